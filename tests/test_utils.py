"""Tests for utility functions."""

import pytest

from casenote.utils.path_utils import coerce_message_id, normalize_message_id
from casenote.utils.text_utils import detect_content_type, sanitize_email_content
from casenote.utils.unicode_utils import normalize_subject, strip_subject_prefixes, truncate_subject


class TestNormalizeMessageId:
    """Test Message-ID normalization."""

    def test_normalize_with_angle_brackets(self):
        """Test normalization with angle brackets present."""
        result = normalize_message_id("<test@example.com>")
        assert result == "<test@example.com>"

    def test_normalize_without_angle_brackets(self):
        """Test normalization adds angle brackets."""
        result = normalize_message_id("test@example.com")
        assert result == "<test@example.com>"

    def test_normalize_with_whitespace(self):
        """Test normalization strips whitespace."""
        result = normalize_message_id("  test@example.com  ")
        assert result == "<test@example.com>"

    def test_normalize_invalid_format_raises_error(self):
        """Test normalization raises ValueError for invalid format."""
        with pytest.raises(ValueError):
            normalize_message_id("invalid-format")

    def test_coerce_keeps_malformed_ids(self):
        """Test coercion keeps local ids and drops blank ones."""
        assert coerce_message_id("local-id-42") == "local-id-42"
        assert coerce_message_id("a@b.com") == "<a@b.com>"
        assert coerce_message_id("  ") is None
        assert coerce_message_id(None) is None


class TestNormalizeSubject:
    """Test subject normalization."""

    @pytest.mark.parametrize(
        "subject, expected",
        [
            ("RE: Project Update", "project update"),
            ("Fwd: RE: fw:  Project   Update ", "project update"),
            ("Re : Budget", "budget"),
            ("Project Update", "project update"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_normalize(self, subject, expected):
        """Test prefixes, whitespace and case are normalized."""
        assert normalize_subject(subject) == expected

    @pytest.mark.parametrize("subject", ["RE: Re: Hello  World", "Fw: Notes", "plain", "  Spaced   out  "])
    def test_idempotent(self, subject):
        """Test normalizing twice gives the same result."""
        once = normalize_subject(subject)
        assert normalize_subject(once) == once

    def test_strip_prefixes_keeps_case(self):
        """Test prefix stripping leaves the original case."""
        result = strip_subject_prefixes("RE: FW: Exam  Accommodations")
        assert result == "Exam Accommodations"

    def test_prefix_inside_subject_kept(self):
        """Test only leading prefixes are removed."""
        assert normalize_subject("Notes re: exam") == "notes re: exam"


class TestTruncateSubject:
    """Test subject line truncation."""

    def test_truncate_short_subject(self):
        """Test truncation of subject shorter than max_length."""
        result = truncate_subject("Short subject", max_length=50)
        assert result == "Short subject"

    def test_truncate_long_subject(self):
        """Test truncation of subject longer than max_length."""
        long_subject = "This is a very long subject line that exceeds fifty characters"
        result = truncate_subject(long_subject, max_length=50)

        assert len(result) == 50
        assert result.endswith("...")

    def test_truncate_exact_length(self):
        """Test truncation of subject exactly max_length."""
        subject = "a" * 50
        result = truncate_subject(subject, max_length=50)
        assert result == subject

    def test_truncate_none_value(self):
        """Test truncation of None returns empty string."""
        result = truncate_subject(None)
        assert result == ""


class TestSanitizeEmailContent:
    """Test sanitization of pasted text."""

    def test_removes_script(self):
        """Test script blocks are removed."""
        result = sanitize_email_content("<script>alert(1)</script>Hello")
        assert result == "Hello"

    def test_removes_handlers_and_javascript_urls(self):
        """Test inline handlers and javascript: URLs are removed."""
        result = sanitize_email_content('<a href="javascript:evil()" onclick="steal()">link</a>')

        assert "javascript:" not in result
        assert "onclick" not in result
        assert "link" in result

    def test_normalizes_whitespace(self):
        """Test line endings, inline spaces and blank runs are normalized."""
        text = "Sent:\tMonday,  January 6, 2025  \r\n\r\n\r\n\r\nbody"
        result = sanitize_email_content(text)
        assert result == "Sent: Monday, January 6, 2025\n\nbody"

    def test_keeps_addresses(self):
        """Test angle-bracket addresses survive."""
        result = sanitize_email_content("From: Jane <jane@school.ca>")
        assert result == "From: Jane <jane@school.ca>"

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_empty(self, text):
        """Test empty input gives an empty string."""
        assert sanitize_email_content(text) == ""


class TestDetectContentType:
    """Test content type detection."""

    def test_email(self):
        """Test header markers mean an email."""
        assert detect_content_type("From: a@b.com\nSubject: hi") == "email"

    def test_task(self):
        """Test task vocabulary means a task."""
        assert detect_content_type("Implement the export milestone") == "task"

    def test_unknown(self):
        """Test anything else is unknown."""
        assert detect_content_type("hello there") == "unknown"
