"""Tests for ThreadGrouper."""

import pytest
from datetime import datetime, timedelta

from casenote.config.app_config import ThreadingConfig
from casenote.models.email_message import EmailMessage
from casenote.services.threads.thread_grouper import (
    ThreadGrouper,
    add_message,
    detect_threads,
    new_thread,
    overlap_ratio,
    summarize,
)
from casenote.services.threads.topics import top_topics

START = datetime(2025, 1, 1, 9, 0)


def message(sender, to, subject, when, **kwargs) -> EmailMessage:
    return EmailMessage(sender=sender, to=frozenset(to), subject=subject, date=when, **kwargs)


class TestOverlapRatio:
    """Test participant overlap."""

    def test_partial_overlap(self):
        """Test overlap is relative to the larger set."""
        assert overlap_ratio(frozenset({"a", "b"}), frozenset({"a", "c", "d"})) == pytest.approx(1 / 3)

    def test_empty_set(self):
        """Test an empty set has no overlap."""
        assert overlap_ratio(frozenset(), frozenset({"a"})) == 0.0


class TestScore:
    """Test the weighted match score."""

    @pytest.fixture
    def grouper(self):
        return ThreadGrouper(now=START + timedelta(days=1))

    @pytest.fixture
    def thread(self):
        return new_thread(message("a@x.com", ["b@x.com"], "Project Update", START, message_id="<1@x.com>"))

    def test_exact_subject_full_overlap_same_day(self, grouper, thread):
        """Test a same-day reply with the same people scores high."""
        reply = message("b@x.com", ["a@x.com"], "RE: project update", START + timedelta(hours=3))
        assert grouper.score(reply, thread) == pytest.approx(0.8)

    def test_partial_subject(self, grouper, thread):
        """Test a contained subject earns half the subject weight."""
        other = message("c@y.com", ["d@y.com"], "Project update notes", START + timedelta(days=30))
        assert grouper.score(other, thread) == pytest.approx(0.2)

    def test_in_reply_to(self, grouper, thread):
        """Test In-Reply-To earns the full reference weight."""
        other = message("c@y.com", ["d@y.com"], "Unrelated", START + timedelta(days=30), in_reply_to="<1@x.com>")
        assert grouper.score(other, thread) == pytest.approx(0.2)

    def test_references_only(self, grouper, thread):
        """Test References alone earns half the reference weight."""
        other = message("c@y.com", ["d@y.com"], "Unrelated", START + timedelta(days=30), references=("<1@x.com>",))
        assert grouper.score(other, thread) == pytest.approx(0.1)

    def test_timing_decays(self, grouper, thread):
        """Test the timing signal decays over the window."""
        other = message("c@y.com", ["d@y.com"], "Unrelated", START + timedelta(days=3.5))
        assert grouper.score(other, thread) == pytest.approx(0.05)

    def test_timing_beyond_window(self, grouper, thread):
        """Test gaps beyond the window add no timing score."""
        other = message("c@y.com", ["d@y.com"], "Unrelated", START + timedelta(days=8))
        assert grouper.score(other, thread) == 0.0

    def test_subject_match_never_lowers_score(self, grouper, thread):
        """Test a subject match only adds to the score."""
        when = START + timedelta(hours=2)
        without = message("b@x.com", ["a@x.com"], "Something else", when)
        with_subject = message("b@x.com", ["a@x.com"], "Project Update", when)

        assert grouper.score(with_subject, thread) >= grouper.score(without, thread)

    def test_score_bounded(self, grouper, thread):
        """Test the score stays within [0, 1]."""
        best = message(
            "a@x.com", ["b@x.com"], "Project Update", START + timedelta(minutes=5), in_reply_to="<1@x.com>"
        )
        assert 0.0 <= grouper.score(best, thread) <= 1.0
        assert grouper.score(best, thread) == pytest.approx(1.0)


class TestGroup:
    """Test incremental grouping."""

    def test_related_messages_share_thread_and_stale_thread_is_inactive(self):
        """Test related messages group and old threads go inactive."""
        messages = [
            message("a@x.com", ["b@x.com"], "Project Update", START),
            message("c@y.com", ["d@y.com"], "Lunch order", START + timedelta(days=40)),
            message("b@x.com", ["a@x.com"], "Re: project update", START + timedelta(hours=3)),
        ]
        threads = ThreadGrouper(now=START + timedelta(days=78)).group(messages)

        assert len(threads) == 2
        assert threads[0].subject == "project update"
        assert len(threads[0].messages) == 2
        assert len(threads[1].messages) == 1
        assert threads[1].is_active is False

    def test_recent_thread_is_active(self):
        """Test a recent thread is active."""
        threads = ThreadGrouper(now=START + timedelta(days=10)).group(
            [message("a@x.com", ["b@x.com"], "Hello", START)]
        )
        assert threads[0].is_active is True

    def test_reply_link_pulls_in_changed_subject(self):
        """Test a reply link keeps a renamed message in its thread."""
        original = message("a@x.com", ["b@x.com"], "Exam accommodations", START, message_id="<1@x.com>")
        linked = message(
            "b@x.com",
            ["a@x.com"],
            "RE: Exam accommodations follow-up",
            START + timedelta(hours=2),
            in_reply_to="<1@x.com>",
        )
        unlinked = message(
            "b@x.com", ["a@x.com"], "RE: Exam accommodations follow-up", START + timedelta(hours=2)
        )

        assert len(detect_threads([original, linked], now=START)) == 1
        assert len(detect_threads([original, unlinked], now=START)) == 2

    def test_threshold_from_settings(self):
        """Test the match threshold comes from settings."""
        messages = [
            message("a@x.com", ["b@x.com"], "Project Update", START),
            message("b@x.com", ["a@x.com"], "Re: project update", START + timedelta(hours=3)),
        ]
        strict = ThreadingConfig(match_threshold=0.9)

        assert len(ThreadGrouper(now=START, settings=strict).group(messages)) == 2

    def test_input_order_does_not_matter(self):
        """Test messages are placed in date order."""
        messages = [
            message("a@x.com", ["b@x.com"], "Project Update", START),
            message("b@x.com", ["a@x.com"], "Re: project update", START + timedelta(hours=3)),
            message("a@x.com", ["b@x.com"], "RE: Project Update", START + timedelta(hours=5)),
        ]
        grouper = ThreadGrouper(now=START)

        forward = grouper.group(messages)
        backward = grouper.group(list(reversed(messages)))

        assert [len(t.messages) for t in forward] == [len(t.messages) for t in backward] == [3]
        assert [m.date for m in backward[0].messages] == sorted(m.date for m in messages)

    def test_tie_goes_to_earlier_thread(self):
        """Test an equal score keeps the earlier thread."""
        grouper = ThreadGrouper(now=START)
        first = new_thread(message("a@x.com", ["b@x.com"], "Budget", START))
        second = new_thread(message("a@x.com", ["b@x.com"], "Budget", START))
        candidate = message("b@x.com", ["a@x.com"], "Re: Budget", START + timedelta(hours=1))

        assert grouper.best_match(candidate, [first, second]) == 0

    def test_join_updates_participants_and_bounds(self):
        """Test joining widens participants and dates."""
        thread = new_thread(message("a@x.com", ["b@x.com"], "Budget", START))
        joined = add_message(
            thread, message("b@x.com", ["a@x.com"], "Re: Budget", START + timedelta(days=2), cc=["c@x.com"])
        )

        assert joined.participants == {"a@x.com", "b@x.com", "c@x.com"}
        assert joined.start_date == START
        assert joined.end_date == START + timedelta(days=2)
        assert len(thread.messages) == 1


class TestSummary:
    """Test thread summaries."""

    def test_summary_with_topics(self):
        """Test the summary lists the top topics."""
        thread = new_thread(
            message("a@x.com", ["b@x.com"], "Project Update", START, content="Can we schedule a meeting about the exam?")
        )
        thread = add_message(thread, message("b@x.com", ["a@x.com"], "Re: Project Update", START + timedelta(hours=3)))

        assert summarize(thread) == "Thread with 2 messages over 1 day. Key topics: scheduling, assessments."

    def test_summary_without_topics(self):
        """Test the summary without any topics."""
        thread = new_thread(message("a@x.com", ["b@x.com"], "Hello", START, content="Hi there"))
        assert summarize(thread) == "Thread with 1 message over 0 days."


class TestMergeThreads:
    """Test the similar-thread merge pass."""

    @pytest.fixture
    def grouper(self):
        return ThreadGrouper(now=START + timedelta(days=45))

    def test_identical_subjects_merge(self, grouper):
        """Test threads with identical subjects merge."""
        first = grouper.finalize(new_thread(message("a@x.com", ["b@x.com"], "Budget", START)))
        second = grouper.finalize(
            new_thread(message("c@y.com", ["d@y.com"], "RE: Budget", START + timedelta(days=20)))
        )

        merged = grouper.merge_threads([first, second])

        assert len(merged) == 1
        assert len(merged[0].messages) == 2
        assert merged[0].participants == {"a@x.com", "b@x.com", "c@y.com", "d@y.com"}
        assert merged[0].end_date == START + timedelta(days=20)
        assert merged[0].is_active is True

    def test_unrelated_threads_stay_apart(self, grouper):
        """Test unrelated threads are kept apart."""
        first = grouper.finalize(new_thread(message("a@x.com", ["b@x.com"], "Budget", START)))
        second = grouper.finalize(
            new_thread(message("c@y.com", ["d@y.com"], "Lunch", START + timedelta(days=20)))
        )

        assert len(grouper.merge_threads([first, second])) == 2

    def test_merge_is_not_transitive_within_a_pass(self, grouper):
        """Test one pass does not chain merges through absorbed threads."""
        a = new_thread(message("a@x.com", ["b@x.com"], "Alpha", START))
        b = new_thread(message("c@x.com", ["d@x.com"], "Alpha", START + timedelta(days=10)))
        c = new_thread(message("c@x.com", ["d@x.com"], "Gamma", START + timedelta(days=20)))

        assert grouper.should_merge(b, c) is True
        assert len(grouper.merge_threads([a, b, c])) == 2


class TestTopTopics:
    """Test topic ranking."""

    def test_ties_follow_table_order(self):
        """Test equal counts are ranked by topic table order, not first appearance."""
        messages = [
            message("a@x.com", ["b@x.com"], "Hello", START, content="What was my grade?"),
            message("b@x.com", ["a@x.com"], "Hello", START + timedelta(hours=1), content="See the exam."),
        ]

        assert top_topics(messages) == ["assessments", "grades"]

    def test_higher_count_first(self):
        """Test more frequent topics rank first."""
        messages = [message("a@x.com", ["b@x.com"], "Hello", START, content="exam meeting, meeting again")]

        assert top_topics(messages) == ["scheduling", "assessments"]

    def test_limit(self):
        """Test at most limit topics are returned."""
        messages = [message("a@x.com", ["b@x.com"], "Hello", START, content="meeting exam grade course")]

        assert top_topics(messages, limit=2) == ["scheduling", "assessments"]
