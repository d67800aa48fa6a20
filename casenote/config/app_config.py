"""Configuration models for casenote."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator


class ExtractionConfig(BaseModel):
    """Date extraction and consolidation settings."""

    # "pending": an override marker whose date cannot be parsed counts as absent
    # "degrade": the marker alone unlocks consolidation of the header dates
    unparsed_override_policy: Literal["pending", "degrade"] = "pending"


class ThreadingConfig(BaseModel):
    """Thread grouping weights and thresholds."""

    subject_weight: float = 0.4
    participant_weight: float = 0.3
    reference_weight: float = 0.2
    timing_weight: float = 0.1
    match_threshold: float = 0.7
    timing_window_days: float = 7.0
    active_window_days: int = 30
    merge_overlap: float = 0.8
    merge_window_days: float = 2.0
    merge_window_overlap: float = 0.5

    @field_validator(
        "subject_weight",
        "participant_weight",
        "reference_weight",
        "timing_weight",
        "match_threshold",
        "merge_overlap",
        "merge_window_overlap",
    )
    def validate_ratio(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("Value must be between 0.0 and 1.0")
        return v

    @field_validator("timing_window_days", "active_window_days", "merge_window_days")
    def validate_window(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Window must be positive")
        return v

    @model_validator(mode="after")
    def validate_weights(self) -> "ThreadingConfig":
        total = self.subject_weight + self.participant_weight + self.reference_weight + self.timing_weight
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Signal weights must sum to 1.0, got {total}")
        return self


class DisplayTemplates(BaseModel):
    """Display templates for rendered notes."""

    poc_line: str = "{label} - {date}"
    exchange_label: str = "{type} ({exchanges} exchanges)"
    thread_line: str = "{subject} | {start} - {end} | {count} messages{status}"
    inactive_marker: str = " [inactive]"
    original_header: str = "ORIGINAL EMAIL:"


class StorageConfig(BaseModel):
    """Storage configuration."""

    database_path: str = "~/.casenote/store.db"

    def get_database_path(self) -> Path:
        """Get expanded database path."""
        return Path(self.database_path).expanduser()


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    format: Literal["json", "console"] = "console"


class AppConfig(BaseModel):
    """Main application configuration."""

    schema_version: str = "1.0"
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    threading: ThreadingConfig = Field(default_factory=ThreadingConfig)
    display_templates: DisplayTemplates = Field(default_factory=DisplayTemplates)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("schema_version")
    def validate_schema_version(cls, v: str) -> str:
        if not v:
            raise ValueError("schema_version is required")
        return v
