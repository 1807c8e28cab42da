"""Configuration models for the DropMetrics pipeline using Pydantic."""
from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class ConfigError(Exception):
    """Raised when a configuration file cannot be read."""


class MonthPatternConfig(BaseModel):
    """An extra month spelling, tried after the built-in table."""

    pattern: str = Field(..., description="Regular expression matched against the date sample")
    month: str = Field(..., description="Full month name reported for matches")
    abbrev: str = Field(..., description="Abbreviation used in date labels")

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v):
        """Ensure the pattern compiles."""
        try:
            re.compile(v)
        except re.error as exc:
            raise ValueError(f"invalid month pattern {v!r}: {exc}") from exc
        return v


class IngestionConfig(BaseModel):
    preamble_lines: int = Field(1, ge=0, description="Title lines skipped before the header row")
    roi_outlier_threshold: float = Field(
        1000.0,
        gt=0,
        description="ROI values above this are recomputed from profit / buy price",
    )


class CalendarConfig(BaseModel):
    month_patterns: List[MonthPatternConfig] = Field(default_factory=list)


class ReportingConfig(BaseModel):
    top_n: int = Field(10, ge=0, description="Rows shown in the top products view")
    excel_output: Optional[str] = Field(None, description="Default workbook path for the CLI")
    formatting: Dict[str, Any] = Field(default_factory=dict)


class LoggingConfig(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    logs_dir: Optional[str] = None
    file_name: str = "dropmetrics.log"


class PipelineConfig(BaseModel):
    """Complete pipeline configuration."""

    ingestion: IngestionConfig = Field(default_factory=IngestionConfig)
    calendar: CalendarConfig = Field(default_factory=CalendarConfig)
    reporting: ReportingConfig = Field(default_factory=ReportingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(path: str | Path | None = None) -> PipelineConfig:
    """
    Load and validate a YAML configuration file.

    Args:
        path: YAML file; ``None`` or a missing file yields the defaults.

    Returns:
        Validated PipelineConfig object

    Raises:
        ConfigError: If the file is not valid YAML or not a mapping
        ValidationError: If configuration values are invalid
    """
    if path is None:
        return PipelineConfig()
    p = Path(path)
    if not p.exists():
        return PipelineConfig()
    try:
        with open(p, "r", encoding="utf-8") as stream:
            raw = yaml.safe_load(stream) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Unable to parse config {p}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError(f"Config {p} must contain a mapping, got {type(raw).__name__}")
    return PipelineConfig.model_validate(raw)
