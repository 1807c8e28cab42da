from pathlib import Path
from textwrap import dedent

import pytest
from pydantic import ValidationError

from dropmetrics.config import ConfigError, PipelineConfig, load_config


def test_defaults_without_file(tmp_path: Path):
    assert load_config(None) == PipelineConfig()
    config = load_config(tmp_path / "missing.yaml")
    assert config.ingestion.preamble_lines == 1
    assert config.ingestion.roi_outlier_threshold == 1000.0
    assert config.reporting.top_n == 10
    assert config.calendar.month_patterns == []
    assert config.logging.level == "INFO"


def test_yaml_values_are_validated(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text(
        dedent(
            """
            ingestion:
              preamble_lines: 2
            calendar:
              month_patterns:
                - pattern: "(?:Juli|July) 2025"
                  month: July
                  abbrev: Jul
            reporting:
              top_n: 5
            logging:
              level: DEBUG
              logs_dir: logs
            """
        ),
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.ingestion.preamble_lines == 2
    assert config.calendar.month_patterns[0].month == "July"
    assert config.reporting.top_n == 5
    assert config.logging.logs_dir == "logs"


def test_empty_file_gives_defaults(tmp_path: Path):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == PipelineConfig()


@pytest.mark.parametrize(
    "payload",
    [
        {"ingestion": {"preamble_lines": -1}},
        {"ingestion": {"roi_outlier_threshold": 0}},
        {"calendar": {"month_patterns": [{"pattern": "(unclosed", "month": "X", "abbrev": "X"}]}},
        {"logging": {"level": "LOUD"}},
    ],
)
def test_invalid_values_rejected(payload):
    with pytest.raises(ValidationError):
        PipelineConfig.model_validate(payload)


def test_unreadable_yaml(tmp_path: Path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("ingestion: [unclosed", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(bad)
    scalar = tmp_path / "scalar.yaml"
    scalar.write_text("just a string", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(scalar)
