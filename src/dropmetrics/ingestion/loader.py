"""CSV text -> cleaned sales dataset."""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import pandas as pd

from .calendar_mapper import MonthInfo, build_month_patterns, detect_month, first_date_sample
from .row_pipeline import LOGGER_NAME, ROI_OUTLIER_THRESHOLD, clean_rows, empty_cleaned_frame
from .schema_validator import ColumnMap, resolve_columns
from .validation_report import LoadReport, build_report

if TYPE_CHECKING:
    from ..config import PipelineConfig


@dataclass(frozen=True)
class SalesDataset:
    """Cleaned rows of one uploaded file plus what was detected while loading.

    A new upload produces a new dataset; nothing here is updated in place.
    """

    rows: pd.DataFrame = field(default_factory=empty_cleaned_frame)
    month_info: MonthInfo = field(default_factory=MonthInfo)
    columns: ColumnMap = field(default_factory=ColumnMap)
    report: LoadReport = field(default_factory=LoadReport)
    roi_threshold: float = ROI_OUTLIER_THRESHOLD

    @property
    def is_empty(self) -> bool:
        return self.rows.empty

    @property
    def month(self) -> str:
        return self.month_info.month

    def __len__(self) -> int:
        return int(len(self.rows))


def _drop_preamble(content: str, preamble_lines: int) -> str:
    if preamble_lines <= 0:
        return content
    lines = content.split("\n")
    return "\n".join(lines[preamble_lines:])


def read_sales_frame(content: str, preamble_lines: int = 1) -> pd.DataFrame:
    """Parse export text into a raw frame.

    The first ``preamble_lines`` lines are a title line and are always skipped;
    the next line is the header row. Blank lines and over-long malformed lines
    are skipped; a trailing delimiter on every row is ignored rather than read
    as an index column. Returns an empty frame when nothing can be parsed.
    """

    if not isinstance(content, str):
        raise TypeError(f"CSV content must be str, got {type(content).__name__}")
    body = _drop_preamble(content.lstrip("\ufeff"), preamble_lines)
    if not body.strip():
        return pd.DataFrame()
    try:
        return pd.read_csv(
            io.StringIO(body),
            skip_blank_lines=True,
            on_bad_lines="skip",
            index_col=False,
        )
    except (pd.errors.EmptyDataError, pd.errors.ParserError, ValueError) as exc:
        logging.getLogger(LOGGER_NAME).warning("[WARNING] Unable to parse CSV content (%s)", exc)
        return pd.DataFrame()


def load_dataset(content: str, config: Optional["PipelineConfig"] = None) -> SalesDataset:
    """Run the full clean pipeline over one file's text.

    Unusable files (unparseable text, missing SELL PRICE / BUY PRICE / PROFIT)
    produce an empty dataset; no exception escapes for textual input.
    """

    logger = logging.getLogger(LOGGER_NAME)
    preamble_lines = 1
    roi_threshold = ROI_OUTLIER_THRESHOLD
    extra_patterns = None
    if config is not None:
        preamble_lines = config.ingestion.preamble_lines
        roi_threshold = config.ingestion.roi_outlier_threshold
        extra_patterns = config.calendar.month_patterns

    raw = read_sales_frame(content, preamble_lines=preamble_lines)
    columns = resolve_columns(raw.columns)
    logger.info("Column mapping: %s", columns.as_dict())

    if not columns.is_usable:
        logger.warning("[WARNING] Required columns not found in CSV: %s", columns.missing_required())
        empty = empty_cleaned_frame(raw.columns)
        return SalesDataset(
            rows=empty,
            columns=columns,
            report=build_report(len(raw), empty, columns, roi_threshold=roi_threshold),
            roi_threshold=roi_threshold,
        )

    month_info = MonthInfo()
    if columns.date is not None:
        sample = first_date_sample(raw[columns.date].tolist())
        month_info = detect_month(sample, build_month_patterns(extra_patterns))
        logger.info("Detected month %s (%s) from %r", month_info.month, month_info.abbrev, sample)
    else:
        logger.info("DATE column not found; month left as %s", month_info.month)

    cleaned = clean_rows(raw, columns, month_info, roi_threshold=roi_threshold)
    report = build_report(len(raw), cleaned, columns, roi_threshold=roi_threshold)
    logger.info(
        "Loaded %d of %d rows (%d dropped)",
        report.valid_rows,
        report.total_rows,
        report.dropped_rows,
    )
    return SalesDataset(
        rows=cleaned,
        month_info=month_info,
        columns=columns,
        report=report,
        roi_threshold=roi_threshold,
    )


def load_dataset_from_path(path: str | Path, config: Optional["PipelineConfig"] = None) -> SalesDataset:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Input not found: {p}")
    content = p.read_text(encoding="utf-8-sig")
    return load_dataset(content, config=config)
