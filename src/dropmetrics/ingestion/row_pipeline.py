"""Per-row cleaning: validation, normalization and derived fields."""
from __future__ import annotations

import dataclasses
import logging
import math
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from .calendar_mapper import MonthInfo, extract_day, format_date_label, has_day
from .numeric_normalizer import is_valid_number, to_number
from .schema_validator import ColumnMap


LOGGER_NAME = "dropmetrics.ingestion"

ROI_OUTLIER_THRESHOLD = 1000.0

# (exclusive upper bound, label); last bucket is open-ended
PRICE_RANGES: tuple[tuple[float, str], ...] = (
    (10.0, "$0-10"),
    (20.0, "$10-20"),
    (30.0, "$20-30"),
    (50.0, "$30-50"),
    (math.inf, "$50+"),
)
PRICE_RANGE_LABELS: tuple[str, ...] = tuple(label for _, label in PRICE_RANGES)

CANONICAL_COLUMNS: List[str] = [
    "sell_price",
    "buy_price",
    "profit",
    "day",
    "date_label",
    "month",
    "month_abbrev",
    "margin_percent",
    "roi",
    "price_range",
    "dq_roi_recomputed",
    "dq_day_defaulted",
]

# raw headers spelled like a canonical column are kept under this prefix
RAW_COLLISION_PREFIX = "raw_"


def price_range_for(sell_price: float) -> str:
    """Bucket a sell price; boundaries are lower-inclusive."""

    for upper, label in PRICE_RANGES:
        if sell_price < upper:
            return label
    return PRICE_RANGES[-1][1]


def _valid_price(value: float) -> bool:
    return is_valid_number(value) and value > 0


def _safe_ratio_pct(numerator: float, denominator: float) -> float:
    if denominator == 0:
        return 0.0
    value = numerator / denominator * 100
    return value if not math.isnan(value) else 0.0


def correct_roi(raw_roi: Any, profit: float, buy_price: float, threshold: float = ROI_OUTLIER_THRESHOLD) -> tuple[float, bool]:
    """Return ``(roi, recomputed)``.

    Source ROI values that are missing, zero, non-numeric or above ``threshold``
    are corrupt exports; they are replaced with ``profit / buy_price * 100``.
    """

    roi = to_number(raw_roi)
    if math.isnan(roi) or roi == 0 or roi > threshold:
        return _safe_ratio_pct(profit, buy_price), True
    return roi, False


def build_row(
    raw: Mapping[str, Any],
    columns: ColumnMap,
    month_info: MonthInfo,
    roi_threshold: float = ROI_OUTLIER_THRESHOLD,
) -> Optional[Dict[str, Any]]:
    """Clean one raw CSV record; ``None`` rejects the row.

    Rows are rejected when either price is missing, zero, negative or not a
    number, or when profit is not a number. Rejection is silent.
    """

    logger = logging.getLogger(LOGGER_NAME)
    if not columns.is_usable:
        return None

    sell_price = to_number(raw.get(columns.sell_price))
    buy_price = to_number(raw.get(columns.buy_price))
    if not (_valid_price(sell_price) and _valid_price(buy_price)):
        logger.debug("Rejected row: sell=%r buy=%r", raw.get(columns.sell_price), raw.get(columns.buy_price))
        return None

    date_value = raw.get(columns.date, "") if columns.date is not None else ""
    day = extract_day(date_value)

    profit = to_number(raw.get(columns.profit))
    if not is_valid_number(profit):
        logger.debug("Rejected row: profit=%r", raw.get(columns.profit))
        return None

    margin_percent = _safe_ratio_pct(profit, sell_price)
    raw_roi = raw.get(columns.roi) if columns.roi is not None else None
    roi, recomputed = correct_roi(raw_roi, profit, buy_price, threshold=roi_threshold)

    cleaned: Dict[str, Any] = dict(raw)
    cleaned[columns.sell_price] = sell_price
    cleaned[columns.buy_price] = buy_price
    cleaned[columns.profit] = profit
    cleaned.update(
        {
            "sell_price": sell_price,
            "buy_price": buy_price,
            "profit": profit,
            "day": day,
            "date_label": format_date_label(month_info, day),
            "month": month_info.month,
            "month_abbrev": month_info.abbrev,
            "margin_percent": margin_percent,
            "roi": roi,
            "price_range": price_range_for(sell_price),
            "dq_roi_recomputed": recomputed,
            "dq_day_defaulted": not has_day(date_value),
        }
    )
    return cleaned


def clean_rows(
    raw_frame: pd.DataFrame,
    columns: ColumnMap,
    month_info: MonthInfo,
    roi_threshold: float = ROI_OUTLIER_THRESHOLD,
) -> pd.DataFrame:
    """Run :func:`build_row` over every record of ``raw_frame``.

    Output keeps the raw columns first, then the canonical derived columns.
    An empty frame with the canonical columns is returned when no row survives.
    """

    if raw_frame.empty or not columns.is_usable:
        return empty_cleaned_frame(raw_frame.columns)

    raw_frame, columns = separate_raw_columns(raw_frame, columns)
    records = []
    for raw in raw_frame.to_dict(orient="records"):
        cleaned = build_row(raw, columns, month_info, roi_threshold=roi_threshold)
        if cleaned is not None:
            records.append(cleaned)
    if not records:
        return empty_cleaned_frame(raw_frame.columns)

    ordered = list(raw_frame.columns) + CANONICAL_COLUMNS
    result = pd.DataFrame.from_records(records, columns=ordered)
    result["day"] = result["day"].astype("int64")
    for col in ("dq_roi_recomputed", "dq_day_defaulted"):
        result[col] = result[col].astype(bool)
    return result


def raw_column_name(header: Any) -> Any:
    """Name a raw column keeps in the cleaned frame."""

    if header in CANONICAL_COLUMNS:
        return f"{RAW_COLLISION_PREFIX}{header}"
    return header


def separate_raw_columns(raw_frame: pd.DataFrame, columns: ColumnMap) -> tuple[pd.DataFrame, ColumnMap]:
    """Rename raw headers that clash with canonical names, e.g. ``roi`` to ``raw_roi``.

    The column map is rewritten to match so the raw values are still read.
    """

    renames = {c: raw_column_name(c) for c in raw_frame.columns if raw_column_name(c) != c}
    if not renames:
        return raw_frame, columns
    mapped = {name: renames.get(header, header) for name, header in columns.as_dict().items() if header is not None}
    return raw_frame.rename(columns=renames), dataclasses.replace(columns, **mapped)


def empty_cleaned_frame(raw_columns: Any = ()) -> pd.DataFrame:
    ordered = [raw_column_name(c) for c in raw_columns] + CANONICAL_COLUMNS
    return pd.DataFrame(columns=ordered)
