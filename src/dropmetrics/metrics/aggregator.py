"""Dataset-level rollups over cleaned sales rows.

All functions are pure: they read the cleaned rows (a DataFrame or a list of
row dicts as produced by the row pipeline) and never modify them.
ROI averages skip rows whose ROI is at or above the outlier threshold.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..ingestion.row_pipeline import PRICE_RANGE_LABELS, ROI_OUTLIER_THRESHOLD


@dataclass(frozen=True)
class Metrics:
    """Headline totals and averages; every field is ``None`` for an empty dataset."""

    total_orders: Optional[int] = None
    total_revenue: Optional[float] = None
    total_cost: Optional[float] = None
    total_profit: Optional[float] = None
    total_loss: Optional[float] = None
    avg_order_value: Optional[float] = None
    avg_profit: Optional[float] = None
    avg_roi: Optional[float] = None
    profit_margin: Optional[float] = None
    loss_count: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass(frozen=True)
class DailyBucket:
    day: int
    date_label: str
    orders: int
    revenue: float
    profit: float
    avg_roi: float
    avg_order_value: float


@dataclass(frozen=True)
class PriceRangeBucket:
    range: str
    count: int
    profit: float
    avg_roi: float
    percentage: float


@dataclass(frozen=True)
class RoiDistributionBucket:
    name: str
    lower: float
    upper: float
    count: int


def _as_frame(rows: pd.DataFrame | Iterable[Dict[str, Any]]) -> pd.DataFrame:
    if isinstance(rows, pd.DataFrame):
        return rows
    return pd.DataFrame(list(rows))


def _mean_roi(frame: pd.DataFrame, threshold: float) -> float:
    roi = pd.to_numeric(frame["roi"], errors="coerce")
    kept = roi[roi < threshold]
    if kept.empty:
        return float("nan")
    return float(kept.mean())


def compute_metrics(rows: pd.DataFrame | Iterable[Dict[str, Any]], roi_threshold: float = ROI_OUTLIER_THRESHOLD) -> Metrics:
    """Summarize the dataset.

    ``profit_margin`` is ``total_profit / total_revenue * 100`` (0 without
    revenue); ``total_loss`` is the absolute sum of negative profits.
    """

    df = _as_frame(rows)
    if df.empty:
        return Metrics()

    revenue = pd.to_numeric(df["sell_price"], errors="coerce").fillna(0.0)
    cost = pd.to_numeric(df["buy_price"], errors="coerce").fillna(0.0)
    profit = pd.to_numeric(df["profit"], errors="coerce").fillna(0.0)
    losses = profit[profit < 0]

    total_revenue = float(revenue.sum())
    total_profit = float(profit.sum())
    return Metrics(
        total_orders=int(len(df)),
        total_revenue=total_revenue,
        total_cost=float(cost.sum()),
        total_profit=total_profit,
        total_loss=float(abs(losses.sum())),
        avg_order_value=float(revenue.mean()),
        avg_profit=float(profit.mean()),
        avg_roi=_mean_roi(df, roi_threshold),
        profit_margin=(total_profit / total_revenue * 100) if total_revenue > 0 else 0.0,
        loss_count=int(len(losses)),
    )


def compute_daily_buckets(rows: pd.DataFrame | Iterable[Dict[str, Any]], roi_threshold: float = ROI_OUTLIER_THRESHOLD) -> List[DailyBucket]:
    """One bucket per distinct day, ascending. ``avg_roi`` is NaN when a day only has outliers."""

    df = _as_frame(rows)
    if df.empty:
        return []

    buckets: List[DailyBucket] = []
    for day, items in df.groupby("day", sort=True):
        revenue = pd.to_numeric(items["sell_price"], errors="coerce")
        buckets.append(
            DailyBucket(
                day=int(day),
                date_label=str(items["date_label"].iloc[0]),
                orders=int(len(items)),
                revenue=float(revenue.sum()),
                profit=float(pd.to_numeric(items["profit"], errors="coerce").sum()),
                avg_roi=_mean_roi(items, roi_threshold),
                avg_order_value=float(revenue.mean()),
            )
        )
    return buckets


def compute_price_range_buckets(
    rows: pd.DataFrame | Iterable[Dict[str, Any]],
    roi_threshold: float = ROI_OUTLIER_THRESHOLD,
) -> List[PriceRangeBucket]:
    """Rollup per price range; only ranges present in the data are returned."""

    df = _as_frame(rows)
    if df.empty:
        return []

    total = len(df)
    grouped = {str(label): items for label, items in df.groupby("price_range", sort=False)}
    order = [label for label in PRICE_RANGE_LABELS if label in grouped]
    order += [label for label in grouped if label not in PRICE_RANGE_LABELS]

    buckets: List[PriceRangeBucket] = []
    for label in order:
        items = grouped[label]
        buckets.append(
            PriceRangeBucket(
                range=label,
                count=int(len(items)),
                profit=float(pd.to_numeric(items["profit"], errors="coerce").sum()),
                avg_roi=_mean_roi(items, roi_threshold),
                percentage=len(items) / total * 100,
            )
        )
    return buckets


def compute_roi_distribution(
    rows: pd.DataFrame | Iterable[Dict[str, Any]],
    roi_threshold: float = ROI_OUTLIER_THRESHOLD,
) -> tuple[RoiDistributionBucket, ...]:
    """Count rows in the four ROI bands.

    Rows with ROI at or above ``roi_threshold`` fall in none of the bands.
    """

    bands = (
        ("Excellent", 50.0, roi_threshold),
        ("Good", 20.0, 50.0),
        ("Fair", 0.0, 20.0),
        ("Loss", -np.inf, 0.0),
    )
    df = _as_frame(rows)
    roi = pd.to_numeric(df["roi"], errors="coerce") if not df.empty else pd.Series([], dtype="float64")
    return tuple(
        RoiDistributionBucket(name, lower, upper, int(((roi >= lower) & (roi < upper)).sum()))
        for name, lower, upper in bands
    )


def top_products(rows: pd.DataFrame | Iterable[Dict[str, Any]], n: int = 10) -> pd.DataFrame:
    """Rows with the highest profit first; ties keep their original order."""

    df = _as_frame(rows)
    if df.empty or n <= 0:
        return df.iloc[0:0].reset_index(drop=True)
    ranked = df.sort_values("profit", ascending=False, kind="mergesort")
    return ranked.head(n).reset_index(drop=True)


def buckets_to_frame(buckets: Sequence[Any]) -> pd.DataFrame:
    """Turn a sequence of bucket dataclasses into a DataFrame."""

    if not buckets:
        return pd.DataFrame()
    frame = pd.DataFrame([asdict(b) for b in buckets])
    # open-ended band edges are written as blanks
    return frame.mask(frame.isin([np.inf, -np.inf]))
