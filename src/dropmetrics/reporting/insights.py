"""Derived headline insights for the overview and insights views."""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import pandas as pd

from ..ingestion.loader import SalesDataset
from ..metrics.queries import get_daily_buckets, get_metrics, get_price_range_buckets


HIGH_ROI_FLOOR = 50.0
CORE_PRICE_RANGE = "$10-20"


@dataclass(frozen=True)
class Insights:
    best_day_label: Optional[str] = None
    best_day_profit: Optional[float] = None
    best_price_range: Optional[str] = None
    best_price_range_profit: Optional[float] = None
    success_rate: float = 100.0
    loss_rate: float = 0.0
    avg_daily_profit: float = 0.0
    avg_daily_orders: float = 0.0
    high_roi_count: int = 0
    profit_margin: float = 0.0
    core_range_share: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def compute_insights(dataset: SalesDataset) -> Insights:
    """Summarize the best day, best price range and loss profile of a dataset.

    Empty datasets produce the neutral defaults (100% success, zero averages).
    """

    if dataset.is_empty:
        return Insights()

    metrics = get_metrics(dataset)
    daily = get_daily_buckets(dataset)
    ranges = get_price_range_buckets(dataset)

    orders = metrics.total_orders or 0
    loss_count = metrics.loss_count or 0
    best_day = max(daily, key=lambda b: b.profit) if daily else None
    best_range = max(ranges, key=lambda b: b.profit) if ranges else None
    core = next((b for b in ranges if b.range == CORE_PRICE_RANGE), None)

    roi = pd.to_numeric(dataset.rows["roi"], errors="coerce")
    high_roi = int(((roi > HIGH_ROI_FLOOR) & (roi < dataset.roi_threshold)).sum())

    return Insights(
        best_day_label=best_day.date_label if best_day else None,
        best_day_profit=best_day.profit if best_day else None,
        best_price_range=best_range.range if best_range else None,
        best_price_range_profit=best_range.profit if best_range else None,
        success_rate=(1 - loss_count / orders) * 100 if orders else 100.0,
        loss_rate=loss_count / orders * 100 if orders else 0.0,
        avg_daily_profit=(metrics.total_profit or 0.0) / len(daily) if daily else 0.0,
        avg_daily_orders=orders / len(daily) if daily else 0.0,
        high_roi_count=high_roi,
        profit_margin=metrics.profit_margin or 0.0,
        core_range_share=core.percentage if core else None,
    )
