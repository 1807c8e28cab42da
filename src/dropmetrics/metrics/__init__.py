"""Aggregations over cleaned sales rows and the dataset query functions."""

from .aggregator import (
    DailyBucket,
    Metrics,
    PriceRangeBucket,
    RoiDistributionBucket,
    compute_daily_buckets,
    compute_metrics,
    compute_price_range_buckets,
    compute_roi_distribution,
    top_products,
)
from .queries import (
    get_daily_buckets,
    get_metrics,
    get_price_range_buckets,
    get_roi_distribution,
    get_top_products,
)

__all__ = [
    "DailyBucket",
    "Metrics",
    "PriceRangeBucket",
    "RoiDistributionBucket",
    "compute_daily_buckets",
    "compute_metrics",
    "compute_price_range_buckets",
    "compute_roi_distribution",
    "top_products",
    "get_daily_buckets",
    "get_metrics",
    "get_price_range_buckets",
    "get_roi_distribution",
    "get_top_products",
]
