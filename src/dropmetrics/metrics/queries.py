"""Read-only views over a loaded :class:`SalesDataset` for presentation layers."""
from __future__ import annotations

from typing import List

import pandas as pd

from ..ingestion.loader import SalesDataset
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


def get_metrics(dataset: SalesDataset) -> Metrics:
    return compute_metrics(dataset.rows, roi_threshold=dataset.roi_threshold)


def get_daily_buckets(dataset: SalesDataset) -> List[DailyBucket]:
    return compute_daily_buckets(dataset.rows, roi_threshold=dataset.roi_threshold)


def get_price_range_buckets(dataset: SalesDataset) -> List[PriceRangeBucket]:
    return compute_price_range_buckets(dataset.rows, roi_threshold=dataset.roi_threshold)


def get_roi_distribution(dataset: SalesDataset) -> tuple[RoiDistributionBucket, ...]:
    return compute_roi_distribution(dataset.rows, roi_threshold=dataset.roi_threshold)


def get_top_products(dataset: SalesDataset, n: int = 10) -> pd.DataFrame:
    return top_products(dataset.rows, n=n)
