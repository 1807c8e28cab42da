"""DropMetrics: cleaning and performance metrics for e-commerce sales exports."""

from .ingestion import SalesDataset, load_dataset, load_dataset_from_path
from .metrics import (
    get_daily_buckets,
    get_metrics,
    get_price_range_buckets,
    get_roi_distribution,
    get_top_products,
)

__version__ = "0.1.0"

__all__ = [
    "SalesDataset",
    "load_dataset",
    "load_dataset_from_path",
    "get_daily_buckets",
    "get_metrics",
    "get_price_range_buckets",
    "get_roi_distribution",
    "get_top_products",
]
