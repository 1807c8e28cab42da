"""
Ingestion: turns one exported sales CSV into a cleaned, immutable dataset.

Column resolution, month/day detection and numeric normalization feed the
row pipeline; the loader wires them together.
"""

from .loader import SalesDataset, load_dataset, load_dataset_from_path

__all__ = ["SalesDataset", "load_dataset", "load_dataset_from_path"]
