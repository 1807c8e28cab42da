from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

import pandas as pd

from .row_pipeline import ROI_OUTLIER_THRESHOLD
from .schema_validator import ColumnMap


@dataclass(frozen=True)
class LoadReport:
    """Row accounting for one load; informational, rows are still dropped silently."""

    total_rows: int = 0
    valid_rows: int = 0
    dropped_rows: int = 0
    missing_columns: List[str] = field(default_factory=list)
    dq_flags: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def build_report(
    raw_rows: int,
    cleaned: pd.DataFrame,
    columns: ColumnMap,
    roi_threshold: float = ROI_OUTLIER_THRESHOLD,
) -> LoadReport:
    total = int(raw_rows)
    valid = int(len(cleaned))
    dq_flags: Dict[str, int] = {}
    dq_cols = [c for c in cleaned.columns if str(c).startswith("dq_")]
    for c in dq_cols:
        dq_flags[c] = int(cleaned[c].astype(bool).sum()) if valid else 0
    # ROI still above the threshold after recomputation; no distribution bucket takes these
    if valid:
        dq_flags["roi_outliers"] = int((pd.to_numeric(cleaned["roi"], errors="coerce") >= roi_threshold).sum())
    else:
        dq_flags["roi_outliers"] = 0
    return LoadReport(
        total_rows=total,
        valid_rows=valid,
        dropped_rows=total - valid,
        missing_columns=columns.missing_required(),
        dq_flags=dq_flags,
    )
