"""Presentation helpers built on the dataset query functions."""

from .insights import Insights, compute_insights
from .formatters import format_callouts, format_metrics_block
from .workbook import write_workbook

__all__ = ["Insights", "compute_insights", "format_callouts", "format_metrics_block", "write_workbook"]
