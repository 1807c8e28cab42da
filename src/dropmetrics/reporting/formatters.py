from __future__ import annotations

import math
from typing import Any, List

from ..metrics.aggregator import Metrics
from .insights import CORE_PRICE_RANGE, Insights


def _is_blank(x: Any) -> bool:
    return x is None or (isinstance(x, float) and math.isnan(x))


def format_currency(x: Any, digits: int = 2) -> str:
    if _is_blank(x):
        return "n/a"
    return f"${float(x):,.{digits}f}"


def format_pct(x: Any, digits: int = 1) -> str:
    if _is_blank(x):
        return "n/a"
    return f"{float(x):.{digits}f}%"


def format_metrics_block(metrics: Metrics) -> List[str]:
    if metrics.is_empty:
        return ["No valid orders found in this file."]
    return [
        f"Orders: {metrics.total_orders}",
        f"Revenue: {format_currency(metrics.total_revenue)}",
        f"Cost: {format_currency(metrics.total_cost)}",
        f"Profit: {format_currency(metrics.total_profit)} ({format_pct(metrics.profit_margin)} margin)",
        f"Average order value: {format_currency(metrics.avg_order_value)}",
        f"Average ROI: {format_pct(metrics.avg_roi)}",
        f"Losses: {metrics.loss_count} orders, {format_currency(metrics.total_loss)}",
    ]


def format_callouts(insights: Insights) -> List[str]:
    """Render short sentences for the insights view; sections without data are skipped."""

    lines: List[str] = []
    if insights.best_day_label is not None:
        lines.append(
            f"Best day was {insights.best_day_label} with {format_currency(insights.best_day_profit)} profit."
        )
    if insights.best_price_range is not None:
        lines.append(
            f"The {insights.best_price_range} range earned the most: {format_currency(insights.best_price_range_profit)}."
        )
    if insights.core_range_share is not None:
        lines.append(f"{CORE_PRICE_RANGE} items make up {format_pct(insights.core_range_share)} of orders.")
    lines.append(f"{insights.high_roi_count} products achieved 50%+ ROI.")
    lines.append(
        f"Daily average of {insights.avg_daily_orders:.1f} orders and {format_currency(insights.avg_daily_profit)} profit."
    )
    lines.append(
        f"Loss rate {format_pct(insights.loss_rate)} (success rate {format_pct(insights.success_rate)})."
    )
    return lines
