import math

import pytest

from dropmetrics.ingestion.loader import SalesDataset, load_dataset
from dropmetrics.metrics.aggregator import Metrics, compute_metrics
from dropmetrics.reporting.formatters import (
    format_callouts,
    format_currency,
    format_metrics_block,
    format_pct,
)
from dropmetrics.reporting.insights import Insights, compute_insights


def test_compute_insights(sample_csv):
    insights = compute_insights(load_dataset(sample_csv))
    assert insights.best_day_label == "May 19"
    assert insights.best_day_profit == pytest.approx(15.0)
    assert insights.best_price_range == "$20-30"
    assert insights.best_price_range_profit == pytest.approx(15.0)
    assert insights.success_rate == pytest.approx(75.0)
    assert insights.loss_rate == pytest.approx(25.0)
    assert insights.avg_daily_profit == pytest.approx(18.09 / 3)
    assert insights.avg_daily_orders == pytest.approx(4 / 3)
    assert insights.high_roi_count == 2
    assert insights.core_range_share == pytest.approx(25.0)
    assert insights.profit_margin == pytest.approx(18.09 / 102.49 * 100)


def test_empty_dataset_insights_are_neutral():
    insights = compute_insights(SalesDataset())
    assert insights == Insights()
    assert insights.success_rate == 100.0
    assert insights.best_day_label is None


def test_format_helpers():
    assert format_currency(1234.5) == "$1,234.50"
    assert format_currency(None) == "n/a"
    assert format_pct(12.345) == "12.3%"
    assert format_pct(float("nan")) == "n/a"


def test_format_callouts(sample_csv):
    lines = format_callouts(compute_insights(load_dataset(sample_csv)))
    assert lines[0] == "Best day was May 19 with $15.00 profit."
    assert any("$10-20 items make up 25.0% of orders." == line for line in lines)
    assert "2 products achieved 50%+ ROI." in lines
    assert lines[-1] == "Loss rate 25.0% (success rate 75.0%)."


def test_format_callouts_skip_missing_sections():
    lines = format_callouts(Insights())
    assert not any(line.startswith("Best day") for line in lines)
    assert "0 products achieved 50%+ ROI." in lines


def test_format_metrics_block():
    assert format_metrics_block(Metrics()) == ["No valid orders found in this file."]
    rows = [{"sell_price": 20.0, "buy_price": 10.0, "profit": 10.0, "roi": 100.0}]
    block = format_metrics_block(compute_metrics(rows))
    assert block[0] == "Orders: 1"
    assert "Profit: $10.00 (50.0% margin)" in block
    assert not math.isnan(compute_metrics(rows).avg_roi)
