import math

import numpy as np
import pandas as pd
import pytest

from dropmetrics.metrics.aggregator import (
    Metrics,
    buckets_to_frame,
    compute_daily_buckets,
    compute_metrics,
    compute_price_range_buckets,
    compute_roi_distribution,
    top_products,
)


def make_rows() -> pd.DataFrame:
    data = [
        {"name": "A", "sell_price": 12.5, "buy_price": 8.0, "profit": 3.1, "roi": 38.75, "day": 17, "date_label": "May 17", "price_range": "$10-20"},
        {"name": "B", "sell_price": 9.99, "buy_price": 5.0, "profit": 4.99, "roi": 99.8, "day": 17, "date_label": "May 17", "price_range": "$0-10"},
        {"name": "C", "sell_price": 55.0, "buy_price": 60.0, "profit": -5.0, "roi": -8.33, "day": 18, "date_label": "May 18", "price_range": "$50+"},
        {"name": "D", "sell_price": 25.0, "buy_price": 10.0, "profit": 15.0, "roi": 150.0, "day": 19, "date_label": "May 19", "price_range": "$20-30"},
        {"name": "E", "sell_price": 8.0, "buy_price": 0.5, "profit": 7.5, "roi": 1500.0, "day": 19, "date_label": "May 19", "price_range": "$0-10"},
    ]
    return pd.DataFrame(data)


class TestComputeMetrics:
    def test_totals_and_averages(self):
        rows = make_rows()
        m = compute_metrics(rows)
        assert m.total_orders == 5
        assert m.total_revenue == pytest.approx(12.5 + 9.99 + 55.0 + 25.0 + 8.0)
        assert m.total_cost == pytest.approx(83.5)
        assert m.total_profit == pytest.approx(sum(rows["profit"]), rel=1e-9)
        assert m.avg_order_value == pytest.approx(m.total_revenue / 5)
        assert m.avg_profit == pytest.approx(m.total_profit / 5)
        assert m.loss_count == 1
        assert m.total_loss == pytest.approx(5.0)
        assert m.profit_margin == pytest.approx(m.total_profit / m.total_revenue * 100)

    def test_avg_roi_excludes_outliers(self):
        m = compute_metrics(make_rows())
        assert m.avg_roi == pytest.approx((38.75 + 99.8 - 8.33 + 150.0) / 4)

    def test_empty_input(self):
        m = compute_metrics(pd.DataFrame())
        assert m == Metrics()
        assert m.is_empty
        assert m.to_dict() == {}
        assert compute_metrics([]).is_empty

    def test_accepts_row_dicts(self):
        records = make_rows().to_dict(orient="records")
        assert compute_metrics(records).total_orders == 5

    def test_all_outlier_roi_average_is_nan(self):
        rows = make_rows().iloc[[4]]
        assert math.isnan(compute_metrics(rows).avg_roi)


class TestDailyBuckets:
    def test_grouped_and_sorted(self):
        rows = make_rows().sample(frac=1.0, random_state=3)
        buckets = compute_daily_buckets(rows)
        assert [b.day for b in buckets] == [17, 18, 19]
        day17 = buckets[0]
        assert day17.date_label == "May 17"
        assert day17.orders == 2
        assert day17.revenue == pytest.approx(22.49)
        assert day17.profit == pytest.approx(8.09)
        assert day17.avg_order_value == pytest.approx(22.49 / 2)

    def test_day_avg_roi_excludes_outliers(self):
        day19 = compute_daily_buckets(make_rows())[-1]
        assert day19.orders == 2
        assert day19.avg_roi == pytest.approx(150.0)

    def test_day_with_only_outliers(self):
        buckets = compute_daily_buckets(make_rows().iloc[[4]])
        assert len(buckets) == 1
        assert math.isnan(buckets[0].avg_roi)

    def test_empty(self):
        assert compute_daily_buckets(pd.DataFrame()) == []


class TestPriceRangeBuckets:
    def test_partition_counts(self):
        rows = make_rows()
        buckets = compute_price_range_buckets(rows)
        assert [b.range for b in buckets] == ["$0-10", "$10-20", "$20-30", "$50+"]
        assert sum(b.count for b in buckets) == len(rows)
        assert sum(b.percentage for b in buckets) == pytest.approx(100.0)
        low = buckets[0]
        assert low.count == 2
        assert low.profit == pytest.approx(12.49)
        assert low.avg_roi == pytest.approx(99.8)
        assert low.percentage == pytest.approx(40.0)

    def test_absent_ranges_omitted(self):
        buckets = compute_price_range_buckets(make_rows().iloc[[0]])
        assert [b.range for b in buckets] == ["$10-20"]

    def test_empty(self):
        assert compute_price_range_buckets([]) == []


class TestRoiDistribution:
    def test_fixed_four_bands(self):
        dist = compute_roi_distribution(make_rows())
        assert [b.name for b in dist] == ["Excellent", "Good", "Fair", "Loss"]
        counts = {b.name: b.count for b in dist}
        # the 1500% row falls into no band
        assert counts == {"Excellent": 2, "Good": 1, "Fair": 0, "Loss": 1}

    def test_band_edges(self):
        rows = pd.DataFrame({"roi": [0.0, 20.0, 50.0, 999.99, 1000.0, -0.01]})
        counts = {b.name: b.count for b in compute_roi_distribution(rows)}
        assert counts == {"Excellent": 2, "Good": 1, "Fair": 1, "Loss": 1}

    def test_empty(self):
        dist = compute_roi_distribution(pd.DataFrame())
        assert len(dist) == 4
        assert all(b.count == 0 for b in dist)


class TestTopProducts:
    def test_sorted_by_profit_desc(self):
        top = top_products(make_rows(), n=3)
        assert top["name"].tolist() == ["D", "E", "B"]
        assert list(top.index) == [0, 1, 2]

    def test_ties_keep_original_order(self):
        rows = pd.DataFrame({"name": ["a", "b", "c", "d"], "profit": [1.0, 5.0, 1.0, 5.0]})
        assert top_products(rows, n=4)["name"].tolist() == ["b", "d", "a", "c"]

    def test_limits(self):
        assert len(top_products(make_rows())) == 5
        assert top_products(make_rows(), n=0).empty
        assert top_products(pd.DataFrame(), n=10).empty


def test_aggregations_are_idempotent_and_pure():
    rows = make_rows()
    snapshot = rows.copy()
    assert compute_metrics(rows) == compute_metrics(rows)
    assert compute_daily_buckets(rows) == compute_daily_buckets(rows)
    assert compute_price_range_buckets(rows) == compute_price_range_buckets(rows)
    assert compute_roi_distribution(rows) == compute_roi_distribution(rows)
    assert top_products(rows).equals(top_products(rows))
    pd.testing.assert_frame_equal(rows, snapshot)


def test_buckets_to_frame():
    frame = buckets_to_frame(compute_roi_distribution(make_rows()))
    assert list(frame.columns) == ["name", "lower", "upper", "count"]
    assert pd.isna(frame["lower"].iloc[-1])
    assert np.isclose(frame["upper"].iloc[1], 50.0)
    assert buckets_to_frame([]).empty
