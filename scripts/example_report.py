"""
Example usage of the DropMetrics loader and query views.

Loads one sales export and prints the headline metrics, the daily breakdown
and the best-selling products.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from dropmetrics import (
    get_daily_buckets,
    get_metrics,
    get_price_range_buckets,
    get_top_products,
    load_dataset_from_path,
)
from dropmetrics.reporting.formatters import format_currency, format_metrics_block


def main():
    """Run the loader example."""
    input_file = sys.argv[1] if len(sys.argv) > 1 else "data/sales_export.csv"

    print("=" * 60)
    print("DropMetrics Example")
    print("=" * 60)

    if not Path(input_file).exists():
        print(f"\nInput file not found: {input_file}")
        print("Expected a title line followed by a header row such as:")
        print()
        print("DATE,ITEM,SELL PRICE,BUY PRICE,PROFIT,ROI")
        print('17. Mai 2025,Widget,"12,50",8.00,"3,10",38.75%')
        print()
        return

    dataset = load_dataset_from_path(input_file)
    print(f"\nMonth: {dataset.month_info.month}")
    print(f"Rows read: {dataset.report.total_rows}, dropped: {dataset.report.dropped_rows}")
    for line in format_metrics_block(get_metrics(dataset)):
        print(f"  {line}")

    print("\nDaily:")
    for bucket in get_daily_buckets(dataset):
        print(f"  {bucket.date_label}: {bucket.orders} orders, {format_currency(bucket.profit)}")

    print("\nPrice ranges:")
    for bucket in get_price_range_buckets(dataset):
        print(f"  {bucket.range}: {bucket.count} ({bucket.percentage:.1f}%)")

    print("\nTop 5 products:")
    print(get_top_products(dataset, n=5).to_string(index=False))


if __name__ == "__main__":
    main()
