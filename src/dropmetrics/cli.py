"""Command-line entry point: load one sales export and report on it."""
from __future__ import annotations

import argparse
import json
import math
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import load_config
from .ingestion.loader import SalesDataset, load_dataset_from_path
from .logging_utils import end_phase_timer, log_system_event, log_warning, setup_logging, start_phase_timer
from .metrics.queries import (
    get_daily_buckets,
    get_metrics,
    get_price_range_buckets,
    get_roi_distribution,
    get_top_products,
)
from .reporting.formatters import format_callouts, format_metrics_block
from .reporting.insights import compute_insights
from .reporting.workbook import write_workbook


EXIT_OK = 0
EXIT_EMPTY = 1
EXIT_MISSING_INPUT = 2


def _json_safe(value: Any) -> Any:
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {str(k): _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


def dataset_to_dict(dataset: SalesDataset, top_n: int = 10) -> Dict[str, Any]:
    """Collect every query view of ``dataset`` into a JSON-ready mapping."""

    top = get_top_products(dataset, n=top_n)
    payload = {
        "month": dataset.month_info.month,
        "month_abbrev": dataset.month_info.abbrev,
        "report": dataset.report.to_dict(),
        "metrics": get_metrics(dataset).to_dict(),
        "daily": [asdict(b) for b in get_daily_buckets(dataset)],
        "price_ranges": [asdict(b) for b in get_price_range_buckets(dataset)],
        "roi_distribution": [asdict(b) for b in get_roi_distribution(dataset)],
        "top_products": top.astype(object).where(top.notna(), None).to_dict(orient="records"),
        "insights": compute_insights(dataset).to_dict(),
    }
    return _json_safe(payload)


def build_arg_parser() -> argparse.ArgumentParser:
    """Create a CLI argument parser."""

    parser = argparse.ArgumentParser(description="DropMetrics sales export analytics")
    parser.add_argument("input", help="Sales export CSV (first line is a title line)")
    parser.add_argument("--config", default="config.yaml", help="Path to the configuration file")
    parser.add_argument("--top", type=int, default=None, help="Number of top products to show")
    parser.add_argument("--excel", default=None, help="Write a workbook to this path")
    parser.add_argument("--json", action="store_true", help="Print all views as JSON")
    return parser


def run(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    config = load_config(args.config)
    logger = setup_logging(config)
    timings: Dict[str, float] = {}

    input_path = Path(args.input)
    if not input_path.is_file():
        log_warning(logger, f"Input not found: {input_path}")
        print(f"Input not found: {input_path}", file=sys.stderr)
        return EXIT_MISSING_INPUT

    start = start_phase_timer("load")
    dataset = load_dataset_from_path(input_path, config=config)
    end_phase_timer("load", start, timings, logger)

    top_n = args.top if args.top is not None else config.reporting.top_n
    if args.json:
        print(json.dumps(dataset_to_dict(dataset, top_n=top_n), indent=2, default=str))
    else:
        print(f"{input_path.name} ({dataset.month_info.month})")
        for line in format_metrics_block(get_metrics(dataset)):
            print(f"  {line}")
        if not dataset.is_empty:
            for line in format_callouts(compute_insights(dataset)):
                print(f"  - {line}")

    excel_path = args.excel or config.reporting.excel_output
    if excel_path and not dataset.is_empty:
        start = start_phase_timer("workbook")
        write_workbook(dataset, excel_path, top_n=top_n, formatting=config.reporting.formatting)
        end_phase_timer("workbook", start, timings, logger)

    if dataset.is_empty:
        log_warning(logger, f"{input_path} produced an empty dataset")
        return EXIT_EMPTY
    log_system_event(logger, f"Processed {len(dataset)} orders from {input_path.name}")
    return EXIT_OK


def main() -> None:
    """CLI entry point."""

    sys.exit(run())


if __name__ == "__main__":  # pragma: no cover - CLI guard
    main()
