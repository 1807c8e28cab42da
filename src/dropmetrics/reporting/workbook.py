"""Excel export of a loaded dataset's views."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

import pandas as pd
from openpyxl import Workbook
from openpyxl.formatting.rule import DataBarRule
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.table import Table, TableStyleInfo

from ..ingestion.loader import SalesDataset
from ..ingestion.row_pipeline import CANONICAL_COLUMNS, raw_column_name
from ..metrics.aggregator import buckets_to_frame
from ..metrics.queries import (
    get_daily_buckets,
    get_metrics,
    get_price_range_buckets,
    get_roi_distribution,
    get_top_products,
)
from .formatters import format_callouts
from .insights import compute_insights


LOGGER_NAME = "dropmetrics.reporting"

TOP_PRODUCT_COLUMNS = ["sell_price", "buy_price", "profit", "roi", "margin_percent", "price_range", "date_label"]
TEXT_COLUMNS = {"date_label", "price_range", "range", "name", "month", "month_abbrev"}


def _style_sheet(ws, formatting: Dict, databar_column: Optional[str] = None) -> None:
    """Header band and column widths for a view sheet, plus data bars on one column."""

    header_fill = PatternFill("solid", fgColor=formatting.get("header_fill", "1F4E78"))
    header_font = Font(
        color=formatting.get("header_font_color", "FFFFFF"),
        bold=True,
        name=formatting.get("body_font", "Calibri"),
        size=float(formatting.get("header_font_size", 12)),
    )
    widths = formatting.get("column_widths", {})
    default_width = float(widths.get("default", 18))
    overrides = widths.get("overrides", {})

    headers = []
    for idx, cell in enumerate(ws[1], start=1):
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = Alignment(horizontal="center", vertical="center")
        ws.column_dimensions[get_column_letter(idx)].width = overrides.get(str(cell.value), default_width)
        headers.append(cell.value)

    if databar_column not in headers or ws.max_row < 2:
        return
    letter = get_column_letter(headers.index(databar_column) + 1)
    rule = DataBarRule(
        start_type="min",
        end_type="max",
        color=formatting.get("databar_color", "63BE7B"),
        showValue=True,
    )
    ws.conditional_formatting.add(f"{letter}2:{letter}{ws.max_row}", rule)


def _add_table(ws, formatting: Dict) -> None:
    if ws.max_row < 2:
        return
    table_name = "".join(ch if ch.isalnum() else "_" for ch in ws.title) + "_Table"
    ref = f"A1:{get_column_letter(ws.max_column)}{ws.max_row}"
    table = Table(displayName=table_name, ref=ref)
    table.tableStyleInfo = TableStyleInfo(
        name=formatting.get("table_style", "TableStyleMedium2"),
        showFirstColumn=False,
        showLastColumn=False,
        showRowStripes=True,
        showColumnStripes=False,
    )
    ws.add_table(table)


def _write_dataframe(ws, df: pd.DataFrame, formatting: Dict, databar_column: Optional[str] = None) -> None:
    if df.empty:
        ws.append(["No data available"])
        return

    ws.append([str(c) for c in df.columns])
    precision = int(formatting.get("precision", 2))
    num_format = f"0.{'0' * precision}" if precision > 0 else "0"
    side = Side(style="thin", color=formatting.get("border_color", "D9D9D9"))
    border = Border(left=side, right=side, top=side, bottom=side)

    for _, row in df.iterrows():
        values: List[object] = []
        for value in row.tolist():
            # openpyxl cannot store NaN / NA
            values.append(None if pd.isna(value) else value)
        ws.append(values)

    _style_sheet(ws, formatting, databar_column)

    headers = [str(c) for c in df.columns]
    for row_idx in range(2, ws.max_row + 1):
        for col_idx, header in enumerate(headers, start=1):
            cell = ws.cell(row=row_idx, column=col_idx)
            if isinstance(cell.value, float) and header not in TEXT_COLUMNS:
                cell.number_format = num_format
            cell.border = border
    _add_table(ws, formatting)


def _create_summary_sheet(ws, dataset: SalesDataset, formatting: Dict) -> Dict[str, object]:
    metrics = get_metrics(dataset)
    insights = compute_insights(dataset)
    summary: Dict[str, object] = {
        "Run Timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
        "Report Month": dataset.month_info.month,
        "Rows Read": dataset.report.total_rows,
        "Rows Dropped": dataset.report.dropped_rows,
    }
    for key, value in metrics.to_dict().items():
        summary[key.replace("_", " ").title()] = None if pd.isna(value) else value

    ws.title = "Summary"
    ws.append(["DropMetrics Sales Summary"])
    ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=2)
    ws["A1"].font = Font(bold=True, size=14)
    ws.append([])

    num_format = formatting.get("summary_number_format", "#,##0.00")
    for key, value in summary.items():
        ws.append([key, value])
        if isinstance(value, float):
            ws.cell(row=ws.max_row, column=2).number_format = num_format

    ws.append([])
    ws.append(["Insights"])
    ws.cell(row=ws.max_row, column=1).font = Font(bold=True)
    for line in format_callouts(insights):
        ws.append([line])

    for column in ("A", "B"):
        ws.column_dimensions[column].width = 28
    return summary


def top_products_frame(dataset: SalesDataset, top_n: int = 10) -> pd.DataFrame:
    """Top products with the identifying raw columns (``ITEM``, order ids) first.

    Raw columns that were resolved into a canonical field are left out, as are
    headers that differ from a canonical column only by case.
    """

    top = get_top_products(dataset, n=top_n)
    if top.empty:
        return top
    resolved = {raw_column_name(h) for h in dataset.columns.as_dict().values() if h is not None}
    identity = [
        c
        for c in top.columns
        if c not in CANONICAL_COLUMNS and c not in resolved and str(c).lower() not in CANONICAL_COLUMNS
    ]
    return top[identity + [c for c in TOP_PRODUCT_COLUMNS if c in top.columns]]


def write_workbook(
    dataset: SalesDataset,
    path: str | Path,
    top_n: int = 10,
    formatting: Optional[Dict] = None,
) -> Path:
    """Write Summary, Daily, Price Ranges, ROI Distribution and Top Products sheets."""

    formatting = formatting or {}
    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    workbook = Workbook()
    _create_summary_sheet(workbook.active, dataset, formatting)

    sheets = [
        ("Daily", buckets_to_frame(get_daily_buckets(dataset)), "profit"),
        ("Price Ranges", buckets_to_frame(get_price_range_buckets(dataset)), "profit"),
        ("ROI Distribution", buckets_to_frame(get_roi_distribution(dataset)), "count"),
        ("Top Products", top_products_frame(dataset, top_n), "profit"),
    ]
    for title, frame, databar_column in sheets:
        ws = workbook.create_sheet(title)
        _write_dataframe(ws, frame, formatting, databar_column)

    workbook.save(out_path)
    logging.getLogger(LOGGER_NAME).info("Workbook written to %s", out_path)
    return out_path
