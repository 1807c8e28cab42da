from __future__ import annotations

import math
import numbers
import re
from typing import Any

import numpy as np
import pandas as pd


_STRIP_RX = re.compile(r'["%]')
# Leading numeric prefix, the way lenient float parsers read "12.5 USD"
_NUMBER_PREFIX_RX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _collapse_separators(text: str) -> str:
    # commas are decimal points; only the last period survives
    s = text.replace(",", ".")
    last = s.rfind(".")
    if last == -1:
        return s
    return s[:last].replace(".", "") + s[last:]


def normalize_number(raw: Any) -> Any:
    """Convert a locale-ambiguous numeric string into a float.

    Non-string input is returned unchanged. For strings, quote marks and
    percent signs are dropped, every comma becomes a period and only the last
    period is kept as the decimal separator, so ``"1.234,56"`` and
    ``"1,234.56"`` both read as ``1234.56``. Text that does not start with a
    number yields ``nan``; callers must check before use.

    A plain integer grouped with a comma (``"1,234"``) is read as ``1.234``.
    """

    if not isinstance(raw, str):
        return raw
    s = _collapse_separators(raw)
    s = _STRIP_RX.sub("", s).strip()
    match = _NUMBER_PREFIX_RX.match(s)
    if match is None:
        return float("nan")
    return float(match.group(0))


def to_number(value: Any) -> float:
    """Coerce a raw CSV cell into a float, ``nan`` when unusable."""

    if value is None or isinstance(value, bool):
        return float("nan")
    if isinstance(value, str):
        return float(normalize_number(value))
    if isinstance(value, numbers.Real):
        return float(value)
    return float("nan")


def is_valid_number(value: float) -> bool:
    return isinstance(value, float) and math.isfinite(value)


def normalize_numeric_series(values: pd.Series) -> pd.Series:
    """Apply :func:`normalize_number` to a Series and enforce float64."""

    if values.empty:
        return pd.Series([], index=values.index, dtype="float64")
    result = values.map(to_number)
    return pd.to_numeric(result, errors="coerce").astype(np.float64)
