from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence


UNKNOWN_MONTH = "Unknown"
UNKNOWN_ABBREV = "Unk"

# Exports are single-year; every default pattern carries this year token
DEFAULT_YEAR = "2025"

_DAY_DOT_RX = re.compile(r"(\d+)\.")
_DAY_ORDINAL_RX = re.compile(r"(\d+)(?:st|nd|rd|th)")


@dataclass(frozen=True)
class MonthInfo:
    month: str = UNKNOWN_MONTH
    abbrev: str = UNKNOWN_ABBREV

    @property
    def is_known(self) -> bool:
        return self.month != UNKNOWN_MONTH


@dataclass(frozen=True)
class MonthPattern:
    """One entry of the ordered month detection table."""

    pattern: re.Pattern
    month: str
    abbrev: str

    @staticmethod
    def build(spellings: Sequence[str], month: str, abbrev: str, year: str = DEFAULT_YEAR) -> "MonthPattern":
        alternatives = "|".join(re.escape(s) for s in spellings)
        return MonthPattern(re.compile(rf"(?:{alternatives}) {re.escape(year)}"), month, abbrev)

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


DEFAULT_MONTH_PATTERNS: tuple[MonthPattern, ...] = (
    MonthPattern.build(["Mai", "May"], "May", "May"),
    MonthPattern.build(["June", "Jun"], "June", "Jun"),
    MonthPattern.build(["April", "Apr"], "April", "Apr"),
)


def build_month_patterns(extra: Iterable[Any] | None = None) -> tuple[MonthPattern, ...]:
    """Return the default table followed by configured patterns.

    ``extra`` items expose ``pattern``, ``month`` and ``abbrev`` (config models
    or mappings). Configured patterns are tried after the defaults.
    """

    patterns: List[MonthPattern] = list(DEFAULT_MONTH_PATTERNS)
    for item in extra or []:
        if isinstance(item, dict):
            pattern, month, abbrev = item["pattern"], item["month"], item["abbrev"]
        else:
            pattern, month, abbrev = item.pattern, item.month, item.abbrev
        patterns.append(MonthPattern(re.compile(pattern), str(month), str(abbrev)))
    return tuple(patterns)


def detect_month(sample: Any, patterns: Sequence[MonthPattern] = DEFAULT_MONTH_PATTERNS) -> MonthInfo:
    """Infer the report month from one date string; first matching pattern wins."""

    if not isinstance(sample, str) or not sample.strip():
        return MonthInfo()
    for entry in patterns:
        if entry.matches(sample):
            return MonthInfo(entry.month, entry.abbrev)
    return MonthInfo()


def _day_from(match: Optional[re.Match]) -> Optional[int]:
    if match is None:
        return None
    day = int(match.group(1))
    return day if 1 <= day <= 31 else None


def _find_day(date_str: Any) -> Optional[int]:
    if not isinstance(date_str, str) or not date_str:
        return None
    day = _day_from(_DAY_DOT_RX.search(date_str))
    if day is None:
        day = _day_from(_DAY_ORDINAL_RX.search(date_str))
    return day


def extract_day(date_str: Any) -> int:
    """Return the day of month from ``"17. Mai 2025"`` or ``"17th May"`` forms, else 1."""

    day = _find_day(date_str)
    return day if day is not None else 1


def has_day(date_str: Any) -> bool:
    """True when :func:`extract_day` finds an explicit day rather than defaulting."""
    return _find_day(date_str) is not None


def first_date_sample(values: Iterable[Any]) -> Any:
    """Return the first non-empty value of a date column, or ``""``."""

    for value in values:
        if value is None:
            continue
        if isinstance(value, float) and value != value:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return ""


def format_date_label(month_info: MonthInfo, day: int) -> str:
    return f"{month_info.abbrev} {day}"
