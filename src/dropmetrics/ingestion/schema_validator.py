from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Dict, Iterable, List, Optional


# field name -> semantic header expected in the export
FIELD_HEADERS: Dict[str, str] = {
    "sell_price": "SELL PRICE",
    "buy_price": "BUY PRICE",
    "profit": "PROFIT",
    "roi": "ROI",
    "date": "DATE",
}
REQUIRED_FIELDS: tuple[str, ...] = ("sell_price", "buy_price", "profit")


def normalize_header(header: object) -> str:
    """Uppercase, trim and collapse inner whitespace for header comparison."""

    return " ".join(str(header).split()).upper()


@dataclass(frozen=True)
class ColumnMap:
    """Original header names for each semantic field, ``None`` when absent."""

    sell_price: Optional[str] = None
    buy_price: Optional[str] = None
    profit: Optional[str] = None
    roi: Optional[str] = None
    date: Optional[str] = None

    def missing_required(self) -> List[str]:
        return [FIELD_HEADERS[name] for name in REQUIRED_FIELDS if getattr(self, name) is None]

    @property
    def is_usable(self) -> bool:
        return not self.missing_required()

    def as_dict(self) -> Dict[str, Optional[str]]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def resolve_columns(headers: Iterable[object]) -> ColumnMap:
    """Map the semantic fields onto the actual CSV headers.

    Rules:
      - header names are compared case-insensitively after trimming and
        collapsing whitespace, so ``" sell  price"`` resolves SELL PRICE.
      - if several headers normalize to the same name, the first one wins.
      - the returned map carries the original header strings.
    """

    current: Dict[str, str] = {}
    for header in headers:
        current.setdefault(normalize_header(header), header)
    resolved = {name: current.get(expected) for name, expected in FIELD_HEADERS.items()}
    return ColumnMap(**resolved)
