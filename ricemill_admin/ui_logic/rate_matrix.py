"""
Editable grid of bag-rate strings for one crop year and season.

Rows are active rice-type codes; columns are bag sizes. Cells hold exactly what
is displayed: server values truncated to two decimals, or whatever the user
typed into the 100 kg cell. The 75 kg and 40 kg cells are recomputed from the
100 kg cell on every edit and are never edited directly.

A second grid, the snapshot, holds the last values confirmed by the server.
The matrix is dirty while any cell differs from its snapshot.
"""

from typing import Dict, Iterable, List, Optional, Tuple
import logging

from ..models import BAG_SIZES, BagSize, SeasonBagRate
from ..money import derive_from_base, parse_decimal_or_null, truncate_to_two_decimals

logger = logging.getLogger(__name__)

RateRow = Dict[BagSize, str]
RateGrid = Dict[str, RateRow]


def empty_row() -> RateRow:
    return {size: "" for size in BAG_SIZES}


def seed_grid(active_codes: Iterable[str], entries: Iterable[SeasonBagRate]) -> RateGrid:
    """Build display rows for `active_codes` from loaded entries.

    Entries for codes outside `active_codes` are dropped. Null rates stay empty.
    """
    grid: RateGrid = {code: empty_row() for code in active_codes}
    for entry in entries:
        row = grid.get(entry.rice_type.code)
        if row is None:
            logger.debug("Dropping bag rates for inactive or unknown rice type %s", entry.rice_type.code)
            continue
        for size in BAG_SIZES:
            value = entry.rates.get(size)
            if value is not None:
                row[size] = truncate_to_two_decimals(value)
    return grid


def _copy(grid: RateGrid) -> RateGrid:
    return {code: dict(row) for code, row in grid.items()}


class RateMatrix:
    """Current rate cells plus the last-saved snapshot."""

    def __init__(self, active_codes: Iterable[str] = (), entries: Iterable[SeasonBagRate] = ()):
        grid = seed_grid(active_codes, entries)
        self._rows: RateGrid = grid
        self._snapshot: RateGrid = _copy(grid)

    @classmethod
    def seed(cls, active_codes: Iterable[str], entries: Iterable[SeasonBagRate]) -> "RateMatrix":
        return cls(active_codes, entries)

    @property
    def codes(self) -> List[str]:
        return list(self._rows.keys())

    def row(self, code: str) -> RateRow:
        return dict(self._rows[code])

    def cell(self, code: str, size: BagSize) -> str:
        return self._rows.get(code, {}).get(size, "")

    def snapshot_cell(self, code: str, size: BagSize) -> str:
        return self._snapshot.get(code, {}).get(size, "")

    def on_base_edit(self, code: str, raw_value: str) -> None:
        """Apply an edit to the 100 kg cell of `code` and refresh its derived cells."""
        if code not in self._rows:
            raise KeyError(f"Unknown rice type code: {code}")
        row = self._rows[code]
        row[BagSize.KG_100] = raw_value
        base = parse_decimal_or_null(raw_value)
        if base is None:
            row[BagSize.KG_75] = ""
            row[BagSize.KG_40] = ""
            return
        row.update(derive_from_base(base))

    @property
    def is_dirty(self) -> bool:
        for code, row in self._rows.items():
            saved = self._snapshot.get(code, {})
            for size in BAG_SIZES:
                if row.get(size, "") != saved.get(size, ""):
                    return True
        return False

    def reseed(self, entries: Iterable[SeasonBagRate], active_codes: Optional[Iterable[str]] = None) -> None:
        """Replace both the cells and the snapshot with server-confirmed values."""
        codes = self.codes if active_codes is None else list(active_codes)
        grid = seed_grid(codes, entries)
        self._rows = grid
        self._snapshot = _copy(grid)

    def cells_in_order(self) -> List[Tuple[str, RateRow]]:
        return [(code, dict(row)) for code, row in self._rows.items()]

    def __len__(self) -> int:
        return len(self._rows)
