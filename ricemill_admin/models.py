from __future__ import annotations

"""Canonical in-memory types for bag-rate pricing.

Wire parsing lives in `schemas.py`; these dataclasses are what the rest of
the package passes around once a response has been normalized.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class SeasonCode(str, Enum):
    KHARIF = "KHARIF"
    RABI = "RABI"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class BagSize(str, Enum):
    """Standard sack weights, declared in order of nominal weight."""

    KG_40 = "KG_40"
    KG_75 = "KG_75"
    KG_100 = "KG_100"

    @property
    def kilograms(self) -> int:
        return int(self.value.split("_", 1)[1])


# Order used for legacy flat payloads
BAG_SIZES: List[BagSize] = [BagSize.KG_40, BagSize.KG_75, BagSize.KG_100]
# Table column order: the editable base rate first, then the derived rates
DISPLAY_SIZES: List[BagSize] = [BagSize.KG_100, BagSize.KG_75, BagSize.KG_40]
SEASONS: List[SeasonCode] = [SeasonCode.KHARIF, SeasonCode.RABI]


@dataclass(frozen=True)
class SeasonRef:
    id: str
    code: str
    name: str


@dataclass(frozen=True)
class CropYear:
    id: str
    label: str
    start_year: int
    seasons: List[SeasonRef] = field(default_factory=list)


@dataclass(frozen=True)
class RiceType:
    id: str
    code: str
    name: str
    is_active: bool = True


@dataclass(frozen=True)
class RiceTypeRef:
    code: str
    name: str


@dataclass
class SeasonBagRate:
    """One grouped row: all three bag-size rates for one rice type."""

    crop_year_start_year: int
    season_code: SeasonCode
    rice_type: RiceTypeRef
    rates: Dict[BagSize, Optional[float]] = field(
        default_factory=lambda: {size: None for size in BAG_SIZES}
    )

    @property
    def key(self) -> tuple:
        return (self.crop_year_start_year, self.season_code, self.rice_type.code)

    def to_wire(self) -> dict:
        return {
            "cropYearStartYear": self.crop_year_start_year,
            "seasonCode": self.season_code.value,
            "riceType": {"code": self.rice_type.code, "name": self.rice_type.name},
            "rates": {size.value: self.rates.get(size) for size in BAG_SIZES},
        }


@dataclass
class SeasonBagRateList:
    """Normalized list response; `message` is the server's optional notice."""

    items: List[SeasonBagRate] = field(default_factory=list)
    success: bool = True
    message: Optional[str] = None

    def to_wire(self) -> dict:
        """Render the grouped wire shape."""
        out: dict = {"success": self.success, "data": {"items": [i.to_wire() for i in self.items]}}
        if self.message is not None:
            out["message"] = self.message
        return out


@dataclass(frozen=True)
class CropYearPage:
    items: List[CropYear]
    total: int
    page: int
    limit: int


__all__ = [
    "BAG_SIZES",
    "BagSize",
    "CropYear",
    "CropYearPage",
    "DISPLAY_SIZES",
    "RiceType",
    "RiceTypeRef",
    "SEASONS",
    "SeasonBagRate",
    "SeasonBagRateList",
    "SeasonCode",
    "SeasonRef",
]
