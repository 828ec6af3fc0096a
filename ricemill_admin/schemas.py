from __future__ import annotations

"""Wire schemas for the back-office REST API.

Every response shape the console understands is described by a strict
pydantic model. Strict mode matters here: a rate sent as the string "12.5"
is not a number on the wire and must not be silently coerced, otherwise a
legacy payload could pass as a grouped one.

Unknown extra fields are ignored, so newer servers can add fields freely.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

BagSizeLiteral = Literal["KG_40", "KG_75", "KG_100"]
SeasonCodeLiteral = Literal["KHARIF", "RABI"]


class WireModel(BaseModel):
    model_config = ConfigDict(strict=True, extra="ignore")


class RiceTypeRefWire(WireModel):
    code: str
    name: str


# --- season bag rates: grouped shape ---

class RatesBySizeWire(WireModel):
    # Keys are required but each value may be null
    KG_40: Optional[float]
    KG_75: Optional[float]
    KG_100: Optional[float]


class GroupedSeasonBagRateWire(WireModel):
    cropYearStartYear: int
    seasonCode: SeasonCodeLiteral
    riceType: RiceTypeRefWire
    rates: RatesBySizeWire


class GroupedItemsWire(WireModel):
    items: List[GroupedSeasonBagRateWire]


class GroupedListResponseWire(WireModel):
    success: bool
    data: GroupedItemsWire
    message: Optional[str] = None


# --- season bag rates: legacy flat shape ---

class LegacySeasonBagRateWire(WireModel):
    id: str
    cropYearStartYear: int
    seasonCode: SeasonCodeLiteral
    riceType: RiceTypeRefWire
    bagSize: BagSizeLiteral
    rateRupees: float


class LegacyItemsWire(WireModel):
    items: List[LegacySeasonBagRateWire]


class LegacyListResponseWire(WireModel):
    success: bool
    data: LegacyItemsWire
    message: Optional[str] = None


# --- season bag rates: write requests ---

class UpsertRatesWire(WireModel):
    KG_40: float = Field(ge=0)
    KG_75: float = Field(ge=0)
    KG_100: float = Field(ge=0)


class UpsertRateRowWire(WireModel):
    riceTypeCode: str = Field(min_length=1)
    rates: UpsertRatesWire


class UpsertSeasonBagRatesRequest(WireModel):
    cropYearStartYear: int
    seasonCode: SeasonCodeLiteral
    rates: List[UpsertRateRowWire] = Field(min_length=1)

    @field_validator("rates")
    @classmethod
    def _unique_rice_types(cls, rows: List[UpsertRateRowWire]) -> List[UpsertRateRowWire]:
        seen = set()
        for row in rows:
            if row.riceTypeCode in seen:
                raise ValueError(f"Duplicate rate row for rice type {row.riceTypeCode}.")
            seen.add(row.riceTypeCode)
        return rows


class LegacyUpsertRowWire(WireModel):
    riceTypeCode: str
    bagSize: BagSizeLiteral
    rateRupees: float


class LegacyUpsertRequest(WireModel):
    cropYearStartYear: int
    seasonCode: SeasonCodeLiteral
    rates: List[LegacyUpsertRowWire]


# --- collaborators ---

class SeasonWire(WireModel):
    id: str
    code: str
    name: str


class CropYearWire(WireModel):
    id: str
    label: str
    startYear: int
    seasons: List[SeasonWire] = Field(default_factory=list)


class CropYearPageWire(WireModel):
    items: List[CropYearWire]
    total: int
    page: int
    limit: int


class CropYearListResponseWire(WireModel):
    success: bool
    data: CropYearPageWire
    message: Optional[str] = None


class MasterRiceTypeWire(WireModel):
    id: str
    code: str
    name: str
    isActive: bool


class MasterRiceTypeItemsWire(WireModel):
    items: List[MasterRiceTypeWire]


class MasterRiceTypeListResponseWire(WireModel):
    success: bool
    data: MasterRiceTypeItemsWire
    message: Optional[str] = None
