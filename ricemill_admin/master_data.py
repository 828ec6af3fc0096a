from __future__ import annotations

"""Read-only clients for the master data the pricing page depends on.

Crop years and rice types are owned elsewhere in the back office; the bag-rate
console only lists them.
"""

import logging
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from .api import ApiClient
from .errors import MalformedResponse
from .models import CropYear, CropYearPage, RiceType, SeasonRef
from .schemas import CropYearListResponseWire, MasterRiceTypeListResponseWire

logger = logging.getLogger(__name__)

CROP_YEARS_PATH = "/admin/crop-years"
RICE_TYPES_PATH = "/master-data/rice-types"


def list_crop_years(
    client: ApiClient,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    label: Optional[str] = None,
) -> CropYearPage:
    params = {}
    if isinstance(page, int):
        params["page"] = str(page)
    if isinstance(limit, int):
        params["limit"] = str(limit)
    if label and label.strip():
        params["label"] = label.strip()

    res = client.get(CROP_YEARS_PATH, params=params or None)
    try:
        parsed = CropYearListResponseWire.model_validate(res)
    except PydanticValidationError as e:
        logger.error("Unexpected crop-year list response: %s", e)
        raise MalformedResponse() from e

    items = [
        CropYear(
            id=cy.id,
            label=cy.label,
            start_year=cy.startYear,
            seasons=[SeasonRef(id=s.id, code=s.code, name=s.name) for s in cy.seasons],
        )
        for cy in parsed.data.items
    ]
    return CropYearPage(items=items, total=parsed.data.total, page=parsed.data.page, limit=parsed.data.limit)


def list_master_rice_types(
    client: ApiClient,
    search: Optional[str] = None,
    include_inactive: Optional[bool] = None,
) -> List[RiceType]:
    params = {}
    if search and search.strip():
        params["search"] = search.strip()
    if isinstance(include_inactive, bool):
        params["includeInactive"] = "true" if include_inactive else "false"

    res = client.get(RICE_TYPES_PATH, params=params or None)
    try:
        parsed = MasterRiceTypeListResponseWire.model_validate(res)
    except PydanticValidationError as e:
        logger.error("Unexpected rice-type list response: %s", e)
        raise MalformedResponse() from e

    return [
        RiceType(id=rt.id, code=rt.code, name=rt.name, is_active=rt.isActive)
        for rt in parsed.data.items
    ]


__all__ = ["CROP_YEARS_PATH", "RICE_TYPES_PATH", "list_crop_years", "list_master_rice_types"]
