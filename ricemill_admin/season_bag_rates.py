from __future__ import annotations

"""
Season bag-rate API calls and response normalization.

The backend has shipped two response shapes for bag rates and either may be
deployed behind this console:

- grouped: one item per rice type with `rates: {KG_40, KG_75, KG_100}`
- legacy: one item per (rice type, bag size) with a single `rateRupees`

`normalize_list_response` accepts both and always returns the grouped form.
The two parsers are independent; fields are never mixed between shapes.

Writes always try the grouped body first. A 400 on that attempt means the
server predates the grouped write shape, so the same rates are re-sent once as
legacy flat rows. Any other failure, or a failure of the retry, propagates.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from .api import ApiClient
from .errors import ApiError, MalformedResponse, RateValidationError
from .models import (
    BAG_SIZES,
    BagSize,
    RiceTypeRef,
    SeasonBagRate,
    SeasonBagRateList,
    SeasonCode,
)
from .schemas import (
    GroupedListResponseWire,
    LegacyListResponseWire,
    LegacyUpsertRequest,
    UpsertSeasonBagRatesRequest,
)

logger = logging.getLogger(__name__)

BAG_RATES_PATH = "/admin/season-bag-rates"
BAG_RATES_RESET_PATH = "/admin/season-bag-rates/reset"
RESET_CONFIRMATION_TOKEN = "RESET"


def _from_grouped(parsed: GroupedListResponseWire) -> SeasonBagRateList:
    items: List[SeasonBagRate] = []
    seen = set()
    for item in parsed.data.items:
        entry = SeasonBagRate(
            crop_year_start_year=item.cropYearStartYear,
            season_code=SeasonCode(item.seasonCode),
            rice_type=RiceTypeRef(code=item.riceType.code, name=item.riceType.name),
            rates={
                BagSize.KG_40: item.rates.KG_40,
                BagSize.KG_75: item.rates.KG_75,
                BagSize.KG_100: item.rates.KG_100,
            },
        )
        if entry.key in seen:
            logger.error("Duplicate bag-rate row in response: %s", entry.key)
            raise MalformedResponse()
        seen.add(entry.key)
        items.append(entry)
    return SeasonBagRateList(items=items, success=parsed.success, message=parsed.message)


def _from_legacy(parsed: LegacyListResponseWire) -> SeasonBagRateList:
    by_code: Dict[str, SeasonBagRate] = {}
    for item in parsed.data.items:
        entry = by_code.get(item.riceType.code)
        if entry is None:
            entry = SeasonBagRate(
                crop_year_start_year=item.cropYearStartYear,
                season_code=SeasonCode(item.seasonCode),
                rice_type=RiceTypeRef(code=item.riceType.code, name=item.riceType.name),
            )
            by_code[item.riceType.code] = entry
        entry.rates[BagSize(item.bagSize)] = item.rateRupees
    return SeasonBagRateList(items=list(by_code.values()), success=parsed.success, message=parsed.message)


def normalize_list_response(raw: Any) -> SeasonBagRateList:
    """Parse a bag-rate list response in either wire shape.

    Raises:
        MalformedResponse: neither the grouped nor the legacy shape matches
    """
    try:
        grouped = GroupedListResponseWire.model_validate(raw)
    except PydanticValidationError:
        grouped = None
    if grouped is not None:
        return _from_grouped(grouped)

    try:
        legacy = LegacyListResponseWire.model_validate(raw)
    except PydanticValidationError as e:
        logger.error("Bag-rate response matched neither wire shape: %s", e)
        raise MalformedResponse() from e
    logger.info("Folded %d legacy bag-rate rows into grouped form", len(legacy.data.items))
    return _from_legacy(legacy)


def build_upsert_payload(
    crop_year_start_year: int,
    season_code: SeasonCode,
    rows: Iterable[tuple],
) -> Dict[str, Any]:
    """Build and validate the grouped write body.

    `rows` yields `(rice_type_code, {BagSize: float})` pairs.

    Raises:
        RateValidationError: the payload is empty, has duplicate rice types
            or carries a negative rate
    """
    body = {
        "cropYearStartYear": crop_year_start_year,
        "seasonCode": SeasonCode(season_code).value,
        "rates": [
            {
                "riceTypeCode": code,
                "rates": {size.value: float(rates[size]) for size in BAG_SIZES},
            }
            for code, rates in rows
        ],
    }
    if not body["rates"]:
        raise RateValidationError("Add at least one rate.", field="rates")
    try:
        UpsertSeasonBagRatesRequest.model_validate(body)
    except PydanticValidationError as e:
        first = e.errors()[0]
        raise RateValidationError(str(first.get("msg", "Enter a valid rate.")), field="rates") from e
    return body


def to_legacy_upsert_payload(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Expand each grouped row into three flat `{riceTypeCode, bagSize, rateRupees}` rows."""
    items: List[Dict[str, Any]] = []
    for row in payload["rates"]:
        for size in BAG_SIZES:
            items.append({
                "riceTypeCode": row["riceTypeCode"],
                "bagSize": size.value,
                "rateRupees": row["rates"][size.value],
            })
    legacy = {
        "cropYearStartYear": payload["cropYearStartYear"],
        "seasonCode": payload["seasonCode"],
        "rates": items,
    }
    LegacyUpsertRequest.model_validate(legacy)
    return legacy


def list_season_bag_rates(client: ApiClient, crop_year_start_year: int, season_code: SeasonCode) -> SeasonBagRateList:
    params = {
        "cropYearStartYear": str(crop_year_start_year),
        "seasonCode": SeasonCode(season_code).value,
    }
    res = client.get(BAG_RATES_PATH, params=params)
    return normalize_list_response(res)


def upsert_season_bag_rates(client: ApiClient, payload: Mapping[str, Any]) -> SeasonBagRateList:
    """Write rates, falling back once to the legacy body on HTTP 400."""
    try:
        res = client.post(BAG_RATES_PATH, body=dict(payload))
    except ApiError as err:
        if err.status != 400:
            raise
        logger.warning("Grouped bag-rate write rejected (400: %s); retrying with legacy rows", err.message)
        res = client.post(BAG_RATES_PATH, body=to_legacy_upsert_payload(payload))
    return normalize_list_response(res)


def reset_season_bag_rates(
    client: ApiClient,
    crop_year_start_year: int,
    season_code: SeasonCode,
    confirm: Optional[str],
) -> SeasonBagRateList:
    """Zero every rate for one crop year and season.

    The confirmation token is checked here, before any request is made.
    """
    if confirm != RESET_CONFIRMATION_TOKEN:
        raise RateValidationError(f"Type {RESET_CONFIRMATION_TOKEN} to confirm.", field="confirm")
    body = {
        "cropYearStartYear": crop_year_start_year,
        "seasonCode": SeasonCode(season_code).value,
        "confirm": confirm,
    }
    logger.info("Resetting bag rates for %s %s", crop_year_start_year, body["seasonCode"])
    res = client.post(BAG_RATES_RESET_PATH, body=body)
    return normalize_list_response(res)


__all__ = [
    "BAG_RATES_PATH",
    "BAG_RATES_RESET_PATH",
    "RESET_CONFIRMATION_TOKEN",
    "build_upsert_payload",
    "list_season_bag_rates",
    "normalize_list_response",
    "reset_season_bag_rates",
    "to_legacy_upsert_payload",
    "upsert_season_bag_rates",
]
