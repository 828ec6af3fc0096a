"""Rice-mill back office: season bag-rate pricing.

Exports the rate value helpers and the normalized bag-rate types for
convenient imports; the API client and workflow live in their own modules.
"""

from .money import derive_from_base, parse_decimal_or_null, truncate_to_two_decimals
from .models import BagSize, SeasonBagRate, SeasonBagRateList, SeasonCode

__version__ = "1.0.0"

__all__ = [
    "BagSize",
    "SeasonBagRate",
    "SeasonBagRateList",
    "SeasonCode",
    "derive_from_base",
    "parse_decimal_or_null",
    "truncate_to_two_decimals",
]
