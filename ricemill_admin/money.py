from __future__ import annotations

"""
Rate value helpers: parsing user input and formatting rupee amounts.

Rates are shown with exactly two fractional digits. Formatting truncates
toward zero rather than rounding, so a derived bag-size rate can never
exceed its proportional share of the 100 kg base rate.

The 75 kg and 40 kg rates are never entered; `derive_from_base` is the only
way they are produced.
"""

from decimal import ROUND_DOWN, Decimal, localcontext
import math
import re
from typing import Dict, Optional, Union

from .models import BagSize

Number = Union[int, float, Decimal]

_CENT = Decimal("0.01")

# What a browser number input accepts: ASCII digits, optional sign, point and exponent
_NUMBER_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

DERIVATION_FACTORS: Dict[BagSize, float] = {
    BagSize.KG_75: 0.75,
    BagSize.KG_40: 0.40,
}

BAG_SIZE_LABELS: Dict[BagSize, str] = {
    BagSize.KG_40: "40 kg",
    BagSize.KG_75: "75 kg",
    BagSize.KG_100: "100 kg",
}


def _to_decimal(value: Number) -> Optional[Decimal]:
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    try:
        as_float = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(as_float):
        return None
    # repr() gives the shortest string that round-trips, so 1.15 stays 1.15
    return Decimal(repr(as_float))


def _truncate(value: Decimal) -> Decimal:
    with localcontext() as ctx:
        # Enough digits for the integer part plus cents, however large the amount
        ctx.prec = max(ctx.prec, value.adjusted() + 6)
        q = value.quantize(_CENT, rounding=ROUND_DOWN)
    # Avoid rendering "-0.00"
    return q.copy_abs() if q == 0 else q


def truncate_to_two_decimals(value: Number) -> str:
    """Format `value` with two decimals, truncating toward zero.

    NaN and infinities format as "0.00".

    >>> truncate_to_two_decimals(1.999)
    '1.99'
    """
    d = _to_decimal(value)
    if d is None:
        return "0.00"
    return f"{_truncate(d):.2f}"


def derive_from_base(base: Number) -> Dict[BagSize, str]:
    """Derive the 75 kg and 40 kg display rates from a 100 kg base rate.

    Each rate is the float product `base * factor` truncated to two decimals,
    so 0.6 gives "0.44" for 75 kg: the float product lands just below 0.45.
    """
    try:
        b = float(base)
    except (TypeError, ValueError):
        b = math.nan
    return {size: truncate_to_two_decimals(b * factor) for size, factor in DERIVATION_FACTORS.items()}


def parse_decimal_or_null(raw: Optional[str]) -> Optional[float]:
    """Parse a user-typed amount.

    Returns None for empty input, anything that is not a finite number, and
    spellings a browser number input rejects (digit-group underscores,
    non-ASCII digits, hex). The sign is kept; range checks belong to
    validation.
    """
    if raw is None:
        return None
    v = str(raw).strip()
    if not _NUMBER_RE.fullmatch(v):
        return None
    n = float(v)
    # Exponents can still overflow, e.g. "1e999"
    if not math.isfinite(n):
        return None
    return n


def format_bag_size_label(bag_size: BagSize) -> str:
    return BAG_SIZE_LABELS[BagSize(bag_size)]


__all__ = [
    "BAG_SIZE_LABELS",
    "DERIVATION_FACTORS",
    "derive_from_base",
    "format_bag_size_label",
    "parse_decimal_or_null",
    "truncate_to_two_decimals",
]
