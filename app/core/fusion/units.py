"""Exact conversions between human decimal amounts and base-unit integers."""

from __future__ import annotations

import re
from decimal import Decimal, localcontext
from typing import Union

MAX_DECIMALS = 77

_AMOUNT_RE = re.compile(r"^(-)?(\d*)(?:\.(\d*))?$")
_INTEGER_RE = re.compile(r"^-?\d+$")


def _check_decimals(decimals: int) -> int:
    if isinstance(decimals, bool) or not isinstance(decimals, int):
        raise ValueError("decimals must be an integer")
    if decimals < 0 or decimals > MAX_DECIMALS:
        raise ValueError(f"decimals must be between 0 and {MAX_DECIMALS}")
    return decimals


def to_base_units(amount: str, decimals: int = 18) -> int:
    """Parse a decimal string such as ``"1.5"`` into base units.

    Fractional digits beyond ``decimals`` are rejected unless they are all
    zero. Exponent notation, NaN and infinity are rejected.
    """

    decimals = _check_decimals(decimals)
    text = (amount or "").strip()
    match = _AMOUNT_RE.fullmatch(text)
    if not match or not (match.group(2) or match.group(3)):
        raise ValueError(f"invalid decimal amount: {amount!r}")

    fraction = (match.group(3) or "").rstrip("0")
    if len(fraction) > decimals:
        raise ValueError("too many decimals for format")

    with localcontext() as ctx:
        ctx.prec = MAX_DECIMALS * 2
        scaled = Decimal(text).scaleb(decimals)
    return int(scaled)


def from_base_units(value: Union[int, str], decimals: int = 18) -> str:
    """Render a base-unit integer as a decimal string (``"1.0"``, ``"0.000001"``)."""

    decimals = _check_decimals(decimals)
    if isinstance(value, bool):
        raise ValueError("invalid base-unit value")
    if isinstance(value, str):
        text = value.strip()
        if not _INTEGER_RE.fullmatch(text):
            raise ValueError(f"invalid base-unit value: {value!r}")
        number = int(text)
    elif isinstance(value, int):
        number = value
    else:
        raise ValueError(f"invalid base-unit value: {value!r}")

    sign = "-" if number < 0 else ""
    whole, remainder = divmod(abs(number), 10**decimals)
    fraction = str(remainder).rjust(decimals, "0").rstrip("0") if decimals else ""
    return f"{sign}{whole}.{fraction or '0'}"


__all__ = ["MAX_DECIMALS", "to_base_units", "from_base_units"]
