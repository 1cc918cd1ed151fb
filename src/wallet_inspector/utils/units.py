"""Exact conversions between integer base units (wei) and decimal display units."""

from __future__ import annotations

from decimal import Decimal, localcontext
from typing import Union

ETHER_DECIMALS = 18
GWEI_DECIMALS = 9

_Number = Union[int, str, Decimal]


def format_units(value: int, decimals: int) -> Decimal:
    """Scale an integer amount of base units down by 10**decimals.

    Runs in a local context wide enough for any uint256, so the result is exact.
    """
    if decimals < 0:
        raise ValueError(f"decimals must be >= 0, got {decimals}")
    with localcontext() as ctx:
        ctx.prec = 100
        return Decimal(int(value)).scaleb(-decimals)


def parse_units(amount: _Number, decimals: int) -> int:
    """Inverse of format_units: display amount -> integer base units.

    Raises:
        ValueError: If amount has more fractional digits than decimals allows.
    """
    if decimals < 0:
        raise ValueError(f"decimals must be >= 0, got {decimals}")
    with localcontext() as ctx:
        ctx.prec = 100
        scaled = Decimal(str(amount)).scaleb(decimals)
        if scaled != scaled.to_integral_value():
            raise ValueError(f"{amount} has more than {decimals} fractional digits")
        return int(scaled)


def format_ether(wei: int) -> Decimal:
    """Wei -> ether."""
    return format_units(wei, ETHER_DECIMALS)


def format_gwei(wei: int) -> Decimal:
    """Wei -> gwei."""
    return format_units(wei, GWEI_DECIMALS)


def parse_ether(amount: _Number) -> int:
    """Ether -> wei."""
    return parse_units(amount, ETHER_DECIMALS)


def hex_to_int(value: object, default: int = 0) -> int:
    """Parse a JSON-RPC quantity ("0x1a", int, decimal str) into an int, or default."""
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return default
        try:
            if s.lower().startswith("0x"):
                return int(s[2:], 16) if len(s) > 2 else 0
            return int(s)
        except ValueError:
            return default
    return default
