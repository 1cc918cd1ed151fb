"""Validation helpers for addresses and transaction hashes."""

from __future__ import annotations

from typing import Any

from wallet_inspector.exceptions import InvalidInputError

ZERO_ADDRESS = "0x" + "0" * 40


def is_hex_address(addr: Any) -> bool:
    """Return True if addr is a valid 0x wallet address (42 chars)."""
    if not isinstance(addr, str):
        return False
    s = addr.strip()
    if len(s) != 42:
        return False
    if not s.startswith("0x"):
        return False
    try:
        int(s[2:], 16)
        return True
    except ValueError:
        return False


def is_tx_hash(x: Any) -> bool:
    """Return True if x is a valid transaction hash (0x + 64 hex chars = 66 chars)."""
    if not isinstance(x, str):
        return False
    s = x.strip()
    if len(s) != 66 or not s.startswith("0x"):
        return False
    try:
        int(s[2:], 16)
        return True
    except ValueError:
        return False


def normalize_address(addr: str | None) -> str:
    """Return the address stripped and lower-cased ("" for None)."""
    return (addr or "").strip().lower()


def require_address(addr: Any, *, field: str = "address") -> str:
    """Return the normalized address or raise InvalidInputError."""
    if not is_hex_address(addr):
        raise InvalidInputError(f"Valid wallet address required: {addr!r}", field=field, value=addr)
    return normalize_address(addr)


def require_tx_hash(tx_hash: Any) -> str:
    """Return the normalized transaction hash or raise InvalidInputError."""
    if not is_tx_hash(tx_hash):
        raise InvalidInputError(
            f"Invalid transaction hash: {tx_hash!r}", field="tx_hash", value=tx_hash
        )
    return tx_hash.strip().lower()


def require_hex_data(data: Any, *, field: str = "data") -> str:
    """Return 0x-prefixed, even-length hex calldata (empty is "0x") or raise InvalidInputError."""
    if data is None or data == "":
        return "0x"
    s = data.strip().lower() if isinstance(data, str) else ""
    if not s.startswith("0x") or len(s) % 2:
        raise InvalidInputError(f"Hex data required: {data!r}", field=field, value=data)
    try:
        bytes.fromhex(s[2:])
    except ValueError:
        raise InvalidInputError(f"Hex data required: {data!r}", field=field, value=data) from None
    return s


def mask_address(addr: str | None) -> str:
    """Return a masked wallet address for logging (e.g. 0x1234...abcd)."""
    if not addr or len(addr) < 10:
        return "***"
    return f"{addr[:6]}...{addr[-4:]}"
