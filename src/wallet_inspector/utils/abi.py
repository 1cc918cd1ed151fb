"""Calldata encoding and return-data decoding for the ERC-165/721 probes."""

from __future__ import annotations

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_utils import encode_hex, function_signature_to_4byte_selector, keccak


def selector(signature: str) -> str:
    """0x-prefixed bytes4(keccak256(signature))."""
    return encode_hex(function_signature_to_4byte_selector(signature))


SELECTOR_SUPPORTS_INTERFACE = selector("supportsInterface(bytes4)")
SELECTOR_OWNER_OF = selector("ownerOf(uint256)")
SELECTOR_NAME = selector("name()")
SELECTOR_SYMBOL = selector("symbol()")
SELECTOR_TOKEN_URI = selector("tokenURI(uint256)")
SELECTOR_APPROVE = selector("approve(address,uint256)")

ERC721_INTERFACE_ID = "0x80ac58cd"

# Shared by ERC-20 and ERC-721
TRANSFER_TOPIC = encode_hex(keccak(text="Transfer(address,address,uint256)"))
ZERO_TOPIC = "0x" + "0" * 64


def address_topic(address: str) -> str:
    """Left-pad an address into a 32-byte indexed topic."""
    s = address.strip().lower()
    if s.startswith("0x"):
        s = s[2:]
    return "0x" + s.rjust(64, "0")


def _strip0x(data: str) -> str:
    return data[2:] if data.startswith("0x") else data


def _result_bytes(result: str) -> bytes:
    raw = _strip0x(result or "")
    if len(raw) % 2:
        raw = "0" + raw
    return bytes.fromhex(raw)


def encode_supports_interface(interface_id: str = ERC721_INTERFACE_ID) -> str:
    return SELECTOR_SUPPORTS_INTERFACE + abi_encode(
        ["bytes4"], [bytes.fromhex(_strip0x(interface_id))]
    ).hex()


def encode_owner_of(token_id: int) -> str:
    return SELECTOR_OWNER_OF + abi_encode(["uint256"], [token_id]).hex()


def encode_token_uri(token_id: int) -> str:
    return SELECTOR_TOKEN_URI + abi_encode(["uint256"], [token_id]).hex()


def decode_bool(result: str) -> bool:
    """Decode a single ABI bool. Raises ValueError on empty/short return data."""
    data = _result_bytes(result)
    if len(data) < 32:
        raise ValueError(f"Return data too short for bool: {result!r}")
    return bool(abi_decode(["bool"], data[:32])[0])


def decode_address(result: str) -> str:
    """Decode a single ABI address (lower-cased). Raises ValueError on short data."""
    data = _result_bytes(result)
    if len(data) < 32:
        raise ValueError(f"Return data too short for address: {result!r}")
    return abi_decode(["address"], data[:32])[0].lower()


def decode_string(result: str) -> str:
    """Decode an ABI string return value.

    Falls back to a NUL-trimmed bytes32 reading for legacy contracts that
    return name/symbol as bytes32.
    """
    data = _result_bytes(result)
    if len(data) < 32:
        raise ValueError(f"Return data too short for string: {result!r}")
    if len(data) == 32:
        return data.rstrip(b"\x00").decode("utf-8", errors="replace")
    return str(abi_decode(["string"], data)[0])
