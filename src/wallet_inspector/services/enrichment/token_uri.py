"""tokenURI interpretation: inline JSON payloads are decoded, hosted URIs pass through unresolved."""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import unquote

_JSON_DATA_PREFIX = "data:application/json"
_EXTERNAL_SCHEMES = ("http://", "https://", "ipfs://", "ar://")


@dataclass(frozen=True, slots=True)
class ParsedTokenUri:
    name: Optional[str] = None
    image: Optional[str] = None
    external: bool = False
    """True when the URI points at hosted metadata that was not fetched."""


def _decode_inline_json(uri: str) -> dict[str, Any]:
    header, sep, payload = uri.partition(",")
    if not sep:
        raise ValueError("data URI without payload")
    if header.endswith(";base64"):
        try:
            text = base64.b64decode(payload, validate=False).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise ValueError(f"invalid base64 JSON payload: {e}") from e
    else:
        text = unquote(payload)
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("token metadata JSON is not an object")
    return data


def parse_token_uri(uri: Optional[str]) -> ParsedTokenUri:
    """Extract name/image from a tokenURI without any network access.

    Raises:
        ValueError: If an inline JSON payload is malformed (json.JSONDecodeError included).
    """
    if not uri:
        return ParsedTokenUri()
    value = uri.strip()
    if value.startswith(_JSON_DATA_PREFIX):
        data = _decode_inline_json(value)
        name = data.get("name")
        image = data.get("image") or data.get("image_url")
        return ParsedTokenUri(
            name=str(name) if name else None,
            image=str(image) if image else None,
        )
    if value.startswith(_EXTERNAL_SCHEMES):
        return ParsedTokenUri(image=value, external=True)
    return ParsedTokenUri()
