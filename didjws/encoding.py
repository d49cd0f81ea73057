"""
Segment encoding for compact tokens.

Each token segment is a JSON object serialized without whitespace and
base64url-encoded without '=' padding.
"""

import json
import math
from typing import Any, Dict

from jwcrypto.common import base64url_decode, base64url_encode

from didjws.errors import EncodingError


def b64url_encode(data: bytes) -> str:
    """Base64url-encode bytes with the trailing padding stripped."""
    return base64url_encode(data)


def b64url_decode(segment: str) -> bytes:
    """Decode a base64url string, padded or not."""
    return base64url_decode(segment)


def check_claim_value(name: Any, value: Any) -> None:
    """
    Ensure a claim can be carried in the payload.

    Claim names must be strings and values strings, finite numbers or None
    (an absent claim, dropped from the payload).

    Raises:
        EncodingError: If the claim cannot be serialized.
    """
    if not isinstance(name, str):
        raise EncodingError(f"Claim names must be strings, got {type(name).__name__}")
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise EncodingError(
            f"Claim '{name}' must be a string or number, got {type(value).__name__}"
        )
    if isinstance(value, float) and not math.isfinite(value):
        raise EncodingError(f"Claim '{name}' is not a finite number: {value}")


def normalize_claim_value(value: Any) -> Any:
    """
    Write integral floats as integers, so 1.0 serializes as 1.

    Floats at or beyond 1e21 are left alone; those print in exponent form.
    """
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return int(value)
    return value


def compact_json(obj: Dict[str, Any], sort_keys: bool = False) -> bytes:
    """
    Serialize an object to compact UTF-8 JSON.

    Keys keep their insertion order unless sort_keys is set, in which case the
    output is canonical (sorted keys at every level). Non-ASCII text is emitted
    literally rather than as \\uXXXX escapes.

    Raises:
        EncodingError: If the object is not JSON serializable.
    """
    try:
        text = json.dumps(
            obj,
            separators=(",", ":"),
            sort_keys=sort_keys,
            ensure_ascii=False,
            allow_nan=False,
        )
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Cannot serialize token segment: {e}") from e
    return text.encode("utf-8")


def encode_segment(obj: Dict[str, Any], sort_keys: bool = False) -> str:
    """Serialize and base64url-encode one token segment."""
    return b64url_encode(compact_json(obj, sort_keys=sort_keys))
