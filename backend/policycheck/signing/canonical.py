"""Canonical JSON bytes, payload hashing and unpadded base64url."""

import base64
import binascii
import hashlib
import hmac
import json
import re
from typing import Any

HASH_PREFIX = "sha256:"

_B64URL = re.compile(r"[A-Za-z0-9_-]*={0,2}")


def _portable_numbers(obj: Any) -> Any:
    """Whole-number floats become ints so `8.0` serializes as `8`, as JSON.stringify writes it."""
    if isinstance(obj, float) and obj.is_integer():
        return int(obj)
    if isinstance(obj, dict):
        return {key: _portable_numbers(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_portable_numbers(value) for value in obj]
    return obj


def canonical_json(obj: Any) -> bytes:
    """
    Deterministic UTF-8 JSON: keys sorted at every level, no insignificant whitespace,
    integral numbers written without a fraction. NaN and infinities are rejected (ValueError).
    """
    return json.dumps(
        _portable_numbers(obj),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    ).encode("utf-8")


def payload_hash(data: bytes) -> str:
    return HASH_PREFIX + hashlib.sha256(data).hexdigest()


def hashes_match(expected: Any, actual: str) -> bool:
    if not isinstance(expected, str):
        return False
    return hmac.compare_digest(expected.encode("utf-8"), actual.encode("utf-8"))


def b64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def b64url_decode(value: str) -> bytes:
    """Decode unpadded (or padded) base64url; ValueError on anything else, including `+` and `/`."""
    if not isinstance(value, str) or not _B64URL.fullmatch(value):
        raise ValueError("Invalid base64url")
    stripped = value.rstrip("=")
    padded = stripped + "=" * (-len(stripped) % 4)
    try:
        return base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64url: {e}") from e
