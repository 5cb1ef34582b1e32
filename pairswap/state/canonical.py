"""
Byte-exact encodings behind pool ids and snapshot commitments.

Two encodings live here:
- canonical JSON for snapshot payloads (sorted keys, no whitespace, ints only),
- length-prefixed binary fields for pool ids.

Both are prefixed with a ``domain_sep_bytes`` tag before hashing so a pool id
can never collide with a snapshot commitment.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any


DOMAIN_PREFIX = b"pairswap:"


def _check_canonical(value: Any, *, path: str) -> None:
    if isinstance(value, float):
        raise TypeError(f"{path}: floats have no canonical encoding")
    if isinstance(value, str):
        if any(0xD800 <= ord(ch) <= 0xDFFF for ch in value):
            raise TypeError(f"{path}: lone surrogates cannot be encoded as UTF-8")
    elif isinstance(value, dict):
        for k, v in value.items():
            if not isinstance(k, str):
                raise TypeError(f"{path}: object keys must be strings, got {type(k).__name__}")
            _check_canonical(k, path=path)
            _check_canonical(v, path=f"{path}.{k}")
    elif isinstance(value, (list, tuple)):
        for i, item in enumerate(value):
            _check_canonical(item, path=f"{path}[{i}]")


def canonical_json_bytes(value: Any) -> bytes:
    """UTF-8 JSON with sorted keys and compact separators; rejects floats and NaN."""
    _check_canonical(value, path="$")
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    return "0x" + hashlib.sha256(data).hexdigest()


def domain_sep_bytes(label: str, version: int = 1) -> bytes:
    """Return ``b"pairswap:<label>:v<version>\\x00"``; *label* must be printable ASCII."""
    if not isinstance(label, str) or not label:
        raise TypeError("label must be a non-empty str")
    if not label.isascii() or not label.isprintable():
        raise ValueError(f"label must be printable ASCII: {label!r}")
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")
    return DOMAIN_PREFIX + f"{label}:v{version}".encode("ascii") + b"\x00"


def encode_uvarint(value: int) -> bytes:
    """Unsigned LEB128."""
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise ValueError(f"uvarint must be a non-negative int, got {value!r}")
    out = bytearray()
    while value > 0x7F:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def encode_bytes(value: bytes) -> bytes:
    if not isinstance(value, (bytes, bytearray)):
        raise TypeError("value must be bytes")
    return encode_uvarint(len(value)) + bytes(value)
