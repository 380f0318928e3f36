"""
Deterministic canonical encoding primitives.

Used to commit to exchange snapshots: the same logical state always encodes
to the same bytes, so two snapshots can be compared by hash.
"""

from __future__ import annotations

import hashlib
import json
import re
from typing import Any


def has_surrogates(s: str) -> bool:
    """True if `s` holds lone surrogate code points, which UTF-8 cannot encode."""
    return any(0xD800 <= ord(ch) <= 0xDFFF for ch in s)


def _reject_str(s: str) -> None:
    if has_surrogates(s):
        raise TypeError("surrogate code points are not allowed in canonical encoding")


def _reject_non_canonical(value: Any) -> None:
    if isinstance(value, str):
        _reject_str(value)
        return
    if isinstance(value, float):
        raise TypeError("floats are not allowed in canonical encoding")
    if isinstance(value, dict):
        for k, v in value.items():
            if not isinstance(k, str):
                raise TypeError("dict keys must be str for canonical encoding")
            _reject_str(k)
            _reject_non_canonical(v)
        return
    if isinstance(value, (list, tuple)):
        for item in value:
            _reject_non_canonical(item)


def canonical_json_bytes(value: Any) -> bytes:
    """
    Canonical JSON encoding for hashing.

    Rules:
    - UTF-8
    - sort_keys=True
    - separators=(',', ':') (no whitespace)
    - allow_nan=False
    - floats rejected (uint256 amounts are encoded as JSON integers)
    """
    _reject_non_canonical(value)
    text = json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )
    return text.encode("utf-8")


def sha256_hex(data: bytes) -> str:
    return "0x" + hashlib.sha256(data).hexdigest()


_LABEL_RE = re.compile(r"^[a-z0-9_]+$")


def domain_sep_bytes(label: str, version: int = 1) -> bytes:
    """`cdswap:<label>:v<version>` followed by NUL, prefixed to hashed payloads."""
    if not isinstance(label, str) or not _LABEL_RE.match(label):
        raise ValueError(f"invalid domain label: {label!r}")
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")
    return f"cdswap:{label}:v{version}".encode("ascii") + b"\x00"
