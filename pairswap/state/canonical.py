"""
Canonical bytes for snapshots and their commitments.

A commitment is sha256(TAG || payload) where TAG is
``pairswap:<label>:v<version>\\0`` and the payload is compact, key-sorted UTF-8
JSON. Floats and lone surrogates are rejected so two hosts holding the same
state always hash the same bytes.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any


TAG_PREFIX = b"pairswap:"


def _check_value(value: Any, path: str) -> None:
    if value is None or isinstance(value, (bool, int)):
        return
    if isinstance(value, float):
        raise TypeError(f"{path}: floats have no canonical form")
    if isinstance(value, str):
        if any(0xD800 <= ord(ch) <= 0xDFFF for ch in value):
            raise TypeError(f"{path}: lone surrogate in string")
        return
    if isinstance(value, dict):
        for k, v in value.items():
            if not isinstance(k, str):
                raise TypeError(f"{path}: object keys must be str")
            _check_value(k, path)
            _check_value(v, f"{path}.{k}")
        return
    if isinstance(value, (list, tuple)):
        for i, item in enumerate(value):
            _check_value(item, f"{path}[{i}]")
        return
    raise TypeError(f"{path}: unsupported type {type(value).__name__}")


def canonical_json_bytes(value: Any) -> bytes:
    _check_value(value, "$")
    text = json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return text.encode("utf-8")


def domain_tag(label: str, version: int = 1) -> bytes:
    if not isinstance(label, str) or not label:
        raise TypeError("label must be a non-empty str")
    if not label.isascii() or "\x00" in label or ":" in label:
        raise ValueError(f"label must be ASCII without NUL or ':': {label!r}")
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")
    return TAG_PREFIX + label.encode("ascii") + b":v%d\x00" % version


def commit(label: str, version: int, payload: bytes) -> bytes:
    return hashlib.sha256(domain_tag(label, version) + payload).digest()


def commit_hex(label: str, version: int, payload: bytes) -> str:
    return "0x" + commit(label, version, payload).hex()
