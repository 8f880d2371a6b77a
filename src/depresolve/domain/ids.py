"""Identifier normalization and call signatures.

Loaders and callers do not always agree on how an identifier is
represented (``7`` vs ``"7"``), so every identifier comparison goes
through :func:`normalize_id`:

- ``bool`` keeps a distinct ``"bool:"`` form so ``True`` never equals ``1``.
- Integral numbers (``7``, ``7.0``) become their decimal string ``"7"``.
- Everything else becomes ``str(value)``.

Call signatures are SHA-256 digests of a canonical JSON document, so
argument-key order and list element order never change the digest.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Iterable, Mapping
from typing import Any

from depresolve.domain.types import ResolveMethod


def normalize_id(value: Any) -> str:
    """Return the canonical string form of an identifier value."""
    if isinstance(value, bool):
        return f"bool:{value}"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def normalize_args(value: Any) -> Any:
    """Recursively canonicalize call arguments.

    Mappings get sorted string keys, lists/tuples/sets are sorted by the
    normalized string form of their elements.
    """
    if isinstance(value, Mapping):
        return {str(k): normalize_args(v) for k, v in sorted(value.items(), key=lambda kv: str(kv[0]))}
    if isinstance(value, (list, tuple, set, frozenset)):
        items = [normalize_args(v) for v in value]
        return sorted(items, key=_sort_key)
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, (int, float)):
        return normalize_id(value)
    return str(value)


def _sort_key(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True, separators=(",", ":"))
    return normalize_id(value)


def call_signature(type_name: str, method: ResolveMethod, *args: Any) -> str:
    """Deterministic digest of ``(type_name, method, args)``."""
    payload = {
        "type": type_name,
        "method": str(method),
        "args": [normalize_args(a) for a in args],
    }
    raw = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def id_set(values: Iterable[Any]) -> set[str]:
    """Normalized identifier set of *values* (``None`` dropped)."""
    return {normalize_id(v) for v in values if v is not None}
