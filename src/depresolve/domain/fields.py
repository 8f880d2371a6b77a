"""Request field tree helpers.

A request field tree maps a field name to ``False`` (not requested),
``True`` (requested scalar) or a nested tree (requested relation with a
sub-selection). The identifier field is forced into every level because
caching and mapping both key on it.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

from depresolve.domain.types import RequestFieldTree


def with_ids(fields: Mapping[str, Any] | None, id_field: str = "id") -> RequestFieldTree:
    """Return a copy of *fields* with *id_field* present at every nested level.

    The caller's tree is never modified. An identifier the caller did not
    ask for is added as ``False`` so loaders can tell it was implied.
    """
    result: RequestFieldTree = {}
    for key, value in (fields or {}).items():
        if isinstance(value, Mapping):
            result[key] = with_ids(value, id_field)
        else:
            result[key] = bool(value)
    if id_field not in result:
        result[id_field] = False
    return result


def merge_fields(target: RequestFieldTree, other: Mapping[str, Any] | None) -> RequestFieldTree:
    """Deep-merge *other* into *target* in place and return *target*.

    Merging only ever adds: a sub-selection wins over a plain flag and
    ``True`` wins over ``False``.
    """
    for key, value in (other or {}).items():
        current = target.get(key)
        if isinstance(value, Mapping):
            if isinstance(current, dict):
                merge_fields(current, value)
            else:
                target[key] = merge_fields({}, value)
        elif isinstance(current, dict):
            continue
        else:
            target[key] = bool(current) or bool(value)
    return target


def requested(fields: Mapping[str, Any]) -> Iterator[tuple[str, Any]]:
    """Yield ``(name, subtree)`` for every truthy entry of *fields*."""
    for key, value in fields.items():
        if value:
            yield key, value


def subtree(fields: Mapping[str, Any], name: str, id_field: str = "id") -> RequestFieldTree:
    """Sub-selection under *name*; a plain ``True`` selects the identifier only."""
    value = fields.get(name)
    if isinstance(value, dict):
        return value
    return {id_field: False}
