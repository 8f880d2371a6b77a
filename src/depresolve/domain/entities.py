"""Uniform access to entity records.

Entities are either mutable mappings (plain dicts from a JSON transport)
or attribute objects (dataclasses, pydantic models). Relation fields are
written in place.
"""

from __future__ import annotations

from collections.abc import Iterable, MutableMapping
from typing import Any

from depresolve.domain.types import Source


def get_value(entity: Any, name: str, default: Any = None) -> Any:
    if isinstance(entity, MutableMapping):
        return entity.get(name, default)
    return getattr(entity, name, default)


def set_value(entity: Any, name: str, value: Any) -> None:
    if isinstance(entity, MutableMapping):
        entity[name] = value
    else:
        setattr(entity, name, value)


def update_values(entity: Any, values: Any) -> None:
    """Shallow-merge *values* into *entity*."""
    for key, value in dict(values).items():
        set_value(entity, key, value)


def is_empty(source: Source) -> bool:
    """True for ``None`` and empty lists/tuples; a single entity is never empty."""
    if source is None:
        return True
    if isinstance(source, (list, tuple)):
        return len(source) == 0
    return False


def as_list(source: Source) -> list[Any]:
    """Return *source* as a list of entities (``None`` items dropped)."""
    if source is None:
        return []
    if isinstance(source, (list, tuple)):
        return [item for item in source if item is not None]
    return [source]


def as_values(value: Any) -> list[Any]:
    """Flatten a field value into a list (scalars become one-item lists)."""
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def child_source(source: Source, field: str) -> list[Any]:
    """Entities reachable from *source* through *field*, lists flattened."""
    children: list[Any] = []
    for item in as_list(source):
        value = get_value(item, field)
        if not value:
            continue
        children.extend(v for v in as_values(value) if v is not None)
    return children


def iter_present(values: Iterable[Any]) -> list[Any]:
    """Drop ``None`` and empty strings, keep everything else (``0`` included)."""
    return [v for v in values if v is not None and v != ""]
