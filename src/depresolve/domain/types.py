"""Schema capabilities consumed by the resolver, plus shared aliases.

The engine never owns a schema. It only needs to ask a type for its
relation fields and a field for its target type and list-ness, which is
what :class:`TypeDescriptor` and :class:`FieldDescriptor` describe.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from enum import StrEnum
from typing import Any, Protocol, TypeAlias, runtime_checkable

RequestFieldTree: TypeAlias = "dict[str, bool | RequestFieldTree]"
Entity: TypeAlias = Any
Source: TypeAlias = Entity | list[Entity] | None

Loader: TypeAlias = Callable[
    [Any, dict[str, list[Any]], RequestFieldTree],
    Awaitable[list[Entity]] | list[Entity],
]
Initializer: TypeAlias = Callable[
    [Any, Source, RequestFieldTree],
    Awaitable[Mapping[Any, Mapping[str, Any]] | None] | Mapping[Any, Mapping[str, Any]] | None,
]


class ResolveMethod(StrEnum):
    """Operation kinds that take part in a call signature."""

    INITIALIZER = "initializer"
    LOADER = "loader"


@runtime_checkable
class FieldDescriptor(Protocol):
    """A field of an entity type."""

    @property
    def name(self) -> str: ...

    def target_type(self) -> TypeDescriptor | None:
        """Underlying object type with list/required wrappers removed, or None for scalars."""
        ...

    def is_list_type(self) -> bool: ...


@runtime_checkable
class TypeDescriptor(Protocol):
    """An entity type known to the schema."""

    @property
    def name(self) -> str: ...

    def fields(self) -> Mapping[str, FieldDescriptor]: ...


def field_name(ref: Any) -> str:
    """Return the name behind a field reference.

    References are plain strings, objects exposing ``name`` (schema
    fields), or zero-arg callables returning either of those.
    """
    if callable(ref) and not isinstance(ref, str) and not hasattr(ref, "name"):
        ref = ref()
    if isinstance(ref, str):
        return ref
    name = getattr(ref, "name", None)
    if not isinstance(name, str):
        msg = f"Cannot derive a field name from {ref!r}"
        raise TypeError(msg)
    return name


def type_name(type_: Any) -> str:
    """Display name of an entity-type identifier."""
    name = getattr(type_, "name", None)
    return name if isinstance(name, str) else str(type_)
