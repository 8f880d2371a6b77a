"""Minimal in-memory schema implementing the descriptor protocols.

Useful when the entity types are not backed by a GraphQL schema (or in
tests). Field maps may be given as a zero-arg callable so types can
reference each other before both are defined::

    User = ObjectType("User", lambda: {
        "id": Field(ID),
        "company": Field(Company),
    })
    Company = ObjectType("Company", lambda: {
        "id": Field(ID),
        "employees": Field(ListOf(User)),
    })
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TypeAlias

_FieldMap: TypeAlias = "Mapping[str, Field]"
_WrappedType: TypeAlias = "ObjectType | Scalar | ListOf | NonNull"


@dataclass(frozen=True)
class Scalar:
    """Leaf value type (never a relation target)."""

    name: str


ID = Scalar("ID")
String = Scalar("String")
Int = Scalar("Int")
Float = Scalar("Float")
Boolean = Scalar("Boolean")


@dataclass(frozen=True)
class ListOf:
    of_type: _WrappedType


@dataclass(frozen=True)
class NonNull:
    of_type: _WrappedType


@dataclass(eq=False)
class Field:
    """A field of an :class:`ObjectType`.

    ``name`` is filled from the owning field map when left empty.
    """

    type: _WrappedType
    name: str = ""

    def target_type(self) -> ObjectType | None:
        inner = self.type
        while isinstance(inner, (ListOf, NonNull)):
            inner = inner.of_type
        return inner if isinstance(inner, ObjectType) else None

    def is_list_type(self) -> bool:
        inner = self.type
        while isinstance(inner, NonNull):
            inner = inner.of_type
        return isinstance(inner, ListOf)


@dataclass(eq=False)
class ObjectType:
    """Named entity type. Hashes by identity so it can key a registry."""

    name: str
    field_map: _FieldMap | Callable[[], _FieldMap] = field(default_factory=dict, repr=False)
    _resolved: dict[str, Field] | None = field(default=None, init=False, repr=False)

    def fields(self) -> dict[str, Field]:
        """Return the field map, resolving a lazy definition on first access."""
        if self._resolved is None:
            raw = self.field_map() if callable(self.field_map) else self.field_map
            resolved: dict[str, Field] = {}
            for key, fld in raw.items():
                if not fld.name:
                    fld.name = key
                resolved[key] = fld
            self._resolved = resolved
        return self._resolved
