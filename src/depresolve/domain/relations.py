"""Relation descriptors: how one entity type is fetched and attached to another."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, TypeAlias

from depresolve.domain.types import field_name


@dataclass(frozen=True)
class RelationDescriptor:
    """One ``requires`` edge from a parent type to a child type.

    Attributes:
        destination: Parent field the matched children are written to.
        filter: ``{filter_key: source_field}``. ``filter_key`` is the loader
            argument name and the child field compared during mapping;
            ``source_field`` is the parent field supplying the values.
        is_list: Whether ``destination`` holds a list. ``None`` defers to
            the parent type's field descriptor.
    """

    destination: str
    filter: Mapping[str, str] = field(default_factory=dict)
    is_list: bool | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "destination", field_name(self.destination))
        normalized = {field_name(k): field_name(v) for k, v in self.filter.items()}
        object.__setattr__(self, "filter", MappingProxyType(normalized))

    @property
    def source_fields(self) -> frozenset[str]:
        return frozenset(self.filter.values())


RelationProvider: TypeAlias = RelationDescriptor | Mapping[str, Any] | Callable[[], RelationDescriptor | Mapping[str, Any]]


def relation(destination: Any, filter: Mapping[Any, Any], *, is_list: bool | None = None) -> RelationDescriptor:  # noqa: A002
    """Build a :class:`RelationDescriptor` from names or schema field objects."""
    return RelationDescriptor(destination=destination, filter=dict(filter), is_list=is_list)


def resolve_relation(provider: RelationProvider) -> RelationDescriptor:
    """Evaluate a deferred provider into a :class:`RelationDescriptor`.

    Providers are evaluated at load time so schema fields referenced by
    them may be defined after registration. Mappings use the keys
    ``as`` (or ``destination``), ``filter`` and optionally ``is_list``.
    """
    value = provider() if callable(provider) else provider
    if isinstance(value, RelationDescriptor):
        return value
    if isinstance(value, Mapping):
        destination = value.get("destination", value.get("as"))
        if destination is None:
            msg = "Relation options need an 'as' (or 'destination') field"
            raise ValueError(msg)
        return relation(destination, value.get("filter", {}), is_list=value.get("is_list"))
    msg = f"Unsupported relation provider result: {value!r}"
    raise TypeError(msg)
