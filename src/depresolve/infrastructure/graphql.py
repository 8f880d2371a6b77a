"""Type descriptors backed by ``graphql-core`` object types.

Install with the ``graphql`` extra. Registries built with
``DependencyRegistry(describe=describe_graphql_type)`` accept
``GraphQLObjectType`` instances directly::

    registry = DependencyRegistry(describe=describe_graphql_type)
    registry.get_or_create(CompanyType).require(UserType, lambda: relation(
        "owner", {"id": "ownerId"},
    ))

``graphql-core`` field objects carry no name, so relation options and
trigger fields refer to GraphQL fields by name.
"""

from __future__ import annotations

from typing import Any

from graphql import (
    GraphQLField,
    GraphQLObjectType,
    get_named_type,
    get_nullable_type,
    is_list_type,
    is_object_type,
)

_descriptors: dict[GraphQLObjectType, GraphQLTypeDescriptor] = {}


class GraphQLFieldDescriptor:
    def __init__(self, name: str, field: GraphQLField) -> None:
        self.name = name
        self.graphql_field = field

    def target_type(self) -> GraphQLTypeDescriptor | None:
        named = get_named_type(self.graphql_field.type)
        if is_object_type(named):
            return describe_graphql_type(named)
        return None

    def is_list_type(self) -> bool:
        return is_list_type(get_nullable_type(self.graphql_field.type))


class GraphQLTypeDescriptor:
    """Wraps one ``GraphQLObjectType``; one wrapper per type."""

    def __init__(self, graphql_type: GraphQLObjectType) -> None:
        self.graphql_type = graphql_type
        self._fields: dict[str, GraphQLFieldDescriptor] | None = None

    def __repr__(self) -> str:
        return f"GraphQLTypeDescriptor({self.name!r})"

    @property
    def name(self) -> str:
        return self.graphql_type.name

    def fields(self) -> dict[str, GraphQLFieldDescriptor]:
        if self._fields is None:
            self._fields = {
                name: GraphQLFieldDescriptor(name, fld) for name, fld in self.graphql_type.fields.items()
            }
        return self._fields


def describe_graphql_type(type_: Any) -> GraphQLTypeDescriptor:
    """Return the shared descriptor for a ``GraphQLObjectType``.

    Already-wrapped descriptors are returned unchanged.
    """
    if isinstance(type_, GraphQLTypeDescriptor):
        return type_
    if not is_object_type(type_):
        msg = f"Expected a GraphQLObjectType, got {type_!r}"
        raise TypeError(msg)
    descriptor = _descriptors.get(type_)
    if descriptor is None:
        descriptor = GraphQLTypeDescriptor(type_)
        _descriptors[type_] = descriptor
    return descriptor
