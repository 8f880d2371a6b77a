"""Attach loaded entities to the relation field of their source entities.

A child matches a source entity when, for every ``filter_key ->
source_field`` pair of the relation, the child's ``filter_key`` value and
the source's ``source_field`` value share at least one identifier once
both are normalized (:func:`depresolve.domain.ids.normalize_id`). That
covers scalar equality, a scalar inside a list on either side, and
overlapping lists, and tolerates ``7`` vs ``"7"``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from depresolve.domain.entities import as_list, as_values, get_value, set_value
from depresolve.domain.ids import id_set
from depresolve.domain.relations import RelationDescriptor
from depresolve.domain.types import Source


def matches(child: Any, item: Any, relation: RelationDescriptor) -> bool:
    """True when *child* satisfies every filter pair of *relation* for *item*."""
    for filter_key, source_field in relation.filter.items():
        wanted = id_set(as_values(get_value(item, source_field)))
        if not wanted:
            return False
        found = id_set(as_values(get_value(child, filter_key)))
        if wanted.isdisjoint(found):
            return False
    return True


def map_list(entities: Mapping[str, Any], item: Any, relation: RelationDescriptor) -> list[Any]:
    return [child for child in entities.values() if matches(child, item, relation)]


def map_item(entities: Mapping[str, Any], item: Any, relation: RelationDescriptor) -> Any | None:
    for child in entities.values():
        if matches(child, item, relation):
            return child
    return None


def map_dependency_data(
    source: Source,
    entities: Mapping[str, Any],
    relation: RelationDescriptor,
    *,
    is_list: bool,
) -> Source:
    """Write matches from *entities* onto ``relation.destination`` of each source entity.

    List relations always receive the full (possibly empty) match list.
    Single relations receive the first match; the field is left as it
    was when nothing matches.
    """
    for item in as_list(source):
        if is_list:
            set_value(item, relation.destination, map_list(entities, item, relation))
        else:
            node = map_item(entities, item, relation)
            if node is not None:
                set_value(item, relation.destination, node)
    return source
