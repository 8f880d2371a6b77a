"""Resolution cache and the pre-scan that fills it.

One :class:`ResolutionCache` lives for a single top-level ``load()``. For
every entity type touched by the request it keeps the request fields
merged across all paths reaching the type, every entity known so far
(given by the caller or loaded), and the memoized calls. Entries only
ever grow.

:func:`build_resolution_cache` walks the request field tree together
with the data already at hand before any loader runs. Recursion follows
the field tree, which is finite, so cyclic type graphs terminate.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from depresolve.domain.entities import as_list, child_source, get_value
from depresolve.domain.fields import merge_fields, requested, subtree, with_ids
from depresolve.domain.ids import normalize_id
from depresolve.domain.types import RequestFieldTree, Source

if TYPE_CHECKING:
    from depresolve.infrastructure.registry import DependencyNode

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """Everything known about one entity type during one load."""

    fields: RequestFieldTree = field(default_factory=dict)
    entities: dict[str, Any] = field(default_factory=dict)
    calls: dict[str, Any] = field(default_factory=dict)

    def add_entities(self, source: Source, id_field: str) -> int:
        """Index *source* by identifier; entities without one are skipped."""
        added = 0
        for item in as_list(source):
            value = get_value(item, id_field)
            if value is None:
                continue
            self.entities[normalize_id(value)] = item
            added += 1
        return added

    def has_entity(self, value: Any) -> bool:
        return normalize_id(value) in self.entities


@dataclass
class LoadStats:
    """Counters reported in the debug line logged when a load completes."""

    loader_calls: int = 0
    initializer_calls: int = 0
    memo_hits: int = 0
    skipped_calls: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "loader_calls": self.loader_calls,
            "initializer_calls": self.initializer_calls,
            "memo_hits": self.memo_hits,
            "skipped_calls": self.skipped_calls,
        }


class ResolutionCache:
    """Per-load map from dependency node to :class:`CacheEntry`."""

    def __init__(self, id_field: str = "id") -> None:
        self.id_field = id_field
        self.stats = LoadStats()
        self._entries: dict[DependencyNode, CacheEntry] = {}

    def get(self, node: DependencyNode) -> CacheEntry | None:
        return self._entries.get(node)

    def entry(self, node: DependencyNode) -> CacheEntry:
        """Return the entry for *node*, creating an empty one if needed."""
        found = self._entries.get(node)
        if found is None:
            found = CacheEntry()
            self._entries[node] = found
        return found

    def merge(self, node: DependencyNode, fields: RequestFieldTree, source: Source) -> CacheEntry:
        """Merge *fields* and *source* into the entry of *node*.

        Memoized calls are reset: the pre-scan runs before any call.
        """
        cache_entry = self.entry(node)
        merge_fields(cache_entry.fields, fields)
        added = cache_entry.add_entities(source, self.id_field)
        cache_entry.calls = {}
        if added:
            logger.debug("Pre-scan indexed %d known %s entities", added, node.name)
        return cache_entry

    def __contains__(self, node: object) -> bool:
        return node in self._entries

    def __iter__(self) -> Iterator[tuple[DependencyNode, CacheEntry]]:
        return iter(list(self._entries.items()))

    def __len__(self) -> int:
        return len(self._entries)


def build_resolution_cache(
    node: DependencyNode,
    fields: RequestFieldTree,
    source: Source = None,
    cache: ResolutionCache | None = None,
    *,
    id_field: str = "id",
) -> ResolutionCache:
    """Pre-scan *fields* and *source* into a :class:`ResolutionCache`.

    No loader or initializer is called. For the level of *node*, the
    entry is only created when entities are at hand; every requested
    relation to a registered child type gets an entry even if nothing is
    known about it yet, so the loader pass always finds one.
    """
    if cache is None:
        cache = ResolutionCache(id_field)
    fields = with_ids(fields, cache.id_field)

    if as_list(source):
        cache.merge(node, fields, source)

    for name, _value in requested(fields):
        child = node.child(name)
        if child is None:
            # scalar, or a relation to a type without a node
            continue

        child_fields = subtree(fields, name, cache.id_field)
        src = child_source(source, name)
        cache.merge(child, child_fields, src)
        build_resolution_cache(child, child_fields, src, cache)

    return cache
