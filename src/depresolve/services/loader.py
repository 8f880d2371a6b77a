"""DependencyLoader — incremental, level-by-level dependency resolution.

``load()`` runs in two passes over the request field tree:

1. :func:`~depresolve.services.cache.build_resolution_cache` merges the
   requested fields per entity type and indexes every entity already at
   hand. Nothing is fetched.
2. The incremental pass walks the tree level by level. At each level:

   - the node's initializer is awaited first when a requested relation
     filters on one of its trigger fields (or when it declares none),
     otherwise it joins the level's fan-out;
   - every requested relation builds its loader arguments from the
     level's entities, skipping identifiers already cached, calls the
     child loader (once per call signature) and maps the results;
   - all of the level's calls are gathered, then every requested child
     level is resolved concurrently.

Loader and initializer failures propagate unchanged out of ``load()``.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from depresolve.domain.entities import (
    as_list,
    as_values,
    child_source,
    get_value,
    is_empty,
    iter_present,
    update_values,
)
from depresolve.domain.fields import requested, subtree, with_ids
from depresolve.domain.ids import call_signature, normalize_id
from depresolve.domain.relations import RelationDescriptor
from depresolve.domain.types import RequestFieldTree, ResolveMethod, Source
from depresolve.errors import BrokenCallChainError
from depresolve.services.base import BaseService
from depresolve.services.cache import CacheEntry, LoadStats, ResolutionCache, build_resolution_cache
from depresolve.services.mapper import map_dependency_data
from depresolve.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from depresolve.infrastructure.registry import DependencyNode

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Call arguments
# ---------------------------------------------------------------------------


def make_call_args(
    source: Source,
    relation: RelationDescriptor,
    entry: CacheEntry | None,
    *,
    id_field: str = "id",
) -> dict[str, list[Any]]:
    """Collect loader filter arguments for *relation* from *source*.

    Values of each source field are flattened, stripped of ``None`` and
    empty strings, and de-duplicated by normalized identity (first seen
    order kept). For the identifier filter key, ids already present in
    *entry* are dropped.

    Raises:
        BrokenCallChainError: *source* is empty but the relation filters on it.
    """
    if not relation.filter:
        return {}
    if is_empty(source):
        msg = "Broken call chain, source expected to be value!"
        raise BrokenCallChainError(msg)

    items = as_list(source)
    args: dict[str, list[Any]] = {}
    for filter_key, source_field in relation.filter.items():
        seen: set[str] = set()
        values: list[Any] = []
        for item in items:
            for value in iter_present(as_values(get_value(item, source_field))):
                key = normalize_id(value)
                if key in seen:
                    continue
                seen.add(key)
                values.append(value)
        if filter_key == id_field and entry is not None:
            values = [v for v in values if not entry.has_entity(v)]
        args[filter_key] = values
    return args


def is_empty_args(args: dict[str, list[Any]]) -> bool:
    """True when no filter key carries a value."""
    return all(not values for values in args.values())


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


class DependencyLoader(BaseService):
    """Resolves requested relations of entities using a registry."""

    @traced
    async def load(
        self,
        type_or_node: Any,
        source: Source,
        context: Any,
        fields: RequestFieldTree | None,
    ) -> Source:
        """Load every relation requested by *fields* into *source* and return it.

        Args:
            type_or_node: Entity type of *source* (or its node).
            source: One entity or a list of entities, mutated in place.
            context: Passed through to loaders and initializers.
            fields: Request field tree. ``None`` or empty returns *source*
                untouched.
        """
        if not fields:
            return source

        node = self._node(type_or_node)
        id_field = self._config.id_field
        fields = with_ids(fields, id_field)
        cache = build_resolution_cache(node, fields, source, ResolutionCache(id_field))

        await self._incremental_load(node, source, context, fields, cache)

        logger.debug(
            "Load of %s complete across %d types: %s",
            node.name,
            len(cache),
            " ".join(f"{k}={v}" for k, v in cache.stats.as_dict().items()),
        )
        return source

    async def _incremental_load(
        self,
        node: DependencyNode,
        source: Source,
        context: Any,
        fields: RequestFieldTree,
        cache: ResolutionCache,
    ) -> Source:
        if is_empty(source):
            return source

        pending: list[Awaitable[Any]] = []
        children: list[tuple[str, DependencyNode]] = []

        if node.initializer is not None:
            if self._wait_for_init(node, fields):
                await self._request_initializer(node, source, context, fields, cache)
            else:
                pending.append(self._request_initializer(node, source, context, fields, cache))

        for name, child, relations in self._requested_relations(node, fields):
            children.append((name, child))

            if child.loader is None:
                # no loader: attach whatever is already cached
                entry = cache.entry(child)
                for relation in relations:
                    map_dependency_data(
                        source, entry.entities, relation, is_list=node.is_list_relation(relation)
                    )
                continue

            for relation in relations:
                pending.append(self._request_loader(node, source, context, relation, child, cache))

        if pending:
            await asyncio.gather(*pending)

        descents = [
            self._incremental_load(
                child,
                child_source(source, name),
                context,
                subtree(fields, name, cache.id_field),
                cache,
            )
            for name, child in children
        ]
        if descents:
            await asyncio.gather(*descents)

        return source

    # ------------------------------------------------------------------
    # Level planning
    # ------------------------------------------------------------------

    @staticmethod
    def _requested_relations(
        node: DependencyNode,
        fields: RequestFieldTree,
    ) -> list[tuple[str, DependencyNode, list[RelationDescriptor]]]:
        """``(field, child node, relations)`` for each requested relation field.

        Only relations writing to that field are returned, so a relation
        is issued once per level even when several requested fields
        target the same child type. Relations to the same child whose
        destination was not requested are not issued at all.
        """
        planned: list[tuple[str, DependencyNode, list[RelationDescriptor]]] = []
        for name, _value in requested(fields):
            child = node.child(name)
            if child is None:
                continue
            relations = [r for r in node.relations(child) if r.destination == name]
            planned.append((name, child, relations))
        return planned

    def _wait_for_init(self, node: DependencyNode, fields: RequestFieldTree) -> bool:
        """Whether the initializer must finish before this level's loaders start."""
        if not node.has_trigger_fields:
            return True

        triggers = node.trigger_field_names()
        for _name, _child, relations in self._requested_relations(node, fields):
            for relation in relations:
                if relation.source_fields & triggers:
                    return True
        return False

    # ------------------------------------------------------------------
    # Calls
    # ------------------------------------------------------------------

    async def _memoized(
        self,
        entry: CacheEntry,
        key: str,
        call: Callable[[], Awaitable[Any]],
        stats: LoadStats,
    ) -> Any:
        """Return the memoized result for *key*, running *call* on a miss.

        Without ``dedupe_inflight`` the memo is only written once *call*
        returns, so concurrent misses on the same key each run *call*.
        With it, the running task is stored and awaited by later callers.
        """
        if key in entry.calls:
            stats.memo_hits += 1
            found = entry.calls[key]
            if isinstance(found, asyncio.Future):
                return await found
            return found

        if not self._config.dedupe_inflight:
            result = await call()
            entry.calls[key] = result
            return result

        task = asyncio.ensure_future(call())
        entry.calls[key] = task
        try:
            result = await task
        except BaseException:
            entry.calls.pop(key, None)
            raise
        entry.calls[key] = result
        return result

    async def _request_initializer(
        self,
        node: DependencyNode,
        source: Source,
        context: Any,
        fields: RequestFieldTree,
        cache: ResolutionCache,
    ) -> Source:
        """Run the initializer of *node* and merge its data into *source* by id."""
        id_field = cache.id_field
        items = as_list(source)
        ids = [normalize_id(v) for v in (get_value(i, id_field) for i in items) if v is not None]
        key = call_signature(node.name, ResolveMethod.INITIALIZER, ids, fields)

        async def call() -> Any:
            with trace_span(f"initializer:{node.name}") as span:
                data = await _resolve(node.initializer(context, source, fields))  # type: ignore[misc]
                if span:
                    span.annotate("entities", len(items))
            cache.stats.initializer_calls += 1
            return data

        init_data = await self._memoized(cache.entry(node), key, call, cache.stats)
        if not init_data:
            return source

        by_id = {normalize_id(k): v for k, v in init_data.items()}
        for item in items:
            value = get_value(item, id_field)
            if value is None:
                logger.debug("Initializer data for %s skipped an entity without %r", node.name, id_field)
                continue
            extra = by_id.get(normalize_id(value))
            if extra:
                update_values(item, extra)
        return source

    async def _request_loader(
        self,
        node: DependencyNode,
        source: Source,
        context: Any,
        relation: RelationDescriptor,
        child: DependencyNode,
        cache: ResolutionCache,
    ) -> Source:
        """Load what *relation* still misses and map it onto *source*."""
        entry = cache.entry(child)
        is_list = node.is_list_relation(relation)
        args = make_call_args(source, relation, entry, id_field=cache.id_field)

        if is_empty_args(args):
            cache.stats.skipped_calls += 1
            return map_dependency_data(source, entry.entities, relation, is_list=is_list)

        key = call_signature(child.name, ResolveMethod.LOADER, args)

        async def call() -> dict[str, Any]:
            with trace_span(f"loader:{child.name}") as span:
                loaded = await _resolve(child.loader(context, args, entry.fields))  # type: ignore[misc]
                if span:
                    span.annotate("relation", f"{node.name}.{relation.destination}")
                    span.annotate("loaded", len(loaded or []))
            cache.stats.loader_calls += 1
            data: dict[str, Any] = {}
            for item in loaded or []:
                value = get_value(item, cache.id_field)
                if value is not None:
                    data[normalize_id(value)] = item
            entry.entities.update(data)
            logger.debug("Loaded %d %s entities for %s.%s", len(data), child.name, node.name, relation.destination)
            return data

        await self._memoized(entry, key, call, cache.stats)
        return map_dependency_data(source, entry.entities, relation, is_list=is_list)
