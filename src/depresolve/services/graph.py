"""DependencyGraphService — questions about a registry, answered without I/O.

Three read-only operations over :class:`RegistryGraph`:

- ``describe`` lists types and relations,
- ``cycles`` lists mutually-requiring type groups,
- ``plan`` dry-runs the resolution pre-scan for a request field tree and
  reports which types a ``load()`` would touch and with which merged
  fields.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import networkx as nx

from depresolve.domain.fields import with_ids
from depresolve.infrastructure.graph.engine import RegistryGraph
from depresolve.services.base import BaseService
from depresolve.services.cache import build_resolution_cache
from depresolve.services.result import ServiceError, ServiceResult
from depresolve.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from depresolve.config.models import ResolverConfig
    from depresolve.infrastructure.registry import DependencyRegistry


class DependencyGraphService(BaseService):
    """Introspection of declared dependencies."""

    def __init__(self, registry: DependencyRegistry, config: ResolverConfig | None = None) -> None:
        super().__init__(registry, config)
        self._graph = RegistryGraph(registry)

    # ------------------------------------------------------------------
    # describe
    # ------------------------------------------------------------------

    @traced
    def describe(self) -> ServiceResult:
        """List every registered type and every declared relation."""
        g = self._graph.graph

        types: list[dict[str, Any]] = []
        for name, attrs in sorted(g.nodes(data=True), key=lambda n: n[0]):
            types.append(
                {
                    "type": name,
                    "loader": attrs["has_loader"],
                    "initializer": attrs["has_initializer"],
                    "trigger_fields": attrs["trigger_fields"],
                }
            )

        relations: list[dict[str, Any]] = []
        for parent, child, attrs in sorted(g.edges(data=True), key=lambda e: (e[0], e[1])):
            for rel in attrs["relations"]:
                relations.append({"parent": parent, "child": child, **rel})

        return ServiceResult(
            ok=True,
            op="graph_show",
            data={
                "type_count": len(types),
                "relation_count": len(relations),
                "types": types,
                "relations": relations,
            },
            warnings=list(self._graph.warnings),
        )

    # ------------------------------------------------------------------
    # cycles
    # ------------------------------------------------------------------

    @traced
    def cycles(self) -> ServiceResult:
        """Find cycles between types (a type requiring itself included).

        Cycles are legal: resolution follows the request field tree, so
        they only mean that requests may nest arbitrarily deep.
        """
        g = self._graph.graph
        found = [sorted(cycle) for cycle in nx.simple_cycles(g)]
        found.sort(key=lambda c: (len(c), c))
        return ServiceResult(
            ok=True,
            op="graph_cycles",
            data={"count": len(found), "cycles": found},
            warnings=list(self._graph.warnings),
        )

    # ------------------------------------------------------------------
    # plan
    # ------------------------------------------------------------------

    @traced
    def plan(self, type_name: str, fields: dict[str, Any]) -> ServiceResult:
        """Report the types, merged fields and loaders a request would use.

        Runs the resolution pre-scan without any source entities, so the
        result is what a ``load()`` call would request on its first pass.
        """
        node = self._registry.find(type_name)
        if node is None:
            return ServiceResult(
                ok=False,
                op="graph_plan",
                error=ServiceError(
                    code="UNKNOWN_TYPE",
                    message=f"Type '{type_name}' is not registered",
                    detail={"known": sorted(n.name for n in self._registry)},
                ),
            )

        id_field = self._config.id_field
        with trace_span("prescan") as span:
            cache = build_resolution_cache(node, with_ids(fields, id_field), id_field=id_field)
            if span:
                span.annotate("types", len(cache))

        steps = [
            {
                "type": child.name,
                "loader": child.loader is not None,
                "initializer": child.initializer is not None,
                "fields": entry.fields,
            }
            for child, entry in cache
        ]
        return ServiceResult(
            ok=True,
            op="graph_plan",
            data={"root": node.name, "count": len(steps), "steps": steps},
        )
