"""RegistryGraph — lazy-built NetworkX view of a dependency registry.

Nodes are type names, edges are ``requires`` relations (one edge per
parent/child pair, carrying every relation between them). Built on first
access; call :meth:`RegistryGraph.invalidate` after further registration.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeAlias

import networkx as nx

if TYPE_CHECKING:
    from depresolve.infrastructure.registry import DependencyRegistry

logger = logging.getLogger(__name__)

_Graph: TypeAlias = nx.DiGraph


class RegistryGraph:
    """Read-only graph of the types and relations declared in a registry."""

    def __init__(self, registry: DependencyRegistry) -> None:
        self._registry = registry
        self._graph: _Graph | None = None
        self.warnings: list[str] = []

    @property
    def graph(self) -> _Graph:
        """Return the graph, building from the registry on first access."""
        if self._graph is None:
            self._graph = self._build()
        return self._graph

    def invalidate(self) -> None:
        """Clear the cached graph, forcing rebuild on next access."""
        self._graph = None

    def _build(self) -> _Graph:
        """Build a DiGraph with one node per registered type.

        Relation providers are evaluated here; a provider that raises is
        reported in :attr:`warnings` and left out of the edge data.
        """
        self.warnings = []
        g: _Graph = nx.DiGraph()
        for node in self._registry:
            g.add_node(
                node.name,
                has_loader=node.loader is not None,
                has_initializer=node.initializer is not None,
                trigger_fields=sorted(node.trigger_field_names()),
            )

        for node in self._registry:
            for child in node.requires:
                relations: list[dict[str, Any]] = []
                try:
                    for relation in node.relations(child):
                        relations.append(
                            {
                                "destination": relation.destination,
                                "filter": dict(relation.filter),
                                "is_list": node.is_list_relation(relation),
                            }
                        )
                except Exception as exc:
                    logger.debug("Relation provider failed for %s -> %s", node.name, child.name, exc_info=True)
                    self.warnings.append(f"{node.name} -> {child.name}: {exc}")
                g.add_edge(node.name, child.name, relations=relations)
        return g
