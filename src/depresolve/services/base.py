"""BaseService — shared foundation for depresolve services.

Every service receives the :class:`DependencyRegistry` it works on and
the resolver configuration. Services never mutate the registry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from depresolve.config.models import ResolverConfig

if TYPE_CHECKING:
    from depresolve.infrastructure.registry import DependencyNode, DependencyRegistry


class BaseService:
    """Base for the resolver and the registry introspection service.

    Usage::

        class DependencyGraphService(BaseService):
            def describe(self) -> ServiceResult:
                for node in self._registry:
                    ...
    """

    def __init__(self, registry: DependencyRegistry, config: ResolverConfig | None = None) -> None:
        self._registry = registry
        self._config = config or ResolverConfig()

    @property
    def config(self) -> ResolverConfig:
        return self._config

    def _node(self, type_or_node: Any) -> DependencyNode:
        """Accept either a node of this registry or an entity type."""
        from depresolve.infrastructure.registry import DependencyNode

        if isinstance(type_or_node, DependencyNode):
            return type_or_node
        return self._registry.get_or_create(type_or_node)
