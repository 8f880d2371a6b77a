"""DependencyRegistry and DependencyNode — declared loaders and relations.

A registry holds exactly one :class:`DependencyNode` per entity type.
Nodes are configured once at process setup::

    registry = DependencyRegistry()
    registry.get_or_create(Company).require(
        User,
        lambda: relation("owner", {"id": "ownerId"}),
    )
    registry.get_or_create(User).define_loader(load_users)

and used per request through :meth:`DependencyNode.load`. Registration
never performs I/O.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any, Self

from depresolve.domain.relations import RelationDescriptor, RelationProvider, resolve_relation
from depresolve.domain.types import (
    FieldDescriptor,
    Initializer,
    Loader,
    RequestFieldTree,
    Source,
    TypeDescriptor,
    field_name,
    type_name,
)
from depresolve.errors import RegistryLookupError

if TYPE_CHECKING:
    from depresolve.config.models import ResolverConfig

logger = logging.getLogger(__name__)


class DependencyNode:
    """Loader, initializer and outgoing relations of one entity type."""

    def __init__(self, registry: DependencyRegistry, type_: TypeDescriptor) -> None:
        self.type = type_
        self._registry = registry
        self.loader: Loader | None = None
        self.initializer: Initializer | None = None
        self._trigger_fields: tuple[Any, ...] = ()
        self.requires: dict[DependencyNode, tuple[RelationProvider, ...]] = {}

    def __repr__(self) -> str:
        return f"DependencyNode({self.name!r})"

    @property
    def name(self) -> str:
        return type_name(self.type)

    @property
    def registry(self) -> DependencyRegistry:
        return self._registry

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def define_loader(self, loader: Loader) -> Self:
        """Set (or replace) the bulk loader for this type.

        The loader is called as ``loader(context, filter_args, fields)``
        and returns the matching entities.
        """
        self.loader = loader
        logger.debug("Loader defined for %s", self.name)
        return self

    def define_initializer(self, initializer: Initializer, *trigger_fields: Any) -> Self:
        """Set (or replace) the initializer and the fields it fills.

        The initializer is called as ``initializer(context, entities,
        fields)`` and returns ``{entity_id: {field: value}}`` to merge into
        the current entities. Relations filtering on a trigger field wait
        for the initializer; without trigger fields every relation waits.
        Trigger fields may be names, schema fields, or zero-arg callables
        returning either.
        """
        self.initializer = initializer
        self._trigger_fields = trigger_fields
        logger.debug("Initializer defined for %s (%d trigger fields)", self.name, len(trigger_fields))
        return self

    def require(self, child: Any, *providers: RelationProvider) -> Self:
        """Declare how instances of *child* attach to this type.

        Each provider is a :class:`RelationDescriptor`, an options mapping,
        or a zero-arg callable returning one; callables are evaluated at
        load time. Calling again for the same child replaces its relations.
        """
        node = self._registry.get_or_create(child)
        self.requires[node] = providers
        logger.debug("%s requires %s (%d relations)", self.name, node.name, len(providers))
        return self

    # ------------------------------------------------------------------
    # Lookups used while resolving
    # ------------------------------------------------------------------

    @property
    def has_trigger_fields(self) -> bool:
        return bool(self._trigger_fields)

    def trigger_field_names(self) -> frozenset[str]:
        return frozenset(field_name(ref) for ref in self._trigger_fields)

    def relations(self, child: DependencyNode) -> list[RelationDescriptor]:
        """Evaluated relation descriptors from this type to *child*."""
        return [resolve_relation(p) for p in self.requires.get(child, ())]

    def field(self, name: str) -> FieldDescriptor | None:
        return self.type.fields().get(name)

    def child(self, name: str) -> DependencyNode | None:
        """Registered node targeted by relation field *name*, if any."""
        descriptor = self.field(name)
        if descriptor is None:
            return None
        target = descriptor.target_type()
        if target is None:
            return None
        return self._registry.get(target)

    def is_list_relation(self, relation: RelationDescriptor) -> bool:
        if relation.is_list is not None:
            return relation.is_list
        descriptor = self.field(relation.destination)
        return bool(descriptor and descriptor.is_list_type())

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    async def load(
        self,
        source: Source,
        context: Any,
        fields: RequestFieldTree | None,
        *,
        config: ResolverConfig | None = None,
    ) -> Source:
        """Resolve every requested relation of *source* and return it.

        See :class:`depresolve.services.loader.DependencyLoader`.
        """
        from depresolve.services.loader import DependencyLoader

        return await DependencyLoader(self._registry, config).load(self, source, context, fields)


class DependencyRegistry:
    """One :class:`DependencyNode` per entity type.

    Args:
        describe: Adapter turning the objects callers register with into
            :class:`TypeDescriptor` instances (identity by default). Use
            :func:`depresolve.infrastructure.graphql.describe_graphql_type`
            for ``graphql-core`` schemas.
    """

    def __init__(self, describe: Callable[[Any], TypeDescriptor] | None = None) -> None:
        self._describe = describe or (lambda t: t)
        self._nodes: dict[TypeDescriptor, DependencyNode] = {}

    def get_or_create(self, type_: Any) -> DependencyNode:
        """Return the node for *type_*, creating it on first access."""
        key = self._describe(type_)
        node = self._nodes.get(key)
        if node is None:
            node = DependencyNode(self, key)
            self._nodes[key] = node
            logger.debug("Registered dependency node %s", node.name)
        return node

    def get(self, type_: Any) -> DependencyNode | None:
        return self._nodes.get(self._describe(type_))

    def find(self, name: str) -> DependencyNode | None:
        """Look a node up by type name."""
        for node in self._nodes.values():
            if node.name == name:
                return node
        return None

    def clear(self) -> None:
        self._nodes.clear()

    def __contains__(self, type_: Any) -> bool:
        return self.get(type_) is not None

    def __iter__(self) -> Iterator[DependencyNode]:
        return iter(list(self._nodes.values()))

    def __len__(self) -> int:
        return len(self._nodes)


default_registry = DependencyRegistry()


def Dependency(type_: Any) -> DependencyNode:  # noqa: N802
    """Shortcut for ``default_registry.get_or_create(type_)``."""
    return default_registry.get_or_create(type_)


def import_registry(path: str) -> DependencyRegistry:
    """Import a registry from ``package.module:attribute``.

    Without ``:attribute`` the module is imported for its registration
    side effects and :data:`default_registry` is returned.

    Raises:
        RegistryLookupError: The module or attribute cannot be found, or
            the attribute is not a registry.
    """
    module_name, _, attr = path.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        msg = f"Cannot import registry module '{module_name}': {exc}"
        raise RegistryLookupError(msg) from exc

    if not attr:
        return default_registry

    registry = getattr(module, attr, None)
    if not isinstance(registry, DependencyRegistry):
        msg = f"'{path}' is not a DependencyRegistry"
        raise RegistryLookupError(msg)
    return registry
