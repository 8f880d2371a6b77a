"""depresolve — declarative, incremental loading of entity dependencies.

Declare loaders and relations once::

    from depresolve import DependencyRegistry, relation

    registry = DependencyRegistry()
    registry.get_or_create(Company).require(User, lambda: relation("owner", {"id": "ownerId"}))
    registry.get_or_create(User).define_loader(load_users)

then resolve a request::

    await registry.get_or_create(Company).load(companies, context, {"owner": {"name": True}})

Resolver options come from the ``[resolver]`` section of ``depresolve.toml``::

    config = load_resolver_config()
    await registry.get_or_create(Company).load(companies, context, fields, config=config)
"""

from __future__ import annotations

__version__ = "1.4.0"

from depresolve.config.discovery import load_resolver_config
from depresolve.config.models import ResolverConfig
from depresolve.domain.relations import RelationDescriptor, relation
from depresolve.errors import BrokenCallChainError, DependencyError, RegistryLookupError
from depresolve.infrastructure.registry import (
    Dependency,
    DependencyNode,
    DependencyRegistry,
    default_registry,
)
from depresolve.services.loader import DependencyLoader

__all__ = [
    "BrokenCallChainError",
    "Dependency",
    "DependencyError",
    "DependencyLoader",
    "DependencyNode",
    "DependencyRegistry",
    "RegistryLookupError",
    "RelationDescriptor",
    "ResolverConfig",
    "__version__",
    "default_registry",
    "load_resolver_config",
    "relation",
]
