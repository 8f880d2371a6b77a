"""Exceptions raised by the resolver.

Loader and initializer failures are never wrapped: they propagate out of
``load()`` as raised by the callable.
"""

from __future__ import annotations


class DependencyError(Exception):
    """Base class for resolver errors."""


class BrokenCallChainError(DependencyError, TypeError):
    """Loader arguments were requested from an empty source."""


class RegistryLookupError(DependencyError, LookupError):
    """A type name or registry import path could not be resolved."""
