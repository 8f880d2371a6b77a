"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, depresolve.toml only contains
overrides.
"""

from __future__ import annotations

from pydantic import BaseModel


class ResolverConfig(BaseModel):
    """[resolver] section.

    Attributes:
        id_field: Identifier field present on every entity. Always added
            to request field trees; filters keyed on it skip ids that are
            already loaded.
        dedupe_inflight: Share one loader call between concurrent relation
            edges computing the same call signature. Off by default: the
            memo is written after the loader returns, so two identical
            edges fanned out together both call the loader.
        registry: Import path (``package.module:attribute``) of the
            registry used by the CLI.
    """

    model_config = {"frozen": True}

    id_field: str = "id"
    dedupe_inflight: bool = False
    registry: str | None = None
