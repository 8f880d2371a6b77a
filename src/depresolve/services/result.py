"""ServiceResult and ServiceError — the contract of the introspection services.

The resolver itself returns the caller's (mutated) entities and raises on
failure; services that answer questions about a registry return a
ServiceResult so the CLI can render or serialize them uniformly.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Return type of registry introspection operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"graph_show"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues, e.g. relations whose providers failed.
        error: Structured error if ``ok`` is False.
        meta: Optional metadata (telemetry spans).
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None
