"""Shared pytest fixtures and test helpers for depresolve tests."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Generator
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest
from click.testing import CliRunner

from depresolve.domain.entities import as_values, get_value
from depresolve.domain.ids import id_set
from depresolve.domain.schema import ID, Field, ListOf, ObjectType, String
from depresolve.infrastructure.registry import DependencyRegistry, default_registry
from depresolve.services.telemetry import disable_telemetry

TESTS_DIR = Path(__file__).parent


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo handler changes made by configure_logging()."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    dep = logging.getLogger("depresolve")
    dep_level = dep.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    dep.setLevel(dep_level)


@pytest.fixture(autouse=True)
def _clean_default_registry() -> Generator[None]:
    yield
    default_registry.clear()


@pytest.fixture(autouse=True)
def _telemetry_off() -> Generator[None]:
    """The CLI enables telemetry for the whole thread with --verbose."""
    yield
    disable_telemetry()


@pytest.fixture
def schema() -> SimpleNamespace:
    """Fresh User / Company / Order object types.

    Field maps are lazy, so the types reference each other freely.
    """
    user = ObjectType(
        "User",
        lambda: {
            "id": Field(ID),
            "name": Field(String),
            "email": Field(String),
            "companyId": Field(ID),
            "company": Field(company),
        },
    )
    order = ObjectType(
        "Order",
        lambda: {
            "id": Field(ID),
            "total": Field(String),
        },
    )
    company = ObjectType(
        "Company",
        lambda: {
            "id": Field(ID),
            "name": Field(String),
            "ownerId": Field(ID),
            "owner": Field(user),
            "manager": Field(user),
            "employees": Field(ListOf(user)),
            "parentId": Field(ID),
            "parent": Field(company),
            "relatedCompanyIds": Field(ListOf(ID)),
            "relatedCompanies": Field(ListOf(company)),
            "orderId": Field(ID),
            "order": Field(order),
        },
    )
    return SimpleNamespace(User=user, Company=company, Order=order)


@pytest.fixture
def registry() -> DependencyRegistry:
    return DependencyRegistry()


@pytest.fixture
def registry_path(monkeypatch: pytest.MonkeyPatch) -> str:
    """Import path of the sample registry used by CLI tests."""
    monkeypatch.syspath_prepend(str(TESTS_DIR.parent))
    return "tests.sample_registry:registry"


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


class RecordingLoader:
    """Async loader over a fixed row set that records every call.

    Rows match when, for each filter key, their value shares an
    identifier with the requested values. Copies are returned so tests
    never share rows. Each call yields to the event loop once, like a
    real I/O-bound loader.
    """

    def __init__(self, rows: list[dict[str, Any]]) -> None:
        self.rows = rows
        self.calls: list[dict[str, list[Any]]] = []
        self.fields: list[dict[str, Any]] = []

    async def __call__(self, context: Any, args: dict[str, list[Any]], fields: dict[str, Any]) -> list[Any]:
        self.calls.append({key: list(values) for key, values in args.items()})
        self.fields.append(fields)
        await asyncio.sleep(0)
        found = self.rows
        for key, values in args.items():
            wanted = id_set(values)
            found = [row for row in found if not wanted.isdisjoint(id_set(as_values(get_value(row, key))))]
        return [dict(row) for row in found]
