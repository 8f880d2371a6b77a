"""Tests for DependencyGraphService — describe, cycles and plan."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from depresolve import relation
from depresolve.infrastructure.registry import DependencyRegistry
from depresolve.services.graph import DependencyGraphService


async def _noop_loader(context: object, args: object, fields: object) -> list:
    return []


@pytest.fixture
def populated(schema: SimpleNamespace, registry: DependencyRegistry) -> DependencyRegistry:
    registry.get_or_create(schema.Company).require(
        schema.User,
        relation("owner", {"id": "ownerId"}),
        relation("employees", {"companyId": "id"}),
    ).define_loader(_noop_loader)
    registry.get_or_create(schema.User).require(
        schema.Company, relation("company", {"id": "companyId"})
    ).define_loader(_noop_loader)
    return registry


class TestDescribe:
    def test_types_and_relations(self, populated: DependencyRegistry) -> None:
        result = DependencyGraphService(populated).describe()
        assert result.ok
        assert result.op == "graph_show"
        assert result.data["type_count"] == 2
        assert result.data["relation_count"] == 3
        assert [t["type"] for t in result.data["types"]] == ["Company", "User"]
        assert [(r["parent"], r["destination"], r["child"]) for r in result.data["relations"]] == [
            ("Company", "owner", "User"),
            ("Company", "employees", "User"),
            ("User", "company", "Company"),
        ]

    def test_empty_registry(self, registry: DependencyRegistry) -> None:
        result = DependencyGraphService(registry).describe()
        assert result.ok
        assert result.data["type_count"] == 0

    def test_provider_failure_is_warning(self, schema: SimpleNamespace, registry: DependencyRegistry) -> None:
        registry.get_or_create(schema.Company).require(schema.User, lambda: {"filter": {}})
        result = DependencyGraphService(registry).describe()
        assert result.ok
        assert len(result.warnings) == 1
        assert result.warnings[0].startswith("Company -> User:")


class TestCycles:
    def test_mutual_requirement(self, populated: DependencyRegistry) -> None:
        result = DependencyGraphService(populated).cycles()
        assert result.op == "graph_cycles"
        assert result.data == {"count": 1, "cycles": [["Company", "User"]]}

    def test_self_requirement(self, schema: SimpleNamespace, registry: DependencyRegistry) -> None:
        registry.get_or_create(schema.Company).require(schema.Company, relation("parent", {"id": "parentId"}))
        result = DependencyGraphService(registry).cycles()
        assert result.data["cycles"] == [["Company"]]

    def test_acyclic(self, schema: SimpleNamespace, registry: DependencyRegistry) -> None:
        registry.get_or_create(schema.Company).require(schema.User, relation("owner", {"id": "ownerId"}))
        assert DependencyGraphService(registry).cycles().data["count"] == 0


class TestPlan:
    def test_merged_fields_per_type(self, populated: DependencyRegistry) -> None:
        result = DependencyGraphService(populated).plan(
            "Company",
            {"owner": {"name": True}, "employees": {"company": {"name": True}}},
        )
        assert result.ok
        assert result.op == "graph_plan"
        assert result.data["root"] == "Company"
        steps = {s["type"]: s for s in result.data["steps"]}
        assert steps["User"]["fields"] == {"name": True, "company": {"name": True, "id": False}, "id": False}
        assert steps["User"]["loader"] is True
        assert steps["Company"]["fields"] == {"name": True, "id": False}

    def test_unknown_type(self, populated: DependencyRegistry) -> None:
        result = DependencyGraphService(populated).plan("Invoice", {})
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "UNKNOWN_TYPE"
        assert result.error.detail["known"] == ["Company", "User"]
