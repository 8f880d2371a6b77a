"""Tests for RegistryGraph — NetworkX view of a registry."""

from __future__ import annotations

from types import SimpleNamespace

from depresolve import relation
from depresolve.infrastructure.graph.engine import RegistryGraph
from depresolve.infrastructure.registry import DependencyRegistry


async def _noop_loader(context: object, args: object, fields: object) -> list:
    return []


class TestRegistryGraph:
    def test_nodes_and_edges(self, schema: SimpleNamespace, registry: DependencyRegistry) -> None:
        registry.get_or_create(schema.Company).require(
            schema.User,
            relation("owner", {"id": "ownerId"}),
            relation("employees", {"companyId": "id"}),
        )
        registry.get_or_create(schema.User).define_loader(_noop_loader)

        g = RegistryGraph(registry).graph
        assert set(g.nodes) == {"Company", "User"}
        assert g.nodes["User"]["has_loader"] is True
        assert g.nodes["Company"]["has_loader"] is False
        edge = g.edges["Company", "User"]
        assert edge["relations"] == [
            {"destination": "owner", "filter": {"id": "ownerId"}, "is_list": False},
            {"destination": "employees", "filter": {"companyId": "id"}, "is_list": True},
        ]

    def test_trigger_fields_sorted(self, schema: SimpleNamespace, registry: DependencyRegistry) -> None:
        registry.get_or_create(schema.Company).define_initializer(lambda c, s, f: None, "orderId", "ownerId")
        g = RegistryGraph(registry).graph
        assert g.nodes["Company"]["has_initializer"] is True
        assert g.nodes["Company"]["trigger_fields"] == ["orderId", "ownerId"]

    def test_lazy_and_invalidate(self, schema: SimpleNamespace, registry: DependencyRegistry) -> None:
        graph = RegistryGraph(registry)
        registry.get_or_create(schema.User)
        first = graph.graph
        assert graph.graph is first
        registry.get_or_create(schema.Company)
        assert "Company" not in graph.graph
        graph.invalidate()
        assert "Company" in graph.graph

    def test_failing_provider_reported(self, schema: SimpleNamespace, registry: DependencyRegistry) -> None:
        def broken() -> dict:
            raise RuntimeError("schema not ready")

        registry.get_or_create(schema.Company).require(schema.User, broken)
        graph = RegistryGraph(registry)
        g = graph.graph
        assert g.edges["Company", "User"]["relations"] == []
        assert graph.warnings == ["Company -> User: schema not ready"]
