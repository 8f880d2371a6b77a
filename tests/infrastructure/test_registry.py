"""Tests for DependencyRegistry and DependencyNode."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from depresolve import Dependency, default_registry, relation
from depresolve.errors import RegistryLookupError
from depresolve.infrastructure.registry import DependencyRegistry, import_registry


async def _noop_loader(context: object, args: object, fields: object) -> list:
    return []


class TestRegistry:
    def test_one_node_per_type(self, schema: SimpleNamespace, registry: DependencyRegistry) -> None:
        node = registry.get_or_create(schema.User)
        assert registry.get_or_create(schema.User) is node
        assert registry.get(schema.User) is node
        assert len(registry) == 1

    def test_get_unknown(self, schema: SimpleNamespace, registry: DependencyRegistry) -> None:
        assert registry.get(schema.User) is None
        assert schema.User not in registry

    def test_find_by_name(self, schema: SimpleNamespace, registry: DependencyRegistry) -> None:
        node = registry.get_or_create(schema.Company)
        assert registry.find("Company") is node
        assert registry.find("Nope") is None

    def test_iter_and_clear(self, schema: SimpleNamespace, registry: DependencyRegistry) -> None:
        registry.get_or_create(schema.User)
        registry.get_or_create(schema.Company)
        assert [n.name for n in registry] == ["User", "Company"]
        registry.clear()
        assert len(registry) == 0

    def test_registries_independent(self, schema: SimpleNamespace) -> None:
        a, b = DependencyRegistry(), DependencyRegistry()
        assert a.get_or_create(schema.User) is not b.get_or_create(schema.User)

    def test_describe_hook(self, schema: SimpleNamespace) -> None:
        by_name = {"User": schema.User}
        registry = DependencyRegistry(describe=lambda t: by_name.get(t, t))
        assert registry.get_or_create("User") is registry.get_or_create(schema.User)

    def test_dependency_shortcut(self, schema: SimpleNamespace) -> None:
        node = Dependency(schema.User)
        assert default_registry.get(schema.User) is node


class TestNode:
    def test_registration_chains(self, schema: SimpleNamespace, registry: DependencyRegistry) -> None:
        node = registry.get_or_create(schema.Company)
        assert node.define_loader(_noop_loader) is node
        assert node.define_initializer(lambda c, s, f: None, "orderId") is node
        assert node.require(schema.User, relation("owner", {"id": "ownerId"})) is node
        assert node.loader is _noop_loader
        assert node.trigger_field_names() == frozenset({"orderId"})
        assert node.has_trigger_fields

    def test_loader_replaced(self, schema: SimpleNamespace, registry: DependencyRegistry) -> None:
        async def other(context: object, args: object, fields: object) -> list:
            return []

        node = registry.get_or_create(schema.User).define_loader(_noop_loader).define_loader(other)
        assert node.loader is other

    def test_require_creates_child(self, schema: SimpleNamespace, registry: DependencyRegistry) -> None:
        registry.get_or_create(schema.Company).require(schema.User, relation("owner", {"id": "ownerId"}))
        assert schema.User in registry

    def test_require_replaces_relations(self, schema: SimpleNamespace, registry: DependencyRegistry) -> None:
        company = registry.get_or_create(schema.Company)
        company.require(schema.User, relation("owner", {"id": "ownerId"}))
        company.require(schema.User, relation("employees", {"companyId": "id"}))
        user = registry.get(schema.User)
        assert [r.destination for r in company.relations(user)] == ["employees"]

    def test_relations_evaluated_lazily(self, schema: SimpleNamespace, registry: DependencyRegistry) -> None:
        calls: list[int] = []

        def provider() -> dict:
            calls.append(1)
            return {"as": "owner", "filter": {"id": "ownerId"}}

        company = registry.get_or_create(schema.Company).require(schema.User, provider)
        assert calls == []
        assert company.relations(registry.get(schema.User))[0].destination == "owner"
        assert calls == [1]

    def test_child_lookup(self, schema: SimpleNamespace, registry: DependencyRegistry) -> None:
        company = registry.get_or_create(schema.Company).require(schema.User, relation("owner", {"id": "ownerId"}))
        assert company.child("owner") is registry.get(schema.User)
        assert company.child("employees") is registry.get(schema.User)
        assert company.child("name") is None
        assert company.child("order") is None
        assert company.child("missing") is None

    def test_is_list_relation(self, schema: SimpleNamespace, registry: DependencyRegistry) -> None:
        company = registry.get_or_create(schema.Company)
        assert not company.is_list_relation(relation("owner", {"id": "ownerId"}))
        assert company.is_list_relation(relation("employees", {"companyId": "id"}))
        assert company.is_list_relation(relation("owner", {"id": "ownerId"}, is_list=True))
        assert not company.is_list_relation(relation("unknown", {}))

    def test_no_trigger_fields(self, schema: SimpleNamespace, registry: DependencyRegistry) -> None:
        node = registry.get_or_create(schema.User).define_initializer(lambda c, s, f: None)
        assert not node.has_trigger_fields
        assert node.trigger_field_names() == frozenset()


class TestImportRegistry:
    def test_attribute(self, registry_path: str) -> None:
        registry = import_registry(registry_path)
        assert registry.find("Company") is not None

    def test_module_only_returns_default(self) -> None:
        assert import_registry("depresolve.domain.schema") is default_registry

    def test_missing_module(self) -> None:
        with pytest.raises(RegistryLookupError, match="Cannot import"):
            import_registry("no_such_module_xyz:registry")

    def test_not_a_registry(self, registry_path: str) -> None:
        module = registry_path.partition(":")[0]
        with pytest.raises(RegistryLookupError, match="not a DependencyRegistry"):
            import_registry(f"{module}:not_a_registry")

    def test_lookup_error_subclass(self) -> None:
        with pytest.raises(LookupError):
            import_registry("no_such_module_xyz")
