"""Tests for mapping loaded entities onto source entities."""

from __future__ import annotations

from depresolve import relation
from depresolve.services.mapper import map_dependency_data, map_item, map_list, matches

OWNER = relation("owner", {"id": "ownerId"})
RELATED = relation("relatedCompanies", {"id": "relatedCompanyIds"})


class TestMatches:
    def test_scalar_equality(self) -> None:
        assert matches({"id": 7}, {"ownerId": 7}, OWNER)
        assert not matches({"id": 8}, {"ownerId": 7}, OWNER)

    def test_normalized(self) -> None:
        assert matches({"id": "7"}, {"ownerId": 7.0}, OWNER)

    def test_source_list(self) -> None:
        assert matches({"id": 3}, {"relatedCompanyIds": [2, 3]}, RELATED)
        assert not matches({"id": 4}, {"relatedCompanyIds": [2, 3]}, RELATED)

    def test_child_list(self) -> None:
        tagged = relation("tagged", {"tagIds": "id"})
        assert matches({"tagIds": [1, 2]}, {"id": 2}, tagged)

    def test_missing_source_value(self) -> None:
        assert not matches({"id": None}, {"ownerId": None}, OWNER)
        assert not matches({"id": 7}, {}, OWNER)

    def test_every_pair_must_match(self) -> None:
        rel = relation("membership", {"userId": "ownerId", "companyId": "id"})
        source = {"id": 1, "ownerId": 7}
        assert matches({"userId": 7, "companyId": 1}, source, rel)
        assert not matches({"userId": 7, "companyId": 2}, source, rel)


class TestMapHelpers:
    def test_map_list_keeps_order(self) -> None:
        entities = {"2": {"id": 2}, "3": {"id": 3}, "4": {"id": 4}}
        assert map_list(entities, {"relatedCompanyIds": [4, 2]}, RELATED) == [{"id": 2}, {"id": 4}]

    def test_map_item_first_match(self) -> None:
        entities = {"7": {"id": 7}}
        assert map_item(entities, {"ownerId": 7}, OWNER) == {"id": 7}
        assert map_item(entities, {"ownerId": 8}, OWNER) is None


class TestMapDependencyData:
    def test_single(self) -> None:
        alice = {"id": 7}
        source = [{"ownerId": 7}, {"ownerId": 8, "owner": "kept"}]
        map_dependency_data(source, {"7": alice}, OWNER, is_list=False)
        assert source[0]["owner"] is alice
        assert source[1]["owner"] == "kept"

    def test_list_always_assigned(self) -> None:
        source = {"relatedCompanyIds": [9], "relatedCompanies": ["stale"]}
        map_dependency_data(source, {"2": {"id": 2}}, RELATED, is_list=True)
        assert source["relatedCompanies"] == []

    def test_empty_source(self) -> None:
        assert map_dependency_data(None, {"7": {"id": 7}}, OWNER, is_list=False) is None
