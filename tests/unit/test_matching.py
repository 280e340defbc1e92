"""
Unit tests for in-process filter evaluation used by the in-memory stores.
"""

import pytest
from bson import Decimal128

from noodle_persistence.mapping.matching import apply_window, matches_filter

MENU_DOCUMENT = {
    "_id": "noodles",
    "itemName": "Yummy Noodles",
    "ingredients": [{"name": "Noodles"}, {"name": "Peanuts"}],
    "tags": ["spicy", "nutty"],
}


@pytest.mark.unit
class TestMatchesFilter:
    def test_empty_filter_matches(self):
        assert matches_filter(MENU_DOCUMENT, None)
        assert matches_filter(MENU_DOCUMENT, {})

    def test_equality(self):
        assert matches_filter(MENU_DOCUMENT, {"itemName": "Yummy Noodles"})
        assert not matches_filter(MENU_DOCUMENT, {"itemName": "Rice"})

    def test_dotted_key_into_array_of_documents(self):
        assert matches_filter(MENU_DOCUMENT, {"ingredients.name": "Peanuts"})
        assert not matches_filter(MENU_DOCUMENT, {"ingredients.name": "Rice"})

    def test_scalar_matches_array_element(self):
        assert matches_filter(MENU_DOCUMENT, {"tags": "spicy"})

    def test_in(self):
        assert matches_filter(MENU_DOCUMENT, {"ingredients.name": {"$in": ["Rice", "Peanuts"]}})
        assert not matches_filter(MENU_DOCUMENT, {"ingredients.name": {"$in": ["Rice"]}})

    def test_nin_and_ne(self):
        assert matches_filter(MENU_DOCUMENT, {"ingredients.name": {"$nin": ["Rice"]}})
        assert not matches_filter(MENU_DOCUMENT, {"ingredients.name": {"$ne": "Noodles"}})
        assert matches_filter(MENU_DOCUMENT, {"itemName": {"$eq": "Yummy Noodles"}})

    def test_missing_key(self):
        assert not matches_filter(MENU_DOCUMENT, {"cost": 5})

    def test_unsupported_operator(self):
        with pytest.raises(ValueError, match=r"\$gt"):
            matches_filter(MENU_DOCUMENT, {"cost": {"$gt": 5}})


@pytest.mark.unit
class TestApplyWindow:
    DOCUMENTS = [
        {"_id": 1, "status": "b", "rank": 2},
        {"_id": 2, "status": "a", "rank": 2},
        {"_id": 3, "status": "c", "rank": 1},
        {"_id": 4},
    ]

    def test_sort_ascending_places_missing_first(self):
        result = apply_window(self.DOCUMENTS, sort=[("status", 1)])
        assert [d["_id"] for d in result] == [4, 2, 1, 3]

    def test_sort_by_several_keys(self):
        result = apply_window(self.DOCUMENTS[:3], sort=[("rank", -1), ("status", 1)])
        assert [d["_id"] for d in result] == [2, 1, 3]

    def test_skip_and_limit(self):
        result = apply_window(self.DOCUMENTS, skip=1, limit=2)
        assert [d["_id"] for d in result] == [2, 3]

    def test_does_not_mutate_input(self):
        documents = list(self.DOCUMENTS)
        apply_window(documents, sort=[("status", -1)])
        assert documents == self.DOCUMENTS

    def test_mixed_types_sort_by_type_order(self):
        documents = [
            {"_id": 1, "code": "b"},
            {"_id": 2, "code": 7},
            {"_id": 3},
            {"_id": 4, "code": "a"},
            {"_id": 5, "code": 2.5},
        ]

        ascending = apply_window(documents, sort=[("code", 1)])
        descending = apply_window(documents, sort=[("code", -1)])

        assert [d["_id"] for d in ascending] == [3, 5, 2, 4, 1]
        assert [d["_id"] for d in descending] == [1, 4, 2, 5, 3]

    def test_decimal128_values_sort_numerically(self):
        documents = [
            {"_id": 1, "cost": Decimal128("12.99")},
            {"_id": 2, "cost": Decimal128("6.50")},
            {"_id": 3, "cost": 9},
        ]

        result = apply_window(documents, sort=[("cost", 1)])

        assert [d["_id"] for d in result] == [2, 3, 1]
