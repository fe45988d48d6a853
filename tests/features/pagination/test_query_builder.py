"""Tests for building store filters and sorts from pagination requests."""

import logging

import pytest

from his_commons.features.pagination import PaginationRequest, QueryOptions, SortField, SortOrder
from his_commons.features.pagination.utils import (
    build_filter,
    build_search_predicate,
    build_sort,
    merge_predicates,
    parse_filter,
    parse_sort,
)


def camel_mapper(name: str) -> str:
    return {"id": "_id", "created_at": "createdAt", "full_name": "fullName"}.get(name, name)


class TestMergePredicates:
    """Test monotonic AND merging."""

    def test_disjoint_keys_merge_directly(self):
        assert merge_predicates({"active": True}, {"name": "x"}) == {"active": True, "name": "x"}

    def test_colliding_key_goes_to_and(self):
        merged = merge_predicates({"active": True}, {"active": False})
        assert merged == {"active": True, "$and": [{"active": False}]}

    def test_existing_and_is_extended(self):
        merged = merge_predicates({"$and": [{"a": 1}]}, {"$and": [{"b": 2}], "a": 3})
        assert merged == {"$and": [{"a": 1}, {"b": 2}], "a": 3}

    def test_source_and_list_is_not_mutated(self):
        source = {"$and": [{"a": 1}]}
        target = merge_predicates({}, source)
        merge_predicates(target, {"$and": [{"b": 2}]})
        assert source == {"$and": [{"a": 1}]}


class TestBuildFilter:
    """Test filter construction."""

    def test_active_predicate_by_default(self):
        assert build_filter(PaginationRequest()) == {"active": True}

    def test_include_inactive_drops_active_predicate(self):
        assert build_filter(PaginationRequest(), QueryOptions(include_inactive=True)) == {}

    def test_options_filter_is_merged(self):
        query = build_filter(PaginationRequest(), QueryOptions(filter={"tenantId": "t1"}))
        assert query == {"active": True, "tenantId": "t1"}

    def test_options_filter_cannot_widen_active(self):
        query = build_filter(PaginationRequest(), QueryOptions(filter={"active": False}))
        assert query["active"] is True
        assert {"active": False} in query["$and"]

    def test_caller_filter_is_merged(self):
        request = PaginationRequest(filter='{"department": "cardiology", "age": {"$gte": 30}}')
        query = build_filter(request)
        assert query == {"active": True, "department": "cardiology", "age": {"$gte": 30}}

    def test_caller_filter_cannot_override_code_filter(self):
        request = PaginationRequest(filter='{"tenantId": "other"}')
        query = build_filter(request, QueryOptions(filter={"tenantId": "mine"}))
        assert query["tenantId"] == "mine"
        assert query["$and"] == [{"tenantId": "other"}]

    def test_malformed_caller_filter_is_ignored(self, caplog):
        with caplog.at_level(logging.WARNING):
            query = build_filter(PaginationRequest(filter="{not json"))
        assert query == {"active": True}
        assert "Ignoring caller filter" in caplog.text

    def test_caller_filter_keys_are_mapped(self):
        request = PaginationRequest(filter='{"id": "abc"}')
        assert build_filter(request, QueryOptions(field_mapper=camel_mapper)) == {"active": True, "_id": "abc"}

    def test_clause_order(self):
        request = PaginationRequest(search="ann", filter='{"name": "Ann"}')
        options = QueryOptions(filter={"ward": "A"}, search_fields=["name"])
        query = build_filter(request, options)
        assert list(query) == ["active", "ward", "name", "$and"]
        assert query["name"] == {"$regex": "ann", "$options": "i"}
        assert query["$and"] == [{"name": "Ann"}]

    def test_whitelist_rejects_whole_filter(self):
        request = PaginationRequest(filter='{"department": "x", "ssn": "123"}')
        query = build_filter(request, QueryOptions(filterable_fields={"department"}))
        assert query == {"active": True}

    def test_whitelist_compares_mapped_keys(self):
        request = PaginationRequest(filter='{"createdAt": {"$gt": "2024-01-01"}}')
        options = QueryOptions(filterable_fields={"created_at"}, field_mapper=camel_mapper)
        assert build_filter(request, options) == {"active": True, "createdAt": {"$gt": "2024-01-01"}}


class TestSearchPredicate:
    """Test the case-insensitive search predicate."""

    def test_single_field(self):
        predicate = build_search_predicate("Smith", QueryOptions(search_fields=["name"]))
        assert predicate == {"name": {"$regex": "Smith", "$options": "i"}}

    def test_multiple_fields_use_or(self):
        predicate = build_search_predicate("sm", QueryOptions(search_fields=["name", "mrn"]))
        assert predicate == {"$or": [
            {"name": {"$regex": "sm", "$options": "i"}},
            {"mrn": {"$regex": "sm", "$options": "i"}},
        ]}

    def test_term_is_escaped(self):
        predicate = build_search_predicate("a.b*(c)", QueryOptions(search_fields=["name"]))
        assert predicate["name"]["$regex"] == r"a\.b\*\(c\)"

    def test_fields_are_mapped(self):
        predicate = build_search_predicate("x", QueryOptions(search_fields=["full_name"], field_mapper=camel_mapper))
        assert "fullName" in predicate

    @pytest.mark.parametrize("term", [None, "", "   "])
    def test_blank_term_is_ignored(self, term):
        assert build_search_predicate(term, QueryOptions(search_fields=["name"])) is None

    def test_no_searchable_fields_ignores_term(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="his_commons.features.pagination.utils.query_builder"):
            assert build_search_predicate("smith", QueryOptions()) is None
        assert "no searchable fields" in caplog.text


class TestParseFilter:

    def test_absent_filter(self):
        assert parse_filter(None, QueryOptions()) == {}

    @pytest.mark.parametrize("raw", ["{not json", "[1, 2]", '"text"', '{"$where": "1"}', '{"name": {"$regex": ".*"}}'])
    def test_unusable_filter_returns_empty(self, raw):
        assert parse_filter(raw, QueryOptions()) == {}


class TestParseSort:

    def test_tokens_in_order(self):
        assert parse_sort("name:desc,createdAt:asc") == [
            SortField("name", SortOrder.DESC),
            SortField("createdAt", SortOrder.ASC),
        ]

    def test_missing_direction_means_ascending(self):
        assert parse_sort("name") == [SortField("name", SortOrder.ASC)]

    def test_invalid_tokens_are_skipped(self, caplog):
        with caplog.at_level(logging.WARNING):
            fields = parse_sort("name:sideways,$where:asc,,age:DESC")
        assert fields == [SortField("age", SortOrder.DESC)]
        assert "Ignoring sort token" in caplog.text

    def test_empty(self):
        assert parse_sort(None) == []
        assert parse_sort("") == []


class TestBuildSort:
    """Test sort specification construction."""

    def test_default_sort(self):
        assert build_sort(PaginationRequest()) == [("createdAt", -1), ("_id", 1)]

    def test_caller_tokens_come_first(self):
        sort = build_sort(PaginationRequest(sort="name:desc,createdAt:asc"))
        assert sort == [("name", -1), ("createdAt", 1), ("_id", 1)]

    def test_options_sort_follows_caller_tokens(self):
        options = QueryOptions(sort=[("age", -1), SortField("name")])
        sort = build_sort(PaginationRequest(sort="name:desc"), options)
        assert sort == [("name", -1), ("age", -1), ("createdAt", -1), ("_id", 1)]

    def test_sort_fields_are_mapped(self):
        sort = build_sort(PaginationRequest(sort="created_at:asc,id:desc"), QueryOptions(field_mapper=camel_mapper))
        assert sort == [("createdAt", 1), ("_id", -1)]

    def test_only_invalid_tokens_gives_default(self):
        assert build_sort(PaginationRequest(sort="name:bogus")) == [("createdAt", -1), ("_id", 1)]
