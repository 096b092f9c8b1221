"""Tests for ApiRelation batch and lazy loading."""

from __future__ import annotations

from typing import Any, Dict, List

import pytest

from api_relations.relations.api_relation import ApiRelation
from api_relations.relations.errors import ApiRelationError, MissingFetchFunctionError
from api_relations.relations.models import RelationKind, RelationSpec


class RecordingFetch:
    """Fetch function stub that records every call."""

    def __init__(self, rows: List[Dict[str, Any]]) -> None:
        self.rows = rows
        self.calls: List[tuple[list, Any]] = []

    def __call__(self, keys: List[Any], foreign_key: Any) -> List[Dict[str, Any]]:
        self.calls.append((list(keys), foreign_key))
        return list(self.rows)


def _relation(kind: RelationKind, fetch: Any, **kwargs: Any) -> ApiRelation:
    kwargs.setdefault("foreign_key", "user_id")
    return ApiRelation(RelationSpec(kind=kind, fetch=fetch, **kwargs))


def test_has_one_batch_scenario() -> None:
    fetch = RecordingFetch([{"user_id": 1, "name": "John"}, {"user_id": 3, "name": "Bob"}])
    parents = [{"id": 1}, {"id": 2}, {"id": 3}]
    relation = _relation(RelationKind.HAS_ONE, fetch)

    relation.init_relation(parents, "profile")
    relation.match(parents, "profile")

    assert parents[0]["profile"] == {"user_id": 1, "name": "John"}
    assert parents[1]["profile"] is None
    assert parents[2]["profile"] == {"user_id": 3, "name": "Bob"}
    assert fetch.calls == [([1, 2, 3], "user_id")]


def test_has_many_batch_scenario() -> None:
    fetch = RecordingFetch(
        [{"user_id": 1, "title": "first"}, {"user_id": 1, "title": "second"}]
    )
    parents = [{"id": 1}, {"id": 2}]
    relation = _relation(RelationKind.HAS_MANY, fetch)

    relation.init_relation(parents, "posts")
    relation.match(parents, "posts")

    assert len(parents[0]["posts"]) == 2
    assert parents[1]["posts"] == []


def test_batch_fetches_each_distinct_key_once_in_first_seen_order() -> None:
    fetch = RecordingFetch([])
    parents = [{"id": 5}, {"id": 2}, {"id": 5}, {"id": None}, {"id": 2}, {"id": 9}]

    _relation(RelationKind.HAS_ONE, fetch).match(parents, "profile")

    assert fetch.calls == [([5, 2, 9], "user_id")]
    assert all(parent["profile"] is None for parent in parents)


def test_batch_issues_single_fetch_for_many_parents() -> None:
    fetch = RecordingFetch([{"user_id": i} for i in range(100)])
    parents = [{"id": i} for i in range(100)]

    _relation(RelationKind.HAS_MANY, fetch).match(parents, "items")

    assert len(fetch.calls) == 1
    assert all(len(parent["items"]) == 1 for parent in parents)


def test_batch_without_keys_skips_fetch() -> None:
    fetch = RecordingFetch([{"user_id": 1}])
    parents = [{"id": None}, {}]

    result = _relation(RelationKind.HAS_ONE, fetch).match(parents, "profile")

    assert result is parents
    assert fetch.calls == []
    assert parents == [{"id": None}, {}]


def test_missing_fetch_function_only_fails_when_fetch_needed() -> None:
    relation = _relation(RelationKind.HAS_ONE, None)

    relation.match([{"id": None}], "profile")
    assert relation.get_results({"id": None}) is None

    with pytest.raises(MissingFetchFunctionError):
        relation.match([{"id": 1}], "profile")
    with pytest.raises(ApiRelationError):
        relation.get_results({"id": 1})


def test_fetch_failure_propagates_without_partial_attachment() -> None:
    def failing_fetch(keys: List[Any], foreign_key: Any) -> List[Dict[str, Any]]:
        raise ConnectionError("upstream down")

    parents = [{"id": 1}, {"id": 2}]

    with pytest.raises(ConnectionError, match="upstream down"):
        _relation(RelationKind.HAS_MANY, failing_fetch).match(parents, "posts")

    assert parents == [{"id": 1}, {"id": 2}]


def test_fetch_returning_none_is_treated_as_empty() -> None:
    parents = [{"id": 1}]

    _relation(RelationKind.HAS_MANY, lambda keys, foreign_key: None).match(parents, "posts")

    assert parents[0]["posts"] == []


def test_lazy_has_one_fetches_single_key() -> None:
    fetch = RecordingFetch([{"user_id": 2, "name": "Jane"}, {"user_id": 3, "name": "Other"}])
    relation = _relation(RelationKind.HAS_ONE, fetch)

    result = relation.get_results({"id": 2})

    assert result == {"user_id": 2, "name": "Jane"}
    assert fetch.calls == [([2], "user_id")]


def test_lazy_has_many_returns_empty_list_when_unmatched() -> None:
    fetch = RecordingFetch([{"user_id": 3}])
    relation = _relation(RelationKind.HAS_MANY, fetch)

    assert relation.get_results({"id": 2}) == []
    assert len(fetch.calls) == 1


def test_lazy_null_key_never_calls_fetch() -> None:
    fetch = RecordingFetch([{"user_id": None}])

    assert _relation(RelationKind.HAS_ONE, fetch).get_results({"id": None}) is None
    assert _relation(RelationKind.HAS_MANY, fetch).get_results({}) == []
    assert fetch.calls == []


def test_lazy_composite_key_passes_mapping_to_fetch() -> None:
    fetch = RecordingFetch(
        [{"customer_id": 2, "order_number": "ORD-001", "total": 150.0}]
    )
    relation = _relation(
        RelationKind.HAS_ONE,
        fetch,
        foreign_key=["customer_id", "order_number"],
        local_key=["customer_id", "order_number"],
    )

    result = relation.get_results({"order_number": "ORD-001", "customer_id": 2})

    assert result["total"] == 150.0
    assert fetch.calls == [
        ([{"customer_id": 2, "order_number": "ORD-001"}], ["customer_id", "order_number"])
    ]


def test_lazy_composite_with_null_field_skips_fetch() -> None:
    fetch = RecordingFetch([])
    relation = _relation(
        RelationKind.HAS_MANY, fetch, foreign_key=["a", "b"], local_key=["a", "b"]
    )

    assert relation.get_results({"a": 1, "b": None}) == []
    assert fetch.calls == []


def test_resolve_helpers_check_kind() -> None:
    fetch = RecordingFetch([{"user_id": 1}])
    has_one = _relation(RelationKind.HAS_ONE, fetch)
    has_many = _relation(RelationKind.HAS_MANY, fetch)

    assert has_one.resolve_one({"id": 1}) == {"user_id": 1}
    assert has_many.resolve_many({"id": 1}) == [{"user_id": 1}]
    with pytest.raises(ValueError, match="has_one"):
        has_one.resolve_many({"id": 1})


def test_init_relation_sets_defaults() -> None:
    parents = [{"id": 1}, {"id": 2}]

    _relation(RelationKind.HAS_MANY, None).init_relation(parents, "posts")

    assert parents == [{"id": 1, "posts": []}, {"id": 2, "posts": []}]
    assert parents[0]["posts"] is not parents[1]["posts"]
