"""Tests for KeyNormalizer."""

from __future__ import annotations

import pytest

from api_relations.normalization.key_normalizer import KeyNormalizer


def test_scalar_keys_render_canonically() -> None:
    normalizer = KeyNormalizer()

    assert normalizer.normalize(123) == "123"
    assert normalizer.normalize("123") == "123"
    assert normalizer.normalize(2.0) == "2"
    assert normalizer.normalize(2.5) == "2.5"
    assert normalizer.normalize(True) == "true"
    assert normalizer.normalize("ABC") == "ABC"


def test_case_insensitive_lowercases_strings_only() -> None:
    normalizer = KeyNormalizer(case_insensitive=True)

    assert normalizer.normalize("AbC") == "abc"
    assert normalizer.normalize(42) == "42"


def test_composite_key_ignores_insertion_order() -> None:
    normalizer = KeyNormalizer()

    left = normalizer.normalize({"customer_id": 2, "seller_id": 100})
    right = normalizer.normalize({"seller_id": 100, "customer_id": 2})

    assert left == right


def test_composite_key_distinguishes_values_and_fields() -> None:
    normalizer = KeyNormalizer()

    base = normalizer.normalize({"a": 2, "b": 100})

    assert base != normalizer.normalize({"a": 2, "b": 101})
    assert base != normalizer.normalize({"a": 2, "c": 100})
    # separators inside values must not produce collisions
    assert normalizer.normalize({"a": "1,2", "b": "3"}) != normalizer.normalize(
        {"a": "1", "b": "2,3"}
    )


def test_composite_case_insensitive_only_touches_strings() -> None:
    normalizer = KeyNormalizer(case_insensitive=True)

    assert normalizer.normalize({"code": "ABC", "id": 7}) == normalizer.normalize(
        {"code": "abc", "id": 7}
    )
    assert KeyNormalizer().normalize({"code": "ABC"}) != KeyNormalizer().normalize(
        {"code": "abc"}
    )


def test_null_key_is_rejected() -> None:
    with pytest.raises(ValueError, match="null key value"):
        KeyNormalizer().normalize(None)


def test_normalize_many_preserves_order() -> None:
    normalizer = KeyNormalizer(case_insensitive=True)

    assert normalizer.normalize_many(["B", 1, "a"]) == ["b", "1", "a"]
