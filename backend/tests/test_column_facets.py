"""Tests for per-column distinct value sets."""

from __future__ import annotations

from csvreview.services.column_facets import build_column_facets


def test_sorted_distinct_non_empty_values():
    rows = [
        {"city": "Paris", "tag": "b"},
        {"city": "Oslo", "tag": ""},
        {"city": "Paris"},
        {"city": "Berlin", "tag": "a"},
        {"city": None, "tag": "b"},
    ]

    facets = build_column_facets(["city", "tag"], rows)

    assert facets == {"city": ["Berlin", "Oslo", "Paris"], "tag": ["a", "b"]}


def test_column_without_values_is_empty():
    facets = build_column_facets(["a", "b"], [{"a": "1"}, {"a": "2", "b": ""}])

    assert facets["b"] == []


def test_no_rows():
    assert build_column_facets(["a"], []) == {"a": []}


def test_extra_keys_outside_headers_are_ignored():
    facets = build_column_facets(["a"], [{"a": "x", "other": "y"}])

    assert facets == {"a": ["x"]}


def test_values_are_strings_and_case_sensitive():
    facets = build_column_facets(["v"], [{"v": 10}, {"v": "10"}, {"v": "b"}, {"v": "B"}])

    assert facets == {"v": ["10", "B", "b"]}
