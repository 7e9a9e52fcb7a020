"""Unit tests for Where parsing, traversal and OrderBy."""

from __future__ import annotations

import pytest

from datasource_mongo.exceptions import InvalidWhereError
from datasource_mongo.where import Operator, OrderBy, iterate_where, parse_operator


def _leaves(where):
    collected = []
    iterate_where(where, lambda field, op, value: collected.append((field, op, value)))
    return collected


class TestIterateWhere:
    """Tests for leaf traversal."""

    def test_none_and_empty_yield_nothing(self):
        """Absent or empty Where has no leaves."""
        assert _leaves(None) == []
        assert _leaves({}) == []

    def test_visits_fields_then_operators_in_order(self):
        """Fields and their operators are visited in insertion order."""
        where = {"age": {"gte": 18, "lt": 65}, "name": {"eq": "Ada"}}

        assert _leaves(where) == [
            ("age", Operator.GTE, 18),
            ("age", Operator.LT, 65),
            ("name", Operator.EQ, "Ada"),
        ]

    def test_nested_and_is_walked_after_own_fields(self):
        """Nested ``and`` expressions follow the enclosing fields, depth-first."""
        where = {
            "and": [{"a": {"eq": 1}, "and": [{"b": {"gt": 2}}]}, {"c": {"lt": 3}}],
            "z": {"eq": 0},
        }

        assert _leaves(where) == [
            ("z", Operator.EQ, 0),
            ("a", Operator.EQ, 1),
            ("b", Operator.GT, 2),
            ("c", Operator.LT, 3),
        ]

    def test_single_mapping_under_and_is_accepted(self):
        """``and`` may hold one mapping instead of a list."""
        assert _leaves({"and": {"a": {"eq": 1}}}) == [("a", Operator.EQ, 1)]

    def test_unknown_operator_key_is_passed_through(self):
        """Keys outside the enumeration reach the callback unchanged."""
        assert _leaves({"name": {"like": "A%"}}) == [("name", "like", "A%")]

    def test_non_mapping_condition_raises(self):
        """A field must map to an operator mapping."""
        with pytest.raises(InvalidWhereError, match="must map operators"):
            _leaves({"name": "Ada"})


class TestParseOperator:
    """Tests for operator coercion."""

    def test_string_keys_are_case_insensitive(self):
        """Upper-case keys map to the same operator."""
        assert parse_operator("GTE") is Operator.GTE

    def test_enum_passes_through(self):
        """An Operator is returned unchanged."""
        assert parse_operator(Operator.CONTAINS) is Operator.CONTAINS

    def test_unknown_key_raises(self):
        """parse_operator rejects keys outside the enumeration."""
        with pytest.raises(InvalidWhereError, match="Unknown Where operator"):
            parse_operator("regex")


class TestOrderBy:
    """Tests for OrderBy.parse."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ({"field": "age", "value": 1}, OrderBy("age", 1)),
            ({"field": "age", "value": -1}, OrderBy("age", -1)),
            ({"field": "age", "value": "DESC"}, OrderBy("age", -1)),
            ({"field": "age", "value": "asc"}, OrderBy("age", 1)),
            ({"field": "age"}, OrderBy("age", 1)),
        ],
    )
    def test_parse_mapping(self, raw, expected):
        """Mappings with numeric or named directions are accepted."""
        assert OrderBy.parse(raw) == expected

    def test_parse_none_and_empty(self):
        """No ordering requested means None."""
        assert OrderBy.parse(None) is None
        assert OrderBy.parse({}) is None

    def test_parse_instance_passes_through(self):
        """An OrderBy instance is returned as-is."""
        order = OrderBy("name", -1)
        assert OrderBy.parse(order) is order

    @pytest.mark.parametrize(
        "raw",
        [{"field": "age", "value": 2}, {"field": "age", "value": "up"}, {"value": 1}],
    )
    def test_parse_invalid(self, raw):
        """Bad directions and missing fields are rejected."""
        with pytest.raises(InvalidWhereError):
            OrderBy.parse(raw)
