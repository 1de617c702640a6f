"""Tests for condition-based query composition."""
from datetime import datetime, timezone

import pytest

from firebridge.query_builder import QueryCondition, QueryOperator, build_query

from .conftest import FakeCollection, FakeFirestore


@pytest.fixture
def base_query():
    return FakeCollection(FakeFirestore(), "products")


def _predicates(query):
    return [(f.field_path, f.op_string, f.value) for f in query.filters]


class TestBuildQuery:

    def test_no_conditions(self, base_query):
        assert build_query(base_query, []) is base_query

    def test_only_none_conditions_return_base(self, base_query):
        conditions = [
            ("name", QueryOperator.NONE, "C"),
            ("price", QueryOperator.NONE, None),
        ]
        assert build_query(base_query, conditions) is base_query

    def test_each_operator_maps_to_firestore(self, base_query):
        expected = {
            QueryOperator.EQUAL: "==",
            QueryOperator.LESS_THAN: "<",
            QueryOperator.GREATER_THAN: ">",
            QueryOperator.LESS_OR_EQUAL: "<=",
            QueryOperator.GREATER_OR_EQUAL: ">=",
            QueryOperator.ARRAY_CONTAINS: "array_contains",
            QueryOperator.NOT_EQUAL: "!=",
        }
        for operator, op_string in expected.items():
            query = build_query(base_query, [("f", operator, 1)])
            assert _predicates(query) == [("f", op_string, 1)]

    def test_none_skipped_and_order_preserved(self, base_query):
        conditions = [
            ("category", QueryOperator.EQUAL, "shoes"),
            ("ignored", QueryOperator.NONE, "x"),
            ("price", QueryOperator.LESS_THAN, 100),
            ("tags", QueryOperator.ARRAY_CONTAINS, "sale"),
            ("also_ignored", QueryOperator.NONE, 0),
            ("stock", QueryOperator.NOT_EQUAL, 0),
        ]
        query = build_query(base_query, conditions)
        assert _predicates(query) == [
            ("category", "==", "shoes"),
            ("price", "<", 100),
            ("tags", "array_contains", "sale"),
            ("stock", "!=", 0),
        ]

    def test_base_query_not_mutated(self, base_query):
        build_query(base_query, [("a", QueryOperator.EQUAL, 1)])
        assert base_query.filters == ()

    def test_accepts_query_condition(self, base_query):
        condition = QueryCondition("name", QueryOperator.EQUAL, "C")
        assert _predicates(build_query(base_query, [condition])) == [
            ("name", "==", "C")]

    def test_accepts_generator(self, base_query):
        conditions = (("n", QueryOperator.GREATER_THAN, i) for i in range(3))
        assert len(build_query(base_query, conditions).filters) == 3


class TestQueryCondition:

    @pytest.mark.parametrize("value", [
        "text", 3, 2.5, True,
        datetime(2024, 1, 1, tzinfo=timezone.utc),
        ["a", "b"], (1, 2),
    ])
    def test_supported_values(self, value):
        condition = QueryCondition.of(("f", QueryOperator.EQUAL, value))
        assert condition.value == value

    @pytest.mark.parametrize("value", [None, {"a": 1}, object(), [{"a": 1}]])
    def test_unsupported_values(self, value):
        with pytest.raises(TypeError):
            QueryCondition.of(("f", QueryOperator.EQUAL, value))

    def test_none_operator_skips_value_check(self):
        condition = QueryCondition.of(("f", QueryOperator.NONE, None))
        assert condition.operator is QueryOperator.NONE

    def test_string_operator_rejected(self):
        with pytest.raises(TypeError):
            QueryCondition.of(("f", "isEqualTo", 1))
