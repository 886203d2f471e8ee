"""Tests for the condition filter compiler."""

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from ElasticQuery.core.errors import (
    InvalidConjunctionError,
    InvalidFilterFieldError,
    MissingOperatorError,
    UnsupportedOperatorError,
)
from ElasticQuery.core.query import Condition, ConditionGroup, Conjunction, Operator
from ElasticQuery.core.schema import FieldSchema, IndexSchema, SemanticType
from ElasticQuery.elastic.filters import build_filter_term, compile_filters


def _schema() -> IndexSchema:
    return IndexSchema.from_fields(
        "content",
        [
            FieldSchema("foo"),
            FieldSchema("whiz"),
            FieldSchema("status", SemanticType.BOOLEAN),
            FieldSchema("created", SemanticType.DATE),
        ],
    )


def _range(lower, upper, include_lower=False, include_upper=False) -> dict:
    return {
        "range": {
            "foo": {
                "from": lower,
                "to": upper,
                "include_lower": include_lower,
                "include_upper": include_upper,
            }
        }
    }


class TestBuildFilterTerm(unittest.TestCase):
    def test_not_equals_null_is_exists(self) -> None:
        self.assertEqual(build_filter_term("foo", Operator.NOT_EQ, None), {"exists": {"field": "foo"}})

    def test_equals_null_is_must_not_exists(self) -> None:
        self.assertEqual(
            build_filter_term("foo", Operator.EQ, None),
            {"bool": {"must_not": {"exists": {"field": "foo"}}}},
        )

    def test_null_with_other_operator_fails(self) -> None:
        with self.assertRaises(UnsupportedOperatorError):
            build_filter_term("foo", Operator.GT, None)

    def test_equals(self) -> None:
        self.assertEqual(build_filter_term("foo", Operator.EQ, "bar"), {"term": {"foo": "bar"}})

    def test_not_equals(self) -> None:
        self.assertEqual(
            build_filter_term("foo", Operator.NOT_EQ, "bar"),
            {"bool": {"must_not": {"term": {"foo": "bar"}}}},
        )

    def test_in_and_not_in(self) -> None:
        self.assertEqual(
            build_filter_term("foo", Operator.IN, ("bar", "whiz")),
            {"terms": {"foo": ["bar", "whiz"]}},
        )
        self.assertEqual(
            build_filter_term("foo", Operator.NOT_IN, ["bar", "whiz"]),
            {"bool": {"must_not": {"terms": {"foo": ["bar", "whiz"]}}}},
        )

    def test_in_with_scalar_fails(self) -> None:
        with self.assertRaises(UnsupportedOperatorError):
            build_filter_term("foo", Operator.IN, "bar")

    def test_single_bound_ranges(self) -> None:
        self.assertEqual(build_filter_term("foo", Operator.GT, "bar"), _range("bar", None))
        self.assertEqual(build_filter_term("foo", Operator.GTE, "bar"), _range("bar", None, include_lower=True))
        self.assertEqual(build_filter_term("foo", Operator.LT, "bar"), _range(None, "bar"))
        self.assertEqual(build_filter_term("foo", Operator.LTE, "bar"), _range(None, "bar", include_upper=True))

    def test_between(self) -> None:
        self.assertEqual(build_filter_term("foo", Operator.BETWEEN, [1, 10]), _range(1, 10))

    def test_between_missing_upper_is_unbounded(self) -> None:
        self.assertEqual(build_filter_term("foo", Operator.BETWEEN, [5]), _range(5, None))
        self.assertEqual(build_filter_term("foo", Operator.BETWEEN, ["", 7]), _range(None, 7))

    def test_between_keeps_zero_bound(self) -> None:
        self.assertEqual(build_filter_term("foo", Operator.BETWEEN, [0, 3]), _range(0, 3))

    def test_not_between(self) -> None:
        self.assertEqual(
            build_filter_term("foo", Operator.NOT_BETWEEN, [1, 10]),
            {"bool": {"must_not": _range(1, 10)}},
        )


class TestCompileFilters(unittest.TestCase):
    def test_and_group_wraps_in_must(self) -> None:
        group = ConditionGroup(
            members=[Condition("foo", "bar"), Condition("whiz", "bang")],
        )

        filters = compile_filters(group, _schema())

        self.assertEqual(
            filters,
            {"bool": {"must": [{"term": {"foo": "bar"}}, {"term": {"whiz": "bang"}}]}},
        )

    def test_or_group_wraps_in_should(self) -> None:
        group = ConditionGroup(
            conjunction=Conjunction.OR,
            members=[Condition("foo", "bar"), Condition("whiz", "bang")],
        )

        filters = compile_filters(group, _schema())

        self.assertEqual(
            filters,
            {"bool": {"should": [{"term": {"foo": "bar"}}, {"term": {"whiz": "bang"}}]}},
        )

    def test_empty_group_is_absent(self) -> None:
        self.assertIsNone(compile_filters(ConditionGroup(), _schema()))

    def test_group_of_empty_groups_is_absent(self) -> None:
        group = ConditionGroup(members=[ConditionGroup(), ConditionGroup(conjunction="OR")])
        self.assertIsNone(compile_filters(group, _schema()))

    def test_single_member_is_not_wrapped(self) -> None:
        group = ConditionGroup(
            conjunction=Conjunction.OR,
            members=[ConditionGroup(), Condition("foo", "bar")],
        )
        self.assertEqual(compile_filters(group, _schema()), {"term": {"foo": "bar"}})

    def test_nested_groups(self) -> None:
        group = ConditionGroup(
            members=[
                Condition("foo", "bar"),
                ConditionGroup(
                    conjunction=Conjunction.OR,
                    members=[Condition("whiz", "a"), Condition("whiz", "b")],
                ),
            ],
        )

        filters = compile_filters(group, _schema())

        self.assertEqual(
            filters,
            {
                "bool": {
                    "must": [
                        {"term": {"foo": "bar"}},
                        {"bool": {"should": [{"term": {"whiz": "a"}}, {"term": {"whiz": "b"}}]}},
                    ]
                }
            },
        )

    def test_negated_group_wraps_in_must_not(self) -> None:
        group = ConditionGroup(members=[Condition("foo", "bar")], negated=True)
        self.assertEqual(
            compile_filters(group, _schema()),
            {"bool": {"must_not": {"term": {"foo": "bar"}}}},
        )

    def test_negated_empty_group_is_absent(self) -> None:
        self.assertIsNone(compile_filters(ConditionGroup(negated=True), _schema()))

    def test_boolean_field_value_is_coerced(self) -> None:
        group = ConditionGroup(
            members=[Condition("status", "0"), Condition("status", 1, Operator.NOT_EQ)],
        )

        filters = compile_filters(group, _schema())

        self.assertEqual(
            filters,
            {
                "bool": {
                    "must": [
                        {"term": {"status": False}},
                        {"bool": {"must_not": {"term": {"status": True}}}},
                    ]
                }
            },
        )

    def test_reserved_fields_are_always_valid(self) -> None:
        group = ConditionGroup(
            members=[
                Condition("search_api_id", "entity:node/1"),
                Condition("search_api_language", ["en"], Operator.IN),
            ],
        )

        filters = compile_filters(group, _schema())

        self.assertEqual(
            filters,
            {
                "bool": {
                    "must": [
                        {"term": {"search_api_id": "entity:node/1"}},
                        {"terms": {"search_api_language": ["en"]}},
                    ]
                }
            },
        )

    def test_unknown_field_fails(self) -> None:
        group = ConditionGroup(members=[Condition("nope", "bar")])
        with self.assertRaises(InvalidFilterFieldError):
            compile_filters(group, _schema())

    def test_missing_field_fails(self) -> None:
        group = ConditionGroup(members=[Condition("", "bar")])
        with self.assertRaises(InvalidFilterFieldError):
            compile_filters(group, _schema())

    def test_missing_operator_fails(self) -> None:
        group = ConditionGroup(members=[Condition("foo", "bar", operator=None)])
        with self.assertRaises(MissingOperatorError):
            compile_filters(group, _schema())

    def test_nested_error_aborts_whole_tree(self) -> None:
        group = ConditionGroup(
            members=[
                Condition("foo", "bar"),
                ConditionGroup(members=[Condition("nope", 1)]),
            ],
        )
        with self.assertRaises(InvalidFilterFieldError):
            compile_filters(group, _schema())


class TestOperatorParsing(unittest.TestCase):
    def test_symbols_and_names_resolve(self) -> None:
        self.assertIs(Operator.parse("NOT IN"), Operator.NOT_IN)
        self.assertIs(Operator.parse("not_in"), Operator.NOT_IN)
        self.assertIs(Operator.parse("<>"), Operator.NOT_EQ)
        self.assertIs(Operator.parse("between"), Operator.BETWEEN)

    def test_condition_resolves_string_operator(self) -> None:
        self.assertIs(Condition("foo", 1, ">=").operator, Operator.GTE)

    def test_unknown_operator_fails(self) -> None:
        with self.assertRaises(UnsupportedOperatorError):
            Condition("foo", 1, "LIKE")

    def test_empty_operator_fails(self) -> None:
        with self.assertRaises(MissingOperatorError):
            Operator.parse("  ")

    def test_unknown_conjunction_fails(self) -> None:
        with self.assertRaises(InvalidConjunctionError):
            ConditionGroup(conjunction="XOR")


if __name__ == "__main__":
    unittest.main()
