"""Tests for facet aggregation compilation and facet result parsing."""

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from ElasticQuery.core.models import FacetBucket
from ElasticQuery.core.query import FacetOperator, FacetSpec
from ElasticQuery.core.schema import FieldSchema, IndexSchema
from ElasticQuery.elastic.facets import compile_facets, parse_facets


def _schema() -> IndexSchema:
    return IndexSchema.from_fields("content", [FieldSchema("type"), FieldSchema("tags")])


class TestCompileFacets(unittest.TestCase):
    def test_and_facet_is_plain_terms_agg(self) -> None:
        aggs = compile_facets([FacetSpec("type", "type", FacetOperator.AND, limit=5)], _schema())
        self.assertEqual(aggs, {"type": {"terms": {"field": "type", "size": 5}}})

    def test_or_facet_is_nested_under_global(self) -> None:
        aggs = compile_facets([FacetSpec("tags", "tags", "or")], _schema())
        self.assertEqual(
            aggs,
            {
                "tags_global": {
                    "global": {},
                    "aggs": {"tags": {"terms": {"field": "tags", "size": 10}}},
                }
            },
        )

    def test_zero_limit_omits_size(self) -> None:
        aggs = compile_facets([FacetSpec("type", "type", limit=0)], _schema())
        self.assertEqual(aggs, {"type": {"terms": {"field": "type"}}})

    def test_unknown_field_is_skipped_with_warning(self) -> None:
        with self.assertLogs("ElasticQuery", level="WARNING") as captured:
            aggs = compile_facets(
                [FacetSpec("missing", "nope"), FacetSpec("type", "type")],
                _schema(),
            )

        self.assertEqual(list(aggs), ["type"])
        self.assertIn("nope", captured.output[0])


class TestParseFacets(unittest.TestCase):
    def test_and_facet_buckets(self) -> None:
        aggregations = {
            "type": {"buckets": [{"key": "article", "doc_count": 3}, {"key": "page", "doc_count": 1}]},
        }

        facets = parse_facets([FacetSpec("type", "type")], aggregations)

        self.assertEqual(
            facets,
            {"type": [FacetBucket(count=3, filter_value='"article"'), FacetBucket(count=1, filter_value='"page"')]},
        )

    def test_buckets_without_key_are_skipped(self) -> None:
        aggregations = {"type": {"buckets": [{"doc_count": 2}, {"key": "page", "doc_count": 1}]}}

        with self.assertLogs("ElasticQuery", level="WARNING") as captured:
            facets = parse_facets([FacetSpec("type", "type")], aggregations)

        self.assertEqual(facets, {"type": [FacetBucket(count=1, filter_value='"page"')]})
        self.assertIn("without key", captured.output[0])

    def test_or_facet_round_trip(self) -> None:
        spec = FacetSpec("tags", "tags", FacetOperator.OR)
        aggs = compile_facets([spec], _schema())
        self.assertIn("tags_global", aggs)

        buckets = [{"key": "red", "doc_count": 7}, {"key": "blue", "doc_count": 2}]
        aggregations = {"tags_global": {"doc_count": 9, "tags": {"buckets": buckets}}}

        facets = parse_facets([spec], aggregations)

        self.assertEqual(
            [(bucket.count, bucket.filter_value) for bucket in facets["tags"]],
            [(7, '"red"'), (2, '"blue"')],
        )

    def test_missing_global_aggregation_is_skipped(self) -> None:
        with self.assertLogs("ElasticQuery", level="WARNING"):
            facets = parse_facets([FacetSpec("tags", "tags", FacetOperator.OR)], {"tags": {"buckets": []}})
        self.assertEqual(facets, {})

    def test_missing_and_aggregation_is_skipped(self) -> None:
        with self.assertLogs("ElasticQuery", level="WARNING"):
            facets = parse_facets(
                [FacetSpec("type", "type"), FacetSpec("tags", "tags")],
                {"tags": {"buckets": [{"key": "x", "doc_count": 1}]}},
            )
        self.assertEqual(list(facets), ["tags"])

    def test_invalid_operator_is_skipped(self) -> None:
        spec = FacetSpec("type", "type", operator="xor")
        self.assertEqual(spec.operator, "xor")

        with self.assertLogs("ElasticQuery", level="WARNING") as captured:
            facets = parse_facets([spec], {"type": {"buckets": []}})

        self.assertEqual(facets, {})
        self.assertIn("xor", captured.output[0])

    def test_numeric_keys_are_quoted(self) -> None:
        facets = parse_facets([FacetSpec("year", "year")], {"year": {"buckets": [{"key": 2024, "doc_count": 4}]}})
        self.assertEqual(facets["year"], [FacetBucket(count=4, filter_value='"2024"')])


if __name__ == "__main__":
    unittest.main()
