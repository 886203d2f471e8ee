"""Tests for the search response parser."""

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from ElasticQuery.core.errors import ResponseParseError
from ElasticQuery.core.models import FacetBucket
from ElasticQuery.core.query import FacetSpec
from ElasticQuery.elastic.parser import parse_result


def _response(**overrides):
    response = {
        "took": 3,
        "hits": {
            "total": {"value": 2, "relation": "eq"},
            "max_score": 1.5,
            "hits": [
                {
                    "_id": "entity:node/1:en",
                    "_score": 1.5,
                    "_source": {
                        "title": "First",
                        "tags": ["a", "b"],
                        "search_api_datasource": "entity:node",
                    },
                },
                {"_id": "entity:node/2:en", "_score": 0.5, "_source": {"title": ["Second"]}},
            ],
        },
    }
    response.update(overrides)
    return response


class TestParseResult(unittest.TestCase):
    def test_hits_in_engine_order(self) -> None:
        result = parse_result(_response())

        self.assertEqual(result.total, 2)
        self.assertEqual([item.id for item in result.items], ["entity:node/1:en", "entity:node/2:en"])
        self.assertEqual([item.score for item in result.items], [1.5, 0.5])

    def test_source_values_are_lists(self) -> None:
        first, second = parse_result(_response()).items

        self.assertEqual(first.fields["title"], ["First"])
        self.assertEqual(first.fields["tags"], ["a", "b"])
        self.assertEqual(second.fields["title"], ["Second"])

    def test_datasource_is_read_from_source(self) -> None:
        first, second = parse_result(_response()).items

        self.assertEqual(first.datasource_id, "entity:node")
        self.assertIsNone(second.datasource_id)

    def test_raw_response_is_kept(self) -> None:
        response = _response()
        result = parse_result(response)

        self.assertIs(result.extra["elasticsearch_response"], response)
        self.assertNotIn("search_api_facets", result.extra)
        self.assertEqual(dict(result.facets), {})

    def test_bare_integer_total(self) -> None:
        response = _response()
        response["hits"]["total"] = 42
        self.assertEqual(parse_result(response).total, 42)

    def test_missing_total_falls_back_to_hit_count(self) -> None:
        response = _response()
        del response["hits"]["total"]
        self.assertEqual(parse_result(response).total, 2)

    def test_empty_hits(self) -> None:
        result = parse_result({"hits": {"total": {"value": 0}, "hits": []}})
        self.assertEqual(result.total, 0)
        self.assertEqual(result.items, ())

    def test_hit_without_score(self) -> None:
        result = parse_result({"hits": {"hits": [{"_id": "x", "_score": None, "_source": {}}]}})
        self.assertIsNone(result.items[0].score)
        self.assertEqual(dict(result.items[0].fields), {})

    def test_facets_are_parsed(self) -> None:
        response = _response(
            aggregations={"types": {"buckets": [{"key": "page", "doc_count": 4}]}},
        )

        result = parse_result(response, [FacetSpec("types", "type")])

        self.assertEqual(result.facets["types"], [FacetBucket(count=4, filter_value='"page"')])
        self.assertEqual(result.extra["search_api_facets"], {"types": [FacetBucket(4, '"page"')]})

    def test_malformed_responses(self) -> None:
        cases = [
            {},
            {"hits": []},
            {"hits": {"hits": {"_id": "x"}}},
            {"hits": {"hits": [{"_source": {}}]}},
            {"hits": {"hits": [{"_id": "x", "_source": ["a"]}]}},
        ]
        for response in cases:
            with self.subTest(response=response):
                with self.assertRaises(ResponseParseError):
                    parse_result(response)


if __name__ == "__main__":
    unittest.main()
