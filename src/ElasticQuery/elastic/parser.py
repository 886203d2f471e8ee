"""Elasticsearch search response parser.

Parses the decoded JSON of a ``_search`` response into a `ResultSet`.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from ElasticQuery.core.errors import ResponseParseError
from ElasticQuery.core.models import ResultItem, ResultSet
from ElasticQuery.core.query import FacetSpec
from ElasticQuery.core.schema import SEARCH_API_DATASOURCE
from ElasticQuery.elastic.facets import parse_facets


def parse_result(response: Mapping[str, Any], facets: Sequence[FacetSpec] = ()) -> ResultSet:
    """Parse a search response.

    Args:
        response: Decoded engine response.
        facets: Facets the query was compiled with; their buckets are read
            when the response has aggregations.

    Returns:
        Result set with hits in engine order. Every source value is a list.

    Raises:
        ResponseParseError: If ``hits`` or a hit is malformed.
    """
    hits = response.get("hits")
    if not isinstance(hits, Mapping):
        raise ResponseParseError("Response has no hits section")

    raw_hits = hits.get("hits") or []
    if not isinstance(raw_hits, list):
        raise ResponseParseError("Response hits.hits must be a list")
    items = [_parse_hit(hit, idx) for idx, hit in enumerate(raw_hits)]

    extra: dict[str, Any] = {"elasticsearch_response": response}
    facet_data = {}
    aggregations = response.get("aggregations")
    if isinstance(aggregations, Mapping) and aggregations:
        facet_data = parse_facets(facets, aggregations)
        extra["search_api_facets"] = facet_data

    return ResultSet(
        total=_parse_total(hits.get("total"), default=len(items)),
        items=items,
        facets=facet_data,
        extra=extra,
    )


def _parse_hit(hit: Any, idx: int) -> ResultItem:
    if not isinstance(hit, Mapping) or "_id" not in hit:
        raise ResponseParseError(f"Response hit {idx} has no _id")

    source = hit.get("_source") or {}
    if not isinstance(source, Mapping):
        raise ResponseParseError(f"Response hit {idx} _source must be an object")

    # Every field is multi-valued at this layer.
    fields = {
        field_id: list(values) if isinstance(values, list) else [values]
        for field_id, values in source.items()
    }

    datasources = fields.get(SEARCH_API_DATASOURCE)
    score = hit.get("_score")
    return ResultItem(
        id=str(hit["_id"]),
        score=float(score) if score is not None else None,
        datasource_id=str(datasources[0]) if datasources else None,
        fields=fields,
    )


def _parse_total(total: Any, *, default: int) -> int:
    """Read ``hits.total`` as an object (``{"value": n}``) or a bare integer."""
    if isinstance(total, Mapping):
        total = total.get("value")
    if isinstance(total, bool) or not isinstance(total, int):
        return default
    return total
