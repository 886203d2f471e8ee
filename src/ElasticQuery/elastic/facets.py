"""Facet aggregation compiler and facet result parser.

AND facets are plain terms aggregations and therefore scoped by the active
query filters. OR facets are nested under a ``global`` aggregation named
``<facet_id>_global`` so their counts ignore the query filters and every
option of the facet stays visible.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from ElasticQuery.core.models import FacetBucket
from ElasticQuery.core.query import FacetOperator, FacetSpec
from ElasticQuery.core.schema import IndexSchema
from ElasticQuery.utils.log import log

Clause = dict[str, Any]

GLOBAL_SUFFIX = "_global"


def compile_facets(facets: Sequence[FacetSpec], schema: IndexSchema) -> Clause:
    """Build the ``aggs`` section for the requested facets.

    Facets on fields unknown to the index are skipped with a warning.

    Args:
        facets: Requested facets.
        schema: Index fields.

    Returns:
        Aggregations keyed by facet id (or ``<facet_id>_global`` for OR facets).
    """
    aggs: Clause = {}
    for facet in facets:
        if schema.get(facet.field_id) is None:
            log.warning("Unknown facet field: %s (facet=%s)", facet.field_id, facet.id)
            continue
        aggs.update(_build_term_bucket_agg(facet))
    return aggs


def _build_term_bucket_agg(facet: FacetSpec) -> Clause:
    terms: Clause = {"field": facet.field_id}
    if facet.limit > 0:
        terms["size"] = facet.limit
    agg: Clause = {facet.id: {"terms": terms}}

    if facet.operator is FacetOperator.OR:
        agg = {facet.id + GLOBAL_SUFFIX: {"global": {}, "aggs": agg}}
    return agg


def parse_facets(facets: Sequence[FacetSpec], aggregations: Mapping[str, Any]) -> dict[str, list[FacetBucket]]:
    """Read facet buckets back from a response ``aggregations`` section.

    Facets whose aggregation is missing, or whose operator is neither ``and``
    nor ``or``, are skipped with a warning, as are buckets without a key.

    Args:
        facets: The facets the query was compiled with.
        aggregations: The ``aggregations`` mapping of the engine response.

    Returns:
        Facet buckets keyed by facet id.
    """
    facet_data: dict[str, list[FacetBucket]] = {}
    for facet in facets:
        if facet.operator is FacetOperator.AND:
            agg = aggregations.get(facet.id)
        elif facet.operator is FacetOperator.OR:
            agg = _get_mapping(aggregations.get(facet.id + GLOBAL_SUFFIX), facet.id)
        else:
            log.warning("Invalid facet operator: %s (facet=%s)", facet.operator, facet.id)
            continue

        buckets = agg.get("buckets") if isinstance(agg, Mapping) else None
        if not isinstance(buckets, list):
            log.warning("Missing aggregation for facet %s (operator=%s)", facet.id, facet.operator.value)
            continue
        facet_data[facet.id] = [_parse_bucket(bucket) for bucket in buckets if _has_key(bucket, facet.id)]
    return facet_data


def _parse_bucket(bucket: Mapping[str, Any]) -> FacetBucket:
    return FacetBucket(count=int(bucket.get("doc_count", 0)), filter_value=f'"{bucket.get("key")}"')


def _get_mapping(value: Any, key: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(key)
    return None


def _has_key(bucket: Any, facet_id: str) -> bool:
    if isinstance(bucket, Mapping) and bucket.get("key") is not None:
        return True
    log.warning("Skipping facet bucket without key (facet=%s)", facet_id)
    return False
