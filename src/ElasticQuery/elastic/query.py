"""Search request orchestrator.

Composes the sort, filter, full-text, more-like-this and facet compilers into
the body sent to the Elasticsearch ``_search`` endpoint.

Query combination
- keys and filters -> ``bool.must`` = full-text, ``bool.filter`` = filters
- keys only        -> the full-text clause itself
- filters only     -> ``bool.filter`` = filters
- neither          -> ``match_all``
"""

from __future__ import annotations

from typing import Any, Sequence

from ElasticQuery.core.models import WireQuery
from ElasticQuery.core.query import (
    Condition,
    ConditionGroup,
    Conjunction,
    Operator,
    QuerySettings,
    SearchRequest,
)
from ElasticQuery.core.schema import SEARCH_API_LANGUAGE, IndexSchema
from ElasticQuery.elastic.facets import compile_facets
from ElasticQuery.elastic.filters import compile_filters
from ElasticQuery.elastic.fulltext import compile_fulltext
from ElasticQuery.elastic.hooks import NO_HOOKS, CompileHooks
from ElasticQuery.elastic.mlt import compile_more_like_this
from ElasticQuery.elastic.sort import compile_sort
from ElasticQuery.utils.log import log

Clause = dict[str, Any]


def compile_query(
    request: SearchRequest,
    schema: IndexSchema,
    settings: QuerySettings,
    hooks: CompileHooks = NO_HOOKS,
) -> WireQuery:
    """Compile a search request into a wire query.

    Args:
        request: Engine-agnostic search request.
        schema: Fields of the searched index.
        settings: Per-call settings (fuzziness, index prefix).
        hooks: Extension points run after the filter, full-text and final
            composition stages.

    Returns:
        The wire query returned by the ``query`` hook (the composed query when
        no hook is set).

    Raises:
        CompileError: If the condition tree cannot be compiled.
    """
    query_schema = schema.with_reserved_fields()
    body: dict[str, Any] = {
        "from": request.offset,
        "size": request.limit,
    }

    sort = compile_sort(request, schema)
    if sort:
        body["sort"] = sort

    conditions = request.conditions
    if request.languages is not None:
        conditions = add_language_filter(conditions, request.languages)

    filters = hooks.after_filters(compile_filters(conditions, query_schema))
    fulltext = compile_fulltext(request, schema, settings)
    if fulltext is not None:
        fulltext = hooks.after_fulltext(fulltext)

    body["query"] = combine_query(fulltext, filters)

    if request.exclude_source_fields:
        body["_source"] = {"excludes": list(request.exclude_source_fields)}

    if request.more_like_this is not None:
        body["query"] = add_must_clause(body["query"], compile_more_like_this(request.more_like_this))

    if request.facets:
        aggs = compile_facets(request.facets, query_schema)
        if aggs:
            body["aggs"] = aggs

    wire = WireQuery(index=settings.target_index(schema.id), body=body)
    log.debug("Compiled query for %s: %s", wire.index, body)
    return hooks.after_query(wire)


def combine_query(fulltext: Clause | None, filters: Clause | None) -> Clause:
    """Combine the full-text clause and the filter clause into one query."""
    if fulltext and filters:
        return {"bool": {"must": fulltext, "filter": filters}}
    if fulltext:
        return fulltext
    if filters:
        return {"bool": {"filter": filters}}
    return {"match_all": {}}


def add_language_filter(group: ConditionGroup, languages: Sequence[str]) -> ConditionGroup:
    """Return a condition tree that also restricts ``search_api_language``.

    The language condition is appended to a plain AND root group; any other
    root is nested under a new AND group so the restriction always applies.
    """
    condition = Condition(field_id=SEARCH_API_LANGUAGE, value=list(languages), operator=Operator.IN)
    if group.conjunction is Conjunction.AND and not group.negated:
        return group.with_member(condition)
    return ConditionGroup(conjunction=Conjunction.AND, members=(group, condition))


def add_must_clause(query: Clause, clause: Clause) -> Clause:
    """Append a clause to the ``bool.must`` list of a query, creating it if absent."""
    if set(query) == {"bool"}:
        bool_query = dict(query["bool"])
        must = bool_query.get("must")
        if must is None:
            bool_query["must"] = [clause]
        elif isinstance(must, list):
            bool_query["must"] = [*must, clause]
        else:
            bool_query["must"] = [must, clause]
        return {"bool": bool_query}
    if set(query) == {"match_all"}:
        return {"bool": {"must": [clause]}}
    return {"bool": {"must": [query, clause]}}
