"""Search service layer.

Runs a search end to end: compile the request, hand the params to an
execution collaborator, and parse the decoded response.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Mapping, Protocol

from ElasticQuery.core.errors import SearchExecutionError
from ElasticQuery.core.models import ResultSet, WireQuery
from ElasticQuery.core.query import QuerySettings, SearchRequest
from ElasticQuery.core.schema import IndexSchema
from ElasticQuery.elastic.hooks import NO_HOOKS, CompileHooks
from ElasticQuery.elastic.mapping import compile_mapping
from ElasticQuery.elastic.parser import parse_result
from ElasticQuery.elastic.query import compile_query
from ElasticQuery.utils.log import log


class QueryExecutor(Protocol):
    """Protocol for the transport that runs compiled queries.

    Implementations wrap an engine client; connectivity, retries and timeouts
    are their concern.
    """

    def search(self, params: Mapping[str, Any]) -> Mapping[str, Any]:
        """Execute ``_search`` params and return the decoded response."""
        raise NotImplementedError


@dataclass(slots=True)
class SearchService:
    """Application service that searches one engine through an executor."""

    executor: QueryExecutor
    settings: QuerySettings = QuerySettings()
    hooks: CompileHooks = NO_HOOKS
    track_total_hits: bool = True
    exclude_source_fields: tuple[str, ...] = ()

    def compile(self, request: SearchRequest, schema: IndexSchema) -> WireQuery:
        """Compile a request without executing it.

        Configured source exclusions apply when the request has none.
        """
        request = apply_default_exclusions(request, self.exclude_source_fields)
        return compile_query(request, schema, self.settings, self.hooks)

    def search(self, request: SearchRequest, schema: IndexSchema) -> ResultSet:
        """Compile, execute and parse a search.

        Args:
            request: Engine-agnostic search request.
            schema: Fields of the searched index.

        Returns:
            Parsed result set.

        Raises:
            CompileError: If the request cannot be compiled.
            SearchExecutionError: If the executor fails.
            ResponseParseError: If the response is malformed.
        """
        wire = self.compile(request, schema)
        params = wire.as_params()
        if self.track_total_hits:
            params["track_total_hits"] = True

        try:
            response = self.executor.search(params)
        except Exception as error:  # noqa: BLE001 - executor failures are opaque
            log.warning("Search execution failed: index=%s error=%s", wire.index, error)
            raise SearchExecutionError(f"Error querying index {wire.index}") from error

        result = parse_result(response, request.facets)
        log.info("Search completed: index=%s total=%d returned=%d", wire.index, result.total, len(result.items))
        return result

    def mapping_params(self, schema: IndexSchema) -> dict[str, Any]:
        """Return the index-creation mapping params for a schema."""
        return compile_mapping(schema, self.settings, self.hooks)


def apply_default_exclusions(request: SearchRequest, exclude_source_fields: tuple[str, ...]) -> SearchRequest:
    """Return the request with configured source exclusions when it sets none of its own."""
    if exclude_source_fields and not request.exclude_source_fields:
        return replace(request, exclude_source_fields=exclude_source_fields)
    return request
