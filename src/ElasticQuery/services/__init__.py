"""Search service layer for ElasticQuery.

Provides the search service, the executor protocol it depends on, and a
factory wiring both from configuration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ElasticQuery.elastic.hooks import NO_HOOKS, CompileHooks
from ElasticQuery.services.search import QueryExecutor, SearchService

if TYPE_CHECKING:
    from ElasticQuery.config import AppConfig


def create_search_service(
    config: AppConfig,
    executor: QueryExecutor,
    hooks: CompileHooks = NO_HOOKS,
) -> SearchService:
    """Create a search service from configuration.

    Args:
        config: Application configuration holding engine settings.
        executor: Transport that runs compiled queries.
        hooks: Optional compile extension points.

    Returns:
        Configured SearchService instance.
    """
    return SearchService(
        executor=executor,
        settings=config.engine.query_settings(),
        hooks=hooks,
        track_total_hits=config.engine.track_total_hits,
        exclude_source_fields=config.engine.exclude_source_fields,
    )


__all__ = [
    "QueryExecutor",
    "SearchService",
    "create_search_service",
]
