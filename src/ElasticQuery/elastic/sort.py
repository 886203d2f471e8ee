"""Sort clause compiler."""

from __future__ import annotations

from typing import Any

from ElasticQuery.core.query import SearchRequest
from ElasticQuery.core.schema import KEYWORD_SUFFIX, SEARCH_API_ID, IndexSchema
from ElasticQuery.elastic.fulltext import build_search_string
from ElasticQuery.utils.log import log

SEARCH_API_RELEVANCE = "search_api_relevance"
ENGINE_ID = "_id"


def compile_sort(request: SearchRequest, schema: IndexSchema) -> list[dict[str, Any]]:
    """Translate request sorts into engine sort clauses.

    - ``search_api_relevance`` sorts on ``_score``, only when the request has
      full-text keys (there is no score otherwise).
    - ``search_api_id`` sorts on the indexed ``id`` field, ``_id`` on the
      engine document id.
    - Full-text fields sort on their non-analyzed ``.keyword`` sub-field.
    - Unknown fields are skipped with a warning.
    """
    has_keys = bool(build_search_string(request.keys, fuzziness=None))
    fulltext_fields = set(schema.fulltext_field_ids())

    sort: list[dict[str, Any]] = []
    for spec in request.sorts:
        direction = spec.direction.value
        field_id = spec.field_id

        if field_id == SEARCH_API_RELEVANCE:
            if has_keys:
                sort.append({"_score": direction})
        elif field_id == SEARCH_API_ID:
            sort.append({"id": direction})
        elif field_id == ENGINE_ID:
            sort.append({ENGINE_ID: direction})
        elif schema.get(field_id) is not None:
            if field_id in fulltext_fields:
                sort.append({field_id + KEYWORD_SUFFIX: direction})
            else:
                sort.append({field_id: direction})
        else:
            log.warning("Invalid sorting field: %s", field_id)
    return sort
