"""JSON output renderers.

Renders wire queries and result sets into JSON-serializable objects for the
command-line tool and for callers that log or persist them.
"""

from __future__ import annotations

import json
from typing import Any

from ElasticQuery.core.models import ResultSet, WireQuery


def render_wire_query(wire: WireQuery) -> dict[str, Any]:
    """Render a wire query as ``{"index": ..., "body": ...}``."""
    return wire.as_params()


def render_result_set(result: ResultSet) -> dict[str, Any]:
    """Render a result set into plain dicts and lists.

    The raw engine response kept in ``extra`` is left out.
    """
    return {
        "total": result.total,
        "items": [
            {
                "id": item.id,
                "score": item.score,
                "datasource_id": item.datasource_id,
                "fields": {field_id: list(values) for field_id, values in item.fields.items()},
            }
            for item in result.items
        ],
        "facets": {
            facet_id: [{"count": bucket.count, "filter": bucket.filter_value} for bucket in buckets]
            for facet_id, buckets in result.facets.items()
        },
    }


def dump_json(data: Any) -> str:
    """Serialize rendered data with stable, human-readable formatting."""
    return json.dumps(data, ensure_ascii=False, indent=2, default=str)
