"""Output renderers for command results."""

from __future__ import annotations

from ElasticQuery.renderers.json import dump_json, render_result_set, render_wire_query

__all__ = [
    "dump_json",
    "render_result_set",
    "render_wire_query",
]
