"""Command implementations for ElasticQuery CLI.

Encapsulates the work of each command, separated from CLI parameter handling
and logging setup. Every command returns the JSON text to print.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ElasticQuery.config import AppConfig, parse_index_schema, parse_search_request, parse_yaml
from ElasticQuery.elastic.mapping import compile_mapping
from ElasticQuery.elastic.parser import parse_result
from ElasticQuery.elastic.query import compile_query
from ElasticQuery.renderers import dump_json, render_result_set, render_wire_query
from ElasticQuery.services.search import apply_default_exclusions
from ElasticQuery.utils.log import log


def load_document(path: Path) -> dict[str, Any]:
    """Load a YAML or JSON document with a mapping root."""
    return parse_yaml(path.read_text(encoding="utf-8"))


@dataclass(slots=True)
class CompileCommand:
    """Compile a request file against a schema file into a wire query."""

    config: AppConfig
    request_path: Path
    schema_path: Path

    def execute(self) -> str:
        schema = parse_index_schema(load_document(self.schema_path))
        request = parse_search_request(load_document(self.request_path))
        log.debug("Compiling request %s against index %s", self.request_path, schema.id)

        engine = self.config.engine
        request = apply_default_exclusions(request, engine.exclude_source_fields)
        wire = compile_query(request, schema, engine.query_settings())
        log.info("Compiled query for index %s", wire.index)
        return dump_json(render_wire_query(wire))


@dataclass(slots=True)
class ParseCommand:
    """Parse a saved engine response for the facets of a request file."""

    config: AppConfig
    request_path: Path
    response_path: Path

    def execute(self) -> str:
        request = parse_search_request(load_document(self.request_path))
        response = load_document(self.response_path)

        result = parse_result(response, request.facets)
        log.info("Parsed %d of %d hits, %d facets", len(result.items), result.total, len(result.facets))
        return dump_json(render_result_set(result))


@dataclass(slots=True)
class MappingCommand:
    """Build index mapping params from a schema file."""

    config: AppConfig
    schema_path: Path

    def execute(self) -> str:
        schema = parse_index_schema(load_document(self.schema_path))
        params = compile_mapping(schema, self.config.engine.query_settings())
        log.info("Mapped %d fields for index %s", len(params["body"]["properties"]), params["index"])
        return dump_json(params)
