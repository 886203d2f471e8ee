from __future__ import annotations

"""Public configuration API for ElasticQuery."""

from ElasticQuery.config.app import (
    AppConfig,
    load_config,
    load_config_with_defaults,
    parse_config_dict,
    parse_yaml,
)
from ElasticQuery.config.engine import EngineConfig
from ElasticQuery.config.request import parse_index_schema, parse_search_request
from ElasticQuery.config.runtime import RuntimeConfig

__all__ = [
    "RuntimeConfig",
    "EngineConfig",
    "AppConfig",
    "load_config",
    "load_config_with_defaults",
    "parse_config_dict",
    "parse_yaml",
    "parse_index_schema",
    "parse_search_request",
]
