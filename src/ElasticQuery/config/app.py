from __future__ import annotations

"""Root configuration: section assembly and YAML file layering."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from ElasticQuery.config.engine import EngineConfig, check_engine, load_engine
from ElasticQuery.config.runtime import RuntimeConfig, check_runtime, load_runtime

DEFAULT_CONFIG_PATH = Path("config/default.yml")


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Validated configuration of every section.

    Attributes:
        runtime: ``log`` section.
        engine: ``engine`` section.
    """

    runtime: RuntimeConfig
    engine: EngineConfig


def parse_config_dict(raw: Mapping[str, Any]) -> AppConfig:
    """Load and check every section of an already-merged config mapping.

    Raises:
        TypeError: If a value has the wrong type.
        ValueError: If a value is out of range.
    """
    config = AppConfig(runtime=load_runtime(raw), engine=load_engine(raw))
    check_runtime(config.runtime)
    check_engine(config.engine)
    return config


def load_config(path: Path) -> AppConfig:
    """Load a single config file, with no defaults layered underneath."""
    return load_config_with_defaults(path, default_path=path)


def load_config_with_defaults(config_path: Path, default_path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    """Layer ``config_path`` over ``default_path`` and parse the result.

    Every section has built-in defaults, so a missing defaults file reads as
    an empty document. A missing ``config_path`` is an error unless it is the
    defaults file itself.
    """
    base = _read_yaml_file(default_path) if default_path.exists() else {}
    if config_path == default_path:
        return parse_config_dict(base)
    return parse_config_dict(merge_config_dicts(base, _read_yaml_file(config_path)))


def parse_yaml(text: str) -> dict[str, Any]:
    """Parse a YAML (or JSON) document whose root must be a mapping.

    Raises:
        ValueError: If the root is a list or a scalar.
    """
    data = yaml.safe_load(text)
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError("Document root must be a mapping/object")
    return dict(data)


def merge_config_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` updated by ``override``; nested mappings merge key by key."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        both_mappings = isinstance(current, Mapping) and isinstance(value, Mapping)
        merged[key] = merge_config_dicts(current, value) if both_mappings else value
    return merged


def _read_yaml_file(path: Path) -> dict[str, Any]:
    return parse_yaml(path.read_text(encoding="utf-8"))
