from __future__ import annotations

"""Validation helpers shared by the config loader and the request-file parser.

Every helper takes the dotted key path of the value it checks (for example
``request.conditions.members[2].operator``) so errors point at the offending
entry of the source document.
"""

from typing import Any, Mapping


def _require(ok: bool, config_key: str, expected: str) -> None:
    if not ok:
        raise TypeError(f"{config_key} must be {expected}")


def get_section(raw: Mapping[str, Any], key: str, *, required: bool) -> Mapping[str, Any]:
    """Return the top-level section ``key`` of a document.

    An absent (or null) optional section reads as an empty mapping.

    Raises:
        ValueError: If a required section is absent.
        TypeError: If the section is not a mapping.
    """
    section = raw.get(key)
    if section is None:
        if required:
            raise ValueError(f"Missing required config: {key}")
        return {}
    _require(isinstance(section, Mapping), key, "an object")
    return section


def get_required_value(section: Mapping[str, Any], field: str, config_key: str) -> Any:
    """Return ``section[field]``, failing with the full key path when absent."""
    if field not in section:
        raise ValueError(f"Missing required config: {config_key}")
    return section[field]


def expect_mapping(value: Any, config_key: str) -> Mapping[str, Any]:
    _require(isinstance(value, Mapping), config_key, "an object")
    return value


def expect_list(value: Any, config_key: str) -> list[Any]:
    _require(isinstance(value, list), config_key, "a list")
    return value


def expect_str(value: Any, config_key: str) -> str:
    _require(isinstance(value, str), config_key, "a string")
    return value


def expect_bool(value: Any, config_key: str) -> bool:
    _require(isinstance(value, bool), config_key, "a boolean")
    return value


def expect_non_negative_int(value: Any, config_key: str) -> int:
    """Return an integer >= 0; booleans are rejected even though they are ints."""
    _require(isinstance(value, int) and not isinstance(value, bool), config_key, "an integer")
    if value < 0:
        raise ValueError(f"{config_key} must be >= 0")
    return value


def expect_float(value: Any, config_key: str) -> float:
    """Return any int or float as a float (booleans rejected)."""
    _require(isinstance(value, (int, float)) and not isinstance(value, bool), config_key, "a number")
    return float(value)


def expect_str_list(value: Any, config_key: str) -> list[str]:
    """Return a list of strings; a bare string counts as a one-item list."""
    if isinstance(value, str):
        return [value]
    return [expect_str(item, f"{config_key}[{idx}]") for idx, item in enumerate(expect_list(value, config_key))]
