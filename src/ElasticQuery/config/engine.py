"""Engine domain configuration (index naming and query behavior)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ElasticQuery.config.common import (
    expect_bool,
    expect_str,
    expect_str_list,
    get_section,
)
from ElasticQuery.core.query import QuerySettings

FUZZINESS_AUTO = "auto"
FUZZINESS_DISABLED = "0"
_ALLOWED_FUZZINESS = {FUZZINESS_DISABLED, FUZZINESS_AUTO, "1", "2", "3", "4", "5"}


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Store validated engine settings.

    Attributes:
        index_prefix: Prefix of every target index name.
        fuzziness: Fuzzy-match level; "0" disables fuzzy matching.
        track_total_hits: Ask the engine for exact hit counts.
        exclude_source_fields: Default source exclusions for requests.
    """

    index_prefix: str = ""
    fuzziness: str = FUZZINESS_AUTO
    track_total_hits: bool = True
    exclude_source_fields: tuple[str, ...] = ()

    def query_settings(self) -> QuerySettings:
        """Return the per-call compiler settings for this engine."""
        return QuerySettings(fuzziness=self.fuzziness, index_prefix=self.index_prefix)


def load_engine(raw: Mapping[str, Any]) -> EngineConfig:
    """Load the ``engine`` section; missing keys keep their defaults.

    Raises:
        TypeError: If config types are invalid.
    """
    section = get_section(raw, "engine", required=False)
    defaults = EngineConfig()

    fuzziness = section.get("fuzziness", defaults.fuzziness)
    if fuzziness is None or fuzziness is False:
        fuzziness = FUZZINESS_DISABLED
    elif isinstance(fuzziness, int) and not isinstance(fuzziness, bool):
        fuzziness = str(fuzziness)

    return EngineConfig(
        index_prefix=expect_str(section.get("index_prefix", defaults.index_prefix) or "", "engine.index_prefix"),
        fuzziness=expect_str(fuzziness, "engine.fuzziness").strip().lower(),
        track_total_hits=expect_bool(
            section.get("track_total_hits", defaults.track_total_hits),
            "engine.track_total_hits",
        ),
        exclude_source_fields=tuple(
            expect_str_list(section.get("exclude_source_fields", []), "engine.exclude_source_fields")
        ),
    )


def check_engine(config: EngineConfig) -> None:
    """Validate engine domain constraints.

    Raises:
        ValueError: If values violate engine constraints.
    """
    if config.fuzziness not in _ALLOWED_FUZZINESS:
        raise ValueError(f"engine.fuzziness must be one of {sorted(_ALLOWED_FUZZINESS)}")
    if any(not name.strip() for name in config.exclude_source_fields):
        raise ValueError("engine.exclude_source_fields must not contain empty names")
