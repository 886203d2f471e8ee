from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence


@dataclass(frozen=True, slots=True)
class WireQuery:
    """Engine-native search request ready for execution.

    Attributes:
        index: Target index name (prefix already applied).
        body: Request body (``from``, ``size``, ``sort``, ``query``, ``aggs``,
            ``_source``) in the engine's JSON-like shape.
    """

    index: str
    body: Mapping[str, Any]

    def as_params(self) -> dict[str, Any]:
        """Return the ``{"index": ..., "body": ...}`` params taken by engine clients."""
        return {"index": self.index, "body": self.body}


@dataclass(frozen=True, slots=True)
class FacetBucket:
    """One facet value with its document count.

    ``filter_value`` is the bucket key wrapped in double quotes, the form
    facet widgets feed back into filters.
    """

    count: int
    filter_value: str


@dataclass(frozen=True, slots=True)
class ResultItem:
    """A single search hit.

    Attributes:
        id: Engine document id.
        score: Relevance score; None when the engine did not score the hit.
        datasource_id: Datasource the item was indexed from, if known.
        fields: Source field values; every field is multi-valued.
    """

    id: str
    score: Optional[float]
    datasource_id: Optional[str] = None
    fields: Mapping[str, Sequence[Any]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))


@dataclass(frozen=True, slots=True)
class ResultSet:
    """Parsed search response.

    Attributes:
        total: Total number of matching documents.
        items: Hits in engine order.
        facets: Facet buckets keyed by facet id.
        extra: Raw data kept for callers (engine response, facet data).
    """

    total: int
    items: Sequence[ResultItem] = ()
    facets: Mapping[str, Sequence[FacetBucket]] = field(default_factory=dict)
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))
        object.__setattr__(self, "facets", MappingProxyType(dict(self.facets)))
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))
