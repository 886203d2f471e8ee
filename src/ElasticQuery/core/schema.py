"""Index field schema.

Describes the indexed fields and their semantic types. A schema is built once
per index generation and only read afterwards by the compilers.
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping

SEARCH_API_ID = "search_api_id"
SEARCH_API_DATASOURCE = "search_api_datasource"
SEARCH_API_LANGUAGE = "search_api_language"

RESERVED_FIELDS: tuple[str, ...] = (SEARCH_API_ID, SEARCH_API_DATASOURCE, SEARCH_API_LANGUAGE)

# Non-analyzed sibling of every full-text field, used for sorting.
KEYWORD_SUFFIX = ".keyword"


class SemanticType(str, Enum):
    """Semantic type of an indexed field."""

    TEXT = "text"
    STRING = "string"
    TOKEN = "token"
    URI = "uri"
    INTEGER = "integer"
    DURATION = "duration"
    BOOLEAN = "boolean"
    DECIMAL = "decimal"
    DATE = "date"
    NESTED = "object"
    GEO_POINT = "location"
    ATTACHMENT = "attachment"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str) -> SemanticType:
        """Resolve a type tag, falling back to UNKNOWN for unrecognized tags."""
        tag = value.strip().lower()
        for member in cls:
            if tag in (member.value, member.name.lower()):
                return member
        return cls.UNKNOWN


@dataclass(frozen=True, slots=True)
class FieldSchema:
    """One indexed field.

    Attributes:
        id: Field identifier, also the engine field name.
        semantic_type: Semantic type driving mapping and value coercion.
        boost: Full-text boost, only meaningful for TEXT fields.
    """

    id: str
    semantic_type: SemanticType = SemanticType.STRING
    boost: float = 1.0

    def __post_init__(self) -> None:
        if self.boost < 0:
            raise ValueError(f"Field boost must be >= 0: {self.id}")

    @property
    def is_fulltext(self) -> bool:
        return self.semantic_type is SemanticType.TEXT


@dataclass(frozen=True, slots=True)
class IndexSchema:
    """The field set of one index, keyed by field id in declaration order."""

    id: str
    fields: Mapping[str, FieldSchema] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @classmethod
    def from_fields(cls, index_id: str, fields: Iterable[FieldSchema]) -> IndexSchema:
        return cls(id=index_id, fields={f.id: f for f in fields})

    def get(self, field_id: str) -> FieldSchema | None:
        return self.fields.get(field_id)

    def fulltext_field_ids(self) -> tuple[str, ...]:
        """Return ids of all declared full-text fields, in declaration order."""
        return tuple(f.id for f in self.fields.values() if f.is_fulltext)

    def with_reserved_fields(self) -> IndexSchema:
        """Return a schema where the reserved fields resolve as plain strings.

        Reserved fields are never declared by callers but are always present
        in the engine documents, so filters may reference them.
        """
        fields = dict(self.fields)
        for name in RESERVED_FIELDS:
            fields.setdefault(name, FieldSchema(id=name, semantic_type=SemanticType.STRING))
        return IndexSchema(id=self.id, fields=fields)
