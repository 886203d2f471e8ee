"""Field mapping compiler.

Builds the index-creation params that declare how every schema field is
stored and analyzed by the engine.

Type mapping
- text                  -> text with boost and a ``keyword`` sub-field
- string / token / uri  -> keyword
- integer / duration    -> integer
- boolean               -> boolean
- decimal               -> float
- date                  -> date (``strict_date_optional_time||epoch_second``)
- object                -> nested
- location              -> geo_point
- attachment            -> attachment
- anything else         -> {} (engine auto-detection)
"""

from __future__ import annotations

from typing import Any

from ElasticQuery.core.query import QuerySettings
from ElasticQuery.core.schema import RESERVED_FIELDS, FieldSchema, IndexSchema, SemanticType
from ElasticQuery.elastic.hooks import NO_HOOKS, CompileHooks

KEYWORD_IGNORE_ABOVE = 256
DATE_FORMAT = "strict_date_optional_time||epoch_second"


def compile_mapping(schema: IndexSchema, settings: QuerySettings, hooks: CompileHooks = NO_HOOKS) -> dict[str, Any]:
    """Build the mapping params for an index.

    Args:
        schema: Index fields; reserved fields it does not declare are added as keyword.
        settings: Per-call settings (index prefix).
        hooks: Extension points; ``field_mapping`` may replace any property.

    Returns:
        ``{"index": <target>, "body": {"properties": {...}}}``.
    """
    properties: dict[str, Any] = {
        "id": {"type": "keyword", "index": True},
    }
    fields = dict(schema.fields)
    for name in RESERVED_FIELDS:
        fields.setdefault(name, FieldSchema(id=name, semantic_type=SemanticType.STRING))
    for schema_field in fields.values():
        properties[schema_field.id] = map_field_property(schema_field, hooks)

    return {
        "index": settings.target_index(schema.id),
        "body": {"properties": properties},
    }


def map_field_property(schema_field: FieldSchema, hooks: CompileHooks = NO_HOOKS) -> dict[str, Any]:
    """Return the engine mapping of one field, after the field mapping hook."""
    return hooks.after_field_mapping(schema_field, _base_property(schema_field))


def _base_property(schema_field: FieldSchema) -> dict[str, Any]:
    semantic_type = schema_field.semantic_type
    if semantic_type is SemanticType.TEXT:
        return {
            "type": "text",
            "boost": schema_field.boost,
            "fields": {
                "keyword": {"type": "keyword", "ignore_above": KEYWORD_IGNORE_ABOVE},
            },
        }
    if semantic_type in (SemanticType.STRING, SemanticType.TOKEN, SemanticType.URI):
        return {"type": "keyword"}
    if semantic_type in (SemanticType.INTEGER, SemanticType.DURATION):
        return {"type": "integer"}
    if semantic_type is SemanticType.BOOLEAN:
        return {"type": "boolean"}
    if semantic_type is SemanticType.DECIMAL:
        return {"type": "float"}
    if semantic_type is SemanticType.DATE:
        return {"type": "date", "format": DATE_FORMAT}
    if semantic_type is SemanticType.NESTED:
        return {"type": "nested"}
    if semantic_type is SemanticType.GEO_POINT:
        return {"type": "geo_point"}
    if semantic_type is SemanticType.ATTACHMENT:
        return {"type": "attachment"}
    return {}
