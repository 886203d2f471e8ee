"""Search request and index schema parsing from plain mappings.

Request files (YAML or JSON) look like::

    conditions:
      conjunction: AND
      members:
        - {field: status, value: true}
        - conjunction: OR
          members:
            - {field: created, operator: ">=", value: 1700000000}
            - {field: type, operator: IN, value: [article, page]}
    keys:
      conjunction: AND
      keys: [foo, {negated: true, keys: [bar]}]
    sort: [{field: search_api_relevance, direction: desc}]
    facets: [{id: type, field: type, operator: or, limit: 5}]
    more_like_this: {id: "entity:node/1", fields: [title]}
    offset: 0
    limit: 10

Schema files map field ids to a type tag or to ``{type, boost}``::

    id: content
    fields:
      title: {type: text, boost: 2}
      status: boolean
"""

from __future__ import annotations

from typing import Any, Mapping

from ElasticQuery.config.common import (
    expect_bool,
    expect_float,
    expect_list,
    expect_mapping,
    expect_non_negative_int,
    expect_str,
    expect_str_list,
    get_required_value,
)
from ElasticQuery.core.query import (
    Condition,
    ConditionGroup,
    Conjunction,
    FacetSpec,
    FullTextGroup,
    FullTextNode,
    MoreLikeThisSpec,
    SearchRequest,
    SortSpec,
)
from ElasticQuery.core.schema import FieldSchema, IndexSchema, SemanticType
from ElasticQuery.elastic.mlt import more_like_this_from_options

_DEFAULT_OPERATOR = "="


def parse_index_schema(value: Any, config_key: str = "schema") -> IndexSchema:
    """Parse an index schema mapping.

    Raises:
        TypeError: If the schema shape/types are invalid.
        ValueError: If required keys are missing.
    """
    raw = expect_mapping(value, config_key)
    index_id = expect_str(get_required_value(raw, "id", f"{config_key}.id"), f"{config_key}.id").strip()
    if not index_id:
        raise ValueError(f"{config_key}.id must not be empty")

    raw_fields = expect_mapping(raw.get("fields", {}), f"{config_key}.fields")
    fields: list[FieldSchema] = []
    for field_id, field_value in raw_fields.items():
        key = f"{config_key}.fields.{field_id}"
        if isinstance(field_value, str):
            field_value = {"type": field_value}
        spec = expect_mapping(field_value, key)
        fields.append(
            FieldSchema(
                id=expect_str(field_id, key),
                semantic_type=SemanticType.parse(expect_str(spec.get("type", "string"), f"{key}.type")),
                boost=expect_float(spec.get("boost", 1.0), f"{key}.boost"),
            )
        )
    return IndexSchema.from_fields(index_id, fields)


def parse_search_request(value: Any, config_key: str = "request") -> SearchRequest:
    """Parse a search request mapping.

    Raises:
        TypeError: If the request shape/types are invalid.
        ValueError: If values are invalid (including unknown operators and
            conjunctions, which raise the matching compile errors).
    """
    raw = expect_mapping(value, config_key)

    conditions = ConditionGroup()
    if raw.get("conditions") is not None:
        conditions = _parse_group(raw["conditions"], f"{config_key}.conditions")

    keys = None
    if raw.get("keys") is not None:
        keys = _parse_keys(raw["keys"], f"{config_key}.keys")

    more_like_this: MoreLikeThisSpec | None = None
    if raw.get("more_like_this") is not None:
        mlt_key = f"{config_key}.more_like_this"
        try:
            more_like_this = more_like_this_from_options(expect_mapping(raw["more_like_this"], mlt_key))
        except ValueError as error:
            raise ValueError(f"{mlt_key}: {error}") from error

    languages = None
    if raw.get("languages") is not None:
        languages = expect_str_list(raw["languages"], f"{config_key}.languages")

    return SearchRequest(
        conditions=conditions,
        keys=keys,
        fulltext_fields=expect_str_list(raw.get("fulltext_fields", []), f"{config_key}.fulltext_fields"),
        sorts=[
            _parse_sort(item, f"{config_key}.sort[{idx}]")
            for idx, item in enumerate(expect_list(raw.get("sort", []), f"{config_key}.sort"))
        ],
        offset=expect_non_negative_int(raw.get("offset", 0), f"{config_key}.offset"),
        limit=expect_non_negative_int(raw.get("limit", 10), f"{config_key}.limit"),
        facets=[
            _parse_facet(item, f"{config_key}.facets[{idx}]")
            for idx, item in enumerate(expect_list(raw.get("facets", []), f"{config_key}.facets"))
        ],
        more_like_this=more_like_this,
        exclude_source_fields=expect_str_list(
            raw.get("exclude_source_fields", []), f"{config_key}.exclude_source_fields"
        ),
        languages=languages,
    )


def _parse_group(value: Any, config_key: str) -> ConditionGroup:
    raw = expect_mapping(value, config_key)
    members: list[Condition | ConditionGroup] = []
    for idx, item in enumerate(expect_list(raw.get("members", []), f"{config_key}.members")):
        member_key = f"{config_key}.members[{idx}]"
        member = expect_mapping(item, member_key)
        if "members" in member:
            members.append(_parse_group(member, member_key))
        else:
            members.append(_parse_condition(member, member_key))
    return ConditionGroup(
        conjunction=Conjunction.parse(raw.get("conjunction", "AND")),
        members=members,
        negated=expect_bool(raw.get("negated", False), f"{config_key}.negated"),
    )


def _parse_condition(raw: Mapping[str, Any], config_key: str) -> Condition:
    field_id = expect_str(raw.get("field", ""), f"{config_key}.field").strip()
    operator = raw.get("operator", _DEFAULT_OPERATOR)
    if operator is not None:
        operator = expect_str(operator, f"{config_key}.operator")
    return Condition(field_id=field_id, value=raw.get("value"), operator=operator)


def _parse_keys(value: Any, config_key: str) -> FullTextNode:
    """Parse keys given as a term, a list (OR group) or a group mapping."""
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return FullTextGroup(children=[_parse_keys(item, f"{config_key}[{idx}]") for idx, item in enumerate(value)])
    raw = expect_mapping(value, config_key)
    children = expect_list(raw.get("keys", []), f"{config_key}.keys")
    return FullTextGroup(
        children=[_parse_keys(item, f"{config_key}.keys[{idx}]") for idx, item in enumerate(children)],
        conjunction=Conjunction.parse(raw.get("conjunction", "OR")),
        negated=expect_bool(raw.get("negated", False), f"{config_key}.negated"),
    )


def _parse_sort(value: Any, config_key: str) -> SortSpec:
    raw = expect_mapping(value, config_key)
    return SortSpec(
        field_id=expect_str(get_required_value(raw, "field", f"{config_key}.field"), f"{config_key}.field"),
        direction=expect_str(raw.get("direction", "asc"), f"{config_key}.direction"),
    )


def _parse_facet(value: Any, config_key: str) -> FacetSpec:
    raw = expect_mapping(value, config_key)
    facet_id = expect_str(get_required_value(raw, "id", f"{config_key}.id"), f"{config_key}.id")
    return FacetSpec(
        id=facet_id,
        field_id=expect_str(raw.get("field", facet_id), f"{config_key}.field"),
        operator=expect_str(raw.get("operator", "and"), f"{config_key}.operator"),
        limit=expect_non_negative_int(raw.get("limit", 10), f"{config_key}.limit"),
    )
