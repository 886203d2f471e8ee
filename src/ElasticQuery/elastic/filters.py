"""Condition filter compiler.

Compiles a `ConditionGroup` tree into an Elasticsearch filter clause.

Rules
- A group compiles its members (recursing into nested groups) and drops the
  ones that compile to nothing.
- No clauses left -> no filter (None, never an empty clause).
- One clause left -> that clause as-is.
- More clauses -> ``bool.must`` for AND, ``bool.should`` for OR.
- A negated group wraps its clause in ``bool.must_not``.

Operator table (field ``f``, value ``v``)
- ``<>`` + None  -> exists f             (not empty)
- ``=``  + None  -> must_not exists f    (empty)
- ``=``          -> term
- ``<>``         -> must_not term
- ``IN``         -> terms
- ``NOT IN``     -> must_not terms
- ``> >= < <=``  -> range with one bound
- ``BETWEEN``    -> range with both bounds, exclusive
- ``NOT BETWEEN``-> must_not range
"""

from __future__ import annotations

from typing import Any, Sequence

from ElasticQuery.core.errors import (
    InvalidConjunctionError,
    InvalidFilterFieldError,
    MissingOperatorError,
    UnsupportedOperatorError,
)
from ElasticQuery.core.query import Condition, ConditionGroup, Conjunction, Operator
from ElasticQuery.core.schema import RESERVED_FIELDS, IndexSchema, SemanticType
from ElasticQuery.utils.log import log

Clause = dict[str, Any]

_FALSE_STRINGS = frozenset({"", "0", "false", "off", "no"})


def compile_filters(group: ConditionGroup, schema: IndexSchema) -> Clause | None:
    """Compile a condition group into a filter clause.

    Args:
        group: Root (or nested) condition group.
        schema: Index fields that conditions may reference.

    Returns:
        The filter clause, or None when the group yields no conditions.

    Raises:
        InvalidFilterFieldError: If a condition references an unknown field.
        MissingOperatorError: If a condition has no operator.
        UnsupportedOperatorError: If an operator cannot be compiled.
        InvalidConjunctionError: If a group has an invalid conjunction.
    """
    clauses: list[Clause] = []
    for member in group.members:
        if isinstance(member, ConditionGroup):
            clause = compile_filters(member, schema)
        else:
            clause = compile_condition(member, schema)
        if clause:
            clauses.append(clause)

    if not clauses:
        return None

    if len(clauses) == 1:
        compiled = clauses[0]
    else:
        compiled = _wrap_with_conjunction(clauses, group.conjunction)

    if group.negated:
        compiled = {"bool": {"must_not": compiled}}
    return compiled


def compile_condition(condition: Condition, schema: IndexSchema) -> Clause:
    """Validate one condition against the schema and compile it."""
    field_id = condition.field_id
    if not field_id:
        raise InvalidFilterFieldError(f"Missing field in search filter: {condition}")
    schema_field = schema.get(field_id)
    if schema_field is None and field_id not in RESERVED_FIELDS:
        raise InvalidFilterFieldError(f"Invalid field '{field_id}' in search filter")
    if condition.operator is None:
        raise MissingOperatorError(f'Unspecified filter operator for field "{field_id}"')

    value = condition.value
    if schema_field is not None and schema_field.semantic_type is SemanticType.BOOLEAN and value is not None:
        value = _coerce_bool(value)

    clause = build_filter_term(field_id, condition.operator, value)
    log.debug("Filter term: field=%s operator=%s clause=%s", field_id, condition.operator.value, clause)
    return clause


def build_filter_term(field_id: str, operator: Operator, value: Any) -> Clause:
    """Build the clause for a single field comparison."""
    if value is None:
        if operator is Operator.NOT_EQ:
            return {"exists": {"field": field_id}}
        if operator is Operator.EQ:
            return _must_not({"exists": {"field": field_id}})
        raise UnsupportedOperatorError(
            f'Operator "{operator.value}" needs a value for field "{field_id}"'
        )

    if operator.multi_valued and not _is_sequence(value):
        raise UnsupportedOperatorError(
            f'Operator "{operator.value}" needs a list value for field "{field_id}"'
        )

    if operator is Operator.EQ:
        return {"term": {field_id: value}}
    if operator is Operator.NOT_EQ:
        return _must_not({"term": {field_id: value}})
    if operator is Operator.IN:
        return {"terms": {field_id: list(value)}}
    if operator is Operator.NOT_IN:
        return _must_not({"terms": {field_id: list(value)}})
    if operator is Operator.GT:
        return _range(field_id, lower=value, include_lower=False)
    if operator is Operator.GTE:
        return _range(field_id, lower=value, include_lower=True)
    if operator is Operator.LT:
        return _range(field_id, upper=value, include_upper=False)
    if operator is Operator.LTE:
        return _range(field_id, upper=value, include_upper=True)
    if operator is Operator.BETWEEN:
        lower, upper = _bounds(value)
        return _range(field_id, lower=lower, upper=upper)
    if operator is Operator.NOT_BETWEEN:
        lower, upper = _bounds(value)
        return _must_not(_range(field_id, lower=lower, upper=upper))

    raise UnsupportedOperatorError(
        f'Undefined operator "{operator}" for field "{field_id}" in filter condition.'
    )


def _wrap_with_conjunction(clauses: list[Clause], conjunction: Conjunction) -> Clause:
    if conjunction is Conjunction.AND:
        return {"bool": {"must": clauses}}
    if conjunction is Conjunction.OR:
        return {"bool": {"should": clauses}}
    raise InvalidConjunctionError(
        f'Unknown filter conjunction "{conjunction}". Valid values are "OR" or "AND"'
    )


def _range(
    field_id: str,
    *,
    lower: Any = None,
    upper: Any = None,
    include_lower: bool = False,
    include_upper: bool = False,
) -> Clause:
    return {
        "range": {
            field_id: {
                "from": lower,
                "to": upper,
                "include_lower": include_lower,
                "include_upper": include_upper,
            }
        }
    }


def _must_not(clause: Clause) -> Clause:
    return {"bool": {"must_not": clause}}


def _bounds(value: Sequence[Any]) -> tuple[Any, Any]:
    """Split a BETWEEN value into bounds; a missing or empty element is unbounded."""
    lower = value[0] if len(value) > 0 else None
    upper = value[1] if len(value) > 1 else None
    return (None if lower == "" else lower, None if upper == "" else upper)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _coerce_bool(value: Any) -> Any:
    if _is_sequence(value):
        return [_coerce_bool(item) for item in value]
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)
