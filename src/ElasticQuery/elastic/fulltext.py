"""Full-text query compiler.

Compiles the full-text keys tree of a `SearchRequest` into a Lucene
``query_string`` clause.

Rules
- Group children are joined with the group conjunction (default OR) and
  parenthesized; a group with a single child is just that child.
- Terms containing whitespace become quoted phrases; inside a phrase ``-``,
  ``"`` and ``\\`` are backslash-escaped so Lucene does not read exclusion
  syntax.
- Terms without whitespace are emitted verbatim.
- With fuzziness enabled every term gets a ``~`` suffix, except terms under a
  negated group.
- Negated groups are prefixed with ``-``.
"""

from __future__ import annotations

import re
from typing import Any, Sequence

from ElasticQuery.core.query import FullTextGroup, FullTextNode, QuerySettings, SearchRequest
from ElasticQuery.core.schema import IndexSchema
from ElasticQuery.utils.log import log

Clause = dict[str, Any]

_RE_WHITESPACE = re.compile(r"\s")
_RE_PHRASE_SPECIAL = re.compile(r'([\\"-])')


def compile_fulltext(request: SearchRequest, schema: IndexSchema, settings: QuerySettings) -> Clause | None:
    """Compile the request keys into a ``query_string`` clause.

    Args:
        request: Search request holding keys and optional full-text fields.
        schema: Index fields, used for full-text field selection and boosts.
        settings: Per-call settings (fuzziness).

    Returns:
        ``{"query_string": {"query": ..., "fields": [...]}}``, or None when the
        keys compile to an empty string.
    """
    query = build_search_string(request.keys, settings.fuzziness)
    if not query:
        return None

    fields = [
        f"{field_id}^{_format_boost(schema.fields[field_id].boost)}"
        for field_id in select_fulltext_fields(schema, request.fulltext_fields)
    ]
    log.debug("Full-text query: %s fields=%s", query, fields)
    return {"query_string": {"query": query, "fields": fields}}


def select_fulltext_fields(schema: IndexSchema, requested: Sequence[str]) -> list[str]:
    """Return the full-text fields to search, in index declaration order.

    Requested fields are intersected with the index full-text fields; with no
    request every full-text field is searched.
    """
    declared = schema.fulltext_field_ids()
    if not requested:
        return list(declared)
    wanted = set(requested)
    return [field_id for field_id in declared if field_id in wanted]


def build_search_string(keys: FullTextNode | None, fuzziness: str | None = "auto") -> str:
    """Build the Lucene query string for a keys tree.

    Args:
        keys: A term, a group, or None.
        fuzziness: Fuzziness setting; None, "" or "0" disable the ``~`` suffix.

    Returns:
        The query string, empty when there is nothing to search for.
    """
    if keys is None:
        return ""
    fuzzy = fuzziness not in (None, "", "0")
    return _compile_node(keys, fuzzy=fuzzy, negated=False)


def _compile_node(node: FullTextNode, *, fuzzy: bool, negated: bool) -> str:
    if isinstance(node, FullTextGroup):
        return _compile_group(node, fuzzy=fuzzy, negated=negated)
    return _compile_term(str(node), fuzzy=fuzzy and not negated)


def _compile_group(group: FullTextGroup, *, fuzzy: bool, negated: bool) -> str:
    inner_negated = negated or group.negated
    parts = [_compile_node(child, fuzzy=fuzzy, negated=inner_negated) for child in group.children]
    parts = [part for part in parts if part]
    if not parts:
        return ""

    if len(parts) == 1:
        body = parts[0]
    else:
        body = "(" + f" {group.conjunction.value} ".join(parts) + ")"
    return f"-{body}" if group.negated else body


def _compile_term(term: str, *, fuzzy: bool) -> str:
    t = term.strip()
    if not t:
        return ""
    if _RE_WHITESPACE.search(t):
        t = '"' + _RE_PHRASE_SPECIAL.sub(r"\\\1", t) + '"'
    return f"{t}~" if fuzzy else t


def _format_boost(boost: float) -> str:
    boost = float(boost)
    return str(int(boost)) if boost.is_integer() else repr(boost)
