"""More-like-this query compiler."""

from __future__ import annotations

from typing import Any, Mapping

from ElasticQuery.core.query import MoreLikeThisSpec

# Not configurable per request yet.
MAX_QUERY_TERMS = 1
MIN_DOC_FREQ = 1
MIN_TERM_FREQ = 1


def compile_more_like_this(spec: MoreLikeThisSpec) -> dict[str, Any]:
    """Build a ``more_like_this`` clause."""
    mlt: dict[str, Any] = {}
    if spec.ids:
        mlt["ids"] = list(spec.ids)
    if spec.like is not None:
        mlt["like"] = spec.like
    if spec.unlike is not None:
        mlt["unlike"] = spec.unlike
    mlt["fields"] = list(spec.fields)
    mlt["max_query_terms"] = MAX_QUERY_TERMS
    mlt["min_doc_freq"] = MIN_DOC_FREQ
    mlt["min_term_freq"] = MIN_TERM_FREQ
    return {"more_like_this": mlt}


def more_like_this_from_options(options: Mapping[str, Any]) -> MoreLikeThisSpec:
    """Build a `MoreLikeThisSpec` from loose options.

    A singular ``id`` (string or list) is accepted in place of ``ids``.

    Raises:
        ValueError: If ``fields`` is missing or empty.
    """
    ids = options.get("ids")
    if "id" in options:
        raw_id = options["id"]
        ids = list(raw_id) if isinstance(raw_id, (list, tuple)) else [raw_id]
    fields = options.get("fields")
    if isinstance(fields, str):
        fields = [fields]
    if not fields:
        raise ValueError("More-like-this options require fields")
    return MoreLikeThisSpec(
        fields=[str(f) for f in fields],
        ids=[str(i) for i in (ids or ())],
        like=options.get("like"),
        unlike=options.get("unlike"),
    )
