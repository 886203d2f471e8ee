"""Extension points of the compile pipeline.

Each hook is a plain function that receives a compiled draft and returns the
draft to use from then on. Hooks run exactly once per compilation, right after
the stage they are named for.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Optional

from ElasticQuery.core.models import WireQuery
from ElasticQuery.core.schema import FieldSchema

Clause = dict[str, Any]

FilterHook = Callable[[Optional[Clause]], Optional[Clause]]
FullTextHook = Callable[[Clause], Clause]
FieldMappingHook = Callable[[FieldSchema, Clause], Clause]
QueryHook = Callable[[WireQuery], WireQuery]


@dataclass(frozen=True, slots=True)
class CompileHooks:
    """Caller-supplied hooks; unset hooks leave drafts unchanged.

    Attributes:
        filters: Called with the compiled filter clause (None when absent).
        fulltext: Called with the compiled ``query_string`` clause.
        field_mapping: Called with a field and its compiled mapping property.
        query: Called with the fully composed wire query.
    """

    filters: FilterHook | None = None
    fulltext: FullTextHook | None = None
    field_mapping: FieldMappingHook | None = None
    query: QueryHook | None = None

    def after_filters(self, clause: Clause | None) -> Clause | None:
        return self.filters(clause) if self.filters else clause

    def after_fulltext(self, clause: Clause) -> Clause:
        return self.fulltext(clause) if self.fulltext else clause

    def after_field_mapping(self, schema_field: FieldSchema, mapping: Clause) -> Clause:
        return self.field_mapping(schema_field, mapping) if self.field_mapping else mapping

    def after_query(self, query: WireQuery) -> WireQuery:
        return self.query(query) if self.query else query


NO_HOOKS = CompileHooks()
