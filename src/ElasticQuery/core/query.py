from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence, Union

from ElasticQuery.core.errors import (
    InvalidConjunctionError,
    MissingOperatorError,
    UnsupportedOperatorError,
)


class Conjunction(str, Enum):
    AND = "AND"
    OR = "OR"

    @classmethod
    def parse(cls, value: Any) -> Conjunction:
        """Resolve a conjunction from an enum member or a case-insensitive string.

        Raises:
            InvalidConjunctionError: If the value is not AND or OR.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().upper() in cls.__members__:
            return cls[value.strip().upper()]
        raise InvalidConjunctionError(f'Unknown conjunction "{value}". Valid values are "OR" or "AND"')


class Operator(str, Enum):
    """Condition operators, valued by their Search API symbol."""

    EQ = "="
    NOT_EQ = "<>"
    IN = "IN"
    NOT_IN = "NOT IN"
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="
    BETWEEN = "BETWEEN"
    NOT_BETWEEN = "NOT BETWEEN"

    @classmethod
    def parse(cls, value: Any) -> Operator:
        """Resolve an operator from its symbol (``NOT IN``) or name (``NOT_IN``).

        Raises:
            MissingOperatorError: If the value is empty.
            UnsupportedOperatorError: If the value names no known operator.
        """
        if isinstance(value, cls):
            return value
        if value is None or (isinstance(value, str) and not value.strip()):
            raise MissingOperatorError("Unspecified filter operator")
        if isinstance(value, str):
            symbol = " ".join(value.split()).upper()
            for member in cls:
                if symbol in (member.value, member.name, member.name.replace("_", " ")):
                    return member
        raise UnsupportedOperatorError(f'Undefined operator "{value}"')

    @property
    def multi_valued(self) -> bool:
        return self in (Operator.IN, Operator.NOT_IN, Operator.BETWEEN, Operator.NOT_BETWEEN)


class FacetOperator(str, Enum):
    AND = "and"
    OR = "or"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Any) -> SortDirection:
        if isinstance(value, cls):
            return value
        direction = str(value).strip().lower()
        if direction not in ("asc", "desc"):
            raise ValueError(f"Invalid sort direction: {value}")
        return cls(direction)


@dataclass(frozen=True, slots=True)
class Condition:
    """A single field comparison.

    ``value`` is a scalar, a list of scalars for IN/NOT IN, a two-element
    sequence for BETWEEN/NOT BETWEEN, or None for the empty/not-empty checks.
    An operator given as a string is resolved on construction; None is kept so
    that compilation reports it.
    """

    field_id: str
    value: Any = None
    operator: Operator | None = Operator.EQ

    def __post_init__(self) -> None:
        if self.operator is not None and not isinstance(self.operator, Operator):
            object.__setattr__(self, "operator", Operator.parse(self.operator))
        if isinstance(self.value, list):
            object.__setattr__(self, "value", tuple(self.value))


@dataclass(frozen=True, slots=True)
class ConditionGroup:
    """Boolean combination of conditions and nested groups."""

    conjunction: Conjunction = Conjunction.AND
    members: Sequence[Union[Condition, "ConditionGroup"]] = ()
    negated: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "conjunction", Conjunction.parse(self.conjunction))
        object.__setattr__(self, "members", tuple(self.members))

    def with_member(self, member: Condition | ConditionGroup) -> ConditionGroup:
        return ConditionGroup(conjunction=self.conjunction, members=(*self.members, member), negated=self.negated)


@dataclass(frozen=True, slots=True)
class FullTextGroup:
    """Group node of the full-text keys tree.

    Children are plain strings (terms or phrases) or nested groups.
    """

    children: Sequence[Union[str, "FullTextGroup"]] = ()
    conjunction: Conjunction = Conjunction.OR
    negated: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "conjunction", Conjunction.parse(self.conjunction))
        object.__setattr__(self, "children", tuple(self.children))


FullTextNode = Union[str, FullTextGroup]


@dataclass(frozen=True, slots=True)
class FacetSpec:
    """A requested terms facet.

    ``operator`` is kept as the raw string when it is not ``and``/``or`` so the
    result parser can report it; ``limit`` 0 means unlimited.
    """

    id: str
    field_id: str
    operator: FacetOperator | str = FacetOperator.AND
    limit: int = 10

    def __post_init__(self) -> None:
        if isinstance(self.operator, str) and not isinstance(self.operator, FacetOperator):
            normalized = self.operator.strip().lower()
            if normalized in ("and", "or"):
                object.__setattr__(self, "operator", FacetOperator(normalized))
        if self.limit < 0:
            raise ValueError(f"Facet limit must be >= 0: {self.id}")


@dataclass(frozen=True, slots=True)
class SortSpec:
    field_id: str
    direction: SortDirection = SortDirection.ASC

    def __post_init__(self) -> None:
        object.__setattr__(self, "direction", SortDirection.parse(self.direction))


@dataclass(frozen=True, slots=True)
class MoreLikeThisSpec:
    """Options of a more-like-this similarity query."""

    fields: Sequence[str]
    ids: Sequence[str] = ()
    like: str | None = None
    unlike: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))
        object.__setattr__(self, "ids", tuple(self.ids))
        if not self.fields:
            raise ValueError("More-like-this requires at least one field")


@dataclass(frozen=True, slots=True)
class SearchRequest:
    """Engine-agnostic search request.

    Attributes:
        conditions: Root filter group; an empty group means no filter.
        keys: Full-text keys tree, or None for no full-text query.
        fulltext_fields: Restricts full-text search to these fields when set.
        sorts: Ordered sort pairs.
        offset: Index of the first hit to return.
        limit: Number of hits to return.
        facets: Requested facets.
        more_like_this: Optional similarity query.
        exclude_source_fields: Source fields to leave out of returned hits.
        languages: Restricts results to these languages when not None.
    """

    conditions: ConditionGroup = ConditionGroup()
    keys: FullTextNode | None = None
    fulltext_fields: Sequence[str] = ()
    sorts: Sequence[SortSpec] = ()
    offset: int = 0
    limit: int = 10
    facets: Sequence[FacetSpec] = ()
    more_like_this: MoreLikeThisSpec | None = None
    exclude_source_fields: Sequence[str] = ()
    languages: Sequence[str] | None = None

    def __post_init__(self) -> None:
        for name in ("fulltext_fields", "sorts", "facets", "exclude_source_fields"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        if self.languages is not None:
            object.__setattr__(self, "languages", tuple(self.languages))
        if self.offset < 0 or self.limit < 0:
            raise ValueError("offset and limit must be >= 0")


@dataclass(frozen=True, slots=True)
class QuerySettings:
    """Per-call compiler settings.

    Attributes:
        fuzziness: Fuzzy-match level ("auto", "1".."5"); None, "" or "0"
            disable fuzzy suffixes.
        index_prefix: Prepended to the index id to form the target index name.
    """

    fuzziness: str | None = "auto"
    index_prefix: str = ""

    @property
    def fuzzy(self) -> bool:
        return self.fuzziness not in (None, "", "0")

    def target_index(self, index_id: str) -> str:
        return f"{self.index_prefix}{index_id}"
