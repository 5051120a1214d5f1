"""Search query builders.

Query assembly is pure data construction: builder functions return
immutable query values that render to Elasticsearch DSL via to_dict().
Nothing here depends on a search client library, so queries can be
inspected in tests and evaluated by any IIndexStore implementation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from app.core.constants import (
    FIELD_CATEGORY_RAW,
    FIELD_NAME,
    FIELD_PRICE,
    FIELD_RATING,
    FUZZINESS_AUTO,
    RATING_BOOST_THRESHOLD,
    SEARCH_FIELD_BOOSTS,
    SUGGEST_FIELDS,
)

MULTI_MATCH_BOOL_PREFIX = "bool_prefix"


def boosted_field(field: str, boost: int) -> str:
    """Return the multi_match field spec (e.g. 'name^3')."""
    return f"{field}^{boost}"


def split_boost(field_spec: str) -> tuple[str, float]:
    """Split 'name^3' into ('name', 3.0); a bare field has boost 1.0."""
    field, _, boost = field_spec.partition("^")
    return field, float(boost) if boost else 1.0


@dataclass(frozen=True)
class MultiMatchQuery:
    """multi_match over several fields (optionally fuzzy, optionally bool_prefix)."""

    query: str
    fields: tuple[str, ...]
    fuzziness: str | None = None
    type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"query": self.query, "fields": list(self.fields)}
        if self.fuzziness is not None:
            body["fuzziness"] = self.fuzziness
        if self.type is not None:
            body["type"] = self.type
        return {"multi_match": body}


@dataclass(frozen=True)
class TermQuery:
    """Exact match on a non-analyzed field."""

    field: str
    value: str

    def to_dict(self) -> dict[str, Any]:
        return {"term": {self.field: {"value": self.value}}}


@dataclass(frozen=True)
class RangeQuery:
    """Numeric range; unset bounds are omitted."""

    field: str
    gte: float | None = None
    lte: float | None = None
    gt: float | None = None
    lt: float | None = None

    def bounds(self) -> dict[str, float]:
        candidates = {"gte": self.gte, "lte": self.lte, "gt": self.gt, "lt": self.lt}
        return {k: v for k, v in candidates.items() if v is not None}

    def to_dict(self) -> dict[str, Any]:
        return {"range": {self.field: self.bounds()}}


@dataclass(frozen=True)
class BoolQuery:
    """Compound query. filter clauses do not score; should clauses only boost."""

    must: tuple[Query, ...] = ()
    filter: tuple[Query, ...] = ()
    should: tuple[Query, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.must:
            body["must"] = [q.to_dict() for q in self.must]
        if self.filter:
            body["filter"] = [q.to_dict() for q in self.filter]
        if self.should:
            body["should"] = [q.to_dict() for q in self.should]
        return {"bool": body}


Query = MultiMatchQuery | TermQuery | RangeQuery | BoolQuery


@dataclass(frozen=True)
class HighlightSpec:
    """Fields to highlight and the tag pair wrapped around matched fragments."""

    fields: tuple[str, ...]
    pre_tag: str = "<b>"
    post_tag: str = "</b>"

    def to_dict(self) -> dict[str, Any]:
        return {
            "pre_tags": [self.pre_tag],
            "post_tags": [self.post_tag],
            "fields": {field: {} for field in self.fields},
        }


@dataclass(frozen=True)
class SearchCriteria:
    """Resolved search parameters (defaults already applied)."""

    query: str
    category: str | None
    min_price: float
    max_price: float


def build_search_query(criteria: SearchCriteria) -> BoolQuery:
    """Build the ranked, filtered catalog search query.

    must: fuzzy multi_match over name^3, description^1, category^2.
    filter: category.raw term (when category is non-blank) and the price
    range, inclusive on both ends and taken literally even when inverted.
    should: rating > 4.0 boosts score without excluding anything.
    """
    text_match = MultiMatchQuery(
        query=criteria.query,
        fields=tuple(boosted_field(f, b) for f, b in SEARCH_FIELD_BOOSTS),
        fuzziness=FUZZINESS_AUTO,
    )
    filters: list[Query] = []
    if criteria.category is not None and criteria.category.strip():
        filters.append(TermQuery(field=FIELD_CATEGORY_RAW, value=criteria.category))
    filters.append(
        RangeQuery(field=FIELD_PRICE, gte=criteria.min_price, lte=criteria.max_price)
    )
    rating_boost = RangeQuery(field=FIELD_RATING, gt=RATING_BOOST_THRESHOLD)
    return BoolQuery(must=(text_match,), filter=tuple(filters), should=(rating_boost,))


def build_suggest_query(prefix: str) -> MultiMatchQuery:
    """Build the search-as-you-type bool_prefix query over the autocomplete sub-fields."""
    return MultiMatchQuery(
        query=prefix,
        fields=SUGGEST_FIELDS,
        type=MULTI_MATCH_BOOL_PREFIX,
    )


def build_name_highlight(pre_tag: str, post_tag: str) -> HighlightSpec:
    """Highlight spec for the name field."""
    return HighlightSpec(fields=(FIELD_NAME,), pre_tag=pre_tag, post_tag=post_tag)
