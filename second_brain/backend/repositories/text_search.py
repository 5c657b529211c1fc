"""
Free-Text Search.

Parses a search string into plain terms, "quoted phrases" and -negated
terms, builds the matching SQL clause for a model, and scores matched
records by relevance.

Matching rules:
    - with phrases present, a record must contain every phrase
    - otherwise it must contain at least one plain term
    - it must contain none of the negated terms
Matching is case-insensitive substring matching over the model's
``search_fields`` and each of its tags (through ``tags_text``, one tag per
line, so a needle never spans two tags or the JSON encoding of the list).
"""

import json
import re
from dataclasses import dataclass
from typing import Any

from sqlalchemy import (
    ColumnElement,
    Float,
    Integer,
    String,
    and_,
    cast,
    false,
    func,
    literal,
    not_,
    or_,
    true,
)

_TOKEN_RE = re.compile(r'"([^"]*)"|(\S+)')


@dataclass(frozen=True)
class SearchQuery:
    """A parsed free-text search string."""

    terms: tuple[str, ...] = ()
    phrases: tuple[str, ...] = ()
    excluded: tuple[str, ...] = ()

    @classmethod
    def parse(cls, text: str | None) -> "SearchQuery":
        terms: list[str] = []
        phrases: list[str] = []
        excluded: list[str] = []
        for phrase, word in _TOKEN_RE.findall(text or ""):
            if phrase.strip():
                phrases.append(" ".join(phrase.split()).lower())
            elif word.startswith("-") and len(word) > 1:
                excluded.append(word[1:].lower())
            elif word and word != "-":
                terms.append(word.lower())
        return cls(tuple(terms), tuple(phrases), tuple(excluded))

    @property
    def is_empty(self) -> bool:
        return not self.terms and not self.phrases

    @property
    def needles(self) -> tuple[str, ...]:
        """Every positive string that contributes to the score."""
        return self.terms + self.phrases


def _searchable_columns(model: Any) -> list[ColumnElement]:
    columns = [
        func.lower(func.coalesce(getattr(model, name), ""), type_=String)
        for name in model.search_fields
    ]
    columns.append(model.tags_text)
    return columns


def _contains_any(columns: list[ColumnElement], needle: str) -> ColumnElement[bool]:
    return or_(*(column.contains(needle, autoescape=True) for column in columns))


def match_clause(model: Any, query: SearchQuery) -> ColumnElement[bool]:
    """Build the WHERE clause selecting records that match the query."""
    if query.is_empty:
        return false()

    columns = _searchable_columns(model)
    if query.phrases:
        positive = and_(*(_contains_any(columns, phrase) for phrase in query.phrases))
    else:
        positive = or_(*(_contains_any(columns, term) for term in query.terms))

    negative = [not_(_contains_any(columns, term)) for term in query.excluded]
    return and_(positive, *negative) if negative else positive


def tags_match_any(model: Any, tags: list[str]) -> ColumnElement[bool]:
    """
    Clause selecting records carrying at least one of the given tags.

    Tags are matched as whole JSON string tokens, so "work" does not
    match a "homework" tag.
    """
    if not tags:
        return true()
    serialized = cast(model.tags, String)
    return or_(*(serialized.contains(json.dumps(tag), autoescape=True) for tag in tags))


def _occurrences(column: ColumnElement, needle: str) -> ColumnElement:
    removed = func.length(column, type_=Integer) - func.length(
        func.replace(column, needle, ""), type_=Integer
    )
    return removed // len(needle)


def relevance_score(model: Any, query: SearchQuery) -> ColumnElement[float]:
    """
    SQL expression counting occurrences of every term and phrase across
    the searchable columns. Each tag is counted on its own.
    """
    columns = _searchable_columns(model)
    counts = [_occurrences(column, needle) for needle in query.needles for column in columns]
    if not counts:
        return cast(literal(0), Float)
    total = counts[0]
    for count in counts[1:]:
        total = total + count
    return cast(total, Float)
