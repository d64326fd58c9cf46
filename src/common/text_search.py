# src/common/text_search.py

from dataclasses import dataclass
from typing import Any

from sqlalchemy import ColumnElement, case, func, literal, or_

EXACT_SCORE = 1.0
PREFIX_SCORE = 0.75
SUBSTRING_SCORE = 0.5

@dataclass(frozen=True)
class TextMatcher:
    """
    Case-insensitive matching of a free-text query against one searchable
    column, plus a relevance score comparable across entity types.

    Every matcher scores with the same tiers (exact, prefix, substring), so
    courses and instructors can be ranked in one list. With ``trigram`` set
    (PostgreSQL + pg_trgm), trigram similarity also counts: a row matches
    when it contains the text or is similar enough, and its score is the
    greater of the tier score and the similarity.
    """

    text: str
    trigram: bool = False
    trigram_threshold: float = 0.3

    @classmethod
    def for_query(cls, text: str, **kwargs: Any) -> "TextMatcher":
        return cls(text=" ".join(text.split()).lower(), **kwargs)

    def score(self, column: ColumnElement) -> ColumnElement:
        lowered = func.lower(column)
        tiers = case(
            (lowered == self.text, literal(EXACT_SCORE)),
            (lowered.startswith(self.text, autoescape=True), literal(PREFIX_SCORE)),
            (lowered.contains(self.text, autoescape=True), literal(SUBSTRING_SCORE)),
            else_=literal(0.0),
        )
        if not self.trigram:
            return tiers
        return func.greatest(tiers, func.similarity(lowered, self.text))

    def condition(self, column: ColumnElement) -> ColumnElement:
        lowered = func.lower(column)
        contains = lowered.contains(self.text, autoescape=True)
        if not self.trigram:
            return contains
        return or_(contains, func.similarity(lowered, self.text) >= self.trigram_threshold)
