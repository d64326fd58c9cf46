# src/common/database/repository.py

import logging
from dataclasses import dataclass
from typing import Any, Generic, List, Tuple, TypeVar

from sqlalchemy import ColumnElement, Select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.future import select

from src.common.config import settings
from src.common.errors import RepositoryError
from src.common.text_search import TextMatcher

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT")

@dataclass(frozen=True)
class ScoredMatch(Generic[EntityT]):
    entity: EntityT
    score: float

class TextSearchRepository(Generic[EntityT]):
    """
    Text lookup over one entity table.

    Subclasses set ``model`` (the ORM class), ``entity_name`` and the names
    of the id and searchable-text attributes on the model. Each call opens
    its own session from the factory, so lookups against different
    repositories can run concurrently.
    """

    model: Any
    entity_name: str
    id_attribute: str = "id"
    search_attribute: str = "search_text"

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    def _matcher(self, dialect_name: str, text: str) -> TextMatcher:
        return TextMatcher.for_query(
            text,
            trigram=settings.SEARCH_TRIGRAM_ENABLED and dialect_name == "postgresql",
            trigram_threshold=settings.SEARCH_TRIGRAM_THRESHOLD,
        )

    def _id_ordering(self, dialect_name: str) -> ColumnElement:
        id_column = getattr(self.model, self.id_attribute)
        # Ids tie-break in code-point order, same as the aggregator's merge.
        # SQLite already compares bytes; PostgreSQL needs the "C" collation.
        if dialect_name == "postgresql":
            id_column = id_column.collate("C")
        return id_column.asc()

    def lookup_statements(self, text: str, dialect_name: str) -> Tuple[Select, Select]:
        """Build the ranked row query (without pagination) and the count query."""
        matcher = self._matcher(dialect_name, text)
        search_column = getattr(self.model, self.search_attribute)
        condition = matcher.condition(search_column)
        score = matcher.score(search_column).label("score")

        stmt = (
            select(self.model, score)
            .where(condition)
            .order_by(score.desc(), self._id_ordering(dialect_name))
        )
        count_stmt = select(func.count()).select_from(self.model).where(condition)
        return stmt, count_stmt

    async def find_by_text(self, text: str, limit: int, offset: int = 0) -> Tuple[List[ScoredMatch[EntityT]], int]:
        """
        Return up to ``limit`` matches starting at ``offset``, ordered by
        relevance score descending then id ascending, together with the
        total number of matches ignoring pagination.

        The count runs first; rows are only fetched when the requested page
        overlaps the matches, and never more rows than there are matches.
        """
        try:
            async with self._session_factory() as session:
                stmt, count_stmt = self.lookup_statements(text, session.get_bind().dialect.name)

                match_count = (await session.execute(count_stmt)).scalar_one()
                limit = min(limit, match_count - offset)
                rows = []
                if limit > 0:
                    rows = (await session.execute(stmt.offset(offset).limit(limit))).all()
        except SQLAlchemyError as exc:
            raise RepositoryError(self.entity_name) from exc

        matches = [ScoredMatch(entity=entity, score=float(row_score)) for entity, row_score in rows]
        logger.debug(
            "%s lookup for %r returned %d of %d matches", self.entity_name, text, len(matches), match_count
        )
        return matches, match_count
