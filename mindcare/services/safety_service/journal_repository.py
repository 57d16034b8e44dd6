"""Journal entry repository.

Entries are append-only for students; the only update is the single
analysis pass writing sentiment_score and sentiment_magnitude.
"""
import logging
from typing import Any, Dict, List

from mindcare.shared.database import BaseRepository, ConnectionManager
from mindcare.shared.models import JournalEntry

logger = logging.getLogger(__name__)


class JournalRepository(BaseRepository[JournalEntry]):
    """Repository for `journal_entries` rows."""

    columns = (
        "id",
        "student_id",
        "content",
        "created_at",
        "sentiment_score",
        "sentiment_magnitude",
    )

    def __init__(self, connection_manager: ConnectionManager):
        super().__init__(connection_manager, "journal_entries")

    def _row_to_entity(self, row: tuple) -> JournalEntry:
        return JournalEntry(
            entry_id=row[0],
            student_id=row[1],
            content=row[2],
            created_at=row[3],
            sentiment_score=row[4],
            sentiment_magnitude=row[5],
        )

    def _entity_to_params(self, entity: JournalEntry) -> Dict[str, Any]:
        return {
            "id": entity.entry_id,
            "student_id": entity.student_id,
            "content": entity.content,
            "created_at": entity.created_at,
            "sentiment_score": entity.sentiment_score,
            "sentiment_magnitude": entity.sentiment_magnitude,
        }

    def set_sentiment(self, entry_id: str, score: float, magnitude: float) -> bool:
        """Write analysis results exactly once.

        Returns:
            True if written; False if the entry is missing or already analyzed
        """
        rowcount = self._execute(
            f"""
            UPDATE {self.table_name}
            SET sentiment_score = %s, sentiment_magnitude = %s
            WHERE id = %s AND sentiment_score IS NULL
            """,
            (score, magnitude, entry_id),
            commit=True,
        )
        if not rowcount:
            logger.warning(
                "JOURNAL_SENTIMENT_NOT_WRITTEN",
                extra={"entry_id": entry_id, "reason": "missing_or_already_analyzed"}
            )
        return rowcount > 0

    def find_by_student(self, student_id: str, limit: int = 50) -> List[JournalEntry]:
        """A student's entries, newest first."""
        return self.find_where(
            "student_id = %s",
            (student_id,),
            order_by="created_at DESC",
            limit=limit,
        )
