"""Weekly check-in repository.

Check-ins are immutable: inserted once when the session completes and
only ever read back by month for aggregation.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List

from mindcare.shared.database import BaseRepository, ConnectionManager
from mindcare.shared.models import CheckinRecord
from mindcare.shared.utils import hash_pii

logger = logging.getLogger(__name__)


class CheckinRepository(BaseRepository[CheckinRecord]):
    """Repository for `weekly_checkins` rows (answers stored as int[] arrays)."""

    columns = (
        "id",
        "student_id",
        "stress_responses",
        "anxiety_responses",
        "depression_responses",
        "created_at",
    )

    def __init__(self, connection_manager: ConnectionManager):
        super().__init__(connection_manager, "weekly_checkins")

    def _row_to_entity(self, row: tuple) -> CheckinRecord:
        return CheckinRecord(
            checkin_id=row[0],
            student_id=row[1],
            stress_responses=tuple(row[2] or ()),
            anxiety_responses=tuple(row[3] or ()),
            depression_responses=tuple(row[4] or ()),
            created_at=row[5],
        )

    def _entity_to_params(self, entity: CheckinRecord) -> Dict[str, Any]:
        # psycopg2 adapts lists (not tuples) to ARRAY
        return {
            "id": entity.checkin_id,
            "student_id": entity.student_id,
            "stress_responses": list(entity.stress_responses),
            "anxiety_responses": list(entity.anxiety_responses),
            "depression_responses": list(entity.depression_responses),
            "created_at": entity.created_at,
        }

    def add(self, checkin: CheckinRecord) -> CheckinRecord:
        """Store a completed check-in."""
        self.insert(checkin)
        logger.info(
            "CHECKIN_STORED",
            extra={
                "checkin_id": checkin.checkin_id,
                "student_id_hash": hash_pii(checkin.student_id),
            }
        )
        return checkin

    def find_in_range(
        self,
        student_id: str,
        start: datetime,
        end: datetime,
        limit: int = 100,
    ) -> List[CheckinRecord]:
        """A student's check-ins with start <= created_at <= end, oldest first."""
        return self.find_where(
            "student_id = %s AND created_at >= %s AND created_at <= %s",
            (student_id, start, end),
            order_by="created_at ASC",
            limit=limit,
        )
