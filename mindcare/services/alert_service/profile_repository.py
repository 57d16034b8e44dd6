"""Student risk profile repository.

One row per student in `student_profiles`. Writers only ever merge the
columns they own:
- Score aggregator: anxiety_score, depression_score, stress_score,
  activity_score, sleep_score
- Journal/PHQ-9 flagging: needs_help, last_urgent_entry, last_urgent_reason
- PHQ-9 survey: phq9_score
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from mindcare.shared.database import BaseRepository, ConnectionManager
from mindcare.shared.models import StudentRiskProfile

logger = logging.getLogger(__name__)


class StudentProfileRepository(BaseRepository[StudentRiskProfile]):
    """Repository for StudentRiskProfile rows."""

    columns = (
        "id",
        "anxiety_score",
        "depression_score",
        "stress_score",
        "needs_help",
        "last_urgent_entry",
        "last_urgent_reason",
        "phq9_score",
        "activity_score",
        "sleep_score",
        "updated_at",
    )

    def __init__(self, connection_manager: ConnectionManager):
        super().__init__(connection_manager, "student_profiles")

    def _row_to_entity(self, row: tuple) -> StudentRiskProfile:
        return StudentRiskProfile(
            student_id=row[0],
            anxiety_score=row[1],
            depression_score=row[2],
            stress_score=row[3],
            needs_help=bool(row[4]),
            last_urgent_entry=row[5],
            last_urgent_reason=row[6],
            phq9_score=row[7],
            activity_score=row[8],
            sleep_score=row[9],
            updated_at=row[10] or datetime.utcnow(),
        )

    def _entity_to_params(self, entity: StudentRiskProfile) -> Dict[str, Any]:
        return {
            "id": entity.student_id,
            "anxiety_score": entity.anxiety_score,
            "depression_score": entity.depression_score,
            "stress_score": entity.stress_score,
            "needs_help": entity.needs_help,
            "last_urgent_entry": entity.last_urgent_entry,
            "last_urgent_reason": entity.last_urgent_reason,
            "phq9_score": entity.phq9_score,
            "activity_score": entity.activity_score,
            "sleep_score": entity.sleep_score,
            "updated_at": entity.updated_at,
        }

    def merge_fields(self, student_id: str, fields: Dict[str, Any]) -> Optional[StudentRiskProfile]:
        """Merge-write a subset of profile columns, creating the row if needed."""
        return self.merge_upsert(student_id, {**fields, "updated_at": datetime.utcnow()})

    def find_flagged(self, limit: int = 100) -> List[StudentRiskProfile]:
        """Students currently awaiting urgent review, most recently flagged first."""
        return self.find_where(
            "needs_help = %s",
            (True,),
            order_by="updated_at DESC",
            limit=limit,
        )
