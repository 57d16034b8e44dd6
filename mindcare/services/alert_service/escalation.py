"""Escalation sink for student risk state.

The only writer of StudentRiskProfile rows. Each operation merges a
disjoint set of columns, so scoring and flagging can race for the same
student without overwriting each other.
"""
import logging
from datetime import datetime
from typing import Mapping, Optional

from mindcare.shared.database import NotFoundError
from mindcare.shared.models import StudentRiskProfile, WellnessScores
from mindcare.shared.utils import hash_pii, hash_text_for_audit
from .alert_publisher import AlertEventPublisher
from .profile_repository import StudentProfileRepository

logger = logging.getLogger(__name__)


class EscalationSink:
    """Merges urgent flags and scores into student profiles."""

    def __init__(
        self,
        repository: StudentProfileRepository,
        publisher: Optional[AlertEventPublisher] = None,
    ):
        """Initialize sink.

        Args:
            repository: Profile repository
            publisher: Alert event publisher; None disables notifications
        """
        self.repository = repository
        self.publisher = publisher

    def flag_urgent(
        self,
        student_id: str,
        reason: str,
        triggering_text: str,
        source: str = "journal",
    ) -> StudentRiskProfile:
        """Set needs_help with the reason and verbatim triggering text.

        Raises:
            ValueError: If reason is empty
            RepositoryError: If the write fails (callers decide whether that is fatal)
        """
        if not reason:
            raise ValueError("An urgent flag requires a reason")

        student_id_hash = hash_pii(student_id)
        profile = self.repository.merge_fields(student_id, {
            "needs_help": True,
            "last_urgent_entry": triggering_text,
            "last_urgent_reason": reason,
        })

        logger.critical(
            "URGENT_FLAG_SET",
            extra={
                "student_id_hash": student_id_hash,
                "reason": reason,
                "trigger_source": source,
                "action": "COUNSELOR_REVIEW_REQUIRED",
            }
        )

        if self.publisher is not None:
            self.publisher.publish_urgent_flag(
                student_id_hash=student_id_hash,
                reason=reason,
                source=source,
                text_hash=hash_text_for_audit(triggering_text) if triggering_text else None,
            )

        return profile

    def update_scores(
        self,
        student_id: str,
        scores: WellnessScores,
        behavioral: Optional[Mapping[str, int]] = None,
    ) -> StudentRiskProfile:
        """Overwrite the three numeric scores; urgent fields are untouched.

        Args:
            student_id: Student to update
            scores: Final wellness scores
            behavioral: activity_score/sleep_score the scores were built from,
                stored in the same write so later recomputes can reuse them
        """
        fields = scores.to_dict()
        if behavioral is not None:
            fields.update(behavioral)
        profile = self.repository.merge_fields(student_id, fields)

        logger.info(
            "PROFILE_SCORES_UPDATED",
            extra={"student_id_hash": hash_pii(student_id), **scores.to_dict()}
        )
        return profile

    def find_profile(self, student_id: str) -> Optional[StudentRiskProfile]:
        """Current profile, or None if the student has never been scored or flagged."""
        return self.repository.find_by_id(student_id)

    def update_phq9(self, student_id: str, phq9_score: int) -> StudentRiskProfile:
        """Store the latest PHQ-9 total."""
        return self.repository.merge_fields(student_id, {"phq9_score": phq9_score})

    def clear_urgent_flag(self, student_id: str) -> StudentRiskProfile:
        """Reviewer action: reset needs_help and null the reason/entry.

        Scores and historical check-ins/journals are not touched.

        Raises:
            NotFoundError: If the student has no profile
        """
        if not self.repository.merge_update(student_id, {
            "needs_help": False,
            "last_urgent_entry": None,
            "last_urgent_reason": None,
            "updated_at": datetime.utcnow(),
        }):
            raise NotFoundError("No profile for student")

        logger.info(
            "URGENT_FLAG_CLEARED",
            extra={"student_id_hash": hash_pii(student_id)}
        )
        return self.repository.get(student_id)
