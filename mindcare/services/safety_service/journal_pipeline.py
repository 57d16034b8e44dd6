"""Journal analysis pipeline, run once per newly created journal entry.

Steps:
1. Sentiment + topic analysis (never fails, may be neutral)
2. Safety-net classification
3. Urgent flag on the student profile (best-effort, skipped without a student id)
4. Sentiment written back to the entry (best-effort)

Steps 3 and 4 are independent: a failure in one is logged and the other
still runs. Nothing is rolled back or retried.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from mindcare.shared.database import RepositoryError
from mindcare.shared.models import JournalEntry, SentimentResult
from mindcare.shared.utils import hash_pii, hash_text_for_audit
from mindcare.services.alert_service.escalation import EscalationSink
from mindcare.services.sentiment_service import SentimentAnalyzer
from .classifier import ClassificationResult, RiskClassifier
from .journal_repository import JournalRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JournalAnalysisOutcome:
    """What the pipeline did for one entry."""
    entry_id: str
    sentiment: SentimentResult
    classification: ClassificationResult
    sentiment_persisted: bool
    profile_flagged: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entry_id": self.entry_id,
            **self.classification.to_dict(),
            "topics": self.sentiment.to_dict()["topics"],
            "sentiment_persisted": self.sentiment_persisted,
            "profile_flagged": self.profile_flagged,
        }


class JournalAnalysisPipeline:
    """Event handler for new journal entries."""

    def __init__(
        self,
        analyzer: SentimentAnalyzer,
        classifier: RiskClassifier,
        journal_repository: JournalRepository,
        escalation_sink: EscalationSink,
    ):
        self.analyzer = analyzer
        self.classifier = classifier
        self.journal_repository = journal_repository
        self.escalation_sink = escalation_sink

    def process(self, entry: JournalEntry) -> JournalAnalysisOutcome:
        """Analyze, classify and persist results for one entry.

        Args:
            entry: The newly created entry (pre-analysis)

        Returns:
            JournalAnalysisOutcome; never raises for service or write failures
        """
        student_id_hash = hash_pii(entry.student_id)

        logger.info(
            "JOURNAL_ANALYSIS_STARTED",
            extra={
                "entry_id": entry.entry_id,
                "student_id_hash": student_id_hash,
                "text_hash": hash_text_for_audit(entry.content),
                "text_length": len(entry.content),
            }
        )

        sentiment = self.analyzer.analyze(entry.content)
        classification = self.classifier.classify(entry.content, sentiment)

        profile_flagged = False
        if classification.is_urgent:
            profile_flagged = self._flag_student(entry, classification, student_id_hash)

        sentiment_persisted = self._persist_sentiment(entry, classification)

        logger.info(
            "JOURNAL_ANALYSIS_COMPLETED",
            extra={
                "entry_id": entry.entry_id,
                "student_id_hash": student_id_hash,
                "is_urgent": classification.is_urgent,
                "profile_flagged": profile_flagged,
                "sentiment_persisted": sentiment_persisted,
            }
        )

        return JournalAnalysisOutcome(
            entry_id=entry.entry_id,
            sentiment=sentiment,
            classification=classification,
            sentiment_persisted=sentiment_persisted,
            profile_flagged=profile_flagged,
        )

    def _flag_student(
        self,
        entry: JournalEntry,
        classification: ClassificationResult,
        student_id_hash: str,
    ) -> bool:
        if not entry.student_id:
            # Cannot flag an unknown student; the entry still gets its sentiment
            logger.warning(
                "URGENT_FLAG_SKIPPED",
                extra={
                    "entry_id": entry.entry_id,
                    "reason": "missing_student_id",
                    "urgent_reason": classification.reason,
                }
            )
            return False

        try:
            self.escalation_sink.flag_urgent(
                student_id=entry.student_id,
                reason=classification.reason,
                triggering_text=entry.content,
            )
        except Exception as e:
            logger.error(
                "URGENT_FLAG_WRITE_FAILED",
                extra={
                    "entry_id": entry.entry_id,
                    "student_id_hash": student_id_hash,
                    "urgent_reason": classification.reason,
                    "error": str(e),
                    "error_type": type(e).__name__,
                    "action": "MANUAL_REVIEW_REQUIRED",
                }
            )
            return False

        return True

    def _persist_sentiment(self, entry: JournalEntry, classification: ClassificationResult) -> bool:
        try:
            return self.journal_repository.set_sentiment(
                entry_id=entry.entry_id,
                score=classification.adjusted_score,
                magnitude=classification.adjusted_magnitude,
            )
        except RepositoryError as e:
            logger.error(
                "JOURNAL_SENTIMENT_WRITE_FAILED",
                extra={
                    "entry_id": entry.entry_id,
                    "error": str(e),
                }
            )
            return False


def build_entry(payload: Dict[str, Any]) -> JournalEntry:
    """Build a pre-analysis JournalEntry from an event payload.

    Raises:
        ValueError: If entry_id or content is missing
    """
    entry_id = payload.get("entry_id")
    content = payload.get("content")
    if not entry_id:
        raise ValueError("Missing required field: entry_id")
    if content is None:
        raise ValueError("Missing required field: content")

    student_id: Optional[str] = payload.get("student_id") or None
    return JournalEntry(entry_id=entry_id, content=content, student_id=student_id)
