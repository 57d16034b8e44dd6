"""Dashboard status, sentiment labels and per-student report analysis.

Thresholds are on the 0-100 profile scale (lower is better):
- mild band starts at 33
- elevated ("needs attention") band starts at 66
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from mindcare.shared.models import JournalEntry, StudentRiskProfile

MILD_THRESHOLD = 33
ELEVATED_THRESHOLD = 66

# Journal sentiment bands ([-1, 1] score, [0, inf) magnitude)
NEGATIVE_SENTIMENT_MAX = -0.25
POSITIVE_SENTIMENT_MIN = 0.25
STRONG_MAGNITUDE = 3.0
CLEAR_MAGNITUDE = 1.0
HIGH_RISK_JOURNAL_SCORE = -0.7
HIGH_RISK_JOURNAL_MAGNITUDE = 2.0


class MentalHealthStatus(Enum):
    """Overall status badge shown on the admin dashboard."""
    URGENT = "Urgent"
    NEEDS_ATTENTION = "Needs Attention"
    NEUTRAL = "Neutral"
    POSITIVE = "Positive"


class ScoreBand(Enum):
    MINIMAL = "minimal"
    MILD = "mild"
    ELEVATED = "elevated"


def score_band(score: int) -> ScoreBand:
    if score >= ELEVATED_THRESHOLD:
        return ScoreBand.ELEVATED
    if score >= MILD_THRESHOLD:
        return ScoreBand.MILD
    return ScoreBand.MINIMAL


def mental_health_status(profile: StudentRiskProfile) -> MentalHealthStatus:
    """Urgent flag first, then the worst category decides.

    Missing scores count as 0.
    """
    if profile.needs_help:
        return MentalHealthStatus.URGENT

    scores = [score or 0 for score in profile.scores]
    if any(score >= ELEVATED_THRESHOLD for score in scores):
        return MentalHealthStatus.NEEDS_ATTENTION
    if all(score < MILD_THRESHOLD for score in scores):
        return MentalHealthStatus.POSITIVE
    return MentalHealthStatus.NEUTRAL


def sentiment_label(score: Optional[float], magnitude: Optional[float]) -> str:
    """Human-readable label such as "Negative (Strong)" or "Analyzing"."""
    if score is None:
        return "Analyzing"

    if score < NEGATIVE_SENTIMENT_MAX:
        text = "Negative"
    elif score > POSITIVE_SENTIMENT_MIN:
        text = "Positive"
    else:
        text = "Neutral"

    if magnitude is not None:
        if magnitude > STRONG_MAGNITUDE:
            return f"{text} (Strong)"
        if magnitude > CLEAR_MAGNITUDE:
            return f"{text} (Clear)"
    return text


def is_high_risk_journal(entry: JournalEntry) -> bool:
    """Highly negative and intense: score <= -0.7 and magnitude > 2.0."""
    return (
        entry.sentiment_score is not None
        and entry.sentiment_magnitude is not None
        and entry.sentiment_score <= HIGH_RISK_JOURNAL_SCORE
        and entry.sentiment_magnitude > HIGH_RISK_JOURNAL_MAGNITUDE
    )


@dataclass(frozen=True)
class StudentReport:
    """Report rendered on the staff per-student page."""
    student_id: str
    status: MentalHealthStatus
    analysis: List[str]
    high_risk_journal_count: int = 0
    score_bands: Dict[str, Optional[str]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "student_id": self.student_id,
            "status": self.status.value,
            "analysis": self.analysis,
            "high_risk_journal_count": self.high_risk_journal_count,
            "score_bands": self.score_bands,
        }


def build_report(profile: StudentRiskProfile, journals: Sequence[JournalEntry]) -> StudentReport:
    """Summarize a student's profile and journal history for a reviewer."""
    analysis = []

    if profile.needs_help:
        analysis.append(
            "This student has been automatically flagged for high-risk content "
            f"({profile.last_urgent_reason}). Immediate intervention is required."
        )

    bands = {}
    for label, score in (
        ("Depression", profile.depression_score),
        ("Anxiety", profile.anxiety_score),
        ("Stress", profile.stress_score),
    ):
        bands[label.lower()] = score_band(score).value if score is not None else None
        if score is not None and score >= ELEVATED_THRESHOLD:
            analysis.append(
                f"Weekly check-ins and activity data indicate an elevated level of {label} ({score}/100)."
            )

    high_risk_count = sum(1 for entry in journals if is_high_risk_journal(entry))
    if high_risk_count:
        analysis.append(
            f"The journal history contains {high_risk_count} entries with highly negative "
            "and severe sentiment."
        )

    if not analysis:
        analysis.append(
            "This student's scores and journal entries are within normal parameters. "
            "Routine monitoring is recommended."
        )

    return StudentReport(
        student_id=profile.student_id,
        status=mental_health_status(profile),
        analysis=analysis,
        high_risk_journal_count=high_risk_count,
        score_bands=bands,
    )
