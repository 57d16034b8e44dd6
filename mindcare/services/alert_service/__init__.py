"""Alert Service: student risk state, urgent-flag notifications and reports.

Components:
- profile_repository.py: student_profiles persistence (field-level merges)
- escalation.py: EscalationSink, the single writer of risk state
- alert_publisher.py: Kinesis notifications for new urgent flags
- report.py: dashboard status, sentiment labels and student reports
- handler.py: Flask HTTP endpoints for reviewers
"""

from .alert_publisher import AlertEventPublisher, UrgentFlagEvent
from .escalation import EscalationSink
from .profile_repository import StudentProfileRepository
from .report import (
    MentalHealthStatus,
    ScoreBand,
    StudentReport,
    build_report,
    is_high_risk_journal,
    mental_health_status,
    score_band,
    sentiment_label,
)

__all__ = [
    "AlertEventPublisher",
    "UrgentFlagEvent",
    "EscalationSink",
    "StudentProfileRepository",
    "MentalHealthStatus",
    "ScoreBand",
    "StudentReport",
    "build_report",
    "is_high_risk_journal",
    "mental_health_status",
    "score_band",
    "sentiment_label",
]
