"""Wellness domain models: check-ins, journal entries and risk profiles.

Score convention: every stored wellness score is an integer on a 0-100
scale where LOWER is better. Raw check-in sums (0-3 per answer) are only
used for the per-session summary, never stored on the profile.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple
import uuid


class Category(Enum):
    """Self-report categories asked in the weekly check-in."""
    STRESS = "stress"           # DASS-21 inspired items
    ANXIETY = "anxiety"         # GAD-7 inspired items
    DEPRESSION = "depression"   # PHQ-9 inspired items


class LikertAnswer(Enum):
    """Answer options shared by every check-in and PHQ-9 question."""
    NOT_AT_ALL = 0
    SEVERAL_DAYS = 1
    MORE_THAN_HALF_THE_DAYS = 2
    NEARLY_EVERY_DAY = 3


VALID_ANSWERS = frozenset(a.value for a in LikertAnswer)


def _validate_answers(name: str, answers: Tuple[int, ...]) -> None:
    for answer in answers:
        if answer not in VALID_ANSWERS:
            raise ValueError(f"{name} answers must be 0-3, got {answer!r}")


@dataclass(frozen=True)
class CheckinRecord:
    """One completed weekly check-in session.

    Created atomically when the student answers the last question.
    Never modified or deleted afterwards.
    """
    student_id: str
    stress_responses: Tuple[int, ...]
    anxiety_responses: Tuple[int, ...]
    depression_responses: Tuple[int, ...]
    created_at: datetime = field(default_factory=datetime.utcnow)
    checkin_id: str = field(default_factory=lambda: f"chk_{uuid.uuid4().hex[:12]}")

    def __post_init__(self):
        if not self.student_id:
            raise ValueError("Check-in requires a student_id")
        # Accept lists from JSON payloads but store immutable tuples
        for attr in ("stress_responses", "anxiety_responses", "depression_responses"):
            value = tuple(getattr(self, attr))
            _validate_answers(attr, value)
            object.__setattr__(self, attr, value)

    def responses(self, category: Category) -> Tuple[int, ...]:
        """Answers recorded for a single category."""
        return {
            Category.STRESS: self.stress_responses,
            Category.ANXIETY: self.anxiety_responses,
            Category.DEPRESSION: self.depression_responses,
        }[category]

    def answers_by_category(self) -> Dict[Category, Tuple[int, ...]]:
        return {category: self.responses(category) for category in Category}


@dataclass(frozen=True)
class JournalEntry:
    """A free-text journal submission.

    Sentiment fields stay None until the single analysis pass sets them.
    student_id may be missing on legacy entries.
    """
    entry_id: str
    content: str
    student_id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    sentiment_score: Optional[float] = None
    sentiment_magnitude: Optional[float] = None

    def __post_init__(self):
        if self.sentiment_score is not None and not -1.0 <= self.sentiment_score <= 1.0:
            raise ValueError(f"Sentiment score must be -1.0-1.0, got {self.sentiment_score}")
        if self.sentiment_magnitude is not None and self.sentiment_magnitude < 0.0:
            raise ValueError(f"Sentiment magnitude must be >= 0, got {self.sentiment_magnitude}")

    @property
    def is_analyzed(self) -> bool:
        return self.sentiment_score is not None


@dataclass(frozen=True)
class BehavioralSample:
    """Trailing 7-day wearable averages used for one scoring pass."""
    avg_sleep_hours: float
    avg_step_count: float

    def __post_init__(self):
        if self.avg_sleep_hours < 0 or self.avg_step_count < 0:
            raise ValueError(
                f"Behavioral averages must be non-negative, got "
                f"sleep={self.avg_sleep_hours} steps={self.avg_step_count}"
            )


@dataclass(frozen=True)
class StudentRiskProfile:
    """Per-student risk state shown on the staff and admin dashboards.

    Scores (and the latest activity/sleep sub-scores they were built from)
    are written by the aggregator, the urgent fields by the journal
    classifier (or PHQ-9 self-harm item) and cleared by a human reviewer.
    """
    student_id: str
    anxiety_score: Optional[int] = None
    depression_score: Optional[int] = None
    stress_score: Optional[int] = None
    needs_help: bool = False
    last_urgent_entry: Optional[str] = None
    last_urgent_reason: Optional[str] = None
    phq9_score: Optional[int] = None
    activity_score: Optional[int] = None
    sleep_score: Optional[int] = None
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self):
        for name in ("anxiety_score", "depression_score", "stress_score", "activity_score", "sleep_score"):
            score = getattr(self, name)
            if score is not None and not 0 <= score <= 100:
                raise ValueError(f"{name} must be 0-100, got {score}")
        if self.needs_help and not self.last_urgent_reason:
            raise ValueError("needs_help requires a last_urgent_reason")

    @property
    def scores(self) -> List[Optional[int]]:
        return [self.anxiety_score, self.depression_score, self.stress_score]


@dataclass(frozen=True)
class WellnessScores:
    """Final 0-100 scores (lower is better) written to the profile."""
    anxiety_score: int
    depression_score: int
    stress_score: int

    def __post_init__(self):
        for name in ("anxiety_score", "depression_score", "stress_score"):
            score = getattr(self, name)
            if not 0 <= score <= 100:
                raise ValueError(f"{name} must be 0-100, got {score}")

    def to_dict(self) -> Dict[str, int]:
        return {
            "anxiety_score": self.anxiety_score,
            "depression_score": self.depression_score,
            "stress_score": self.stress_score,
        }
