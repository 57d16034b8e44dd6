"""Weekly check-in scoring.

Two separate outputs:
- score_checkin: raw per-category sums for one session (0-3 per answer),
  shown to the student right after the check-in.
- monthly_factor(s): the 0-100 share of "yes-equivalent" (non-zero) answers
  over the calendar month, consumed by the aggregator.
"""
import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from mindcare.shared.models import Category, CheckinRecord, VALID_ANSWERS
from .config import DEFAULT_SCORING_CONFIG, ScoringConfig


@dataclass(frozen=True)
class CheckinQuestion:
    category: Category
    text: str


# Canonical questionnaire, asked in this order
CHECKIN_QUESTIONS: Tuple[CheckinQuestion, ...] = (
    # Stress (DASS-21 inspired)
    CheckinQuestion(Category.STRESS, "Over the last week, how often have you found it hard to wind down?"),
    CheckinQuestion(Category.STRESS, "Over the last week, how often have you been easily annoyed or irritable?"),
    CheckinQuestion(Category.STRESS, "Over the last week, how often have you felt nervous, anxious or on edge?"),
    # Anxiety (GAD-7 inspired)
    CheckinQuestion(Category.ANXIETY, "Over the last week, how often have you been unable to stop or control worrying?"),
    CheckinQuestion(Category.ANXIETY, "Over the last week, how often have you been worrying too much about different things?"),
    CheckinQuestion(Category.ANXIETY, "Over the last week, how often have you had trouble relaxing?"),
    CheckinQuestion(Category.ANXIETY, "Over the last week, how often have you felt afraid as if something awful might happen?"),
    # Depression (PHQ-9 inspired)
    CheckinQuestion(Category.DEPRESSION, "Over the last week, how often have you had little interest or pleasure in doing things?"),
    CheckinQuestion(Category.DEPRESSION, "Over the last week, how often have you been feeling down, depressed, or hopeless?"),
    CheckinQuestion(Category.DEPRESSION, "Over the last week, how often have you had trouble falling or staying asleep, or sleeping too much?"),
    CheckinQuestion(Category.DEPRESSION, "Over the last week, how often have you been feeling tired or having little energy?"),
    CheckinQuestion(
        Category.DEPRESSION,
        "Over the last week, how often have you been feeling bad about yourself, "
        "or that you are a failure or have let yourself or your family down?",
    ),
)


def questions_for(category: Category) -> List[CheckinQuestion]:
    return [q for q in CHECKIN_QUESTIONS if q.category == category]


@dataclass(frozen=True)
class CheckinScores:
    """Raw per-category sums for one check-in session."""
    stress_score: int
    anxiety_score: int
    depression_score: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "stress_score": self.stress_score,
            "anxiety_score": self.anxiety_score,
            "depression_score": self.depression_score,
        }


def validate_answers(answers: Mapping[str, Sequence[int]]) -> None:
    """Check an answer map against the canonical questionnaire.

    Args:
        answers: {"stress": [...], "anxiety": [...], "depression": [...]}

    Raises:
        ValueError: On a missing category, wrong answer count or
            an answer outside 0-3
    """
    for category in Category:
        if category.value not in answers:
            raise ValueError(f"Missing answers for category: {category.value}")
        given = list(answers[category.value])
        expected = len(questions_for(category))
        if len(given) != expected:
            raise ValueError(
                f"Expected {expected} {category.value} answers, got {len(given)}"
            )
        for answer in given:
            if answer not in VALID_ANSWERS:
                raise ValueError(f"{category.value} answers must be 0-3, got {answer!r}")


def score_checkin(answers: Mapping[str, Sequence[int]]) -> CheckinScores:
    """Sum each category's answers.

    Example: stress answers [3, 3, 3] -> stress_score 9.
    """
    return CheckinScores(
        stress_score=sum(answers.get(Category.STRESS.value, ())),
        anxiety_score=sum(answers.get(Category.ANXIETY.value, ())),
        depression_score=sum(answers.get(Category.DEPRESSION.value, ())),
    )


def monthly_factor(
    category: Category,
    checkins: Sequence[CheckinRecord],
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> float:
    """Average non-zero answers per check-in as a 0-100 share of the assumed max.

    Zero check-ins gives 0.0.
    """
    count = max(len(checkins), 1)
    yes_answers = sum(
        sum(1 for answer in checkin.responses(category) if answer)
        for checkin in checkins
    )
    return min(100.0, (yes_answers / count) / config.max_yes_answers * 100)


def monthly_factors(
    checkins: Iterable[CheckinRecord],
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> Dict[Category, float]:
    checkins = list(checkins)
    return {category: monthly_factor(category, checkins, config) for category in Category}


def month_bounds(now: datetime) -> Tuple[datetime, datetime]:
    """Calendar-month window containing `now`, inclusive on both ends."""
    start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    last_day = calendar.monthrange(now.year, now.month)[1]
    end = start.replace(day=last_day) + timedelta(days=1) - timedelta(microseconds=1)
    return start, end
