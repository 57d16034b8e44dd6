"""Scoring Service: weekly check-ins, wearable data and final wellness scores.

Components:
- config.py: ScoringConfig targets and AggregationWeights
- checkin_scorer.py: raw check-in sums and monthly 0-100 factors
- behavioral.py: sleep/activity scores and Google Fit bucket summaries
- aggregator.py: weighted combination into anxiety/depression/stress scores
- phq9.py: PHQ-9 survey scoring
- checkin_repository.py: weekly_checkins persistence
- handler.py: Flask HTTP endpoints
"""

from .aggregator import ScoreAggregator, aggregate
from .behavioral import BehavioralScores, behavioral_scores, summarize_fit_buckets
from .checkin_repository import CheckinRepository
from .checkin_scorer import (
    CHECKIN_QUESTIONS,
    CheckinScores,
    month_bounds,
    monthly_factor,
    monthly_factors,
    score_checkin,
    validate_answers,
)
from .config import AggregationWeights, ScoreWeights, ScoringConfig
from .phq9 import PHQ9Result, score_phq9

__all__ = [
    "ScoreAggregator",
    "aggregate",
    "BehavioralScores",
    "behavioral_scores",
    "summarize_fit_buckets",
    "CheckinRepository",
    "CHECKIN_QUESTIONS",
    "CheckinScores",
    "month_bounds",
    "monthly_factor",
    "monthly_factors",
    "score_checkin",
    "validate_answers",
    "AggregationWeights",
    "ScoreWeights",
    "ScoringConfig",
    "PHQ9Result",
    "score_phq9",
]
