"""Unified score aggregator.

Combines monthly check-in factors (0-100, higher = more symptoms) with
inverted behavioral scores into the three final profile scores:

    sleep_factor    = 100 - sleep_score
    activity_factor = 100 - activity_score

    anxiety    = 0.6 * anxiety_chat    + 0.4 * sleep_factor
    depression = 0.6 * depression_chat + 0.3 * activity_factor + 0.1 * sleep_factor
    stress     = 0.6 * stress_chat     + 0.2 * sleep_factor    + 0.2 * activity_factor

Recomputation always starts from persisted state (the month's stored
check-ins and the last stored activity/sleep scores), so repeated or
out-of-order triggers converge on the same result.
"""
import logging
from datetime import datetime
from typing import Mapping, Optional

from mindcare.shared.models import BehavioralSample, Category, WellnessScores
from mindcare.shared.utils import hash_pii, round_half_up
from mindcare.services.alert_service.escalation import EscalationSink
from .behavioral import BehavioralScores, behavioral_scores
from .checkin_repository import CheckinRepository
from .checkin_scorer import month_bounds, monthly_factors
from .config import (
    DEFAULT_AGGREGATION_WEIGHTS,
    DEFAULT_SCORING_CONFIG,
    AggregationWeights,
    ScoreWeights,
    ScoringConfig,
)

logger = logging.getLogger(__name__)


def _weighted(weights: ScoreWeights, chat: float, sleep_factor: float, activity_factor: float) -> int:
    return round_half_up(
        weights.checkin * chat
        + weights.sleep * sleep_factor
        + weights.activity * activity_factor
    )


def aggregate(
    factors: Mapping[Category, float],
    behavioral: BehavioralScores,
    weights: AggregationWeights = DEFAULT_AGGREGATION_WEIGHTS,
) -> WellnessScores:
    """Weighted sum of monthly factors and inverted behavioral scores."""
    sleep_factor = 100 - behavioral.sleep_score
    activity_factor = 100 - behavioral.activity_score

    return WellnessScores(
        anxiety_score=_weighted(weights.anxiety, factors[Category.ANXIETY], sleep_factor, activity_factor),
        depression_score=_weighted(weights.depression, factors[Category.DEPRESSION], sleep_factor, activity_factor),
        stress_score=_weighted(weights.stress, factors[Category.STRESS], sleep_factor, activity_factor),
    )


class ScoreAggregator:
    """Recomputes and stores a student's final scores on every input change."""

    def __init__(
        self,
        checkin_repository: CheckinRepository,
        escalation_sink: EscalationSink,
        config: ScoringConfig = DEFAULT_SCORING_CONFIG,
        weights: AggregationWeights = DEFAULT_AGGREGATION_WEIGHTS,
    ):
        self.checkin_repository = checkin_repository
        self.escalation_sink = escalation_sink
        self.config = config
        self.weights = weights

    def recompute(
        self,
        student_id: str,
        behavioral: Optional[BehavioralSample] = None,
        now: Optional[datetime] = None,
    ) -> WellnessScores:
        """Recompute from this month's stored check-ins and merge into the profile.

        Args:
            student_id: Student to score
            behavioral: Fresh weekly wearable averages; None reuses the scores
                stored by the last wearable sample, or the neutral 50/50 if
                the student has never had one
            now: Reference time selecting the calendar month (default utcnow)

        Returns:
            The scores written to the profile
        """
        start, end = month_bounds(now or datetime.utcnow())
        checkins = self.checkin_repository.find_in_range(student_id, start, end)
        factors = monthly_factors(checkins, self.config)

        if behavioral is None:
            scores = self._stored_behavioral(student_id)
        else:
            scores = behavioral_scores(
                behavioral.avg_sleep_hours,
                behavioral.avg_step_count,
                self.config,
            )

        result = aggregate(factors, scores, self.weights)
        self.escalation_sink.update_scores(
            student_id,
            result,
            behavioral=scores.to_dict() if behavioral is not None else None,
        )

        logger.info(
            "SCORES_RECOMPUTED",
            extra={
                "student_id_hash": hash_pii(student_id),
                "checkin_count": len(checkins),
                "behavioral_fresh": behavioral is not None,
                **scores.to_dict(),
                **result.to_dict(),
            }
        )
        return result

    def _stored_behavioral(self, student_id: str) -> BehavioralScores:
        profile = self.escalation_sink.find_profile(student_id)
        if profile is None or profile.activity_score is None or profile.sleep_score is None:
            return BehavioralScores.neutral(self.config)
        return BehavioralScores(
            activity_score=profile.activity_score,
            sleep_score=profile.sleep_score,
        )
