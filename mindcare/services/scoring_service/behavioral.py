"""Behavioral factor calculation from wearable (Google Fit) data.

Scores are 0-100 where 100 is good: on the step target, or sleeping
exactly the target hours.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from mindcare.shared.models import BehavioralSample
from mindcare.shared.utils import round_half_up
from .config import DEFAULT_SCORING_CONFIG, ScoringConfig

logger = logging.getLogger(__name__)

# Google Fit sleep stages counted as asleep: light, deep, REM
ASLEEP_STAGES = frozenset({1, 2, 4})

NANOS_PER_HOUR = 3.6e12


@dataclass(frozen=True)
class BehavioralScores:
    activity_score: int
    sleep_score: int

    def __post_init__(self):
        for name in ("activity_score", "sleep_score"):
            score = getattr(self, name)
            if not 0 <= score <= 100:
                raise ValueError(f"{name} must be 0-100, got {score}")

    @classmethod
    def neutral(cls, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> "BehavioralScores":
        """Default used when no wearable data is available."""
        return cls(
            activity_score=config.neutral_behavioral_score,
            sleep_score=config.neutral_behavioral_score,
        )

    def to_dict(self) -> Dict[str, int]:
        return {"activity_score": self.activity_score, "sleep_score": self.sleep_score}


def behavioral_scores(
    avg_sleep_hours: float,
    avg_step_count: float,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> BehavioralScores:
    """Convert weekly averages into activity and sleep scores.

    activity = min(100, steps / target * 100)
    sleep = 100 - min(|hours - target|, max_deviation) / max_deviation * 100

    Examples:
        (7.5, 8000) -> (100, 100)
        (4.5, 0) -> (0, 0)
    """
    activity = min(100.0, avg_step_count / config.healthy_step_count * 100)

    deviation = min(abs(avg_sleep_hours - config.healthy_sleep_hours), config.max_sleep_deviation)
    sleep = 100 - deviation / config.max_sleep_deviation * 100

    return BehavioralScores(
        activity_score=round_half_up(activity),
        sleep_score=round_half_up(sleep),
    )


def _buckets(payload: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    if not payload:
        return []
    return payload.get("bucket") or []


def _points(bucket: Dict[str, Any]) -> List[Dict[str, Any]]:
    datasets = bucket.get("dataset") or []
    if not datasets:
        return []
    return datasets[0].get("point") or []


def _int_val(point: Dict[str, Any]) -> int:
    values = point.get("value") or []
    if not values:
        return 0
    return int(values[0].get("intVal") or 0)


def daily_steps(steps_payload: Optional[Dict[str, Any]]) -> List[int]:
    """Step count per daily bucket; buckets with no points count as 0."""
    steps = []
    for bucket in _buckets(steps_payload):
        points = _points(bucket)
        steps.append(_int_val(points[0]) if points else 0)
    return steps


def daily_sleep_hours(sleep_payload: Optional[Dict[str, Any]]) -> List[float]:
    """Hours asleep per daily bucket, summed over light, deep and REM segments."""
    hours = []
    for bucket in _buckets(sleep_payload):
        asleep_nanos = sum(
            int(point["endTimeNanos"]) - int(point["startTimeNanos"])
            for point in _points(bucket)
            if _int_val(point) in ASLEEP_STAGES
        )
        hours.append(round(asleep_nanos / NANOS_PER_HOUR, 2))
    return hours


def summarize_fit_buckets(
    steps_payload: Optional[Dict[str, Any]],
    sleep_payload: Optional[Dict[str, Any]],
) -> Optional[BehavioralSample]:
    """Average Google Fit `dataset:aggregate` responses (24h buckets).

    Each payload is averaged over its own buckets; a missing payload
    averages to 0.

    Returns:
        BehavioralSample, or None if neither payload has any buckets
    """
    steps = daily_steps(steps_payload)
    sleep = daily_sleep_hours(sleep_payload)

    if not steps and not sleep:
        logger.info("FIT_DATA_UNAVAILABLE")
        return None

    return BehavioralSample(
        avg_sleep_hours=sum(sleep) / len(sleep) if sleep else 0.0,
        avg_step_count=sum(steps) / len(steps) if steps else 0.0,
    )
