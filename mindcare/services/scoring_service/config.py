"""Scoring Service configuration: behavioral targets and aggregation weights.

Units:
- Behavioral scores are 0-100 where HIGHER is better (100 = on target).
- Check-in monthly factors and final wellness scores are 0-100 where
  LOWER is better.
"""
from dataclasses import dataclass
import math


@dataclass(frozen=True)
class ScoringConfig:
    """Targets used to turn wearable averages into 0-100 goodness scores."""

    # 100% activity mark; more steps are not rewarded further
    healthy_step_count: float = 8000.0

    # Target nightly sleep; deviation in either direction is penalized
    healthy_sleep_hours: float = 7.5

    # Deviation (hours) at which the sleep score bottoms out at 0
    max_sleep_deviation: float = 3.0

    # Assumed maximum "yes-equivalent" answers per category per check-in
    max_yes_answers: int = 5

    # Substituted for both behavioral scores when no wearable data exists
    neutral_behavioral_score: int = 50

    def __post_init__(self):
        if self.healthy_step_count <= 0:
            raise ValueError(f"healthy_step_count must be positive, got {self.healthy_step_count}")
        if self.max_sleep_deviation <= 0:
            raise ValueError(f"max_sleep_deviation must be positive, got {self.max_sleep_deviation}")
        if self.max_yes_answers <= 0:
            raise ValueError(f"max_yes_answers must be positive, got {self.max_yes_answers}")
        if not 0 <= self.neutral_behavioral_score <= 100:
            raise ValueError(
                f"neutral_behavioral_score must be 0-100, got {self.neutral_behavioral_score}"
            )


@dataclass(frozen=True)
class ScoreWeights:
    """Weights for one final score: self-report, inverted sleep, inverted activity."""
    checkin: float
    sleep: float
    activity: float

    def __post_init__(self):
        total = self.checkin + self.sleep + self.activity
        # Weights summing to 1.0 keep [0, 100] inputs inside [0, 100]
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"Score weights must sum to 1.0, got {total}")
        if min(self.checkin, self.sleep, self.activity) < 0:
            raise ValueError("Score weights must be non-negative")


@dataclass(frozen=True)
class AggregationWeights:
    """Weight sets for the three final wellness scores.

    Self-report is weighted higher than the behavioral proxy throughout.
    """
    anxiety: ScoreWeights = ScoreWeights(checkin=0.6, sleep=0.4, activity=0.0)
    depression: ScoreWeights = ScoreWeights(checkin=0.6, sleep=0.1, activity=0.3)
    stress: ScoreWeights = ScoreWeights(checkin=0.6, sleep=0.2, activity=0.2)


DEFAULT_SCORING_CONFIG = ScoringConfig()
DEFAULT_AGGREGATION_WEIGHTS = AggregationWeights()
