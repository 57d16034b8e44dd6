"""PHQ-9 depression screening survey.

Nine items answered 0-3 ("Not at all" .. "Nearly every day"), total 0-27.
Item 9 asks about thoughts of self-harm; any non-zero answer must reach a
human reviewer regardless of the total.
"""
from dataclasses import dataclass
from typing import Any, Dict, Sequence, Tuple

from mindcare.shared.models import VALID_ANSWERS

PHQ9_ITEM_COUNT = 9
SELF_HARM_ITEM_INDEX = 8

# Total-score status bands
NEGATIVE_MIN_TOTAL = 10
NEUTRAL_MIN_TOTAL = 5

SELF_HARM_REASON = "PHQ-9 self-harm item endorsed."

PHQ9_QUESTIONS: Tuple[str, ...] = (
    "Little interest or pleasure in doing things",
    "Feeling down, depressed, or hopeless",
    "Trouble falling or staying asleep, or sleeping too much",
    "Feeling tired or having little energy",
    "Poor appetite or overeating",
    "Feeling bad about yourself, or that you are a failure or have let yourself or your family down",
    "Trouble concentrating on things, such as reading the newspaper or watching television",
    "Moving or speaking so slowly that other people could have noticed, or the opposite",
    "Thoughts that you would be better off dead or of hurting yourself in some way",
)


@dataclass(frozen=True)
class PHQ9Result:
    total: int
    status: str
    self_harm_flag: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total": self.total,
            "status": self.status,
            "self_harm_flag": self.self_harm_flag,
        }


def phq9_status(total: int) -> str:
    if total >= NEGATIVE_MIN_TOTAL:
        return "negative"
    if total >= NEUTRAL_MIN_TOTAL:
        return "neutral"
    return "positive"


def score_phq9(answers: Sequence[int]) -> PHQ9Result:
    """Score a completed PHQ-9.

    Raises:
        ValueError: Unless exactly nine answers, each 0-3
    """
    answers = list(answers)
    if len(answers) != PHQ9_ITEM_COUNT:
        raise ValueError(f"PHQ-9 requires {PHQ9_ITEM_COUNT} answers, got {len(answers)}")
    for answer in answers:
        if answer not in VALID_ANSWERS:
            raise ValueError(f"PHQ-9 answers must be 0-3, got {answer!r}")

    total = sum(answers)
    return PHQ9Result(
        total=total,
        status=phq9_status(total),
        self_harm_flag=answers[SELF_HARM_ITEM_INDEX] > 0,
    )
