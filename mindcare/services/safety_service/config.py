"""Safety-net classifier configuration.

One canonical, versioned keyword list and threshold set. Everything here
can be overridden by passing a custom RiskClassifierConfig to the
classifier (tests do this with small lists).
"""
from dataclasses import dataclass
from typing import FrozenSet, Tuple

# Check names used in RiskClassifierConfig.reason_precedence
TOPIC_CHECK = "topic"
KEYWORD_CHECK = "keyword"
SENTIMENT_CHECK = "sentiment"


# High-risk phrases matched as case-insensitive substrings of journal text.
# Phrases must be specific enough that substring matching does not fire
# inside ordinary words or everyday idioms (no "gun", "rope", "kms",
# "kill them", "touches me").
# Updated: 2025-10-20
HIGH_RISK_KEYWORDS: FrozenSet[str] = frozenset({
    # --------------------------------------------------------------------
    # SELF-HARM / SUICIDAL IDEATION
    # --------------------------------------------------------------------
    "suicide",
    "suicidal",
    "kill myself",
    "killing myself",
    "end my life",
    "ending my life",
    "end it all",
    "want to die",
    "wanna die",
    "better off dead",
    "better off without me",
    "no reason to live",
    "don't want to live",
    "dont want to live",
    "hurt myself",
    "harm myself",
    "self harm",
    "self-harm",
    "cut myself",
    "cutting myself",
    "hang myself",
    "overdose",
    "unalive",
    "sewerslide",
    "never wake up",
    "disappear forever",

    # --------------------------------------------------------------------
    # VIOLENCE TOWARD OTHERS
    # --------------------------------------------------------------------
    "kill someone",
    "kill him",
    "kill her",
    "hurt someone",
    "hurt other people",
    "hurt people at school",
    "shoot up the school",
    "bring a gun to school",
    "school shooting",
    "stab someone",

    # --------------------------------------------------------------------
    # EXPLICIT THREATS / ABUSE DISCLOSURE
    # --------------------------------------------------------------------
    "going to make them pay",
    "they will regret it",
    "bomb the school",
    "touches me down there",
    "touches me inappropriately",
})

# Substrings of topic-classification category names treated as high risk
# (matched case-insensitively against e.g. "/Sensitive Subjects/Self-Harm")
HIGH_RISK_TOPIC_CATEGORIES: Tuple[str, ...] = (
    "Self-Harm",
    "Violence",
    "Firearms & Weapons",
)


@dataclass(frozen=True)
class RiskClassifierConfig:
    """Thresholds and lists for the three urgency checks.

    Units: sentiment scores are on the service's [-1, 1] scale,
    confidences on [0, 1], magnitudes on [0, +inf).
    """
    high_risk_keywords: FrozenSet[str] = HIGH_RISK_KEYWORDS
    high_risk_topic_categories: Tuple[str, ...] = HIGH_RISK_TOPIC_CATEGORIES

    # Topic must be strictly more confident than this to count
    topic_confidence_threshold: float = 0.6

    # Scores at or below this are urgent on their own
    low_sentiment_threshold: float = -0.7

    # Values written to the entry when an urgent entry did not already
    # score at or below low_sentiment_threshold
    override_score: float = -1.0
    override_magnitude: float = 5.0

    # Order used to attribute the reason when several checks fire;
    # the keyword list is authoritative over topic and sentiment
    reason_precedence: Tuple[str, ...] = (KEYWORD_CHECK, TOPIC_CHECK, SENTIMENT_CHECK)

    # Version tracking for audit trail
    keyword_list_version: str = "2025.10.20"

    def __post_init__(self):
        if sorted(self.reason_precedence) != sorted((TOPIC_CHECK, KEYWORD_CHECK, SENTIMENT_CHECK)):
            raise ValueError(
                f"reason_precedence must order exactly {TOPIC_CHECK}, {KEYWORD_CHECK}, "
                f"{SENTIMENT_CHECK}; got {self.reason_precedence}"
            )
        if not 0.0 <= self.topic_confidence_threshold <= 1.0:
            raise ValueError(
                f"topic_confidence_threshold must be 0.0-1.0, got {self.topic_confidence_threshold}"
            )
        # Normalize once so matching can use plain lowercase substring checks
        object.__setattr__(
            self, "high_risk_keywords", frozenset(k.lower() for k in self.high_risk_keywords)
        )


# Reason strings stored on the student profile
TOPIC_REASON_TEMPLATE = "AI Threat Detected: {category}"
KEYWORD_REASON = "High-risk keyword detected."
SENTIMENT_REASON = "Low sentiment score detected."
