"""Sentiment analysis result models.

Mirrors the text-understanding service contract: a document sentiment
score in [-1, 1], a non-negative magnitude, and optional topic categories.
"""
from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class TopicCategory:
    """A content category returned by topic classification."""
    name: str           # e.g. "/Sensitive Subjects/Self-Harm"
    confidence: float   # 0.0 to 1.0

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be 0.0-1.0, got {self.confidence}")


@dataclass(frozen=True)
class SentimentResult:
    """Combined sentiment and topic output for one piece of text."""
    score: float
    magnitude: float
    topics: List[TopicCategory] = field(default_factory=list)
    sentiment_available: bool = True
    topics_available: bool = True

    def __post_init__(self):
        if not -1.0 <= self.score <= 1.0:
            raise ValueError(f"Sentiment score must be -1.0-1.0, got {self.score}")
        if self.magnitude < 0.0:
            raise ValueError(f"Magnitude must be >= 0, got {self.magnitude}")

    @classmethod
    def neutral(cls) -> "SentimentResult":
        """Default used when the sentiment service is unavailable."""
        return cls(score=0.0, magnitude=0.0, sentiment_available=False, topics_available=False)

    def to_dict(self) -> dict:
        return {
            "score": round(self.score, 3),
            "magnitude": round(self.magnitude, 3),
            "topics": [{"name": t.name, "confidence": round(t.confidence, 3)} for t in self.topics],
        }
