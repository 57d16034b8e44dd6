"""Shared domain models for MindCare platform."""
from .sentiment import SentimentResult, TopicCategory
from .wellness import (
    BehavioralSample,
    Category,
    CheckinRecord,
    JournalEntry,
    LikertAnswer,
    StudentRiskProfile,
    VALID_ANSWERS,
    WellnessScores,
)

__all__ = [
    "BehavioralSample",
    "Category",
    "CheckinRecord",
    "JournalEntry",
    "LikertAnswer",
    "SentimentResult",
    "StudentRiskProfile",
    "TopicCategory",
    "VALID_ANSWERS",
    "WellnessScores",
]
