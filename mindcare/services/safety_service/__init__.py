"""Safety Service: three-layer safety net for journal entries.

Every new journal entry is classified as urgent or not from three
independent signals: AI topic classification, curated high-risk keywords
and very low sentiment. Urgent entries flag the student for human review.

Components:
- config.py: RiskClassifierConfig, canonical keyword list and thresholds
- classifier.py: RiskClassifier and the sentiment override rule
- journal_repository.py: journal_entries persistence
- journal_pipeline.py: analyze -> classify -> flag -> persist
- handler.py: Flask HTTP endpoints (/health, /ready, /journal/analyze)

Usage:
    from mindcare.services.safety_service import RiskClassifier
    result = RiskClassifier().classify(text, sentiment)
    result.is_urgent, result.reason
"""

from .classifier import ClassificationResult, RiskClassifier
from .config import HIGH_RISK_KEYWORDS, HIGH_RISK_TOPIC_CATEGORIES, RiskClassifierConfig
from .journal_pipeline import JournalAnalysisOutcome, JournalAnalysisPipeline
from .journal_repository import JournalRepository

__all__ = [
    "ClassificationResult",
    "RiskClassifier",
    "HIGH_RISK_KEYWORDS",
    "HIGH_RISK_TOPIC_CATEGORIES",
    "RiskClassifierConfig",
    "JournalAnalysisOutcome",
    "JournalAnalysisPipeline",
    "JournalRepository",
]
