"""Three-layer safety net for journal entries.

Checks (all three always run so every signal is logged):
- Topic: AI topic classification hit a high-risk category with confidence > 0.6
- Keyword: curated high-risk phrase found in the text
- Sentiment: document sentiment at or below -0.7

Any check firing makes the entry urgent. The stored reason comes from the
first firing check in the configured precedence order.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from mindcare.shared.models import SentimentResult, TopicCategory
from mindcare.shared.utils import hash_text_for_audit
from .config import (
    KEYWORD_CHECK,
    KEYWORD_REASON,
    SENTIMENT_CHECK,
    SENTIMENT_REASON,
    TOPIC_CHECK,
    TOPIC_REASON_TEMPLATE,
    RiskClassifierConfig,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of classifying one journal entry.

    adjusted_score/adjusted_magnitude are the values to persist on the
    entry; they differ from the raw sentiment only when the override fired.
    """
    is_urgent: bool
    reason: Optional[str]
    adjusted_score: float
    adjusted_magnitude: float
    topic_match: Optional[TopicCategory] = None
    keyword_matches: List[str] = field(default_factory=list)
    low_sentiment: bool = False
    override_applied: bool = False

    def __post_init__(self):
        if self.is_urgent and not self.reason:
            raise ValueError("Urgent classification requires a reason")

    @property
    def fired_checks(self) -> List[str]:
        checks = []
        if self.topic_match is not None:
            checks.append(TOPIC_CHECK)
        if self.keyword_matches:
            checks.append(KEYWORD_CHECK)
        if self.low_sentiment:
            checks.append(SENTIMENT_CHECK)
        return checks

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_urgent": self.is_urgent,
            "reason": self.reason,
            "sentiment_score": self.adjusted_score,
            "sentiment_magnitude": self.adjusted_magnitude,
            "fired_checks": self.fired_checks,
            "override_applied": self.override_applied,
        }


class RiskClassifier:
    """Decides whether a journal entry needs immediate human review."""

    def __init__(self, config: Optional[RiskClassifierConfig] = None):
        self.config = config or RiskClassifierConfig()

        logger.info(
            "RISK_CLASSIFIER_INITIALIZED",
            extra={
                "keyword_list_version": self.config.keyword_list_version,
                "keyword_count": len(self.config.high_risk_keywords),
                "topic_category_count": len(self.config.high_risk_topic_categories),
                "reason_precedence": list(self.config.reason_precedence),
            }
        )

    def classify(self, text: str, sentiment: SentimentResult) -> ClassificationResult:
        """Classify a journal entry.

        Args:
            text: Raw journal text
            sentiment: Result from the sentiment analyzer (may be neutral)

        Returns:
            ClassificationResult with urgency, reason and values to persist
        """
        text = text or ""
        topic_match = self._check_topics(sentiment.topics)
        keyword_matches = self._check_keywords(text)
        low_sentiment = sentiment.score <= self.config.low_sentiment_threshold

        reasons = {
            TOPIC_CHECK: (
                TOPIC_REASON_TEMPLATE.format(category=topic_match.name) if topic_match else None
            ),
            KEYWORD_CHECK: KEYWORD_REASON if keyword_matches else None,
            SENTIMENT_CHECK: SENTIMENT_REASON if low_sentiment else None,
        }
        reason = next(
            (reasons[check] for check in self.config.reason_precedence if reasons[check]),
            None,
        )
        is_urgent = reason is not None

        adjusted_score = sentiment.score
        adjusted_magnitude = sentiment.magnitude
        override_applied = False
        if is_urgent and sentiment.score > self.config.low_sentiment_threshold:
            # The model did not reflect the severity; force a consistent sort key
            adjusted_score = self.config.override_score
            adjusted_magnitude = self.config.override_magnitude
            override_applied = True

        result = ClassificationResult(
            is_urgent=is_urgent,
            reason=reason,
            adjusted_score=adjusted_score,
            adjusted_magnitude=adjusted_magnitude,
            topic_match=topic_match,
            keyword_matches=keyword_matches,
            low_sentiment=low_sentiment,
            override_applied=override_applied,
        )

        log = logger.critical if is_urgent else logger.info
        log(
            "JOURNAL_CLASSIFIED_URGENT" if is_urgent else "JOURNAL_CLASSIFIED",
            extra={
                "text_hash": hash_text_for_audit(text),
                "is_urgent": is_urgent,
                "reason": reason,
                "fired_checks": result.fired_checks,
                "keyword_match_count": len(keyword_matches),
                "topic": topic_match.name if topic_match else None,
                "raw_score": sentiment.score,
                "override_applied": override_applied,
            }
        )
        return result

    def _check_topics(self, topics: List[TopicCategory]) -> Optional[TopicCategory]:
        """First topic in a high-risk category above the confidence threshold."""
        categories = [c.lower() for c in self.config.high_risk_topic_categories]
        for topic in topics:
            name = topic.name.lower()
            if topic.confidence > self.config.topic_confidence_threshold and any(
                category in name for category in categories
            ):
                return topic
        return None

    def _check_keywords(self, text: str) -> List[str]:
        """All high-risk phrases contained in the text, sorted."""
        lowered = text.lower()
        return sorted(k for k in self.config.high_risk_keywords if k in lowered)
