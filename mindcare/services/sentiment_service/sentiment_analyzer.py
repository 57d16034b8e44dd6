"""Sentiment and topic analysis for journal entries.

Wraps the external text-understanding service. The two sub-calls are
independent:
- Sentiment failure degrades to neutral (score 0, magnitude 0)
- Topic failure degrades to an empty topic list (expected for short text)
Neither failure is ever raised to the caller.
"""
import logging
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple

from mindcare.shared.models import SentimentResult, TopicCategory
from mindcare.shared.utils import hash_text_for_audit
from .language_client import LanguageServiceClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SentimentConfig:
    """Configuration for calls to the text-understanding service."""
    request_timeout_s: float = 10.0
    topics_enabled: bool = True


class SentimentAnalyzer:
    """Produces a SentimentResult for any text without raising."""

    def __init__(
        self,
        config: Optional[SentimentConfig] = None,
        client: Optional[LanguageServiceClient] = None,
    ):
        """Initialize analyzer.

        Args:
            config: Timeout and feature configuration
            client: Language service wrapper (injected for testing)
        """
        self.config = config or SentimentConfig()
        self.client = client or LanguageServiceClient(timeout_s=self.config.request_timeout_s)

        logger.info(
            "SENTIMENT_ANALYZER_INITIALIZED",
            extra={
                "request_timeout_s": self.config.request_timeout_s,
                "topics_enabled": self.config.topics_enabled,
            }
        )

    def analyze(self, text: str) -> SentimentResult:
        """Analyze sentiment and topics of a journal entry.

        Args:
            text: Raw journal text

        Returns:
            SentimentResult; neutral when the service cannot be reached
        """
        if not text or not text.strip():
            logger.info("SENTIMENT_SKIPPED", extra={"reason": "empty_text"})
            return SentimentResult.neutral()

        text_hash = hash_text_for_audit(text)
        start_time = time.perf_counter()

        sentiment = self._analyze_sentiment(text, text_hash)
        topics = self._classify_topics(text, text_hash)

        score, magnitude = sentiment if sentiment is not None else (0.0, 0.0)
        result = SentimentResult(
            score=score,
            magnitude=magnitude,
            topics=topics if topics is not None else [],
            sentiment_available=sentiment is not None,
            topics_available=topics is not None,
        )

        logger.info(
            "SENTIMENT_ANALYSIS_COMPLETED",
            extra={
                "text_hash": text_hash,
                "score": result.score,
                "magnitude": result.magnitude,
                "topic_count": len(result.topics),
                "sentiment_available": result.sentiment_available,
                "topics_available": result.topics_available,
                "latency_ms": (time.perf_counter() - start_time) * 1000,
            }
        )
        return result

    def _analyze_sentiment(self, text: str, text_hash: str) -> Optional[Tuple[float, float]]:
        """Sentiment sub-call. None means the call failed."""
        try:
            score, magnitude = self.client.analyze_sentiment(text)
        except Exception as e:
            logger.warning(
                "SENTIMENT_CALL_FAILED",
                extra={
                    "text_hash": text_hash,
                    "error": str(e),
                    "error_type": type(e).__name__,
                    "action": "DEFAULTING_TO_NEUTRAL",
                }
            )
            return None

        # Clamp in case the service drifts outside its documented range
        return max(-1.0, min(1.0, score)), max(0.0, magnitude)

    def _classify_topics(self, text: str, text_hash: str) -> Optional[List[TopicCategory]]:
        """Topic sub-call. None means the call failed or is disabled."""
        if not self.config.topics_enabled:
            return None

        try:
            return self.client.classify_topics(text)
        except Exception as e:
            # Short entries are routinely rejected by classification
            logger.info(
                "TOPIC_CLASSIFICATION_UNAVAILABLE",
                extra={
                    "text_hash": text_hash,
                    "error_type": type(e).__name__,
                    "text_length": len(text),
                }
            )
            return None
