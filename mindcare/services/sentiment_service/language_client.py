"""Google Cloud Natural Language client wrapper.

Thin layer over `google.cloud.language_v1` exposing the two calls the
sentiment analyzer needs. Errors are NOT handled here: the analyzer decides
how each failure degrades.
"""
import logging
from typing import List, Tuple

from mindcare.shared.models import TopicCategory

logger = logging.getLogger(__name__)


class LanguageServiceClient:
    """Calls analyzeSentiment and classifyText with a bounded timeout."""

    def __init__(self, timeout_s: float = 10.0, client=None):
        """Initialize wrapper.

        Args:
            timeout_s: Per-request timeout in seconds
            client: Pre-built language_v1.LanguageServiceClient (tests inject a mock)
        """
        self.timeout_s = timeout_s
        self._client = client

    @property
    def client(self):
        """Lazy initialization of the Natural Language SDK client."""
        if self._client is None:
            from google.cloud import language_v1

            self._client = language_v1.LanguageServiceClient()
            logger.info("LANGUAGE_CLIENT_INITIALIZED", extra={"timeout_s": self.timeout_s})
        return self._client

    @staticmethod
    def _document(text: str) -> dict:
        return {"content": text, "type_": "PLAIN_TEXT"}

    def analyze_sentiment(self, text: str) -> Tuple[float, float]:
        """Document-level sentiment.

        Returns:
            (score in [-1, 1], magnitude >= 0)
        """
        response = self.client.analyze_sentiment(
            request={"document": self._document(text)},
            timeout=self.timeout_s,
        )
        sentiment = response.document_sentiment
        return float(sentiment.score), float(sentiment.magnitude)

    def classify_topics(self, text: str) -> List[TopicCategory]:
        """Content categories with confidences.

        The service rejects short inputs (roughly under 20 tokens) with
        InvalidArgument; callers treat that as "no topics".
        """
        response = self.client.classify_text(
            request={"document": self._document(text)},
            timeout=self.timeout_s,
        )
        return [
            TopicCategory(name=category.name, confidence=float(category.confidence))
            for category in response.categories
        ]

