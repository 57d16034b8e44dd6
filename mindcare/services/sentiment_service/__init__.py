"""Sentiment Service: text-understanding adapter for journal entries.

Components:
- language_client.py: Google Cloud Natural Language wrapper
- sentiment_analyzer.py: SentimentAnalyzer with neutral/empty fallbacks

Usage:
    from mindcare.services.sentiment_service import SentimentAnalyzer
    result = SentimentAnalyzer().analyze("I had a rough week")
    result.score, result.magnitude, result.topics
"""

from .language_client import LanguageServiceClient
from .sentiment_analyzer import SentimentAnalyzer, SentimentConfig

__all__ = [
    "LanguageServiceClient",
    "SentimentAnalyzer",
    "SentimentConfig",
]
