"""Tests for the journal risk classifier.

The three checks (topic, keyword, sentiment) always run. The first firing
check in precedence order supplies the reason, and urgent entries with a
mild raw score are overridden to -1.0 / 5.0.
"""
import pytest

from mindcare.shared.models import SentimentResult, TopicCategory
from mindcare.shared.utils import configure_pii_salt
from mindcare.services.safety_service.classifier import RiskClassifier, ClassificationResult
from mindcare.services.safety_service.config import (
    KEYWORD_CHECK,
    KEYWORD_REASON,
    SENTIMENT_CHECK,
    SENTIMENT_REASON,
    TOPIC_CHECK,
    RiskClassifierConfig,
)


@pytest.fixture(autouse=True)
def setup_pii_salt():
    configure_pii_salt("test_salt_that_is_at_least_32_characters_long")


@pytest.fixture
def classifier():
    return RiskClassifier()


def sentiment(score=0.0, magnitude=0.0, topics=None):
    return SentimentResult(score=score, magnitude=magnitude, topics=topics or [])


class TestNonUrgent:
    def test_ordinary_entry(self, classifier):
        result = classifier.classify("Had a good day at practice.", sentiment(0.6, 1.2))

        assert result.is_urgent is False
        assert result.reason is None
        assert result.adjusted_score == 0.6
        assert result.adjusted_magnitude == 1.2
        assert result.fired_checks == []
        assert result.override_applied is False

    def test_repeated_classification_never_flips(self, classifier):
        text = "Math test tomorrow, a bit nervous."
        results = [classifier.classify(text, sentiment(-0.3, 0.8)) for _ in range(3)]

        assert all(r.is_urgent is False for r in results)

    def test_empty_text_and_neutral_sentiment(self, classifier):
        result = classifier.classify("", SentimentResult.neutral())

        assert result.is_urgent is False
        assert result.adjusted_score == 0.0


class TestKeywordCheck:
    def test_keyword_with_mild_sentiment_is_overridden(self, classifier):
        result = classifier.classify("I think about suicide a lot", sentiment(0.1, 0.4))

        assert result.is_urgent is True
        assert result.reason == KEYWORD_REASON
        assert result.keyword_matches == ["suicide"]
        assert result.adjusted_score == -1.0
        assert result.adjusted_magnitude == 5.0
        assert result.override_applied is True

    def test_keyword_beats_low_sentiment_for_reason(self, classifier):
        result = classifier.classify("suicide", sentiment(-0.9, 3.0))

        assert result.is_urgent is True
        assert result.reason == KEYWORD_REASON
        assert result.fired_checks == [KEYWORD_CHECK, SENTIMENT_CHECK]
        # Raw score already reflects severity, so no override
        assert result.adjusted_score == -0.9
        assert result.adjusted_magnitude == 3.0
        assert result.override_applied is False

    def test_match_is_case_insensitive(self, classifier):
        result = classifier.classify("Sometimes I Want To Die.", sentiment(0.0, 0.0))

        assert result.is_urgent is True
        assert "want to die" in result.keyword_matches

    def test_all_matches_reported_sorted(self, classifier):
        result = classifier.classify("suicidal and want to die", sentiment())

        assert result.keyword_matches == ["suicidal", "want to die"]

    def test_kill_them_with_kindness_does_not_match(self, classifier):
        result = classifier.classify("Going to kill them with kindness at practice.", sentiment(0.4, 0.6))

        assert result.keyword_matches == []
        assert result.is_urgent is False

    def test_touches_me_deeply_does_not_match(self, classifier):
        result = classifier.classify("Her speech really touches me deeply.", sentiment(0.4, 0.6))

        assert result.keyword_matches == []
        assert result.is_urgent is False

    def test_abuse_disclosure_matches(self, classifier):
        result = classifier.classify("My uncle touches me inappropriately.", sentiment(0.0, 0.0))

        assert result.keyword_matches == ["touches me inappropriately"]


class TestSentimentCheck:
    def test_threshold_is_inclusive(self, classifier):
        result = classifier.classify("Everything is awful.", sentiment(-0.7, 2.5))

        assert result.is_urgent is True
        assert result.reason == SENTIMENT_REASON
        assert result.low_sentiment is True
        assert result.override_applied is False
        assert result.adjusted_score == -0.7

    def test_just_above_threshold_not_urgent(self, classifier):
        result = classifier.classify("Rough week.", sentiment(-0.69, 2.5))

        assert result.is_urgent is False


class TestTopicCheck:
    def test_confident_high_risk_topic(self, classifier):
        topic = TopicCategory(name="/Sensitive Subjects/Self-Harm", confidence=0.8)
        result = classifier.classify("some text", sentiment(0.2, 0.5, [topic]))

        assert result.is_urgent is True
        assert result.reason == "AI Threat Detected: /Sensitive Subjects/Self-Harm"
        assert result.topic_match == topic
        assert result.adjusted_score == -1.0

    def test_confidence_must_exceed_threshold(self, classifier):
        topic = TopicCategory(name="/Sensitive Subjects/Self-Harm", confidence=0.6)
        result = classifier.classify("some text", sentiment(0.2, 0.5, [topic]))

        assert result.is_urgent is False
        assert result.topic_match is None

    def test_unrelated_topic_ignored(self, classifier):
        topic = TopicCategory(name="/Sports/Team Sports", confidence=0.95)
        result = classifier.classify("some text", sentiment(0.2, 0.5, [topic]))

        assert result.is_urgent is False

    def test_keyword_reason_wins_over_topic_by_default(self, classifier):
        topic = TopicCategory(name="/People & Society/Violence", confidence=0.9)
        result = classifier.classify("I want to hurt someone", sentiment(-0.8, 4.0, [topic]))

        assert result.reason == KEYWORD_REASON
        assert result.fired_checks == [TOPIC_CHECK, KEYWORD_CHECK, SENTIMENT_CHECK]


class TestCustomConfig:
    def test_custom_keyword_list(self):
        classifier = RiskClassifier(RiskClassifierConfig(high_risk_keywords=frozenset({"Red Flag"})))

        assert classifier.classify("a red flag phrase", sentiment()).is_urgent is True
        assert classifier.classify("I think about suicide", sentiment()).is_urgent is False

    def test_topic_first_precedence(self):
        config = RiskClassifierConfig(
            reason_precedence=(TOPIC_CHECK, KEYWORD_CHECK, SENTIMENT_CHECK)
        )
        topic = TopicCategory(name="/People & Society/Violence", confidence=0.9)
        result = RiskClassifier(config).classify("hurt someone", sentiment(0.0, 0.0, [topic]))

        assert result.reason == "AI Threat Detected: /People & Society/Violence"

    def test_invalid_precedence_rejected(self):
        with pytest.raises(ValueError):
            RiskClassifierConfig(reason_precedence=(KEYWORD_CHECK, KEYWORD_CHECK, SENTIMENT_CHECK))

    def test_invalid_confidence_threshold_rejected(self):
        with pytest.raises(ValueError):
            RiskClassifierConfig(topic_confidence_threshold=1.5)


class TestClassificationResult:
    def test_urgent_requires_reason(self):
        with pytest.raises(ValueError):
            ClassificationResult(is_urgent=True, reason=None, adjusted_score=0.0, adjusted_magnitude=0.0)

    def test_to_dict(self, classifier):
        data = classifier.classify("overdose", sentiment(0.0, 0.0)).to_dict()

        assert data == {
            "is_urgent": True,
            "reason": KEYWORD_REASON,
            "sentiment_score": -1.0,
            "sentiment_magnitude": 5.0,
            "fired_checks": [KEYWORD_CHECK],
            "override_applied": True,
        }
