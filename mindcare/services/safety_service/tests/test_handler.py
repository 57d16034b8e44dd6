"""Tests for Safety Service HTTP handler."""
import json
import pytest
from unittest.mock import patch

from mindcare.shared.models import SentimentResult
from mindcare.shared.utils import configure_pii_salt
from mindcare.services.safety_service.classifier import ClassificationResult
from mindcare.services.safety_service.journal_pipeline import JournalAnalysisOutcome


@pytest.fixture(autouse=True)
def setup_pii_salt():
    configure_pii_salt("test_salt_that_is_at_least_32_characters_long")


@pytest.fixture
def client():
    from mindcare.services.safety_service.handler import app
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


def urgent_outcome(entry_id="jrn_1"):
    return JournalAnalysisOutcome(
        entry_id=entry_id,
        sentiment=SentimentResult(score=0.1, magnitude=0.2),
        classification=ClassificationResult(
            is_urgent=True,
            reason="High-risk keyword detected.",
            adjusted_score=-1.0,
            adjusted_magnitude=5.0,
            keyword_matches=["suicide"],
            override_applied=True,
        ),
        sentiment_persisted=True,
        profile_flagged=True,
    )


class TestHealthEndpoints:
    def test_health_returns_200(self, client):
        response = client.get('/health')
        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['status'] == 'healthy'
        assert data['service'] == 'safety-service'
        assert 'keyword_list_version' in data

    @patch('mindcare.services.safety_service.handler.connection_manager')
    def test_ready_when_database_up(self, mock_manager, client):
        mock_manager.health_check.return_value = {"healthy": True}
        response = client.get('/ready')
        assert response.status_code == 200

    @patch('mindcare.services.safety_service.handler.connection_manager')
    def test_not_ready_when_database_down(self, mock_manager, client):
        mock_manager.health_check.return_value = {"healthy": False, "error": "refused"}
        response = client.get('/ready')
        assert response.status_code == 503


class TestAnalyzeEndpoint:
    @patch('mindcare.services.safety_service.handler.pipeline')
    def test_analyze_urgent_entry(self, mock_pipeline, client):
        mock_pipeline.process.return_value = urgent_outcome()

        response = client.post(
            '/journal/analyze',
            json={'entry_id': 'jrn_1', 'student_id': 'student_1', 'content': 'suicide'},
        )

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['is_urgent'] is True
        assert data['reason'] == "High-risk keyword detected."
        assert data['sentiment_score'] == -1.0
        assert data['sentiment_magnitude'] == 5.0
        assert data['fired_checks'] == ['keyword']

        entry = mock_pipeline.process.call_args.args[0]
        assert entry.entry_id == 'jrn_1'
        assert entry.student_id == 'student_1'

    @patch('mindcare.services.safety_service.handler.pipeline')
    def test_missing_content_is_400(self, mock_pipeline, client):
        response = client.post('/journal/analyze', json={'entry_id': 'jrn_1'})

        assert response.status_code == 400
        assert 'error' in json.loads(response.data)
        mock_pipeline.process.assert_not_called()

    def test_empty_body_is_400(self, client):
        response = client.post('/journal/analyze', data='', content_type='application/json')
        assert response.status_code == 400

    @patch('mindcare.services.safety_service.handler.pipeline')
    def test_unexpected_failure_is_500_json(self, mock_pipeline, client):
        mock_pipeline.process.side_effect = RuntimeError("boom")

        response = client.post(
            '/journal/analyze',
            json={'entry_id': 'jrn_1', 'content': 'hello'},
        )

        assert response.status_code == 500
        assert json.loads(response.data) == {'error': 'Journal analysis failed'}
