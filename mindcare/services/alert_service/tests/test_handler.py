"""Tests for Alert Service HTTP handler."""
import json
from datetime import datetime
import pytest
from unittest.mock import patch

from mindcare.shared.database import NotFoundError, RepositoryError
from mindcare.shared.models import JournalEntry, StudentRiskProfile
from mindcare.shared.utils import configure_pii_salt


@pytest.fixture(autouse=True)
def setup_pii_salt():
    configure_pii_salt("test_salt_that_is_at_least_32_characters_long")


@pytest.fixture
def client():
    from mindcare.services.alert_service.handler import app
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


FLAGGED = StudentRiskProfile(
    student_id='student_1',
    anxiety_score=70,
    depression_score=20,
    stress_score=30,
    needs_help=True,
    last_urgent_entry='I want to die',
    last_urgent_reason='High-risk keyword detected.',
    updated_at=datetime(2025, 10, 20, 8, 0),
)


class TestHealthEndpoint:
    def test_health_returns_200(self, client):
        response = client.get('/health')
        assert response.status_code == 200
        assert json.loads(response.data)['service'] == 'alert-service'


class TestClearFlagEndpoint:
    @patch('mindcare.services.alert_service.handler.escalation_sink')
    def test_clear_flag(self, mock_sink, client):
        mock_sink.clear_urgent_flag.return_value = StudentRiskProfile(
            student_id='student_1', anxiety_score=70, depression_score=20, stress_score=30,
        )

        response = client.post('/students/student_1/clear-flag', json={'reviewer_id': 'counselor_1'})

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['needs_help'] is False
        assert data['status'] == 'Needs Attention'
        mock_sink.clear_urgent_flag.assert_called_once_with('student_1')

    @patch('mindcare.services.alert_service.handler.escalation_sink')
    def test_clear_unknown_student_is_404(self, mock_sink, client):
        mock_sink.clear_urgent_flag.side_effect = NotFoundError("missing")

        response = client.post('/students/nobody/clear-flag')

        assert response.status_code == 404

    @patch('mindcare.services.alert_service.handler.escalation_sink')
    def test_clear_failure_is_500(self, mock_sink, client):
        mock_sink.clear_urgent_flag.side_effect = RepositoryError("connection lost")

        response = client.post('/students/student_1/clear-flag')

        assert response.status_code == 500
        assert 'error' in json.loads(response.data)


class TestReportEndpoint:
    @patch('mindcare.services.alert_service.handler.journal_repository')
    @patch('mindcare.services.alert_service.handler.profile_repository')
    def test_report(self, mock_profiles, mock_journals, client):
        mock_profiles.get.return_value = FLAGGED
        mock_journals.find_by_student.return_value = [
            JournalEntry(entry_id='jrn_1', content='x', sentiment_score=-1.0, sentiment_magnitude=5.0),
        ]

        response = client.get('/students/student_1/report')

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['status'] == 'Urgent'
        assert data['high_risk_journal_count'] == 1
        assert data['score_bands']['anxiety'] == 'elevated'

    @patch('mindcare.services.alert_service.handler.profile_repository')
    def test_report_unknown_student_is_404(self, mock_profiles, client):
        mock_profiles.get.side_effect = NotFoundError("missing")

        response = client.get('/students/nobody/report')

        assert response.status_code == 404


class TestFlaggedEndpoint:
    @patch('mindcare.services.alert_service.handler.profile_repository')
    def test_lists_flagged(self, mock_profiles, client):
        mock_profiles.find_flagged.return_value = [FLAGGED]

        response = client.get('/students/flagged?limit=10')

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data['count'] == 1
        assert data['students'][0]['reason'] == 'High-risk keyword detected.'
        mock_profiles.find_flagged.assert_called_once_with(limit=10)

    def test_bad_limit_is_400(self, client):
        response = client.get('/students/flagged?limit=ten')
        assert response.status_code == 400
