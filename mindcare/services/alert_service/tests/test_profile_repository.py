"""Tests for StudentProfileRepository merge writes."""
from datetime import datetime
import pytest
from unittest.mock import MagicMock

from mindcare.services.alert_service.profile_repository import StudentProfileRepository

ROW = ("student_1", 40, 55, 70, True, "I want to die", "High-risk keyword detected.", 12,
       80, 65, datetime(2025, 10, 20, 8, 0))


@pytest.fixture
def cursor():
    return MagicMock()


@pytest.fixture
def repo(cursor):
    conn = MagicMock()
    conn.cursor.return_value.__enter__.return_value = cursor
    manager = MagicMock()
    manager.get_connection.return_value.__enter__.return_value = conn
    return StudentProfileRepository(manager)


class TestMergeFields:
    def test_only_named_columns_are_updated(self, repo, cursor):
        cursor.fetchone.return_value = ROW

        profile = repo.merge_fields("student_1", {"stress_score": 70})

        sql = " ".join(cursor.execute.call_args.args[0].split())
        assert "INSERT INTO student_profiles (id, stress_score, updated_at)" in sql
        assert "DO UPDATE SET stress_score = EXCLUDED.stress_score, updated_at = EXCLUDED.updated_at" in sql
        assert "needs_help = EXCLUDED" not in sql
        assert profile.needs_help is True
        assert profile.phq9_score == 12

    def test_unknown_column_rejected(self, repo):
        with pytest.raises(ValueError):
            repo.merge_fields("student_1", {"mood": "sad"})


class TestFindFlagged:
    def test_filters_on_needs_help(self, repo, cursor):
        cursor.fetchall.return_value = [ROW]

        profiles = repo.find_flagged(limit=20)

        assert [p.student_id for p in profiles] == ["student_1"]
        sql = cursor.execute.call_args.args[0]
        assert "WHERE needs_help = %s ORDER BY updated_at DESC LIMIT %s" in sql
        assert cursor.execute.call_args.args[1] == [True, 20]


class TestRowMapping:
    def test_behavioral_sub_scores_read_back(self, repo, cursor):
        cursor.fetchone.return_value = ROW

        profile = repo.find_by_id("student_1")

        assert profile.activity_score == 80
        assert profile.sleep_score == 65
        assert profile.updated_at == datetime(2025, 10, 20, 8, 0)
