"""Tests for PHQ-9 scoring."""
import pytest

from mindcare.services.scoring_service.phq9 import PHQ9_QUESTIONS, score_phq9


class TestScorePhq9:
    def test_all_zero_is_positive(self):
        result = score_phq9([0] * 9)

        assert result.total == 0
        assert result.status == "positive"
        assert result.self_harm_flag is False

    @pytest.mark.parametrize("answers,status", [
        ([1, 1, 1, 1, 0, 0, 0, 0, 0], "positive"),
        ([1, 1, 1, 1, 1, 0, 0, 0, 0], "neutral"),
        ([2, 2, 2, 1, 1, 1, 0, 0, 0], "neutral"),
        ([2, 2, 2, 2, 2, 0, 0, 0, 0], "negative"),
        ([3] * 9, "negative"),
    ])
    def test_status_bands(self, answers, status):
        assert score_phq9(answers).status == status

    def test_item_nine_sets_self_harm_flag(self):
        result = score_phq9([0, 0, 0, 0, 0, 0, 0, 0, 1])

        assert result.total == 1
        assert result.status == "positive"
        assert result.self_harm_flag is True

    def test_max_total(self):
        assert score_phq9([3] * 9).total == 27

    @pytest.mark.parametrize("answers", [
        [0] * 8,
        [0] * 10,
        [0, 0, 0, 0, 0, 0, 0, 0, 4],
    ])
    def test_invalid_answers_rejected(self, answers):
        with pytest.raises(ValueError):
            score_phq9(answers)

    def test_nine_questions(self):
        assert len(PHQ9_QUESTIONS) == 9

    def test_to_dict(self):
        assert score_phq9([1] * 9).to_dict() == {
            "total": 9,
            "status": "neutral",
            "self_harm_flag": True,
        }
