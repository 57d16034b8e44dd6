"""Scoring Service HTTP handler.

Endpoints:
- POST /checkins: store a completed weekly check-in, recompute scores
- POST /behavioral: fresh wearable sample, recompute scores
- POST /phq9: score a PHQ-9 survey, flag on the self-harm item
"""
import logging
import os
from typing import Any, Dict, Optional
from flask import Flask, request, jsonify

from mindcare.shared.database import RepositoryError, get_connection_manager
from mindcare.shared.models import BehavioralSample, CheckinRecord
from mindcare.shared.utils import configure_pii_salt, hash_pii
from mindcare.services.alert_service.alert_publisher import AlertEventPublisher
from mindcare.services.alert_service.escalation import EscalationSink
from mindcare.services.alert_service.profile_repository import StudentProfileRepository
from .aggregator import ScoreAggregator
from .behavioral import summarize_fit_buckets
from .checkin_repository import CheckinRepository
from .checkin_scorer import score_checkin, validate_answers
from .phq9 import PHQ9_QUESTIONS, SELF_HARM_ITEM_INDEX, SELF_HARM_REASON, score_phq9

logger = logging.getLogger(__name__)

app = Flask(__name__)

pii_salt = os.getenv("PII_HASH_SALT", "default_dev_salt_change_in_production_32chars")
configure_pii_salt(pii_salt)

connection_manager = get_connection_manager()
checkin_repository = CheckinRepository(connection_manager)
escalation_sink = EscalationSink(
    repository=StudentProfileRepository(connection_manager),
    publisher=AlertEventPublisher(
        stream_name=os.getenv("ALERT_STREAM_NAME", "mindcare-urgent-alerts"),
        enabled=os.getenv("ALERT_PUBLISHING_ENABLED", "true").lower() == "true",
    ),
)
aggregator = ScoreAggregator(checkin_repository, escalation_sink)


def _require_student_id(data: Dict[str, Any]) -> str:
    student_id = data.get("student_id")
    if not student_id:
        raise ValueError("Missing required field: student_id")
    return student_id


def _behavioral_from_payload(data: Dict[str, Any]) -> Optional[BehavioralSample]:
    """Pre-computed averages take priority over raw Google Fit buckets."""
    if "avg_sleep_hours" in data or "avg_step_count" in data:
        return BehavioralSample(
            avg_sleep_hours=float(data.get("avg_sleep_hours", 0.0)),
            avg_step_count=float(data.get("avg_step_count", 0.0)),
        )
    return summarize_fit_buckets(data.get("steps"), data.get("sleep"))


def _recompute(student_id: str, behavioral: Optional[BehavioralSample] = None) -> Optional[Dict[str, int]]:
    """Best-effort recompute; the triggering write has already succeeded."""
    try:
        return aggregator.recompute(student_id, behavioral=behavioral).to_dict()
    except RepositoryError as e:
        logger.error(
            "SCORE_RECOMPUTE_FAILED",
            extra={
                "student_id_hash": hash_pii(student_id),
                "error": str(e),
            }
        )
        return None


@app.route("/health", methods=["GET"])
def health():
    """Health check endpoint for ECS/ALB."""
    return jsonify({"status": "healthy", "service": "scoring-service"}), 200


@app.route("/ready", methods=["GET"])
def ready():
    """Readiness check - verifies the database is reachable."""
    db_status = connection_manager.health_check()
    if not db_status["healthy"]:
        return jsonify({"status": "not_ready", "reason": "database_unavailable"}), 503
    return jsonify({"status": "ready"}), 200


@app.route("/checkins", methods=["POST"])
def submit_checkin():
    """Store a completed check-in.

    Request Body:
        {
            "student_id": "student_789",
            "stress_responses": [0, 1, 3],
            "anxiety_responses": [0, 0, 1, 2],
            "depression_responses": [0, 0, 0, 1, 0],
            "behavioral": {"avg_sleep_hours": 7.0, "avg_step_count": 6500} (optional)
        }

    Response:
        {
            "checkin_id": "chk_...",
            "raw_scores": {"stress_score": 4, ...},
            "profile_scores": {"anxiety_score": 12, ...} | null
        }
    """
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Request body required"}), 400

    try:
        student_id = _require_student_id(data)
        answers = {
            "stress": data.get("stress_responses", []),
            "anxiety": data.get("anxiety_responses", []),
            "depression": data.get("depression_responses", []),
        }
        validate_answers(answers)
        checkin = CheckinRecord(
            student_id=student_id,
            stress_responses=answers["stress"],
            anxiety_responses=answers["anxiety"],
            depression_responses=answers["depression"],
        )
        behavioral = _behavioral_from_payload(data["behavioral"]) if data.get("behavioral") else None
    except (TypeError, ValueError) as e:
        logger.warning("CHECKIN_REQUEST_INVALID", extra={"reason": str(e)})
        return jsonify({"error": str(e)}), 400

    try:
        checkin_repository.add(checkin)
        raw_scores = score_checkin(answers)
        profile_scores = _recompute(student_id, behavioral)
    except Exception as e:
        logger.error(
            "CHECKIN_SUBMIT_ERROR",
            extra={
                "student_id_hash": hash_pii(student_id),
                "error": str(e),
                "error_type": type(e).__name__,
            }
        )
        return jsonify({"error": "Check-in could not be saved"}), 500

    return jsonify({
        "checkin_id": checkin.checkin_id,
        "raw_scores": raw_scores.to_dict(),
        "profile_scores": profile_scores,
    }), 201


@app.route("/behavioral", methods=["POST"])
def submit_behavioral():
    """Recompute scores from a fresh wearable sample.

    Request Body (either form):
        {"student_id": "...", "avg_sleep_hours": 6.5, "avg_step_count": 4200}
        {"student_id": "...", "steps": <dataset:aggregate>, "sleep": <dataset:aggregate>}
    """
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Request body required"}), 400

    try:
        student_id = _require_student_id(data)
        sample = _behavioral_from_payload(data)
    except (TypeError, ValueError, KeyError) as e:
        logger.warning("BEHAVIORAL_REQUEST_INVALID", extra={"reason": str(e)})
        return jsonify({"error": str(e)}), 400

    try:
        scores = aggregator.recompute(student_id, behavioral=sample)
    except Exception as e:
        logger.error(
            "BEHAVIORAL_RECOMPUTE_ERROR",
            extra={
                "student_id_hash": hash_pii(student_id),
                "error": str(e),
                "error_type": type(e).__name__,
            }
        )
        return jsonify({"error": "Scores could not be recomputed"}), 500

    return jsonify({
        "behavioral_available": sample is not None,
        "profile_scores": scores.to_dict(),
    }), 200


@app.route("/phq9", methods=["POST"])
def submit_phq9():
    """Score a PHQ-9 survey.

    Request Body:
        {"student_id": "student_789", "answers": [0, 1, 0, 2, 0, 0, 1, 0, 0]}

    Response:
        {"total": 4, "status": "positive", "self_harm_flag": false, "flagged": false}
    """
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "Request body required"}), 400

    try:
        student_id = _require_student_id(data)
        result = score_phq9(data.get("answers") or [])
    except (TypeError, ValueError) as e:
        logger.warning("PHQ9_REQUEST_INVALID", extra={"reason": str(e)})
        return jsonify({"error": str(e)}), 400

    try:
        escalation_sink.update_phq9(student_id, result.total)
        if result.self_harm_flag:
            escalation_sink.flag_urgent(
                student_id=student_id,
                reason=SELF_HARM_REASON,
                triggering_text=PHQ9_QUESTIONS[SELF_HARM_ITEM_INDEX],
                source="phq9",
            )
    except Exception as e:
        logger.error(
            "PHQ9_SUBMIT_ERROR",
            extra={
                "student_id_hash": hash_pii(student_id),
                "self_harm_flag": result.self_harm_flag,
                "error": str(e),
                "error_type": type(e).__name__,
            }
        )
        return jsonify({"error": "PHQ-9 could not be saved"}), 500

    return jsonify({**result.to_dict(), "flagged": result.self_harm_flag}), 200


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    port = int(os.getenv("PORT", "8002"))
    app.run(host="0.0.0.0", port=port, debug=False)
