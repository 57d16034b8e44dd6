"""Alert Service HTTP handler - reviewer-facing endpoints.

Used by the staff and admin dashboards to list flagged students, read a
student's report and clear an urgent flag after human review.
"""
import logging
import os
from flask import Flask, request, jsonify

from mindcare.shared.database import NotFoundError, get_connection_manager
from mindcare.shared.utils import configure_pii_salt, hash_pii
from mindcare.services.safety_service.journal_repository import JournalRepository
from .escalation import EscalationSink
from .profile_repository import StudentProfileRepository
from .report import build_report, mental_health_status

logger = logging.getLogger(__name__)

app = Flask(__name__)

pii_salt = os.getenv("PII_HASH_SALT", "default_dev_salt_change_in_production_32chars")
configure_pii_salt(pii_salt)

connection_manager = get_connection_manager()
profile_repository = StudentProfileRepository(connection_manager)
journal_repository = JournalRepository(connection_manager)
# Clearing a flag publishes nothing
escalation_sink = EscalationSink(repository=profile_repository)

REPORT_JOURNAL_LIMIT = int(os.getenv("REPORT_JOURNAL_LIMIT", "50"))


@app.route("/health", methods=["GET"])
def health():
    """Health check endpoint for ECS/ALB."""
    return jsonify({"status": "healthy", "service": "alert-service"}), 200


@app.route("/ready", methods=["GET"])
def ready():
    """Readiness check - verifies the database is reachable."""
    db_status = connection_manager.health_check()
    if not db_status["healthy"]:
        return jsonify({"status": "not_ready", "reason": "database_unavailable"}), 503
    return jsonify({"status": "ready"}), 200


@app.route("/students/<student_id>/clear-flag", methods=["POST"])
def clear_flag(student_id: str):
    """Reviewer clears a student's urgent flag; scores are untouched.

    Request Body (optional):
        {"reviewer_id": "counselor_42"}
    """
    data = request.get_json(silent=True) or {}

    try:
        profile = escalation_sink.clear_urgent_flag(student_id)
    except NotFoundError:
        return jsonify({"error": "Student profile not found"}), 404
    except Exception as e:
        logger.error(
            "CLEAR_FLAG_ERROR",
            extra={
                "student_id_hash": hash_pii(student_id),
                "error": str(e),
                "error_type": type(e).__name__,
            }
        )
        return jsonify({"error": "Flag could not be cleared"}), 500

    logger.info(
        "URGENT_FLAG_REVIEWED",
        extra={
            "student_id_hash": hash_pii(student_id),
            "reviewer_id_hash": hash_pii(data.get("reviewer_id")),
        }
    )

    return jsonify({
        "student_id": profile.student_id,
        "needs_help": profile.needs_help,
        "status": mental_health_status(profile).value,
    }), 200


@app.route("/students/<student_id>/report", methods=["GET"])
def student_report(student_id: str):
    """Status badge, score bands and analysis points for one student."""
    try:
        profile = profile_repository.get(student_id)
        journals = journal_repository.find_by_student(student_id, limit=REPORT_JOURNAL_LIMIT)
        report = build_report(profile, journals)
    except NotFoundError:
        return jsonify({"error": "Student profile not found"}), 404
    except Exception as e:
        logger.error(
            "REPORT_BUILD_ERROR",
            extra={
                "student_id_hash": hash_pii(student_id),
                "error": str(e),
                "error_type": type(e).__name__,
            }
        )
        return jsonify({"error": "Report could not be built"}), 500

    return jsonify(report.to_dict()), 200


@app.route("/students/flagged", methods=["GET"])
def flagged_students():
    """Students currently awaiting urgent review.

    Query Params:
        limit: Maximum rows (default 100)
    """
    try:
        limit = int(request.args.get("limit", "100"))
    except ValueError:
        return jsonify({"error": "limit must be an integer"}), 400

    try:
        profiles = profile_repository.find_flagged(limit=limit)
    except Exception as e:
        logger.error(
            "FLAGGED_LIST_ERROR",
            extra={"error": str(e), "error_type": type(e).__name__}
        )
        return jsonify({"error": "Flagged students could not be listed"}), 500

    return jsonify({
        "count": len(profiles),
        "students": [
            {
                "student_id": profile.student_id,
                "reason": profile.last_urgent_reason,
                "last_urgent_entry": profile.last_urgent_entry,
                "updated_at": profile.updated_at.isoformat(),
            }
            for profile in profiles
        ],
    }), 200


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    port = int(os.getenv("PORT", "8003"))
    app.run(host="0.0.0.0", port=port, debug=False)
