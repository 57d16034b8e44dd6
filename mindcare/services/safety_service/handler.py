"""Safety Service HTTP handler - journal analysis endpoint.

Invoked once per newly created journal entry (fire-and-forget from the
journal page). Analysis failures degrade to neutral sentiment; they never
surface to the student.
"""
import logging
import os
from flask import Flask, request, jsonify

from mindcare.shared.database import get_connection_manager
from mindcare.shared.utils import configure_pii_salt
from mindcare.services.alert_service.alert_publisher import AlertEventPublisher
from mindcare.services.alert_service.escalation import EscalationSink
from mindcare.services.alert_service.profile_repository import StudentProfileRepository
from mindcare.services.sentiment_service import SentimentAnalyzer, SentimentConfig
from .classifier import RiskClassifier
from .config import RiskClassifierConfig
from .journal_pipeline import JournalAnalysisPipeline, build_entry
from .journal_repository import JournalRepository

logger = logging.getLogger(__name__)

app = Flask(__name__)

pii_salt = os.getenv("PII_HASH_SALT", "default_dev_salt_change_in_production_32chars")
configure_pii_salt(pii_salt)

classifier_config = RiskClassifierConfig()
connection_manager = get_connection_manager()

pipeline = JournalAnalysisPipeline(
    analyzer=SentimentAnalyzer(config=SentimentConfig(
        request_timeout_s=float(os.getenv("LANGUAGE_API_TIMEOUT_S", "10")),
        topics_enabled=os.getenv("TOPIC_CLASSIFICATION_ENABLED", "true").lower() == "true",
    )),
    classifier=RiskClassifier(config=classifier_config),
    journal_repository=JournalRepository(connection_manager),
    escalation_sink=EscalationSink(
        repository=StudentProfileRepository(connection_manager),
        publisher=AlertEventPublisher(
            stream_name=os.getenv("ALERT_STREAM_NAME", "mindcare-urgent-alerts"),
            enabled=os.getenv("ALERT_PUBLISHING_ENABLED", "true").lower() == "true",
        ),
    ),
)


@app.route("/health", methods=["GET"])
def health():
    """Health check endpoint for ECS/ALB."""
    return jsonify({
        "status": "healthy",
        "service": "safety-service",
        "keyword_list_version": classifier_config.keyword_list_version,
    }), 200


@app.route("/ready", methods=["GET"])
def ready():
    """Readiness check - verifies the database is reachable."""
    db_status = connection_manager.health_check()
    if not db_status["healthy"]:
        return jsonify({"status": "not_ready", "reason": "database_unavailable"}), 503
    return jsonify({"status": "ready"}), 200


@app.route("/journal/analyze", methods=["POST"])
def analyze_journal():
    """Analyze a newly created journal entry.

    Request Body:
        {
            "entry_id": "jrn_123",
            "student_id": "student_789" (optional),
            "content": "Journal text"
        }

    Response:
        {
            "entry_id": "jrn_123",
            "is_urgent": true | false,
            "reason": "High-risk keyword detected." | null,
            "sentiment_score": -1.0,
            "sentiment_magnitude": 5.0,
            "fired_checks": ["keyword"],
            ...
        }
    """
    data = request.get_json(silent=True)
    if not data:
        logger.warning("ANALYZE_REQUEST_INVALID", extra={"reason": "empty_body"})
        return jsonify({"error": "Request body required"}), 400

    try:
        entry = build_entry(data)
    except ValueError as e:
        logger.warning("ANALYZE_REQUEST_INVALID", extra={"reason": str(e)})
        return jsonify({"error": str(e)}), 400

    try:
        outcome = pipeline.process(entry)
    except Exception as e:
        logger.error(
            "JOURNAL_ANALYSIS_ERROR",
            extra={
                "entry_id": entry.entry_id,
                "error": str(e),
                "error_type": type(e).__name__,
            }
        )
        return jsonify({"error": "Journal analysis failed"}), 500

    return jsonify(outcome.to_dict()), 200


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    port = int(os.getenv("PORT", "8001"))
    app.run(host="0.0.0.0", port=port, debug=False)
