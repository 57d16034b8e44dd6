"""Urgent-flag event publisher.

Publishes an event to a Kinesis stream whenever a student is flagged, so
counselor notification runs decoupled from the request that raised the
flag. The profile row remains the source of truth: a failed publish is
logged at CRITICAL with the full payload and never raised.
"""
import json
import logging
import os
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UrgentFlagEvent:
    """Immutable record of a student being flagged for review."""
    event_id: str
    student_id_hash: str
    reason: str
    event_type: str = "student.urgent_flag.set"
    source: str = "journal"             # "journal" or "phq9"
    text_hash: Optional[str] = None     # Fingerprint of the triggering text, never the text
    requires_human_review: bool = True
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def to_kinesis_payload(self) -> dict:
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "timestamp": self.timestamp.isoformat() + "Z",
            "source": "alert-service",
            "data": {
                "student_id_hash": self.student_id_hash,
                "reason": self.reason,
                "trigger_source": self.source,
                "text_hash": self.text_hash,
                "requires_human_review": self.requires_human_review,
            }
        }


class AlertEventPublisher:
    """Publishes UrgentFlagEvents to Kinesis.

    Failure Handling:
        - Publishing never blocks or undoes the profile write
        - Failures are logged at CRITICAL level for manual follow-up
    """

    def __init__(
        self,
        stream_name: str = "mindcare-urgent-alerts",
        enabled: bool = True,
        region: Optional[str] = None,
    ):
        """Initialize publisher.

        Args:
            stream_name: Kinesis stream name
            enabled: Whether publishing is enabled (disable for local dev)
            region: AWS region (defaults to AWS_REGION env var)
        """
        self.stream_name = stream_name
        self.enabled = enabled
        self.region = region or os.getenv("AWS_REGION", "us-east-1")
        self._kinesis_client = None

        logger.info(
            "ALERT_PUBLISHER_INITIALIZED",
            extra={
                "stream_name": stream_name,
                "enabled": enabled,
                "region": self.region,
            }
        )

    @property
    def kinesis_client(self):
        """Lazy initialization of Kinesis client."""
        if self._kinesis_client is None and self.enabled:
            try:
                import boto3
                self._kinesis_client = boto3.client(
                    "kinesis",
                    region_name=self.region,
                )
            except Exception as e:
                logger.error(
                    "KINESIS_CLIENT_INIT_FAILED",
                    extra={"error": str(e)}
                )
        return self._kinesis_client

    def publish_urgent_flag(
        self,
        student_id_hash: str,
        reason: str,
        source: str = "journal",
        text_hash: Optional[str] = None,
    ) -> bool:
        """Publish one urgent-flag event.

        Returns:
            True if Kinesis accepted the record, False otherwise
        """
        if not self.enabled:
            logger.info(
                "ALERT_PUBLISH_SKIPPED",
                extra={"student_id_hash": student_id_hash, "reason": "publishing_disabled"}
            )
            return False

        event = UrgentFlagEvent(
            event_id=f"evt_{uuid.uuid4().hex[:12]}",
            student_id_hash=student_id_hash,
            reason=reason,
            source=source,
            text_hash=text_hash,
        )
        payload = event.to_kinesis_payload()

        try:
            if self.kinesis_client is None:
                logger.critical(
                    "ALERT_EVENT_FALLBACK_LOG",
                    extra={
                        "event_id": event.event_id,
                        "payload": json.dumps(payload),
                        "reason": "kinesis_client_unavailable",
                        "action": "MANUAL_PROCESSING_REQUIRED",
                    }
                )
                return False

            response = self.kinesis_client.put_record(
                StreamName=self.stream_name,
                Data=json.dumps(payload),
                PartitionKey=student_id_hash,  # Same student -> same shard, ordered
            )

            logger.info(
                "ALERT_EVENT_PUBLISHED",
                extra={
                    "event_id": event.event_id,
                    "student_id_hash": student_id_hash,
                    "shard_id": response.get("ShardId"),
                    "sequence_number": response.get("SequenceNumber"),
                }
            )
            return True

        except Exception as e:
            logger.critical(
                "ALERT_EVENT_PUBLISH_FAILED",
                extra={
                    "event_id": event.event_id,
                    "student_id_hash": student_id_hash,
                    "error": str(e),
                    "error_type": type(e).__name__,
                    "action": "MANUAL_REVIEW_REQUIRED",
                    "payload": json.dumps(payload),
                }
            )
            return False

