"""Stripe webhook handling."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from analyst_payments.adapters.stripe_client import PaymentProcessorClient
from analyst_payments.domain.errors import WebhookSignatureError
from analyst_payments.domain.sessions import RecordStatus
from analyst_payments.services.records import (
    SessionRecordRepository,
    record_from_processor_session,
    utc_now,
)

logger = logging.getLogger(__name__)

COMPLETED_EVENT = "checkout.session.completed"


@dataclass
class WebhookService:
    """Persists completed checkouts reported by Stripe."""

    repository: SessionRecordRepository
    processor: PaymentProcessorClient
    clock: Callable[[], datetime] = utc_now

    def handle(self, payload: bytes, signature: str | None) -> bool:
        """Verify and process an event; return true when a record was written."""
        if not signature:
            raise WebhookSignatureError("Missing Stripe-Signature header")
        event = self.processor.construct_event(payload, signature)
        logger.info("Received webhook event", extra={"event_type": event.type})

        if event.type != COMPLETED_EVENT or event.session is None:
            return False
        session = event.session
        if not session.is_paid:
            logger.info(
                "Completed session not paid yet",
                extra={"session_id": session.id},
            )
            return False
        record = record_from_processor_session(
            session, status=RecordStatus.CONFIRMED, now=self.clock()
        )
        if record is None:
            logger.info(
                "Session metadata has no booking or bootcamp",
                extra={"session_id": session.id},
            )
            return False
        self.repository.insert_if_absent(record)
        logger.info(
            "Stored completed checkout",
            extra={"session_id": session.id, "record_type": record.record_type},
        )
        return True
