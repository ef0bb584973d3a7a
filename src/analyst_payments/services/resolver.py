"""Locate the record behind a checkout session id."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from analyst_payments.adapters.stripe_client import PaymentProcessorClient
from analyst_payments.domain.errors import PaymentProcessorError, SessionNotFoundError
from analyst_payments.domain.sessions import RecordStatus, SessionRecord
from analyst_payments.services.records import (
    SessionRecordRepository,
    get_local_record,
    record_from_processor_session,
    utc_now,
)

logger = logging.getLogger(__name__)


@dataclass
class SessionResolver:
    """Resolves a session id to a booking or registration.

    Local records win. When neither collection has the session yet (the user
    returned before the webhook was processed), the Stripe session is read
    and, if paid, persisted with an insert-if-absent write so concurrent
    resolvers and the webhook converge on one document.
    """

    repository: SessionRecordRepository
    processor: PaymentProcessorClient
    clock: Callable[[], datetime] = utc_now

    def find_local(self, session_id: str) -> SessionRecord | None:
        """Return the stored record without consulting Stripe."""
        return get_local_record(self.repository, session_id)

    async def resolve(self, session_id: str) -> SessionRecord:
        """Return the record for a session or raise SessionNotFoundError."""
        record = self.find_local(session_id)
        if record is not None:
            return record

        try:
            session = await self.processor.retrieve_session(session_id)
        except PaymentProcessorError:
            logger.warning(
                "Stripe session lookup failed", extra={"session_id": session_id}
            )
            raise SessionNotFoundError(session_id) from None

        if not session.is_paid:
            raise SessionNotFoundError(session_id)
        synthesized = record_from_processor_session(
            session, status=RecordStatus.PAID, now=self.clock()
        )
        if synthesized is None:
            raise SessionNotFoundError(session_id)

        self.repository.insert_if_absent(synthesized)
        logger.info(
            "Recorded paid session ahead of webhook",
            extra={"session_id": session_id, "record_type": synthesized.record_type},
        )
        # Re-read so a concurrent writer's document is the one returned.
        return self.find_local(session_id) or synthesized
