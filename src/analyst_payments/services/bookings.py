"""Booking follow-up actions."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from analyst_payments.domain.errors import BookingUpdateError, SessionNotFoundError
from analyst_payments.services.records import SessionRecordRepository, utc_now


@dataclass
class BookingService:
    """Records the outcome of scheduling a paid booking."""

    repository: SessionRecordRepository
    clock: Callable[[], datetime] = utc_now

    def record_calendly_booking(
        self,
        session_id: str,
        event_uri: str | None,
        invitee_uri: str | None,
    ) -> bool:
        """Attach Calendly URIs to the booking for a session."""
        if not event_uri and not invitee_uri:
            raise BookingUpdateError("At least one Calendly URI is required")
        booking = self.repository.get_booking(session_id)
        if booking is None or booking.stripe_session_id != session_id:
            raise SessionNotFoundError(session_id)
        return self.repository.set_calendly_uris(
            session_id,
            event_uri=event_uri,
            invitee_uri=invitee_uri,
            updated_at=self.clock(),
        )
