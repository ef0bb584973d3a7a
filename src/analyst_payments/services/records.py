"""Persistence interfaces and record synthesis for checkout sessions."""

from datetime import UTC, datetime
from typing import Protocol

from analyst_payments.domain.catalog import find_bootcamp
from analyst_payments.domain.processor import ProcessorSession
from analyst_payments.domain.sessions import (
    BookingDraft,
    BookingRecord,
    RecordStatus,
    RecordType,
    RegistrationRecord,
    SessionRecord,
)


class SessionRecordRepository(Protocol):
    """Persistence interface for bookings and bootcamp registrations."""

    def get_booking(self, session_id: str) -> BookingRecord | None:
        """Return a booking by Stripe session id or legacy id."""

    def get_registration(self, session_id: str) -> RegistrationRecord | None:
        """Return a registration by Stripe session id or legacy id."""

    def insert_if_absent(self, record: SessionRecord) -> None:
        """Insert the record unless one exists for its Stripe session id."""

    def mark_expired(self, record: SessionRecord, updated_at: datetime) -> bool:
        """Expire a pending record; return true when the row was updated."""

    def set_calendly_uris(
        self,
        session_id: str,
        event_uri: str | None,
        invitee_uri: str | None,
        updated_at: datetime,
    ) -> bool:
        """Store Calendly URIs on a booking; return true when updated."""

    def list_recent(self, record_type: RecordType, limit: int) -> list[SessionRecord]:
        """Return the most recently created records of a type."""


class BookingDraftRepository(Protocol):
    """Persistence interface for booking drafts."""

    def save_draft(self, draft: BookingDraft) -> None:
        """Persist a draft keyed by its Stripe session id."""

    def get_draft(self, session_id: str) -> BookingDraft | None:
        """Return the draft for a session, if present."""

    def delete_draft(self, session_id: str) -> None:
        """Delete the draft for a session."""


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def get_local_record(
    repository: SessionRecordRepository, session_id: str
) -> SessionRecord | None:
    """Return the stored record for a session, bookings first."""
    booking = repository.get_booking(session_id)
    if booking is not None:
        return booking
    return repository.get_registration(session_id)


def record_from_processor_session(
    session: ProcessorSession, status: RecordStatus, now: datetime
) -> SessionRecord | None:
    """Build a record from a Stripe session, or None if it is not ours."""
    metadata = session.metadata
    common = {
        "status": status,
        "payment_status": session.payment_status,
        "stripe_session_id": session.id,
        "customer_name": metadata.get("customerName") or None,
        "customer_email": metadata.get("customerEmail") or session.customer_email,
        "notes": metadata.get("notes") or None,
        "amount": (session.amount_total or 0) / 100,
        "currency": session.currency or "usd",
        "stripe_payment_intent_id": session.payment_intent,
        "stripe_customer_id": session.customer,
        "created_at": now,
        "updated_at": now,
        "paid_at": now if status == RecordStatus.PAID else None,
        "confirmed_at": now if status == RecordStatus.CONFIRMED else None,
    }
    record_type = _classify(session)
    if record_type == "booking":
        return BookingRecord(
            **common,
            meeting_type_id=metadata.get("meetingTypeId") or None,
            selected_analyst=metadata.get("selectedAnalyst") or None,
            selected_meeting=metadata.get("selectedMeeting") or None,
            selected_date=metadata.get("selectedDate") or None,
            selected_time=metadata.get("selectedTime") or None,
            selected_timezone=metadata.get("selectedTimezone") or None,
        )
    if record_type == "bootcamp":
        bootcamp_id = metadata.get("bootcampId") or None
        bootcamp = find_bootcamp(bootcamp_id)
        return RegistrationRecord(
            **common,
            bootcamp_id=bootcamp_id,
            bootcamp_name=bootcamp.name if bootcamp else None,
            bootcamp_description=bootcamp.description if bootcamp else None,
        )
    return None


def _classify(session: ProcessorSession) -> RecordType | None:
    tagged = session.metadata.get("type")
    if tagged in {"booking", "bootcamp"}:
        return tagged
    if session.looks_like_booking():
        return "booking"
    if session.looks_like_registration():
        return "bootcamp"
    return None
