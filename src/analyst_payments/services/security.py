"""Validity checks applied before a session is reported back."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import assert_never

from analyst_payments.domain.errors import SessionAlreadyUsedError, SessionTooOldError
from analyst_payments.domain.sessions import (
    BookingRecord,
    RegistrationRecord,
    SessionRecord,
)
from analyst_payments.services.records import utc_now

DEFAULT_REUSE_WINDOW = timedelta(hours=1)


@dataclass(frozen=True)
class SecurityVerdict:
    """Independently computed validity flags for one record."""

    session_key: str
    expired: bool
    session_too_old: bool
    already_used: bool

    def raise_for_rejection(self) -> None:
        """Raise when the session must not be used again."""
        if self.session_too_old:
            raise SessionTooOldError(self.session_key)
        if self.already_used:
            raise SessionAlreadyUsedError(self.session_key)


@dataclass
class SecurityGate:
    """Evaluates expiry, reuse window and prior use of a session."""

    reuse_window: timedelta = DEFAULT_REUSE_WINDOW
    clock: Callable[[], datetime] = utc_now

    def evaluate(self, record: SessionRecord) -> SecurityVerdict:
        now = self.clock()
        return SecurityVerdict(
            session_key=record.session_key,
            expired=_is_expired(record, now),
            session_too_old=self._is_too_old(record, now),
            already_used=_is_already_used(record),
        )

    def _is_too_old(self, record: SessionRecord, now: datetime) -> bool:
        if not record.is_paid:
            return False
        reference = record.paid_at or record.confirmed_at or record.created_at
        if reference is None:
            return False
        return now - reference > self.reuse_window


def _is_expired(record: SessionRecord, now: datetime) -> bool:
    return (
        record.expires_at is not None
        and record.expires_at < now
        and not record.is_paid
    )


def _is_already_used(record: SessionRecord) -> bool:
    if isinstance(record, BookingRecord):
        return bool(record.calendly_event_uri or record.calendly_invitee_uri)
    if isinstance(record, RegistrationRecord):
        return False
    assert_never(record)
