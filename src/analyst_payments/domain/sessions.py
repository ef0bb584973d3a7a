"""Domain models for checkout sessions and the records they produce."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import ClassVar, Literal

RecordType = Literal["booking", "bootcamp"]


class RecordStatus(StrEnum):
    """Local lifecycle state of a booking or registration."""

    PENDING = "PENDING"
    PAID = "PAID"
    CONFIRMED = "CONFIRMED"
    EXPIRED = "EXPIRED"
    FAILED = "FAILED"


PAID_STATUSES = frozenset({RecordStatus.PAID, RecordStatus.CONFIRMED})


@dataclass(frozen=True)
class _SessionRecordBase:
    status: RecordStatus
    payment_status: str
    stripe_session_id: str | None = None
    legacy_id: str | None = None
    customer_name: str | None = None
    customer_email: str | None = None
    notes: str | None = None
    amount: float = 0.0
    currency: str = "usd"
    stripe_payment_intent_id: str | None = None
    stripe_customer_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    paid_at: datetime | None = None
    confirmed_at: datetime | None = None
    expires_at: datetime | None = None

    @property
    def session_key(self) -> str:
        """Return the identifier the record is addressed by."""
        return self.stripe_session_id or self.legacy_id or ""

    @property
    def is_paid(self) -> bool:
        return self.status in PAID_STATUSES


@dataclass(frozen=True)
class BookingRecord(_SessionRecordBase):
    """A paid or pending analyst meeting booking."""

    record_type: ClassVar[RecordType] = "booking"

    meeting_type_id: str | None = None
    selected_analyst: str | None = None
    selected_meeting: str | None = None
    selected_date: str | None = None
    selected_time: str | None = None
    selected_timezone: str | None = None
    calendly_event_uri: str | None = None
    calendly_invitee_uri: str | None = None

    @property
    def has_form_fields(self) -> bool:
        """Return true when the booking carries submitted form fields."""
        return any(
            (
                self.notes,
                self.selected_analyst,
                self.selected_meeting,
                self.selected_date,
                self.selected_time,
                self.selected_timezone,
            )
        )


@dataclass(frozen=True)
class RegistrationRecord(_SessionRecordBase):
    """A bootcamp registration."""

    record_type: ClassVar[RecordType] = "bootcamp"

    bootcamp_id: str | None = None
    bootcamp_name: str | None = None
    bootcamp_description: str | None = None


SessionRecord = BookingRecord | RegistrationRecord


class FormDataSource(StrEnum):
    """Where the form data in a status response came from."""

    DRAFT = "draft"
    RECORD = "record"
    METADATA = "metadata"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class FormData:
    """Customer-submitted booking form fields."""

    source: FormDataSource
    full_name: str = ""
    email: str = ""
    notes: str = ""
    selected_analyst: str = ""
    selected_meeting: str = ""
    selected_date: str = ""
    selected_time: str = ""
    selected_timezone: str = ""


@dataclass(frozen=True)
class BookingDraft:
    """Form fields captured when a booking checkout is created."""

    stripe_session_id: str
    full_name: str = ""
    email: str = ""
    notes: str = ""
    selected_analyst: str = ""
    selected_meeting: str = ""
    selected_date: str = ""
    selected_time: str = ""
    selected_timezone: str = ""
    created_at: datetime | None = None

    def to_form_data(self) -> FormData:
        return FormData(
            source=FormDataSource.DRAFT,
            full_name=self.full_name,
            email=self.email,
            notes=self.notes,
            selected_analyst=self.selected_analyst,
            selected_meeting=self.selected_meeting,
            selected_date=self.selected_date,
            selected_time=self.selected_time,
            selected_timezone=self.selected_timezone,
        )


@dataclass(frozen=True)
class PaymentStatusView:
    """Unified result of resolving a checkout session."""

    record: SessionRecord
    expired: bool
    form_data: FormData | None = None
    checkout_url: str | None = None


@dataclass(frozen=True)
class StatusEcho:
    """Lightweight status returned by a manual refresh."""

    session_id: str
    record_type: RecordType
    status: RecordStatus
    payment_status: str
    last_updated: datetime | None
