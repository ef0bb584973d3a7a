"""Domain models for the payment processor's view of a checkout."""

from dataclasses import dataclass, field
from datetime import datetime

BOOKING_METADATA_KEYS = frozenset(
    {
        "meetingTypeId",
        "selectedAnalyst",
        "selectedMeeting",
        "selectedDate",
        "selectedTime",
        "selectedTimezone",
    }
)


@dataclass(frozen=True)
class ProcessorSession:
    """Stripe checkout session fields this service relies on."""

    id: str
    payment_status: str
    mode: str
    amount_total: int | None = None
    currency: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)
    customer_email: str | None = None
    payment_intent: str | None = None
    customer: str | None = None
    url: str | None = None
    expires_at: datetime | None = None

    @property
    def is_paid(self) -> bool:
        return self.payment_status == "paid"

    def looks_like_booking(self) -> bool:
        """Return true for booking sessions, tagged or not."""
        if self.metadata.get("type") == "booking":
            return True
        return self.mode == "payment" and bool(
            BOOKING_METADATA_KEYS.intersection(self.metadata)
        )

    def looks_like_registration(self) -> bool:
        """Return true for bootcamp sessions, tagged or not."""
        if self.metadata.get("type") == "bootcamp":
            return True
        return bool(self.metadata.get("bootcampId"))


@dataclass(frozen=True)
class ProcessorEvent:
    """A verified webhook event."""

    id: str
    type: str
    session: ProcessorSession | None = None
