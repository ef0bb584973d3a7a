"""Checkout session creation for bookings and bootcamps."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta

from analyst_payments.adapters.stripe_client import PaymentProcessorClient
from analyst_payments.domain.catalog import Product, find_bootcamp, find_meeting_type
from analyst_payments.domain.errors import CheckoutValidationError
from analyst_payments.domain.sessions import BookingDraft
from analyst_payments.services.records import BookingDraftRepository, utc_now

logger = logging.getLogger(__name__)

# Stripe rejects metadata values longer than this.
METADATA_VALUE_LIMIT = 500


@dataclass(frozen=True)
class CheckoutRequest:
    """Customer input for a new checkout."""

    type: str
    customer_email: str
    customer_name: str = ""
    meeting_type_id: str | None = None
    bootcamp_id: str | None = None
    notes: str = ""
    selected_analyst: str = ""
    selected_meeting: str = ""
    selected_date: str = ""
    selected_time: str = ""
    selected_timezone: str = ""


@dataclass(frozen=True)
class CheckoutResult:
    """A created checkout session."""

    session_id: str
    url: str | None
    amount: int
    currency: str
    product_name: str
    expires_at: datetime | None


@dataclass
class CheckoutService:
    """Creates Stripe checkout sessions and captures booking drafts."""

    processor: PaymentProcessorClient
    draft_repository: BookingDraftRepository
    base_url: str
    test_mode: bool = False
    expiry_minutes: int = 30
    clock: Callable[[], datetime] = utc_now

    async def create_checkout(self, request: CheckoutRequest) -> CheckoutResult:
        """Create a checkout session for the requested product."""
        product = _select_product(request)
        amount = product.price_for(self.test_mode) * 100
        base_url = self.base_url.rstrip("/")
        if request.type == "bootcamp":
            success_url = (
                f"{base_url}/bootcamp-success?session_id={{CHECKOUT_SESSION_ID}}"
            )
            cancel_url = f"{base_url}/bootcamp/{product.id}/register?payment=cancelled"
        else:
            success_url = f"{base_url}/booking-success?session_id={{CHECKOUT_SESSION_ID}}"
            cancel_url = f"{base_url}/meetings?payment=cancelled"

        session = await self.processor.create_checkout_session(
            amount=amount,
            currency="usd",
            product_name=product.name,
            product_description=product.description,
            customer_email=request.customer_email,
            metadata=_build_metadata(request),
            success_url=success_url,
            cancel_url=cancel_url,
            expires_at=self.clock() + timedelta(minutes=self.expiry_minutes),
        )

        if request.type == "booking":
            self.draft_repository.save_draft(
                BookingDraft(
                    stripe_session_id=session.id,
                    full_name=request.customer_name,
                    email=request.customer_email,
                    notes=request.notes,
                    selected_analyst=request.selected_analyst,
                    selected_meeting=request.selected_meeting,
                    selected_date=request.selected_date,
                    selected_time=request.selected_time,
                    selected_timezone=request.selected_timezone,
                    created_at=self.clock(),
                )
            )

        logger.info(
            "Created checkout session",
            extra={
                "session_id": session.id,
                "type": request.type,
                "test_mode": self.test_mode,
            },
        )
        return CheckoutResult(
            session_id=session.id,
            url=session.url,
            amount=amount,
            currency="USD",
            product_name=product.name,
            expires_at=session.expires_at,
        )


def _select_product(request: CheckoutRequest) -> Product:
    if request.type == "booking":
        meeting_type = find_meeting_type(request.meeting_type_id)
        if meeting_type is None:
            raise CheckoutValidationError("Invalid meeting type")
        return meeting_type
    if request.type == "bootcamp":
        bootcamp = find_bootcamp(request.bootcamp_id)
        if bootcamp is None:
            raise CheckoutValidationError("Invalid bootcamp")
        if not request.customer_name.strip():
            raise CheckoutValidationError("Customer name is required for bootcamps")
        return bootcamp
    raise CheckoutValidationError('Invalid type. Must be "booking" or "bootcamp"')


def _build_metadata(request: CheckoutRequest) -> dict[str, str]:
    metadata = {
        "type": request.type,
        "customerEmail": request.customer_email,
        "customerName": request.customer_name,
        "notes": request.notes,
    }
    if request.type == "booking":
        metadata.update(
            {
                "meetingTypeId": request.meeting_type_id or "",
                "selectedAnalyst": request.selected_analyst,
                "selectedMeeting": request.selected_meeting,
                "selectedDate": request.selected_date,
                "selectedTime": request.selected_time,
                "selectedTimezone": request.selected_timezone,
            }
        )
    else:
        metadata["bootcampId"] = request.bootcamp_id or ""
    return {
        key: value[:METADATA_VALUE_LIMIT] for key, value in metadata.items() if value
    }
