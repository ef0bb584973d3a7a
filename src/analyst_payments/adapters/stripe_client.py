"""Stripe API client adapter."""

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

import stripe

from analyst_payments.domain.errors import (
    PaymentProcessorError,
    WebhookSignatureError,
)
from analyst_payments.domain.processor import ProcessorEvent, ProcessorSession


class PaymentProcessorClient(Protocol):
    """Interface for payment processor interactions."""

    async def retrieve_session(self, session_id: str) -> ProcessorSession:
        """Return the processor's view of a checkout session."""

    async def create_checkout_session(  # noqa: PLR0913
        self,
        *,
        amount: int,
        currency: str,
        product_name: str,
        product_description: str,
        customer_email: str,
        metadata: dict[str, str],
        success_url: str,
        cancel_url: str,
        expires_at: datetime,
    ) -> ProcessorSession:
        """Create a one-off payment checkout session; amount is in cents."""

    def construct_event(self, payload: bytes, signature: str) -> ProcessorEvent:
        """Verify a webhook payload and return the parsed event."""


@dataclass
class StripeCheckoutClient(PaymentProcessorClient):
    """Payment processor client backed by the Stripe SDK."""

    api_key: str
    webhook_secret: str

    async def retrieve_session(self, session_id: str) -> ProcessorSession:
        """Retrieve a checkout session."""
        try:
            session = await asyncio.to_thread(
                stripe.checkout.Session.retrieve, session_id, api_key=self.api_key
            )
        except stripe.StripeError as exc:
            raise PaymentProcessorError(str(exc)) from exc
        return parse_session(_as_dict(session))

    async def create_checkout_session(  # noqa: PLR0913
        self,
        *,
        amount: int,
        currency: str,
        product_name: str,
        product_description: str,
        customer_email: str,
        metadata: dict[str, str],
        success_url: str,
        cancel_url: str,
        expires_at: datetime,
    ) -> ProcessorSession:
        """Create a payment-mode checkout session with a single line item."""
        try:
            session = await asyncio.to_thread(
                stripe.checkout.Session.create,
                api_key=self.api_key,
                mode="payment",
                currency=currency,
                line_items=[
                    {
                        "price_data": {
                            "currency": currency,
                            "product_data": {
                                "name": product_name,
                                "description": product_description,
                            },
                            "unit_amount": amount,
                        },
                        "quantity": 1,
                    }
                ],
                customer_email=customer_email,
                metadata=metadata,
                success_url=success_url,
                cancel_url=cancel_url,
                expires_at=int(expires_at.timestamp()),
            )
        except stripe.StripeError as exc:
            raise PaymentProcessorError(str(exc)) from exc
        return parse_session(_as_dict(session))

    def construct_event(self, payload: bytes, signature: str) -> ProcessorEvent:
        """Verify the Stripe-Signature header and parse the event."""
        try:
            event = stripe.Webhook.construct_event(
                payload, signature, self.webhook_secret
            )
        except (ValueError, stripe.SignatureVerificationError) as exc:
            raise WebhookSignatureError(str(exc)) from exc
        return parse_event(_as_dict(event))


def parse_session(data: dict[str, object]) -> ProcessorSession:
    """Convert a Stripe checkout session payload to a domain object."""
    metadata = data.get("metadata") or {}
    expires_at = data.get("expires_at")
    amount_total = data.get("amount_total")
    return ProcessorSession(
        id=str(data["id"]),
        payment_status=str(data.get("payment_status") or ""),
        mode=str(data.get("mode") or ""),
        amount_total=int(amount_total) if amount_total is not None else None,
        currency=_optional_str(data.get("currency")),
        metadata={str(key): str(value) for key, value in metadata.items()},
        customer_email=_optional_str(data.get("customer_email")),
        payment_intent=_optional_id(data.get("payment_intent")),
        customer=_optional_id(data.get("customer")),
        url=_optional_str(data.get("url")),
        expires_at=(
            datetime.fromtimestamp(int(expires_at), tz=UTC)
            if expires_at is not None
            else None
        ),
    )


def parse_event(data: dict[str, object]) -> ProcessorEvent:
    """Convert a Stripe event payload to a domain object."""
    event_type = str(data.get("type") or "")
    payload = data.get("data") or {}
    obj = payload.get("object") if isinstance(payload, dict) else None
    session = None
    if event_type.startswith("checkout.session.") and isinstance(obj, dict):
        session = parse_session(obj)
    return ProcessorEvent(id=str(data.get("id") or ""), type=event_type, session=session)


def _as_dict(obj: object) -> dict[str, object]:
    if isinstance(obj, dict):
        return dict(obj)
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    raise PaymentProcessorError(f"Unexpected Stripe payload: {type(obj).__name__}")


def _optional_str(value: object) -> str | None:
    return str(value) if value else None


def _optional_id(value: object) -> str | None:
    """Return the id of an expandable Stripe field."""
    if isinstance(value, dict):
        return _optional_str(value.get("id"))
    return _optional_str(value)
