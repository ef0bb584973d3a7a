"""FastAPI application factory."""

import logging
from datetime import datetime
from typing import assert_never

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from analyst_payments.api.admin import router as admin_router
from analyst_payments.api.models import CalendlyUpdatePayload, CheckoutSessionPayload
from analyst_payments.app_logging import configure_logging
from analyst_payments.containers import AppContainer
from analyst_payments.domain.errors import (
    BookingUpdateError,
    CheckoutValidationError,
    PaymentProcessorError,
    PaymentSessionError,
    SessionAlreadyUsedError,
    SessionNotFoundError,
    SessionTooOldError,
    WebhookSignatureError,
)
from analyst_payments.domain.sessions import (
    BookingRecord,
    FormData,
    PaymentStatusView,
    RegistrationRecord,
)
from analyst_payments.services.checkout import CheckoutRequest

_ERROR_RESPONSES: dict[type[PaymentSessionError], tuple[int, str | None]] = {
    SessionNotFoundError: (status.HTTP_404_NOT_FOUND, "Payment session not found"),
    SessionAlreadyUsedError: (
        status.HTTP_409_CONFLICT,
        "This booking session has already been used",
    ),
    SessionTooOldError: (
        status.HTTP_410_GONE,
        "This payment session can no longer be used. Please start a new checkout.",
    ),
    PaymentProcessorError: (
        status.HTTP_502_BAD_GATEWAY,
        "Payment processor request failed",
    ),
    WebhookSignatureError: (status.HTTP_400_BAD_REQUEST, "Invalid signature"),
    CheckoutValidationError: (status.HTTP_400_BAD_REQUEST, None),
    BookingUpdateError: (status.HTTP_400_BAD_REQUEST, None),
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    app.include_router(admin_router)

    @app.exception_handler(PaymentSessionError)
    async def payment_session_error_handler(
        request: Request, exc: PaymentSessionError
    ) -> JSONResponse:
        status_code, detail = _error_response(exc)
        return JSONResponse(status_code=status_code, content={"error": detail})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/stripe/payment-status/{session_id}")
    async def payment_status(session_id: str, request: Request) -> dict[str, object]:
        """Return the unified status of a booking or bootcamp checkout."""
        state_container: AppContainer = request.app.state.container
        try:
            view = await state_container.payment_status_service.get_status(session_id)
            return _serialize_status_view(view)
        except PaymentSessionError:
            raise
        except Exception:
            logger.exception(
                "Payment status lookup failed", extra={"session_id": session_id}
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error",
            ) from None

    @app.post("/stripe/payment-status/{session_id}")
    async def refresh_payment_status(
        session_id: str, request: Request
    ) -> dict[str, object]:
        """Echo the stored status of a checkout."""
        state_container: AppContainer = request.app.state.container
        try:
            echo = state_container.payment_status_service.refresh_status(session_id)
        except PaymentSessionError:
            raise
        except Exception:
            logger.exception(
                "Payment status refresh failed", extra={"session_id": session_id}
            )
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error",
            ) from None
        return {
            "success": True,
            "message": "Status refreshed",
            "sessionId": echo.session_id,
            "type": echo.record_type,
            "status": echo.status.value,
            "paymentStatus": echo.payment_status,
            "lastUpdated": _isoformat(echo.last_updated),
        }

    @app.post("/stripe/checkout-sessions")
    async def create_checkout_session(
        payload: CheckoutSessionPayload, request: Request
    ) -> dict[str, object]:
        """Create a Stripe checkout session for a booking or bootcamp."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.checkout_service.create_checkout(
            CheckoutRequest(**payload.model_dump())
        )
        return {
            "success": True,
            "sessionId": result.session_id,
            "url": result.url,
            "amount": result.amount,
            "currency": result.currency,
            "productName": result.product_name,
            "expiresAt": _isoformat(result.expires_at),
        }

    @app.post("/stripe/webhook")
    async def stripe_webhook(request: Request) -> dict[str, bool]:
        """Receive Stripe webhook events."""
        state_container: AppContainer = request.app.state.container
        payload = await request.body()
        try:
            state_container.webhook_service.handle(
                payload, request.headers.get("stripe-signature")
            )
        except PaymentSessionError:
            raise
        except Exception:
            logger.exception("Webhook processing failed")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Webhook handler failed",
            ) from None
        return {"received": True}

    @app.put("/bookings/calendly")
    async def update_calendly(
        payload: CalendlyUpdatePayload, request: Request
    ) -> dict[str, object]:
        """Attach Calendly URIs to a paid booking."""
        state_container: AppContainer = request.app.state.container
        updated = state_container.booking_service.record_calendly_booking(
            payload.session_id,
            event_uri=payload.calendly_event_uri,
            invitee_uri=payload.calendly_invitee_uri,
        )
        return {
            "success": True,
            "message": "Booking updated with Calendly information",
            "updated": updated,
        }

    return app


def _error_response(exc: PaymentSessionError) -> tuple[int, str]:
    for error_type in type(exc).__mro__:
        if error_type in _ERROR_RESPONSES:
            status_code, detail = _ERROR_RESPONSES[error_type]
            return status_code, detail or str(exc)
    return status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error"


def _serialize_status_view(view: PaymentStatusView) -> dict[str, object]:
    """Render a status view with the camelCase keys the site expects."""
    record = view.record
    body: dict[str, object] = {
        "success": True,
        "sessionId": record.session_key,
        "type": record.record_type,
        "status": record.status.value,
        "paymentStatus": record.payment_status,
        "amount": record.amount,
        "currency": record.currency,
        "customerEmail": record.customer_email,
        "customerName": record.customer_name,
        "createdAt": _isoformat(record.created_at),
        "updatedAt": _isoformat(record.updated_at),
        "expiresAt": _isoformat(record.expires_at),
        "expired": view.expired,
    }
    if isinstance(record, BookingRecord):
        body["meetingDetails"] = {
            "meetingTypeId": record.meeting_type_id,
            "selectedAnalyst": record.selected_analyst,
            "selectedMeeting": record.selected_meeting,
            "selectedDate": record.selected_date,
            "selectedTime": record.selected_time,
            "selectedTimezone": record.selected_timezone,
        }
    elif isinstance(record, RegistrationRecord):
        body["bootcampDetails"] = {
            "bootcampId": record.bootcamp_id,
            "bootcampName": record.bootcamp_name,
            "bootcampDescription": record.bootcamp_description,
            "notes": record.notes,
        }
    else:
        assert_never(record)
    if record.is_paid:
        body["paymentDetails"] = {
            "stripePaymentIntentId": record.stripe_payment_intent_id,
            "stripeCustomerId": record.stripe_customer_id,
            "paidAt": _isoformat(record.paid_at),
            "confirmedAt": _isoformat(record.confirmed_at),
        }
    if view.checkout_url:
        body["checkoutUrl"] = view.checkout_url
    if view.form_data is not None:
        body["formData"] = _serialize_form_data(view.form_data)
    return body


def _serialize_form_data(form_data: FormData) -> dict[str, str]:
    return {
        "source": form_data.source.value,
        "fullName": form_data.full_name,
        "email": form_data.email,
        "notes": form_data.notes,
        "selectedAnalyst": form_data.selected_analyst,
        "selectedMeeting": form_data.selected_meeting,
        "selectedDate": form_data.selected_date,
        "selectedTime": form_data.selected_time,
        "selectedTimezone": form_data.selected_timezone,
    }


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None
