"""Dependency container wiring for the application."""

from dataclasses import dataclass
from datetime import timedelta

from supabase import create_client

from analyst_payments.adapters.stripe_client import StripeCheckoutClient
from analyst_payments.adapters.supabase_booking_draft_repository import (
    SupabaseBookingDraftRepository,
)
from analyst_payments.adapters.supabase_session_record_repository import (
    SupabaseSessionRecordRepository,
)
from analyst_payments.config import Settings
from analyst_payments.services.admin import AdminService
from analyst_payments.services.bookings import BookingService
from analyst_payments.services.checkout import CheckoutService
from analyst_payments.services.expiry import ExpirySweeper
from analyst_payments.services.form_data import FormDataAssembler
from analyst_payments.services.payment_status import PaymentStatusService
from analyst_payments.services.resolver import SessionResolver
from analyst_payments.services.security import SecurityGate
from analyst_payments.services.webhooks import WebhookService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    payment_status_service: PaymentStatusService
    checkout_service: CheckoutService
    webhook_service: WebhookService
    booking_service: BookingService
    admin_service: AdminService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    record_repository = SupabaseSessionRecordRepository(supabase_client)
    draft_repository = SupabaseBookingDraftRepository(supabase_client)
    processor = StripeCheckoutClient(
        api_key=resolved_settings.stripe_secret_key,
        webhook_secret=resolved_settings.stripe_webhook_secret,
    )
    payment_status_service = PaymentStatusService(
        resolver=SessionResolver(record_repository, processor),
        sweeper=ExpirySweeper(record_repository),
        gate=SecurityGate(
            reuse_window=timedelta(
                seconds=resolved_settings.session_reuse_window_seconds
            )
        ),
        assembler=FormDataAssembler(draft_repository, processor),
    )
    checkout_service = CheckoutService(
        processor=processor,
        draft_repository=draft_repository,
        base_url=resolved_settings.base_url,
        test_mode=resolved_settings.stripe_test_mode,
        expiry_minutes=resolved_settings.checkout_expiry_minutes,
    )

    return AppContainer(
        settings=resolved_settings,
        payment_status_service=payment_status_service,
        checkout_service=checkout_service,
        webhook_service=WebhookService(record_repository, processor),
        booking_service=BookingService(record_repository),
        admin_service=AdminService(record_repository),
    )
