"""Payment status lookups for returning checkout sessions."""

from dataclasses import dataclass

from analyst_payments.domain.errors import SessionNotFoundError
from analyst_payments.domain.sessions import (
    PaymentStatusView,
    RecordStatus,
    StatusEcho,
)
from analyst_payments.services.expiry import ExpirySweeper
from analyst_payments.services.form_data import FormDataAssembler
from analyst_payments.services.resolver import SessionResolver
from analyst_payments.services.security import SecurityGate

CHECKOUT_URL_TEMPLATE = "https://checkout.stripe.com/pay/{session_id}"


@dataclass
class PaymentStatusService:
    """Builds the unified status view for a booking or bootcamp session."""

    resolver: SessionResolver
    sweeper: ExpirySweeper
    gate: SecurityGate
    assembler: FormDataAssembler

    async def get_status(self, session_id: str) -> PaymentStatusView:
        """Resolve, validate and enrich a session.

        Rejections (too old, already used) are raised before any form data is
        read, so a rejected session never consumes its draft.
        """
        record = await self.resolver.resolve(session_id)
        record = self.sweeper.sweep(record)
        verdict = self.gate.evaluate(record)
        verdict.raise_for_rejection()
        form_data = await self.assembler.assemble(record)
        checkout_url = None
        if record.status == RecordStatus.PENDING and not verdict.expired:
            checkout_url = CHECKOUT_URL_TEMPLATE.format(session_id=session_id)
        return PaymentStatusView(
            record=record,
            expired=verdict.expired,
            form_data=form_data,
            checkout_url=checkout_url,
        )

    def refresh_status(self, session_id: str) -> StatusEcho:
        """Return the stored status without side effects."""
        record = self.resolver.find_local(session_id)
        if record is None:
            raise SessionNotFoundError(session_id)
        return StatusEcho(
            session_id=record.session_key,
            record_type=record.record_type,
            status=record.status,
            payment_status=record.payment_status,
            last_updated=record.updated_at,
        )
