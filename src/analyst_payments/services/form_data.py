"""Reconstruct booking form data for a resolved session."""

import logging
from dataclasses import dataclass
from typing import assert_never

from analyst_payments.adapters.stripe_client import PaymentProcessorClient
from analyst_payments.domain.errors import PaymentProcessorError
from analyst_payments.domain.processor import ProcessorSession
from analyst_payments.domain.sessions import (
    BookingRecord,
    FormData,
    FormDataSource,
    RegistrationRecord,
    SessionRecord,
)
from analyst_payments.services.records import BookingDraftRepository

logger = logging.getLogger(__name__)


@dataclass
class FormDataAssembler:
    """Picks exactly one source of booking form data.

    Sources are tried in order: the booking draft (consumed on read), fields
    already on the record, Stripe session metadata, and finally name and email
    alone. The first source that matches is returned as is.
    """

    draft_repository: BookingDraftRepository
    processor: PaymentProcessorClient

    async def assemble(self, record: SessionRecord) -> FormData | None:
        if isinstance(record, RegistrationRecord):
            return None
        if isinstance(record, BookingRecord):
            return await self._assemble_booking(record)
        assert_never(record)

    async def _assemble_booking(self, record: BookingRecord) -> FormData | None:
        draft = self.draft_repository.get_draft(record.session_key)
        if draft is not None:
            self.draft_repository.delete_draft(record.session_key)
            return draft.to_form_data()

        if record.has_form_fields:
            return _from_record(record)

        from_metadata = await self._from_processor_metadata(record)
        if from_metadata is not None:
            return from_metadata

        if record.customer_name or record.customer_email:
            return FormData(
                source=FormDataSource.FALLBACK,
                full_name=record.customer_name or "",
                email=record.customer_email or "",
            )
        return None

    async def _from_processor_metadata(self, record: BookingRecord) -> FormData | None:
        if not record.stripe_session_id:
            return None
        try:
            session = await self.processor.retrieve_session(record.stripe_session_id)
        except PaymentProcessorError:
            logger.warning(
                "Could not read Stripe metadata for form data",
                extra={"session_id": record.stripe_session_id},
            )
            return None
        if not session.looks_like_booking():
            return None
        return _from_metadata(session)


def _from_record(record: BookingRecord) -> FormData:
    return FormData(
        source=FormDataSource.RECORD,
        full_name=record.customer_name or "",
        email=record.customer_email or "",
        notes=record.notes or "",
        selected_analyst=record.selected_analyst or "",
        selected_meeting=record.selected_meeting or "",
        selected_date=record.selected_date or "",
        selected_time=record.selected_time or "",
        selected_timezone=record.selected_timezone or "",
    )


def _from_metadata(session: ProcessorSession) -> FormData:
    metadata = session.metadata
    return FormData(
        source=FormDataSource.METADATA,
        full_name=metadata.get("customerName", ""),
        email=metadata.get("customerEmail") or session.customer_email or "",
        notes=metadata.get("notes", ""),
        selected_analyst=metadata.get("selectedAnalyst", ""),
        selected_meeting=metadata.get("selectedMeeting", ""),
        selected_date=metadata.get("selectedDate", ""),
        selected_time=metadata.get("selectedTime", ""),
        selected_timezone=metadata.get("selectedTimezone", ""),
    )
