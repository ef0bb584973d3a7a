"""Supabase-backed booking draft repository."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from analyst_payments.domain.sessions import BookingDraft
from analyst_payments.services.records import BookingDraftRepository

_FORM_COLUMNS = (
    "full_name",
    "email",
    "notes",
    "selected_analyst",
    "selected_meeting",
    "selected_date",
    "selected_time",
    "selected_timezone",
)


@dataclass
class SupabaseBookingDraftRepository(BookingDraftRepository):
    """Supabase implementation for booking drafts."""

    client: Client

    def save_draft(self, draft: BookingDraft) -> None:
        """Insert a draft row."""
        payload: dict[str, object] = {
            column: getattr(draft, column) for column in _FORM_COLUMNS
        }
        payload["stripe_session_id"] = draft.stripe_session_id
        if draft.created_at:
            payload["created_at"] = draft.created_at.isoformat()
        self.client.table("booking_drafts").insert(payload).execute()

    def get_draft(self, session_id: str) -> BookingDraft | None:
        """Return the draft for a session, if present."""
        response = (
            self.client.table("booking_drafts")
            .select("*")
            .eq("stripe_session_id", session_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        created_at = row.get("created_at")
        return BookingDraft(
            stripe_session_id=row["stripe_session_id"],
            created_at=(
                datetime.fromisoformat(created_at)
                if isinstance(created_at, str) and created_at
                else None
            ),
            **{column: str(row.get(column) or "") for column in _FORM_COLUMNS},
        )

    def delete_draft(self, session_id: str) -> None:
        """Delete the draft for a session."""
        self.client.table("booking_drafts").delete().eq(
            "stripe_session_id", session_id
        ).execute()
