"""Supabase-backed repository for bookings and bootcamp registrations."""

import logging
from dataclasses import asdict, dataclass, fields
from datetime import UTC, datetime

from supabase import Client

from analyst_payments.domain.sessions import (
    BookingRecord,
    RecordStatus,
    RecordType,
    RegistrationRecord,
    SessionRecord,
)
from analyst_payments.services.records import SessionRecordRepository

logger = logging.getLogger(__name__)

_TABLES: dict[RecordType, str] = {
    "booking": "bookings",
    "bootcamp": "bootcamp_registrations",
}
_DATETIME_COLUMNS = {"created_at", "updated_at", "paid_at", "confirmed_at", "expires_at"}


@dataclass
class SupabaseSessionRecordRepository(SessionRecordRepository):
    """Supabase implementation for session records."""

    client: Client

    def get_booking(self, session_id: str) -> BookingRecord | None:
        """Return a booking by Stripe session id or legacy id."""
        row = self._find_row(_TABLES["booking"], session_id)
        return _parse_record(BookingRecord, row) if row else None

    def get_registration(self, session_id: str) -> RegistrationRecord | None:
        """Return a registration by Stripe session id or legacy id."""
        row = self._find_row(_TABLES["bootcamp"], session_id)
        return _parse_record(RegistrationRecord, row) if row else None

    def insert_if_absent(self, record: SessionRecord) -> None:
        """Insert a record, leaving any existing row for the session untouched."""
        self.client.table(_TABLES[record.record_type]).upsert(
            _serialize_record(record),
            on_conflict="stripe_session_id",
            ignore_duplicates=True,
        ).execute()

    def mark_expired(self, record: SessionRecord, updated_at: datetime) -> bool:
        """Expire the record only while it is still pending."""
        key_column = "stripe_session_id" if record.stripe_session_id else "legacy_id"
        response = (
            self.client.table(_TABLES[record.record_type])
            .update(
                {
                    "status": RecordStatus.EXPIRED.value,
                    "payment_status": "EXPIRED",
                    "updated_at": updated_at.isoformat(),
                }
            )
            .eq(key_column, record.session_key)
            .eq("status", RecordStatus.PENDING.value)
            .execute()
        )
        return bool(response.data)

    def set_calendly_uris(
        self,
        session_id: str,
        event_uri: str | None,
        invitee_uri: str | None,
        updated_at: datetime,
    ) -> bool:
        """Store the Calendly URIs that were provided."""
        payload: dict[str, object] = {"updated_at": updated_at.isoformat()}
        if event_uri:
            payload["calendly_event_uri"] = event_uri
        if invitee_uri:
            payload["calendly_invitee_uri"] = invitee_uri
        response = (
            self.client.table(_TABLES["booking"])
            .update(payload)
            .eq("stripe_session_id", session_id)
            .execute()
        )
        return bool(response.data)

    def list_recent(self, record_type: RecordType, limit: int) -> list[SessionRecord]:
        """Return the newest records of a type."""
        response = (
            self.client.table(_TABLES[record_type])
            .select("*")
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        record_class = BookingRecord if record_type == "booking" else RegistrationRecord
        return [_parse_record(record_class, row) for row in response.data or []]

    def _find_row(self, table: str, session_id: str) -> dict[str, object] | None:
        for column in ("stripe_session_id", "legacy_id"):
            response = (
                self.client.table(table)
                .select("*")
                .eq(column, session_id)
                .limit(1)
                .execute()
            )
            if response.data:
                return response.data[0]
        return None


def _serialize_record(record: SessionRecord) -> dict[str, object]:
    payload = asdict(record)
    payload["status"] = record.status.value
    for column in _DATETIME_COLUMNS:
        value = payload[column]
        payload[column] = value.isoformat() if value else None
    return payload


def _parse_record(
    record_class: type[BookingRecord] | type[RegistrationRecord],
    row: dict[str, object],
) -> SessionRecord:
    values: dict[str, object] = {}
    for field in fields(record_class):
        if field.name not in row:
            continue
        value = row[field.name]
        if field.name in _DATETIME_COLUMNS:
            value = _parse_datetime(value)
        elif field.name == "status":
            value = _parse_status(value)
        elif field.name == "amount":
            value = float(value or 0.0)
        values[field.name] = value
    values.setdefault("status", RecordStatus.PENDING)
    values["payment_status"] = str(values.get("payment_status") or "")
    return record_class(**values)


def _parse_datetime(value: object) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    parsed = datetime.fromisoformat(value)
    # Columns without a time zone hold UTC.
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed


def _parse_status(value: object) -> RecordStatus:
    # Rows written by older flows used lowercase statuses.
    raw = str(value or RecordStatus.PENDING.value).upper()
    try:
        return RecordStatus(raw)
    except ValueError:
        logger.warning(
            "Unknown record status, reading as FAILED", extra={"status": raw}
        )
        return RecordStatus.FAILED
