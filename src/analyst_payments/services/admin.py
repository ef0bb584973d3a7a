"""Admin service for reporting."""

from dataclasses import dataclass

from analyst_payments.domain.sessions import SessionRecord
from analyst_payments.services.records import SessionRecordRepository


@dataclass
class AdminService:
    """Service for admin dashboards."""

    repository: SessionRecordRepository

    def list_bookings(self, limit: int = 20) -> list[dict[str, object]]:
        """Return recent bookings."""
        return [
            _serialize_record(record)
            for record in self.repository.list_recent("booking", limit)
        ]

    def list_registrations(self, limit: int = 20) -> list[dict[str, object]]:
        """Return recent bootcamp registrations."""
        return [
            _serialize_record(record)
            for record in self.repository.list_recent("bootcamp", limit)
        ]


def _serialize_record(record: SessionRecord) -> dict[str, object]:
    return {
        "session_id": record.session_key,
        "type": record.record_type,
        "status": record.status.value,
        "payment_status": record.payment_status,
        "customer_name": record.customer_name,
        "customer_email": record.customer_email,
        "amount": record.amount,
        "currency": record.currency,
        "created_at": record.created_at.isoformat() if record.created_at else None,
    }
