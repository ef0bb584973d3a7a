"""Transition expired pending records."""

from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime

from analyst_payments.domain.sessions import RecordStatus, SessionRecord
from analyst_payments.services.records import (
    SessionRecordRepository,
    get_local_record,
    utc_now,
)


@dataclass
class ExpirySweeper:
    """Marks pending records past their expiry as EXPIRED."""

    repository: SessionRecordRepository
    clock: Callable[[], datetime] = utc_now

    def sweep(self, record: SessionRecord) -> SessionRecord:
        """Return the record, expiring it first when it is overdue."""
        now = self.clock()
        if record.status != RecordStatus.PENDING:
            return record
        if record.expires_at is None or record.expires_at >= now:
            return record
        if self.repository.mark_expired(record, updated_at=now):
            return replace(
                record,
                status=RecordStatus.EXPIRED,
                payment_status="EXPIRED",
                updated_at=now,
            )
        # Another request moved it out of PENDING first.
        return get_local_record(self.repository, record.session_key) or record
