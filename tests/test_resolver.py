"""Tests for session resolution."""

import asyncio

import pytest

from analyst_payments.domain.errors import SessionNotFoundError
from analyst_payments.domain.sessions import (
    BookingRecord,
    RecordStatus,
    RegistrationRecord,
)
from analyst_payments.services.resolver import SessionResolver
from analyst_payments.services.webhooks import WebhookService
from tests.conftest import (
    NOW,
    VALID_SIGNATURE,
    FakePaymentProcessorClient,
    FixedClock,
    InMemorySessionRecordRepository,
    make_booking,
    make_processor_session,
    make_registration,
)


def _resolver(
    repository: InMemorySessionRecordRepository,
    processor: FakePaymentProcessorClient,
) -> SessionResolver:
    return SessionResolver(repository, processor, clock=FixedClock())


def test_resolve_prefers_local_booking() -> None:
    repository = InMemorySessionRecordRepository(bookings=[make_booking()])
    processor = FakePaymentProcessorClient()

    record = asyncio.run(_resolver(repository, processor).resolve("cs_test_booking"))

    assert isinstance(record, BookingRecord)
    assert processor.retrieved == []


def test_resolve_matches_legacy_id() -> None:
    legacy = make_booking(stripe_session_id=None, legacy_id="booking-42")
    repository = InMemorySessionRecordRepository(bookings=[legacy])

    record = asyncio.run(
        _resolver(repository, FakePaymentProcessorClient()).resolve("booking-42")
    )

    assert record.session_key == "booking-42"


def test_resolve_falls_back_to_registrations() -> None:
    repository = InMemorySessionRecordRepository(registrations=[make_registration()])

    record = asyncio.run(
        _resolver(repository, FakePaymentProcessorClient()).resolve("cs_test_bootcamp")
    )

    assert isinstance(record, RegistrationRecord)
    assert record.record_type == "bootcamp"


def test_resolve_synthesizes_paid_booking_from_stripe() -> None:
    repository = InMemorySessionRecordRepository()
    processor = FakePaymentProcessorClient(
        sessions={
            "cs_live_1": make_processor_session(
                "cs_live_1",
                metadata={
                    "type": "booking",
                    "customerName": "Amal K",
                    "customerEmail": "amal@example.com",
                    "meetingTypeId": "strategy-workshop",
                    "selectedDate": "2026-03-05",
                },
                amount_total=15000,
            )
        }
    )

    record = asyncio.run(_resolver(repository, processor).resolve("cs_live_1"))

    assert isinstance(record, BookingRecord)
    assert record.status == RecordStatus.PAID
    assert record.payment_status == "paid"
    assert record.amount == 150.0
    assert record.paid_at == NOW
    assert record.selected_date == "2026-03-05"
    assert repository.bookings == [record]


def test_resolve_recognizes_untagged_booking_metadata() -> None:
    repository = InMemorySessionRecordRepository()
    processor = FakePaymentProcessorClient(
        sessions={
            "cs_old": make_processor_session(
                "cs_old", metadata={"meetingTypeId": "follow-up-session"}
            )
        }
    )

    record = asyncio.run(_resolver(repository, processor).resolve("cs_old"))

    assert isinstance(record, BookingRecord)
    assert record.meeting_type_id == "follow-up-session"


def test_resolve_recognizes_untagged_bootcamp_metadata() -> None:
    repository = InMemorySessionRecordRepository()
    processor = FakePaymentProcessorClient(
        sessions={
            "cs_camp": make_processor_session(
                "cs_camp", metadata={"bootcampId": "crypto-trading"}
            )
        }
    )

    record = asyncio.run(_resolver(repository, processor).resolve("cs_camp"))

    assert isinstance(record, RegistrationRecord)
    assert record.bootcamp_name == "Crypto Trading Bootcamp"
    assert repository.registrations == [record]


@pytest.mark.parametrize("payment_status", ["unpaid", "no_payment_required"])
def test_resolve_unpaid_session_is_not_found(payment_status: str) -> None:
    repository = InMemorySessionRecordRepository()
    processor = FakePaymentProcessorClient(
        sessions={
            "cs_unpaid": make_processor_session(
                "cs_unpaid",
                metadata={"type": "booking"},
                payment_status=payment_status,
            )
        }
    )

    with pytest.raises(SessionNotFoundError):
        asyncio.run(_resolver(repository, processor).resolve("cs_unpaid"))
    assert repository.writes == []


def test_resolve_unrelated_paid_session_is_not_found() -> None:
    repository = InMemorySessionRecordRepository()
    processor = FakePaymentProcessorClient(
        sessions={"cs_sub": make_processor_session("cs_sub", mode="subscription")}
    )

    with pytest.raises(SessionNotFoundError):
        asyncio.run(_resolver(repository, processor).resolve("cs_sub"))
    assert repository.writes == []


def test_resolve_downgrades_stripe_failure_to_not_found() -> None:
    processor = FakePaymentProcessorClient(fail=True)

    with pytest.raises(SessionNotFoundError):
        asyncio.run(
            _resolver(InMemorySessionRecordRepository(), processor).resolve("cs_x")
        )


def test_concurrent_resolutions_persist_one_record() -> None:
    repository = InMemorySessionRecordRepository()
    processor = FakePaymentProcessorClient(
        sessions={
            "cs_race": make_processor_session("cs_race", metadata={"type": "booking"})
        }
    )
    resolver = _resolver(repository, processor)

    async def resolve_twice() -> list:
        return await asyncio.gather(
            resolver.resolve("cs_race"), resolver.resolve("cs_race")
        )

    first, second = asyncio.run(resolve_twice())

    assert len(repository.bookings) == 1
    assert first == second == repository.bookings[0]
    assert [kind for kind, _ in repository.writes] == ["insert", "insert_skipped"]


def test_resolution_racing_webhook_returns_webhook_record() -> None:
    repository = InMemorySessionRecordRepository()
    processor = FakePaymentProcessorClient(
        sessions={
            "cs_hook": make_processor_session("cs_hook", metadata={"type": "booking"})
        }
    )
    webhook = WebhookService(repository, processor, clock=FixedClock())
    payload = (
        b'{"id": "evt_1", "type": "checkout.session.completed", "data": {"object": '
        b'{"id": "cs_hook", "payment_status": "paid", "mode": "payment", '
        b'"amount_total": 5000, "currency": "usd", "metadata": {"type": "booking"}}}}'
    )
    processor.on_retrieve = lambda _session_id: webhook.handle(payload, VALID_SIGNATURE)

    record = asyncio.run(_resolver(repository, processor).resolve("cs_hook"))

    assert len(repository.bookings) == 1
    assert record.status == RecordStatus.CONFIRMED
