"""Products that can be purchased through checkout."""

from dataclasses import dataclass

TEST_MODE_PRICE = 1


@dataclass(frozen=True)
class Product:
    """A purchasable meeting type or bootcamp."""

    id: str
    name: str
    description: str
    price: int
    duration_minutes: int | None = None

    def price_for(self, test_mode: bool) -> int:
        """Return the price in major units."""
        return TEST_MODE_PRICE if test_mode else self.price


MEETING_TYPES: tuple[Product, ...] = (
    Product(
        id="initial-consultation",
        name="Initial Consultation",
        description="Quick overview and needs assessment",
        price=50,
        duration_minutes=30,
    ),
    Product(
        id="initial-consultation-1",
        name="Extended Initial Consultation",
        description="Extended consultation with detailed analysis",
        price=75,
        duration_minutes=45,
    ),
    Product(
        id="strategy-workshop",
        name="Strategy Workshop",
        description="Intensive planning and implementation workshop",
        price=150,
        duration_minutes=90,
    ),
    Product(
        id="follow-up-session",
        name="Follow-up Session",
        description="Progress review and next steps",
        price=75,
        duration_minutes=45,
    ),
)

BOOTCAMPS: tuple[Product, ...] = (
    Product(
        id="crypto-trading",
        name="Crypto Trading Bootcamp",
        description="Interactive mentorship bootcamp guided by Senior Crypto Analyst",
        price=30,
    ),
)


def find_meeting_type(meeting_type_id: str | None) -> Product | None:
    return next((item for item in MEETING_TYPES if item.id == meeting_type_id), None)


def find_bootcamp(bootcamp_id: str | None) -> Product | None:
    return next((item for item in BOOTCAMPS if item.id == bootcamp_id), None)
