"""Rate tables — Walla Walla tour, transfer and wait-time pricing."""

from decimal import Decimal

# Guest-count tiers for private wine tours, upper bound → tier key
WINE_TOUR_TIERS: list[tuple[int, str]] = [
    (2, "1-2"),
    (4, "3-4"),
    (6, "5-6"),
    (8, "7-8"),
    (11, "9-11"),
    (14, "12-14"),
]

# Hourly wine tour rates by day type and tier
WINE_TOUR_RATES: dict[str, dict[str, Decimal]] = {
    "Sun-Wed": {
        "1-2": Decimal("85"),
        "3-4": Decimal("95"),
        "5-6": Decimal("105"),
        "7-8": Decimal("115"),
        "9-11": Decimal("130"),
        "12-14": Decimal("140"),
    },
    "Thu-Sat": {
        "1-2": Decimal("95"),
        "3-4": Decimal("105"),
        "5-6": Decimal("115"),
        "7-8": Decimal("125"),
        "9-11": Decimal("140"),
        "12-14": Decimal("150"),
    },
}

WINE_TOUR_MINIMUM_HOURS: dict[str, int] = {
    "Sun-Wed": 4,
    "Thu-Sat": 5,
}

PRIVATE_TOUR_MAX_GUESTS = WINE_TOUR_TIERS[-1][0]

# Shared group tours (ticketed, per person)
SHARED_TOUR_BASE_RATE = Decimal("95")
SHARED_TOUR_WITH_LUNCH_RATE = Decimal("115")
SHARED_TOUR_DAYS: tuple[str, ...] = ("Sunday", "Monday", "Tuesday", "Wednesday")
SHARED_TOUR_MAX_GUESTS = 14

# Airport transfers: flat one-way price, 0 means not yet priced
AIRPORT_TRANSFER_RATES: dict[str, Decimal] = {
    "seatac_to_walla": Decimal("850"),
    "walla_to_seatac": Decimal("850"),
    "pasco_to_walla": Decimal("0"),
    "walla_to_pasco": Decimal("0"),
    "pendleton_to_walla": Decimal("0"),
    "walla_to_pendleton": Decimal("0"),
    "lagrande_to_walla": Decimal("0"),
    "walla_to_lagrande": Decimal("0"),
}

# Local transfers
LOCAL_TRANSFER_BASE_RATE = Decimal("100")
LOCAL_TRANSFER_BASE_MILES = 10
LOCAL_TRANSFER_PER_MILE = Decimal("3")

# Wait time, hourly by tier (lower bound → key) and day type
WAIT_TIME_TIERS: list[tuple[int, str]] = [
    (9, "9-14"),
    (5, "5-8"),
    (1, "1-4"),
]

WAIT_TIME_RATES: dict[str, dict[str, Decimal]] = {
    "Sun-Wed": {"1-4": Decimal("75"), "5-8": Decimal("95"), "9-14": Decimal("110")},
    "Thu-Sat": {"1-4": Decimal("85"), "5-8": Decimal("105"), "9-14": Decimal("120")},
}
WAIT_TIME_MINIMUM_HOURS = 1

SERVICE_TYPE_LABELS: dict[str, str] = {
    "wine_tour": "Wine Tour",
    "shared_tour": "Shared Group Tour",
    "airport_transfer": "Airport Transfer",
    "local_transfer": "Local Transfer",
    "wait_time": "Wait Time",
    "custom": "Custom Service",
}

SERVICE_TYPES = frozenset(SERVICE_TYPE_LABELS)
