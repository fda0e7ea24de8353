"""Pricing service — hourly wine tour rates, transfers, wait time, tax and lunch estimates."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from app.config import settings
from app.data.rates import (
    AIRPORT_TRANSFER_RATES,
    LOCAL_TRANSFER_BASE_MILES,
    LOCAL_TRANSFER_BASE_RATE,
    LOCAL_TRANSFER_PER_MILE,
    SHARED_TOUR_BASE_RATE,
    SHARED_TOUR_DAYS,
    SHARED_TOUR_MAX_GUESTS,
    SHARED_TOUR_WITH_LUNCH_RATE,
    WAIT_TIME_MINIMUM_HOURS,
    WAIT_TIME_RATES,
    WAIT_TIME_TIERS,
    WINE_TOUR_MINIMUM_HOURS,
    WINE_TOUR_RATES,
    WINE_TOUR_TIERS,
)

CENT = Decimal("0.01")


@dataclass
class WineTourPrice:
    hourly_rate: Decimal
    hours: Decimal
    subtotal: Decimal
    tax: Decimal
    total: Decimal
    day_type: str
    rate_tier: str
    minimum_hours: int


@dataclass
class SharedTourPrice:
    per_person_rate: Decimal
    guests: int
    subtotal: Decimal
    tax: Decimal
    total: Decimal


def to_money(amount: Decimal | int | float) -> Decimal:
    """Round to cents, half-up."""
    return Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP)


def format_currency(amount: Decimal | int | float | None) -> str:
    """Format an amount as dollars, e.g. 1234.5 → '$1,234.50'."""
    if amount is None:
        return "$0.00"
    return f"${to_money(amount):,.2f}"


def get_day_type(tour_date: date) -> str:
    """Thursday through Saturday bill at the weekend rate."""
    return "Thu-Sat" if tour_date.weekday() in (3, 4, 5) else "Sun-Wed"


def get_day_of_week(tour_date: date) -> str:
    return tour_date.strftime("%A")


def get_rate_tier(party_size: int) -> str:
    """Map a guest count to its wine tour tier; parties over 14 use the top tier."""
    for upper, tier in WINE_TOUR_TIERS:
        if party_size <= upper:
            return tier
    return WINE_TOUR_TIERS[-1][1]


def get_minimum_hours(tour_date: date) -> int:
    return WINE_TOUR_MINIMUM_HOURS[get_day_type(tour_date)]


def get_hourly_rate(party_size: int, tour_date: date) -> Decimal:
    """Hourly wine tour rate for the party size and day of week."""
    return WINE_TOUR_RATES[get_day_type(tour_date)][get_rate_tier(party_size)]


def calculate_tax(amount: Decimal) -> Decimal:
    return to_money(amount * settings.tax_rate)


def calculate_deposit(total: Decimal, percentage: Decimal | None = None) -> Decimal:
    pct = percentage if percentage is not None else settings.deposit_percentage
    return to_money(total * pct)


def calculate_wine_tour_price(hours: Decimal | float, party_size: int, tour_date: date) -> WineTourPrice:
    """Price a private wine tour, enforcing the day-type minimum hours."""
    day_type = get_day_type(tour_date)
    minimum_hours = WINE_TOUR_MINIMUM_HOURS[day_type]
    billable_hours = max(Decimal(str(hours)), Decimal(minimum_hours))

    hourly_rate = get_hourly_rate(party_size, tour_date)
    subtotal = to_money(hourly_rate * billable_hours)
    tax = calculate_tax(subtotal)

    return WineTourPrice(
        hourly_rate=hourly_rate,
        hours=billable_hours,
        subtotal=subtotal,
        tax=tax,
        total=subtotal + tax,
        day_type=day_type,
        rate_tier=f"{get_rate_tier(party_size)} guests",
        minimum_hours=minimum_hours,
    )


def is_shared_tour_day(tour_date: date) -> bool:
    return get_day_of_week(tour_date) in SHARED_TOUR_DAYS


def calculate_shared_tour_price(
    guests: int, include_lunch: bool = True, tour_date: date | None = None
) -> SharedTourPrice:
    """Per-person ticket pricing for the shared group tour."""
    if guests < 1:
        raise ValueError("Shared tours need at least one guest")
    if guests > SHARED_TOUR_MAX_GUESTS:
        raise ValueError(f"Shared tours are limited to {SHARED_TOUR_MAX_GUESTS} guests")
    if tour_date is not None and not is_shared_tour_day(tour_date):
        raise ValueError("Shared tours only run Sunday through Wednesday")

    rate = SHARED_TOUR_WITH_LUNCH_RATE if include_lunch else SHARED_TOUR_BASE_RATE
    subtotal = to_money(rate * guests)
    tax = calculate_tax(subtotal)
    return SharedTourPrice(
        per_person_rate=rate,
        guests=guests,
        subtotal=subtotal,
        tax=tax,
        total=subtotal + tax,
    )


def calculate_transfer_price(route: str, miles: Decimal | float | None = None) -> Decimal:
    """Flat airport transfer price, or base + per-mile for local transfers."""
    if route == "local":
        if not miles:
            return LOCAL_TRANSFER_BASE_RATE
        extra_miles = max(Decimal("0"), Decimal(str(miles)) - LOCAL_TRANSFER_BASE_MILES)
        return to_money(LOCAL_TRANSFER_BASE_RATE + extra_miles * LOCAL_TRANSFER_PER_MILE)
    return AIRPORT_TRANSFER_RATES.get(route, Decimal("0"))


def calculate_wait_time_price(
    hours: Decimal | float, party_size: int = 4, tour_date: date | None = None
) -> Decimal:
    billable_hours = max(Decimal(str(hours)), Decimal(WAIT_TIME_MINIMUM_HOURS))
    day_type = get_day_type(tour_date or date.today())

    tier = WAIT_TIME_TIERS[-1][1]
    for lower, key in WAIT_TIME_TIERS:
        if party_size >= lower:
            tier = key
            break

    return to_money(billable_hours * WAIT_TIME_RATES[day_type][tier])


def estimate_lunch_cost(party_size: int) -> Decimal:
    """Flat per-person lunch estimate shown on wine tour proposals."""
    return to_money(settings.lunch_estimate_per_person * party_size)


def price_service_item(
    service_type: str,
    party_size: int,
    service_date: date | None = None,
    duration_hours: Decimal | float | None = None,
    route: str | None = None,
    miles: Decimal | float | None = None,
) -> Decimal:
    """Default pre-tax price for a proposal line when none was quoted."""
    if service_type == "wine_tour":
        if service_date is None:
            raise ValueError("Wine tours need a date to be priced")
        return calculate_wine_tour_price(duration_hours or 0, party_size, service_date).subtotal
    if service_type == "shared_tour":
        return calculate_shared_tour_price(party_size, tour_date=service_date).subtotal
    if service_type == "airport_transfer":
        if not route:
            raise ValueError("Airport transfers need a route to be priced")
        return calculate_transfer_price(route)
    if service_type == "local_transfer":
        return calculate_transfer_price("local", miles)
    if service_type == "wait_time":
        return calculate_wait_time_price(duration_hours or 0, party_size, service_date)
    raise ValueError(f"A price is required for '{service_type}' items")


def calculate_end_time(start_time: str, duration_hours: Decimal | float) -> str | None:
    """Start time plus duration, in the start time's own format ("10:00 AM" or "10:00").

    Returns None when the start time can't be read.
    """
    for fmt, twelve_hour in (("%I:%M %p", True), ("%H:%M", False)):
        try:
            start = datetime.strptime(start_time.strip(), fmt)
        except ValueError:
            continue
        end = start + timedelta(minutes=int(Decimal(str(duration_hours)) * 60))
        if twelve_hour:
            return f"{end.hour % 12 or 12}:{end.minute:02d} {'AM' if end.hour < 12 else 'PM'}"
        return end.strftime("%H:%M")
    return None
