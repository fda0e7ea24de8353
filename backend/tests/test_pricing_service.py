"""
Unit tests for the rate table lookups and price calculations.
"""

from datetime import date
from decimal import Decimal

import pytest

from app.services.pricing_service import (
    calculate_deposit,
    calculate_end_time,
    calculate_shared_tour_price,
    calculate_transfer_price,
    calculate_wait_time_price,
    calculate_wine_tour_price,
    estimate_lunch_cost,
    format_currency,
    get_day_type,
    get_hourly_rate,
    get_rate_tier,
    is_shared_tour_day,
    price_service_item,
)

SUNDAY = date(2025, 6, 15)
WEDNESDAY = date(2025, 6, 11)
THURSDAY = date(2025, 6, 12)
SATURDAY = date(2025, 6, 14)


@pytest.mark.parametrize(
    "tour_date,expected",
    [(SUNDAY, "Sun-Wed"), (WEDNESDAY, "Sun-Wed"), (THURSDAY, "Thu-Sat"), (SATURDAY, "Thu-Sat")],
)
def test_day_type(tour_date, expected):
    assert get_day_type(tour_date) == expected


@pytest.mark.parametrize(
    "party_size,tier",
    [(1, "1-2"), (2, "1-2"), (3, "3-4"), (6, "5-6"), (8, "7-8"), (11, "9-11"), (14, "12-14"), (20, "12-14")],
)
def test_rate_tier_boundaries(party_size, tier):
    assert get_rate_tier(party_size) == tier


def test_hourly_rate_depends_on_day_and_party_size():
    assert get_hourly_rate(2, SUNDAY) == Decimal("85")
    assert get_hourly_rate(2, SATURDAY) == Decimal("95")
    assert get_hourly_rate(6, WEDNESDAY) == Decimal("105")
    assert get_hourly_rate(12, THURSDAY) == Decimal("150")


def test_wine_tour_enforces_sun_wed_minimum():
    price = calculate_wine_tour_price(3, 4, SUNDAY)

    assert price.hours == Decimal("4")
    assert price.minimum_hours == 4
    assert price.hourly_rate == Decimal("95")
    assert price.subtotal == Decimal("380.00")
    assert price.tax == Decimal("34.58")
    assert price.total == Decimal("414.58")
    assert price.rate_tier == "3-4 guests"


def test_wine_tour_enforces_thu_sat_minimum():
    price = calculate_wine_tour_price(4, 2, SATURDAY)

    assert price.hours == Decimal("5")
    assert price.day_type == "Thu-Sat"
    assert price.subtotal == Decimal("475.00")
    assert price.tax == Decimal("43.23")
    assert price.total == Decimal("518.23")


def test_wine_tour_bills_actual_hours_above_minimum():
    price = calculate_wine_tour_price(6.5, 4, SATURDAY)
    assert price.hours == Decimal("6.5")
    assert price.subtotal == Decimal("682.50")


@pytest.mark.parametrize("party_size,expected", [(1, "17.50"), (4, "70.00"), (7, "122.50")])
def test_lunch_estimate_is_flat_per_person(party_size, expected):
    assert estimate_lunch_cost(party_size) == Decimal(expected)


def test_transfer_prices():
    assert calculate_transfer_price("seatac_to_walla") == Decimal("850")
    assert calculate_transfer_price("local", 5) == Decimal("100")
    assert calculate_transfer_price("local", 25) == Decimal("145.00")
    assert calculate_transfer_price("mars_to_walla") == Decimal("0")


def test_wait_time_minimum_and_tiers():
    assert calculate_wait_time_price(0.5, 6, SATURDAY) == Decimal("105.00")
    assert calculate_wait_time_price(2, 10, SUNDAY) == Decimal("220.00")
    assert calculate_wait_time_price(1, 2, SUNDAY) == Decimal("75.00")


def test_shared_tour_pricing():
    price = calculate_shared_tour_price(4, include_lunch=True, tour_date=SUNDAY)
    assert price.per_person_rate == Decimal("115")
    assert price.subtotal == Decimal("460.00")

    without_lunch = calculate_shared_tour_price(4, include_lunch=False)
    assert without_lunch.subtotal == Decimal("380.00")


def test_shared_tour_rejects_weekend_and_large_groups():
    assert is_shared_tour_day(WEDNESDAY)
    assert not is_shared_tour_day(SATURDAY)

    with pytest.raises(ValueError):
        calculate_shared_tour_price(4, tour_date=SATURDAY)
    with pytest.raises(ValueError):
        calculate_shared_tour_price(15)


def test_deposit_and_currency_format():
    assert calculate_deposit(Decimal("414.58")) == Decimal("207.29")
    assert calculate_deposit(Decimal("1000"), Decimal("0.25")) == Decimal("250.00")
    assert format_currency(Decimal("1234.5")) == "$1,234.50"
    assert format_currency(None) == "$0.00"


def test_price_service_item_by_type():
    assert price_service_item("wine_tour", 4, SATURDAY, duration_hours=6) == Decimal("630.00")
    assert price_service_item("airport_transfer", 4, route="walla_to_seatac") == Decimal("850")
    assert price_service_item("local_transfer", 2, miles=12) == Decimal("106.00")


def test_price_service_item_requires_price_for_custom():
    with pytest.raises(ValueError):
        price_service_item("custom", 4)
    with pytest.raises(ValueError):
        price_service_item("wine_tour", 4, None, duration_hours=5)


@pytest.mark.parametrize(
    "start,hours,expected",
    [
        ("10:00 AM", 6, "4:00 PM"),
        ("11:30 AM", 1, "12:30 PM"),
        ("9:15 am", Decimal("5.5"), "2:45 PM"),
        ("09:30", 5.5, "15:00"),
        ("around ten", 5, None),
    ],
)
def test_end_time_from_start_and_duration(start, hours, expected):
    assert calculate_end_time(start, hours) == expected
