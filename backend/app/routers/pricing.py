"""Pricing router — quotes from the rate table."""

from dataclasses import asdict
from datetime import date

from fastapi import APIRouter, HTTPException, Query

from app.config import settings
from app.data.rates import (
    AIRPORT_TRANSFER_RATES,
    SHARED_TOUR_BASE_RATE,
    SHARED_TOUR_DAYS,
    SHARED_TOUR_MAX_GUESTS,
    SHARED_TOUR_WITH_LUNCH_RATE,
    WAIT_TIME_RATES,
    WINE_TOUR_MINIMUM_HOURS,
    WINE_TOUR_RATES,
)
from app.services.pricing_service import (
    calculate_deposit,
    calculate_shared_tour_price,
    calculate_wine_tour_price,
    estimate_lunch_cost,
    format_currency,
)

router = APIRouter()


@router.get("/wine-tour")
async def quote_wine_tour(
    party_size: int = Query(..., ge=1, le=14),
    tour_date: date = Query(..., alias="date"),
    hours: float = Query(5, gt=0, le=24),
):
    """Hourly wine tour quote with minimum hours applied."""
    price = calculate_wine_tour_price(hours, party_size, tour_date)
    return {
        **asdict(price),
        "deposit": calculate_deposit(price.total),
        "total_display": format_currency(price.total),
    }


@router.get("/shared-tour")
async def quote_shared_tour(
    guests: int = Query(..., ge=1),
    include_lunch: bool = Query(True),
    tour_date: date | None = Query(None, alias="date"),
):
    try:
        price = calculate_shared_tour_price(guests, include_lunch, tour_date)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return asdict(price)


@router.get("/lunch-estimate")
async def lunch_estimate(party_size: int = Query(..., ge=1)):
    estimate = estimate_lunch_cost(party_size)
    return {
        "party_size": party_size,
        "per_person": settings.lunch_estimate_per_person,
        "estimate": estimate,
        "display": format_currency(estimate),
    }


@router.get("/rates")
async def get_rates():
    return {
        "wine_tours": {
            "rates": WINE_TOUR_RATES,
            "minimum_hours": WINE_TOUR_MINIMUM_HOURS,
        },
        "shared_tours": {
            "base_rate": SHARED_TOUR_BASE_RATE,
            "with_lunch_rate": SHARED_TOUR_WITH_LUNCH_RATE,
            "days": list(SHARED_TOUR_DAYS),
            "max_guests": SHARED_TOUR_MAX_GUESTS,
        },
        "airport_transfers": AIRPORT_TRANSFER_RATES,
        "wait_time": WAIT_TIME_RATES,
        "tax_rate": settings.tax_rate,
        "deposit_percentage": settings.deposit_percentage,
        "lunch_estimate_per_person": settings.lunch_estimate_per_person,
    }
