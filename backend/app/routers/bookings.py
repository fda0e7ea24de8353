"""Bookings router — booking creation, lookup and cancellation."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.booking import Booking
from app.schemas.booking import BookingResponse, CreateBookingRequest
from app.services.booking_service import booking_service

router = APIRouter()


@router.post("", status_code=201, response_model=BookingResponse)
async def create_booking(
    req: CreateBookingRequest,
    db: AsyncSession = Depends(get_db),
):
    """Create a booking and email the customer a confirmation."""
    try:
        booking = await booking_service.create_booking(db, req)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return BookingResponse.model_validate(booking)


@router.get("", response_model=list[BookingResponse])
async def list_bookings(
    status: str | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    query = select(Booking).order_by(Booking.tour_date.desc())
    if status:
        query = query.where(Booking.status == status)
    query = query.offset((page - 1) * limit).limit(limit)

    result = await db.execute(query)
    return [BookingResponse.model_validate(b) for b in result.scalars().all()]


@router.get("/{booking_number}", response_model=BookingResponse)
async def get_booking(
    booking_number: str,
    db: AsyncSession = Depends(get_db),
):
    booking = await booking_service.get_booking(db, booking_number)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")
    return BookingResponse.model_validate(booking)


@router.post("/{booking_number}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_number: str,
    db: AsyncSession = Depends(get_db),
):
    booking = await booking_service.get_booking(db, booking_number)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")

    try:
        booking = await booking_service.cancel_booking(db, booking)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return BookingResponse.model_validate(booking)
