"""Tour offers router — offering bookings to drivers and recording their response."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.database import get_db
from app.models.booking import TourOffer
from app.schemas.booking import CreateTourOfferRequest, RespondToOfferRequest, TourOfferResponse
from app.services.booking_service import booking_service

router = APIRouter()


@router.post("", status_code=201, response_model=TourOfferResponse)
async def create_tour_offer(
    req: CreateTourOfferRequest,
    db: AsyncSession = Depends(get_db),
):
    """Offer a booking to a driver and email them the offer."""
    booking = await booking_service.get_booking(db, req.booking_number)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")

    try:
        offer = await booking_service.create_tour_offer(db, booking, req)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return TourOfferResponse.model_validate(offer)


@router.post("/{offer_id}/respond", response_model=TourOfferResponse)
async def respond_to_offer(
    offer_id: uuid.UUID,
    req: RespondToOfferRequest,
    db: AsyncSession = Depends(get_db),
):
    """Driver accepts or declines. Accepting assigns the booking and confirms by email."""
    result = await db.execute(
        select(TourOffer).where(TourOffer.id == offer_id).options(selectinload(TourOffer.booking))
    )
    offer = result.scalar_one_or_none()
    if not offer:
        raise HTTPException(status_code=404, detail="Tour offer not found")

    try:
        offer = await booking_service.respond_to_offer(
            db, offer, offer.booking, req.action, vehicle_name=req.vehicle_name
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return TourOfferResponse.model_validate(offer)
