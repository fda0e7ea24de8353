"""Lunch orders router — customer lunch orders forwarded to restaurants on approval."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.database import get_db
from app.models.booking import LunchOrder
from app.schemas.booking import CreateLunchOrderRequest, LunchOrderResponse
from app.services.booking_service import booking_service

router = APIRouter()


@router.post("", status_code=201, response_model=LunchOrderResponse)
async def create_lunch_order(
    req: CreateLunchOrderRequest,
    db: AsyncSession = Depends(get_db),
):
    booking = await booking_service.get_booking(db, req.booking_number)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")

    try:
        order = await booking_service.create_lunch_order(db, booking, req)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return LunchOrderResponse.model_validate(order)


@router.post("/{order_id}/approve", response_model=LunchOrderResponse)
async def approve_lunch_order(
    order_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Approve a pending order and email it to the restaurant."""
    result = await db.execute(
        select(LunchOrder).where(LunchOrder.id == order_id).options(selectinload(LunchOrder.booking))
    )
    order = result.scalar_one_or_none()
    if not order:
        raise HTTPException(status_code=404, detail="Lunch order not found")

    try:
        order = await booking_service.approve_lunch_order(db, order, order.booking)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return LunchOrderResponse.model_validate(order)
