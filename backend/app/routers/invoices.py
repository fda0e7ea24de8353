"""Invoices router — deposit/final invoices and the approval that emails them."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.database import get_db
from app.models.booking import Invoice
from app.schemas.booking import CreateInvoiceRequest, InvoiceResponse
from app.services.booking_service import booking_service

router = APIRouter()


async def _load_invoice(db: AsyncSession, invoice_id: uuid.UUID) -> Invoice:
    result = await db.execute(
        select(Invoice).where(Invoice.id == invoice_id).options(selectinload(Invoice.booking))
    )
    invoice = result.scalar_one_or_none()
    if not invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return invoice


@router.post("", status_code=201, response_model=InvoiceResponse)
async def create_invoice(
    req: CreateInvoiceRequest,
    db: AsyncSession = Depends(get_db),
):
    """Draft a deposit or final invoice. Final wine tour invoices bill actual hours."""
    booking = await booking_service.get_booking(db, req.booking_number)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found")

    try:
        invoice = await booking_service.create_invoice(db, booking, req)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return InvoiceResponse.model_validate(invoice)


@router.get("/{invoice_id}", response_model=InvoiceResponse)
async def get_invoice(
    invoice_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    invoice = await _load_invoice(db, invoice_id)
    return InvoiceResponse.model_validate(invoice)


@router.post("/{invoice_id}/approve", response_model=InvoiceResponse)
async def approve_invoice(
    invoice_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    """Approve a draft invoice and email it to the customer."""
    invoice = await _load_invoice(db, invoice_id)

    try:
        invoice = await booking_service.approve_invoice(db, invoice, invoice.booking)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return InvoiceResponse.model_validate(invoice)
