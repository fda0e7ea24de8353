"""Booking service — bookings, invoices, lunch orders and driver tour offers."""

import logging
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.booking import Booking, Invoice, LunchOrder, TourOffer
from app.schemas.booking import (
    CreateBookingRequest,
    CreateInvoiceRequest,
    CreateLunchOrderRequest,
    CreateTourOfferRequest,
)
from app.services.email_service import email_service
from app.services.pricing_service import (
    calculate_deposit,
    calculate_end_time,
    calculate_wine_tour_price,
    to_money,
)

logger = logging.getLogger(__name__)

FINAL_INVOICE_DUE_DAYS = 7
NUMBER_ATTEMPTS = 3


async def next_number(db: AsyncSession, column, prefix: str, on: date | None = None) -> str:
    """Next per-year reference number, e.g. WWT-2025-000042."""
    stem = f"{prefix}-{(on or date.today()).year}-"
    result = await db.execute(select(func.max(column)).where(column.like(f"{stem}%")))
    last = result.scalar_one_or_none()
    seq = int(last.rsplit("-", 1)[1]) + 1 if last else 1
    return f"{stem}{seq:06d}"


async def save_numbered(db: AsyncSession, obj, column, prefix: str) -> None:
    """Assign the next reference number and commit, retrying if another request took it."""
    for attempt in range(1, NUMBER_ATTEMPTS + 1):
        number = await next_number(db, column, prefix)
        setattr(obj, column.key, number)
        db.add(obj)
        try:
            await db.commit()
            return
        except IntegrityError:
            await db.rollback()
            logger.warning(f"Reference number {number} already taken (attempt {attempt}/{NUMBER_ATTEMPTS})")
    raise ValueError(f"Could not allocate a {prefix} reference number, please retry")


class BookingService:
    """Create/approve flows; each one commits and then sends its email."""

    async def get_booking(self, db: AsyncSession, booking_number: str) -> Booking | None:
        result = await db.execute(
            select(Booking).where(Booking.booking_number == booking_number.upper())
        )
        return result.scalar_one_or_none()

    async def create_booking(self, db: AsyncSession, req: CreateBookingRequest) -> Booking:
        if req.total_price is not None:
            total = to_money(req.total_price)
        elif req.service_type == "wine_tour":
            total = calculate_wine_tour_price(req.duration_hours, req.party_size, req.tour_date).total
        else:
            raise ValueError(f"total_price is required for '{req.service_type}' bookings")

        deposit = to_money(req.deposit_paid) if req.deposit_paid is not None else calculate_deposit(total)
        if deposit > total:
            raise ValueError("Deposit cannot exceed the total price")

        booking = Booking(
            customer_name=req.customer_name,
            customer_email=str(req.customer_email),
            customer_phone=req.customer_phone,
            service_type=req.service_type,
            tour_date=req.tour_date,
            start_time=req.start_time,
            end_time=req.end_time or calculate_end_time(req.start_time, req.duration_hours),
            duration_hours=req.duration_hours,
            party_size=req.party_size,
            pickup_location=req.pickup_location,
            wineries=[w.model_dump() for w in req.wineries],
            special_requests=req.special_requests,
            total_price=total,
            deposit_paid=deposit,
            balance_due=total - deposit,
            status="confirmed",
        )
        await save_numbered(db, booking, Booking.booking_number, "WWT")
        await db.refresh(booking)
        logger.info(f"Booking {booking.booking_number} created for {booking.party_size} guests on {booking.tour_date}")

        await email_service.send_booking_confirmation(booking)
        return booking

    async def cancel_booking(self, db: AsyncSession, booking: Booking) -> Booking:
        if booking.status in ("completed", "cancelled"):
            raise ValueError(f"Booking cannot be cancelled in status '{booking.status}'")
        booking.status = "cancelled"
        await db.execute(
            update(TourOffer)
            .where(TourOffer.booking_id == booking.id, TourOffer.status == "pending")
            .values(status="expired")
        )
        await db.commit()
        await db.refresh(booking)
        logger.info(f"Booking {booking.booking_number} cancelled")
        return booking

    # ─── Invoices ───

    async def create_invoice(
        self, db: AsyncSession, booking: Booking, req: CreateInvoiceRequest
    ) -> Invoice:
        if req.invoice_type not in ("deposit", "final"):
            raise ValueError("invoice_type must be 'deposit' or 'final'")
        if booking.status == "cancelled":
            raise ValueError("Cannot invoice a cancelled booking")

        actual_hours = None
        hourly_rate = None
        if req.invoice_type == "deposit":
            amount = to_money(req.amount) if req.amount is not None else calculate_deposit(booking.total_price)
            due = req.due_date or date.today()
        else:
            if req.amount is not None:
                amount = to_money(req.amount)
            elif booking.service_type == "wine_tour":
                # Actual hours at the booking's rate, day minimum and tax applied, less the deposit
                price = calculate_wine_tour_price(
                    req.actual_hours or booking.duration_hours, booking.party_size, booking.tour_date
                )
                actual_hours = price.hours
                hourly_rate = price.hourly_rate
                amount = max(price.total - to_money(booking.deposit_paid), Decimal("0"))
            else:
                amount = to_money(booking.balance_due)
            due = req.due_date or booking.tour_date + timedelta(days=FINAL_INVOICE_DUE_DAYS)

        booking_number = booking.booking_number
        inv = Invoice(
            booking_id=booking.id,
            invoice_type=req.invoice_type,
            amount=amount,
            actual_hours=actual_hours,
            hourly_rate=hourly_rate,
            due_date=due,
            status="draft",
        )
        await save_numbered(db, inv, Invoice.invoice_number, "INV")
        await db.refresh(inv)
        logger.info(f"Invoice {inv.invoice_number} ({inv.invoice_type}) drafted for {booking_number}: {amount}")
        return inv

    async def approve_invoice(self, db: AsyncSession, invoice: Invoice, booking: Booking) -> Invoice:
        if invoice.status != "draft":
            raise ValueError(f"Invoice cannot be approved in status '{invoice.status}'")

        invoice.status = "approved"
        invoice.approved_at = datetime.now(timezone.utc)
        if invoice.invoice_type == "final":
            booking.status = "completed"
        await db.commit()
        await db.refresh(invoice)
        logger.info(f"Invoice {invoice.invoice_number} approved")

        await email_service.send_invoice(invoice, booking)
        return invoice

    # ─── Lunch orders ───

    async def create_lunch_order(
        self, db: AsyncSession, booking: Booking, req: CreateLunchOrderRequest
    ) -> LunchOrder:
        if booking.status == "cancelled":
            raise ValueError("Cannot order lunch for a cancelled booking")

        items = [
            {"name": i.name, "quantity": i.quantity, "price": str(to_money(i.price))}
            for i in req.items
        ]
        total = to_money(sum((i.price * i.quantity for i in req.items), Decimal("0")))

        order = LunchOrder(
            booking_id=booking.id,
            restaurant_name=req.restaurant_name,
            restaurant_email=str(req.restaurant_email),
            arrival_time=req.arrival_time,
            items=items,
            total=total,
            dietary_restrictions=req.dietary_restrictions,
            special_requests=req.special_requests,
            status="pending",
        )
        db.add(order)
        await db.commit()
        await db.refresh(order)
        return order

    async def approve_lunch_order(self, db: AsyncSession, order: LunchOrder, booking: Booking) -> LunchOrder:
        if order.status != "pending":
            raise ValueError(f"Lunch order cannot be approved in status '{order.status}'")
        if booking.status == "cancelled":
            raise ValueError("Cannot send a lunch order for a cancelled booking")

        order.status = "approved"
        await db.commit()

        sent = await email_service.send_lunch_order(order, booking)
        if sent:
            order.status = "sent"
            order.sent_at = datetime.now(timezone.utc)
            await db.commit()
        await db.refresh(order)
        logger.info(f"Lunch order {order.id} approved for {order.restaurant_name} (sent={sent})")
        return order

    # ─── Tour offers ───

    async def create_tour_offer(
        self, db: AsyncSession, booking: Booking, req: CreateTourOfferRequest
    ) -> TourOffer:
        if booking.status not in ("pending", "confirmed"):
            raise ValueError(f"Cannot offer a booking in status '{booking.status}'")

        ttl = req.expires_in_hours or settings.tour_offer_ttl_hours
        offer = TourOffer(
            booking_id=booking.id,
            driver_name=req.driver_name,
            driver_email=str(req.driver_email),
            pay_amount=to_money(req.pay_amount),
            estimated_hours=req.estimated_hours or booking.duration_hours,
            notes=req.notes,
            expires_at=datetime.now(timezone.utc) + timedelta(hours=ttl),
            status="pending",
        )
        db.add(offer)
        await db.commit()
        await db.refresh(offer)
        logger.info(f"Tour offer {offer.id} sent to {offer.driver_name} for {booking.booking_number}")

        await email_service.send_tour_offer(offer, booking)
        return offer

    async def respond_to_offer(
        self,
        db: AsyncSession,
        offer: TourOffer,
        booking: Booking,
        action: str,
        vehicle_name: str | None = None,
    ) -> TourOffer:
        if action not in ("accept", "decline"):
            raise ValueError("action must be 'accept' or 'decline'")
        if offer.status != "pending":
            raise ValueError(f"Offer is already {offer.status}")

        now = datetime.now(timezone.utc)
        if _as_utc(offer.expires_at) <= now:
            offer.status = "expired"
            await db.commit()
            raise ValueError("Offer has expired")

        offer.responded_at = now
        if action == "decline":
            offer.status = "declined"
            await db.commit()
            await db.refresh(offer)
            logger.info(f"Tour offer {offer.id} declined by {offer.driver_name}")
            return offer

        if booking.status not in ("pending", "confirmed"):
            raise ValueError(f"Booking is no longer open ({booking.status})")

        offer.status = "accepted"
        booking.status = "assigned"
        booking.driver_name = offer.driver_name
        booking.driver_email = offer.driver_email
        booking.vehicle_name = vehicle_name

        # Any other pending offers for this booking lapse
        await db.execute(
            update(TourOffer)
            .where(
                TourOffer.booking_id == booking.id,
                TourOffer.id != offer.id,
                TourOffer.status == "pending",
            )
            .values(status="expired")
        )
        await db.commit()
        await db.refresh(offer)
        await db.refresh(booking)
        logger.info(f"Tour offer {offer.id} accepted, {booking.booking_number} assigned to {offer.driver_name}")

        await email_service.send_tour_assignment(booking)
        return offer

    async def expire_tour_offers(self, db: AsyncSession) -> int:
        """Mark pending offers past their expiry as expired."""
        result = await db.execute(
            update(TourOffer)
            .where(TourOffer.status == "pending", TourOffer.expires_at <= datetime.now(timezone.utc))
            .values(status="expired")
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return result.rowcount or 0


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


booking_service = BookingService()
