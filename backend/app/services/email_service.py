"""Email service — sends transactional email through the Resend API."""

import logging
from decimal import Decimal

import httpx

from app.config import settings
from app.models.booking import Booking, Invoice, LunchOrder, TourOffer
from app.models.proposal import Proposal
from app.services import email_templates
from app.services.email_templates import RenderedEmail
from app.services.pricing_service import calculate_tax, to_money

logger = logging.getLogger(__name__)


def _payment_url(invoice: Invoice) -> str:
    return f"{settings.app_base_url}/payment/{invoice.invoice_number}"


class EmailService:
    """Adapter for the Resend email API; logs instead of sending when no key is configured."""

    def __init__(self):
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=settings.resend_base_url,
                timeout=15.0,
            )
        return self._client

    async def close(self):
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def send_email(
        self,
        to: str | list[str],
        subject: str,
        html: str,
        text: str | None = None,
        from_email: str | None = None,
        reply_to: str | None = None,
    ) -> bool:
        """Send one email. Returns False when skipped or failed; never raises."""
        recipients = to if isinstance(to, list) else [to]

        if not settings.resend_api_key:
            logger.warning(f"RESEND_API_KEY not configured, email not sent: {subject}")
            logger.info(f"  To: {', '.join(recipients)}")
            logger.info(f"  Subject: {subject}")
            return False

        payload = {
            "from": from_email or settings.from_email,
            "to": recipients,
            "subject": subject,
            "html": html,
        }
        if text:
            payload["text"] = text
        if reply_to:
            payload["reply_to"] = reply_to

        try:
            client = await self._get_client()
            resp = await client.post(
                "/emails",
                json=payload,
                headers={"Authorization": f"Bearer {settings.resend_api_key}"},
            )
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Email send failed ({e.response.status_code}): {e.response.text}")
            return False
        except httpx.RequestError as e:
            logger.error(f"Email send error: {e}")
            return False

        try:
            body = resp.json()
        except ValueError:
            body = None
        email_id = body.get("id") if isinstance(body, dict) else None
        logger.info(f"Email sent: {email_id}: {subject}")
        return True

    async def send_rendered(self, to: str | list[str], email: RenderedEmail) -> bool:
        return await self.send_email(to, email.subject, email.html, text=email.text)

    async def send_booking_confirmation(self, booking: Booking) -> bool:
        email = email_templates.booking_confirmation(
            customer_name=booking.customer_name,
            booking_number=booking.booking_number,
            tour_date=booking.tour_date,
            start_time=booking.start_time,
            end_time=booking.end_time,
            duration_hours=booking.duration_hours,
            party_size=booking.party_size,
            pickup_location=booking.pickup_location,
            total_price=booking.total_price,
            deposit_paid=booking.deposit_paid,
            balance_due=booking.balance_due,
            wineries=booking.wineries,
        )
        return await self.send_rendered(booking.customer_email, email)

    async def send_invoice(self, invoice: Invoice, booking: Booking) -> bool:
        if invoice.invoice_type == "final" and invoice.actual_hours and invoice.hourly_rate:
            return await self.send_final_invoice(invoice, booking)

        email = email_templates.invoice(
            customer_name=booking.customer_name,
            invoice_number=invoice.invoice_number,
            invoice_type=invoice.invoice_type,
            amount=invoice.amount,
            due_date=invoice.due_date,
            payment_url=_payment_url(invoice),
        )
        return await self.send_rendered(booking.customer_email, email)

    async def send_final_invoice(self, invoice: Invoice, booking: Booking) -> bool:
        """Hourly final invoice with tip suggestions; the deposit is credited against the total."""
        subtotal = to_money(invoice.hourly_rate * invoice.actual_hours)
        email = email_templates.final_invoice(
            customer_name=booking.customer_name,
            booking_number=booking.booking_number,
            invoice_number=invoice.invoice_number,
            tour_date=booking.tour_date,
            actual_hours=invoice.actual_hours,
            hourly_rate=invoice.hourly_rate,
            subtotal=subtotal,
            driver_name=booking.driver_name or f"your {settings.company_name} driver",
            payment_url=_payment_url(invoice),
            tax=calculate_tax(subtotal),
            deposit_paid=booking.deposit_paid,
            amount_due=invoice.amount,
        )
        return await self.send_rendered(booking.customer_email, email)

    async def send_lunch_order(self, order: LunchOrder, booking: Booking) -> bool:
        email = email_templates.lunch_order_to_restaurant(
            restaurant_name=order.restaurant_name,
            customer_name=booking.customer_name,
            tour_date=booking.tour_date,
            arrival_time=order.arrival_time,
            party_size=booking.party_size,
            items=order.items,
            total=order.total,
            dietary_restrictions=order.dietary_restrictions,
            special_requests=order.special_requests,
        )
        return await self.send_rendered(order.restaurant_email, email)

    async def send_tour_offer(self, offer: TourOffer, booking: Booking) -> bool:
        email = email_templates.tour_offer_to_driver(
            driver_name=offer.driver_name,
            customer_name=booking.customer_name,
            tour_date=booking.tour_date,
            start_time=booking.start_time,
            end_time=booking.end_time,
            party_size=booking.party_size,
            pickup_location=booking.pickup_location,
            estimated_hours=offer.estimated_hours,
            pay_amount=offer.pay_amount,
            expires_at=offer.expires_at,
            offer_url=f"{settings.app_base_url}/driver-portal/offers/{offer.id}",
            notes=offer.notes,
        )
        return await self.send_rendered(offer.driver_email, email)

    async def send_tour_assignment(self, booking: Booking) -> bool:
        if not booking.driver_email:
            logger.warning(f"Booking {booking.booking_number} has no driver email, skipping assignment email")
            return False
        email = email_templates.tour_assignment_confirmation(
            driver_name=booking.driver_name or "",
            booking_number=booking.booking_number,
            customer_name=booking.customer_name,
            tour_date=booking.tour_date,
            start_time=booking.start_time,
            pickup_location=booking.pickup_location,
            party_size=booking.party_size,
            vehicle_name=booking.vehicle_name,
        )
        return await self.send_rendered(booking.driver_email, email)

    async def send_proposal(self, proposal: Proposal, total: Decimal) -> bool:
        email = email_templates.proposal_ready(
            customer_name=proposal.customer_name,
            proposal_number=proposal.proposal_number,
            proposal_url=f"{settings.app_base_url}/proposals/{proposal.proposal_number}",
            total=total,
            valid_until=proposal.valid_until,
        )
        return await self.send_rendered(proposal.customer_email, email)


email_service = EmailService()
