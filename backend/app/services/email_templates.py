"""Email templates — transactional emails for customers, restaurants and drivers."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from html import escape

from app.config import settings
from app.services.pricing_service import format_currency, to_money

TIP_PERCENTAGES = (15, 20, 25)
SUGGESTED_TIP = 20


@dataclass
class RenderedEmail:
    subject: str
    html: str
    text: str | None = None


def _e(value) -> str:
    return escape(str(value)) if value is not None else ""


def _long_date(value: date | str) -> str:
    d = date.fromisoformat(value) if isinstance(value, str) else value
    return f"{d:%A, %B} {d.day}, {d.year}"


def _short_date(value: date | str) -> str:
    d = date.fromisoformat(value) if isinstance(value, str) else value
    return f"{d.month}/{d.day}/{d.year}"


def _plural_guests(party_size: int) -> str:
    return f"{party_size} guest{'s' if party_size > 1 else ''}"


def _row(label: str, value: str, color: str = "#1f2937") -> str:
    return (
        f'<tr><td style="padding: 8px 0; color: #6b7280; font-size: 14px;">{label}</td>'
        f'<td style="padding: 8px 0; color: {color}; font-size: 14px; font-weight: bold; '
        f'text-align: right;">{value}</td></tr>'
    )


def _button(url: str, label: str, color: str = "#7c3aed") -> str:
    return (
        f'<a href="{_e(url)}" style="background: {color}; color: white; padding: 15px 30px; '
        f'text-decoration: none; border-radius: 8px; display: inline-block; font-weight: bold;">'
        f"{label}</a>"
    )


def _wrap(heading: str, body: str, color: str = "#7c3aed") -> str:
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        f'<h1 style="color: {color};">{heading}</h1>'
        f"{body}"
        "</div>"
    )


def booking_confirmation(
    customer_name: str,
    booking_number: str,
    tour_date: date | str,
    start_time: str,
    duration_hours: Decimal | float,
    party_size: int,
    pickup_location: str,
    total_price: Decimal,
    deposit_paid: Decimal,
    balance_due: Decimal,
    end_time: str | None = None,
    wineries: list[dict] | None = None,
) -> RenderedEmail:
    time_range = f"{start_time} - {end_time}" if end_time else start_time
    rows = "".join([
        _row("Booking Number", _e(booking_number)),
        _row("Date", _long_date(tour_date)),
        _row("Time", _e(time_range)),
        _row("Duration", f"{_e(duration_hours)} hours"),
        _row("Party Size", _plural_guests(party_size)),
        _row("Pickup", _e(pickup_location)),
    ])
    payment_rows = "".join([
        _row("Total", format_currency(total_price)),
        _row("Deposit Paid", f"{format_currency(deposit_paid)} ✓", color="#10b981"),
        _row("Balance Due", format_currency(balance_due), color="#065f46"),
    ])

    winery_html = ""
    winery_text = ""
    if wineries:
        listed = "".join(
            f"<li>{_e(w.get('name'))} - {_e(w.get('city'))}</li>" for w in wineries
        )
        winery_html = f"<h3>Your Wineries</h3><ol>{listed}</ol>"
        winery_text = "\nYour Wineries:\n" + "\n".join(
            f"{i}. {w.get('name')} - {w.get('city')}" for i, w in enumerate(wineries, start=1)
        ) + "\n"

    html = _wrap(
        "Your Wine Tour is Confirmed!",
        f"<p>Hi {_e(customer_name)},</p>"
        f"<p>Thank you for booking with {_e(settings.company_name)}! Here are your tour details.</p>"
        f'<table style="width: 100%;">{rows}</table>'
        f"{winery_html}"
        f'<table style="width: 100%; background: #ecfdf5; padding: 12px;">{payment_rows}</table>'
        "<p>Your balance will be invoiced after your tour based on actual tour time.</p>"
        f"<p>Cheers,<br>{_e(settings.company_name)}</p>",
    )

    text = (
        f"Hi {customer_name},\n\n"
        f"Your wine tour with {settings.company_name} is confirmed!\n\n"
        f"Booking Number: {booking_number}\n"
        f"Date: {_long_date(tour_date)}\n"
        f"Time: {time_range}\n"
        f"Duration: {duration_hours} hours\n"
        f"Party Size: {_plural_guests(party_size)}\n"
        f"Pickup: {pickup_location}\n"
        f"{winery_text}\n"
        f"Total: {format_currency(total_price)}\n"
        f"Deposit Paid: {format_currency(deposit_paid)} ✓\n"
        f"Balance Due: {format_currency(balance_due)}\n"
    )

    return RenderedEmail(
        subject=f"Your Walla Walla Wine Tour is Confirmed! [{booking_number}]",
        html=html,
        text=text,
    )


def invoice(
    customer_name: str,
    invoice_number: str,
    invoice_type: str,
    amount: Decimal,
    due_date: date | str,
    payment_url: str,
) -> RenderedEmail:
    kind = "Deposit" if invoice_type == "deposit" else "Final"
    html = _wrap(
        "Invoice Ready",
        f"<p>Hi {_e(customer_name)},</p>"
        f"<p>Your {_e(invoice_type)} invoice is ready for payment.</p>"
        '<div style="background: #f3f4f6; padding: 20px; border-radius: 8px; margin: 20px 0;">'
        f"<h2>Invoice {_e(invoice_number)}</h2>"
        f'<p style="font-size: 32px; font-weight: bold; color: #7c3aed;">{format_currency(amount)}</p>'
        f"<p><strong>Due Date:</strong> {_short_date(due_date)}</p>"
        "</div>"
        f'<div style="text-align: center; margin: 30px 0;">{_button(payment_url, "Pay Invoice")}</div>'
        f'<p style="font-size: 12px; color: #6b7280;">If the button doesn\'t work, copy and paste '
        f"this link:<br>{_e(payment_url)}</p>"
        f"<p>Thank you for your business!</p><p>Best regards,<br>{_e(settings.company_name)}</p>",
    )
    return RenderedEmail(subject=f"{kind} Invoice - {invoice_number}", html=html)


def final_invoice(
    customer_name: str,
    booking_number: str,
    invoice_number: str,
    tour_date: date | str,
    actual_hours: Decimal | float,
    hourly_rate: Decimal,
    subtotal: Decimal,
    driver_name: str,
    payment_url: str,
    tax: Decimal = Decimal("0"),
    deposit_paid: Decimal = Decimal("0"),
    amount_due: Decimal | None = None,
) -> RenderedEmail:
    """Hourly final invoice. Tips are suggested on the pre-tax tour subtotal."""
    hours = f"{Decimal(str(actual_hours)):.1f}"
    if amount_due is None:
        amount_due = to_money(Decimal(subtotal) + Decimal(tax) - Decimal(deposit_paid))
    tips = {pct: to_money(Decimal(subtotal) * pct / 100) for pct in TIP_PERCENTAGES}
    tip_rows = "".join(
        _row(f"{pct}%", format_currency(amount) + (" ⭐" if pct == SUGGESTED_TIP else ""), color="#78350f")
        for pct, amount in tips.items()
    )
    rows = [
        _row("Invoice", _e(invoice_number)),
        _row("Booking", _e(booking_number)),
        _row("Tour Date", _short_date(tour_date)),
        _row("Driver", _e(driver_name)),
        _row("Tour Duration", f"{hours} hours"),
        _row("Hourly Rate", f"{format_currency(hourly_rate)}/hr"),
        _row("Tour Subtotal", format_currency(subtotal)),
        _row("Tax", format_currency(tax)),
    ]
    if deposit_paid:
        rows.append(_row("Deposit Paid", f"-{format_currency(deposit_paid)}", color="#10b981"))
    rows.append(_row("Amount Due", format_currency(amount_due), color="#065f46"))

    html = _wrap(
        "Thank You for Touring With Us!",
        f"<p>Hi {_e(customer_name)},</p>"
        f"<p>Thank you for choosing {_e(settings.company_name)}! We hope you enjoyed your wine "
        f"country adventure on {_long_date(tour_date)}. Here's your final invoice for the tour.</p>"
        f'<table style="width: 100%;">{"".join(rows)}</table>'
        '<div style="background: #fef3c7; padding: 15px; border-radius: 8px;">'
        f"<p>If {_e(driver_name)} provided excellent service, you can add a tip when you pay. "
        f'Suggested amounts:</p><table style="width: 100%;">{tip_rows}</table></div>'
        f'<div style="text-align: center; margin: 30px 0;">{_button(payment_url, "Pay Final Invoice")}</div>'
        f'<p style="font-size: 12px; color: #6b7280;">{_e(payment_url)}</p>',
    )

    text = (
        f"Hi {customer_name},\n\n"
        f"Thank you for choosing {settings.company_name}! We hope you enjoyed your tour on "
        f"{_short_date(tour_date)}.\n\n"
        f"Invoice: {invoice_number}\n"
        f"Booking: {booking_number}\n"
        f"Date: {_short_date(tour_date)}\n"
        f"Driver: {driver_name}\n\n"
        f"Hours: {hours} hours\n"
        f"Rate: {format_currency(hourly_rate)}/hr\n"
        f"Subtotal: {format_currency(subtotal)}\n"
        f"Tax: {format_currency(tax)}\n"
        + (f"Deposit Paid: -{format_currency(deposit_paid)}\n" if deposit_paid else "")
        + f"Amount Due: {format_currency(amount_due)}\n\n"
        f"If {driver_name} provided excellent service, you can add a tip:\n"
        + "".join(
            f"• {pct}%: {format_currency(amount)}{' ⭐' if pct == SUGGESTED_TIP else ''}\n"
            for pct, amount in tips.items()
        )
        + f"\nPay here: {payment_url}\n"
    )

    return RenderedEmail(
        subject=f"Final Invoice - Thank You for Your Tour! [{invoice_number}]",
        html=html,
        text=text,
    )


def lunch_order_to_restaurant(
    restaurant_name: str,
    customer_name: str,
    tour_date: date | str,
    arrival_time: str,
    party_size: int,
    items: list[dict],
    total: Decimal,
    dietary_restrictions: str | None = None,
    special_requests: str | None = None,
) -> RenderedEmail:
    lines = "".join(
        f"<li>{_e(item.get('quantity', 1))}× {_e(item.get('name'))}"
        f" - {format_currency(Decimal(str(item.get('price', 0))) * int(item.get('quantity', 1)))}</li>"
        for item in items
    )
    extras = ""
    if dietary_restrictions:
        extras += (
            '<div style="background: #fef3c7; padding: 15px; border-radius: 8px;">'
            f"<p><strong>Dietary Restrictions:</strong></p><p>{_e(dietary_restrictions)}</p></div>"
        )
    if special_requests:
        extras += (
            '<div style="background: #dbeafe; padding: 15px; border-radius: 8px;">'
            f"<p><strong>Special Requests:</strong></p><p>{_e(special_requests)}</p></div>"
        )

    html = _wrap(
        "Lunch Order",
        f"<p>Hello {_e(restaurant_name)},</p>"
        f"<p>{_e(settings.company_name)} would like to place a lunch order for one of our wine tours.</p>"
        '<div style="background: #f3f4f6; padding: 20px; border-radius: 8px;">'
        f"<p><strong>Customer:</strong> {_e(customer_name)}</p>"
        f"<p><strong>Date:</strong> {_short_date(tour_date)}</p>"
        f"<p><strong>Estimated Arrival:</strong> {_e(arrival_time)}</p>"
        f"<p><strong>Party Size:</strong> {party_size}</p>"
        "</div>"
        f"<h3>Order</h3><ul>{lines}</ul>"
        f'<p style="font-weight: bold;">Total: {format_currency(total)}</p>'
        f"{extras}"
        f"<p>For questions, contact us at {_e(settings.contact_phone)}</p>"
        f"<p>Thank you!<br>{_e(settings.company_name)}</p>",
        color="#059669",
    )
    date_label = tour_date.isoformat() if isinstance(tour_date, date) else tour_date
    return RenderedEmail(subject=f"Lunch Order for {customer_name} - {date_label}", html=html)


def tour_offer_to_driver(
    driver_name: str,
    customer_name: str,
    tour_date: date | str,
    start_time: str,
    end_time: str | None,
    party_size: int,
    pickup_location: str,
    estimated_hours: Decimal | float,
    pay_amount: Decimal,
    expires_at: datetime,
    offer_url: str,
    notes: str | None = None,
) -> RenderedEmail:
    time_range = f"{start_time} - {end_time}" if end_time else start_time
    notes_html = ""
    if notes:
        notes_html = (
            '<div style="background: #fef3c7; padding: 15px; border-radius: 8px; margin: 20px 0;">'
            f"<p><strong>Notes:</strong></p><p>{_e(notes)}</p></div>"
        )

    html = _wrap(
        "New Tour Offer!",
        f"<p>Hi {_e(driver_name)},</p>"
        "<p>You have a new tour offer available. Please review and respond.</p>"
        '<div style="background: #dbeafe; padding: 20px; border-radius: 8px; text-align: center;">'
        "<p>Your Pay</p>"
        f'<p style="font-size: 36px; font-weight: bold; color: #2563eb;">{format_currency(pay_amount)}</p>'
        f"<p>{_e(estimated_hours)} hours</p></div>"
        '<div style="background: #f3f4f6; padding: 20px; border-radius: 8px; margin: 20px 0;">'
        "<h2>Tour Details</h2>"
        f"<p><strong>Customer:</strong> {_e(customer_name)}</p>"
        f"<p><strong>Date:</strong> {_long_date(tour_date)}</p>"
        f"<p><strong>Time:</strong> {_e(time_range)}</p>"
        f"<p><strong>Party Size:</strong> {party_size} guests</p>"
        f"<p><strong>Pickup:</strong> {_e(pickup_location)}</p></div>"
        f"{notes_html}"
        '<div style="background: #fee2e2; padding: 15px; border-radius: 8px;">'
        f'<p style="color: #991b1b;"><strong>This offer expires {expires_at:%m/%d/%Y %I:%M %p %Z}'
        "</strong></p></div>"
        f'<div style="text-align: center; margin: 30px 0;">{_button(offer_url, "Accept Tour", "#16a34a")} '
        f'{_button(offer_url, "View Details", "#6b7280")}</div>'
        f'<p style="font-size: 12px; color: #6b7280;">{_e(offer_url)}</p>'
        f"<p>Drive safe!<br>{_e(settings.company_name)} Dispatch</p>",
        color="#2563eb",
    )
    date_label = tour_date.isoformat() if isinstance(tour_date, date) else tour_date
    return RenderedEmail(subject=f"New Tour Offer - {customer_name} on {date_label}", html=html)


def tour_assignment_confirmation(
    driver_name: str,
    booking_number: str,
    customer_name: str,
    tour_date: date | str,
    start_time: str,
    pickup_location: str,
    party_size: int,
    vehicle_name: str | None = None,
) -> RenderedEmail:
    vehicle = f"<p><strong>Vehicle:</strong> {_e(vehicle_name)}</p>" if vehicle_name else ""
    html = _wrap(
        "Tour Confirmed",
        f"<p>Hi {_e(driver_name)},</p>"
        "<p>Thanks for accepting! You're confirmed for this tour.</p>"
        '<div style="background: #f3f4f6; padding: 20px; border-radius: 8px;">'
        f"<p><strong>Booking:</strong> {_e(booking_number)}</p>"
        f"<p><strong>Customer:</strong> {_e(customer_name)}</p>"
        f"<p><strong>Date:</strong> {_long_date(tour_date)}</p>"
        f"<p><strong>Pickup Time:</strong> {_e(start_time)}</p>"
        f"<p><strong>Pickup Location:</strong> {_e(pickup_location)}</p>"
        f"<p><strong>Party Size:</strong> {_plural_guests(party_size)}</p>"
        f"{vehicle}</div>"
        f"<p>Drive safe!<br>{_e(settings.company_name)} Dispatch</p>",
        color="#16a34a",
    )
    return RenderedEmail(subject=f"Tour Confirmed - {booking_number}", html=html)


def proposal_ready(
    customer_name: str,
    proposal_number: str,
    proposal_url: str,
    total: Decimal,
    valid_until: date | None = None,
) -> RenderedEmail:
    validity = f"<p>This proposal is valid until {_long_date(valid_until)}.</p>" if valid_until else ""
    html = _wrap(
        "Your Wine Country Proposal",
        f"<p>Hi {_e(customer_name)},</p>"
        f"<p>We've put together a proposal for your visit. Estimated total: "
        f"<strong>{format_currency(total)}</strong>.</p>"
        f"{validity}"
        f'<div style="text-align: center; margin: 30px 0;">{_button(proposal_url, "View Proposal", "#8B1538")}</div>'
        f"<p>Cheers,<br>{_e(settings.company_name)}</p>",
        color="#8B1538",
    )
    return RenderedEmail(subject=f"Your Proposal from {settings.company_name} [{proposal_number}]", html=html)


TEMPLATES: dict[str, Callable[..., RenderedEmail]] = {
    "booking_confirmation": booking_confirmation,
    "invoice": invoice,
    "final_invoice": final_invoice,
    "lunch_order_to_restaurant": lunch_order_to_restaurant,
    "tour_offer_to_driver": tour_offer_to_driver,
    "tour_assignment_confirmation": tour_assignment_confirmation,
    "proposal_ready": proposal_ready,
}


def render(template_name: str, **data) -> RenderedEmail:
    template = TEMPLATES.get(template_name)
    if template is None:
        raise KeyError(f"Unknown email template '{template_name}'")
    return template(**data)
