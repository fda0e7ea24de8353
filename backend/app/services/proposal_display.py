"""Proposal display — builds the customer-facing view of a proposal.

Wine tours are billed hourly, so their lines carry the hourly rate, an
estimated-duration marker, the tasting fee reminder and a lunch estimate.
Transfers and other fixed-price services show only their price.
"""

import re
from dataclasses import asdict, dataclass, field
from datetime import date
from decimal import Decimal

from app.config import settings
from app.data.rates import SERVICE_TYPE_LABELS, WINE_TOUR_MINIMUM_HOURS
from app.models.proposal import Proposal, ServiceItem
from app.services.pricing_service import (
    estimate_lunch_cost,
    format_currency,
    get_hourly_rate,
    get_minimum_hours,
    to_money,
)

LEGACY_DESCRIPTION = re.compile(r"Includes tastings and lunch coordination\.?", re.IGNORECASE)

WINE_TOUR_ITINERARY = "Visit 3 premier wineries"
TASTING_FEE_NOTE = "Wine tasting fees paid directly to wineries ($20-$40/person typical)"
DEFAULT_BASIS_HOURS = 6


@dataclass
class ServiceItemView:
    id: str
    service_type: str
    label: str
    date_display: str | None
    description: str | None
    duration_display: str | None
    price: Decimal
    price_display: str
    guests_display: str
    notes: str | None = None
    # Wine tours only
    hourly_rate: Decimal | None = None
    hourly_rate_display: str | None = None
    itinerary: str | None = None
    tasting_fee_note: str | None = None
    lunch_estimate: Decimal | None = None
    lunch_estimate_display: str | None = None


@dataclass
class ProposalTotals:
    subtotal: Decimal
    discount: Decimal
    taxable_amount: Decimal
    tax: Decimal
    total: Decimal
    deposit: Decimal
    basis_display: str


@dataclass
class ProposalView:
    proposal_number: str
    title: str | None
    customer_name: str
    status: str
    valid_until: date | None
    items: list[ServiceItemView] = field(default_factory=list)
    pricing_note: str | None = None
    totals: ProposalTotals | None = None

    def to_dict(self) -> dict:
        return asdict(self)


def get_service_type_label(service_type: str) -> str:
    return SERVICE_TYPE_LABELS.get(service_type, service_type)


def format_date_long(value: date | None) -> str | None:
    """e.g. 'Saturday, June 14, 2025'."""
    if value is None:
        return None
    return f"{value:%A, %B} {value.day}, {value.year}"


def clean_description(description: str | None) -> str | None:
    """Strip the legacy lunch-coordination sentence, now shown as its own line."""
    if not description:
        return None
    cleaned = LEGACY_DESCRIPTION.sub("", description).strip()
    return cleaned or None


def format_guests(party_size: int) -> str:
    return f"{party_size} {'guest' if party_size == 1 else 'guests'}"


def _format_hours(hours: Decimal) -> str:
    return f"{hours.normalize():f}" if hours == hours.to_integral_value() else f"{hours:.1f}"


def build_item_view(item: ServiceItem) -> ServiceItemView:
    is_wine_tour = item.service_type == "wine_tour"
    price = to_money(item.price)

    duration_display = None
    if item.duration_hours:
        duration_display = f"{_format_hours(Decimal(item.duration_hours))} hours"
        if is_wine_tour:
            duration_display += " (estimated)"

    view = ServiceItemView(
        id=str(item.id),
        service_type=item.service_type,
        label=get_service_type_label(item.service_type),
        date_display=format_date_long(item.service_date),
        description=clean_description(item.description),
        duration_display=duration_display,
        price=price,
        price_display=format_currency(price),
        guests_display=format_guests(item.party_size),
        notes=item.notes,
    )

    if not is_wine_tour:
        return view

    if item.service_date is not None:
        view.hourly_rate = get_hourly_rate(item.party_size, item.service_date)
        view.hourly_rate_display = f"Billed Hourly @ {format_currency(view.hourly_rate)}/hr"
    view.itinerary = WINE_TOUR_ITINERARY
    view.tasting_fee_note = TASTING_FEE_NOTE
    if item.party_size:
        view.lunch_estimate = estimate_lunch_cost(item.party_size)
        view.lunch_estimate_display = (
            f"Estimated lunch cost: {format_currency(view.lunch_estimate)} "
            f"({format_guests(item.party_size)} × ~$15-20/person + tax)"
        )
    return view


def build_pricing_note(items: list[ServiceItem]) -> str | None:
    """Hourly billing note, only when the proposal includes a wine tour."""
    wine_tours = [i for i in items if i.service_type == "wine_tour"]
    if not wine_tours:
        return None

    dated = [i.service_date for i in wine_tours if i.service_date is not None]
    minimum = max((get_minimum_hours(d) for d in dated), default=max(WINE_TOUR_MINIMUM_HOURS.values()))
    return (
        f"Wine tours are billed at an hourly rate with a {minimum}-hour minimum. "
        "The estimate above is based on typical tour duration. Your final invoice will "
        "reflect actual tour time and will be sent 48 hours after your experience concludes."
    )


def calculate_totals(proposal: Proposal) -> ProposalTotals:
    items = proposal.service_items
    subtotal = to_money(sum((Decimal(i.price) for i in items), Decimal("0")))
    discount = to_money(proposal.discount_amount or 0)
    taxable = max(subtotal - discount, Decimal("0.00"))
    tax = to_money(taxable * settings.tax_rate)
    total = taxable + tax

    basis_hours = items[0].duration_hours if items and items[0].duration_hours else DEFAULT_BASIS_HOURS
    return ProposalTotals(
        subtotal=subtotal,
        discount=discount,
        taxable_amount=taxable,
        tax=tax,
        total=total,
        deposit=to_money(total * settings.deposit_percentage),
        basis_display=(
            f"Based on {_format_hours(Decimal(basis_hours))} hours. "
            "Final invoice will reflect actual tour duration."
        ),
    )


def build_proposal_view(proposal: Proposal) -> ProposalView:
    items = list(proposal.service_items)
    return ProposalView(
        proposal_number=proposal.proposal_number,
        title=proposal.title,
        customer_name=proposal.customer_name,
        status=proposal.status,
        valid_until=proposal.valid_until,
        items=[build_item_view(i) for i in items],
        pricing_note=build_pricing_note(items),
        totals=calculate_totals(proposal),
    )
