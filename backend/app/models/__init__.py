from app.models.booking import Booking, Invoice, LunchOrder, TourOffer
from app.models.proposal import Proposal, ServiceItem

__all__ = [
    "Booking",
    "Invoice",
    "LunchOrder",
    "Proposal",
    "ServiceItem",
    "TourOffer",
]
