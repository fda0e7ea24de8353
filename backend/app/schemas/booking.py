import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, EmailStr, Field, model_validator

from app.data.rates import PRIVATE_TOUR_MAX_GUESTS


class Winery(BaseModel):
    name: str
    city: str = "Walla Walla"


class CreateBookingRequest(BaseModel):
    customer_name: str = Field(min_length=1, max_length=255)
    customer_email: EmailStr
    customer_phone: str | None = None
    service_type: str = "wine_tour"
    tour_date: date
    start_time: str
    end_time: str | None = None
    duration_hours: Decimal = Field(gt=0, le=24)
    party_size: int = Field(ge=1, le=50)
    pickup_location: str = Field(min_length=1)
    wineries: list[Winery] = []
    special_requests: str | None = None
    total_price: Decimal | None = Field(default=None, ge=0)
    deposit_paid: Decimal | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_private_tour_size(self) -> "CreateBookingRequest":
        if self.service_type == "wine_tour" and self.party_size > PRIVATE_TOUR_MAX_GUESTS:
            raise ValueError(f"Private wine tours are limited to {PRIVATE_TOUR_MAX_GUESTS} guests")
        return self


class BookingResponse(BaseModel):
    id: uuid.UUID
    booking_number: str
    customer_name: str
    customer_email: str
    customer_phone: str | None
    service_type: str
    tour_date: date
    start_time: str
    end_time: str | None
    duration_hours: float
    party_size: int
    pickup_location: str
    wineries: list[dict] | None
    total_price: float
    deposit_paid: float
    balance_due: float
    status: str
    driver_name: str | None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class CreateInvoiceRequest(BaseModel):
    booking_number: str
    invoice_type: str = "final"  # deposit | final
    actual_hours: Decimal | None = Field(default=None, gt=0, le=24)
    amount: Decimal | None = Field(default=None, ge=0)
    due_date: date | None = None


class InvoiceResponse(BaseModel):
    id: uuid.UUID
    invoice_number: str
    booking_id: uuid.UUID
    invoice_type: str
    amount: float
    actual_hours: float | None
    hourly_rate: float | None
    due_date: date
    status: str
    approved_at: datetime | None = None

    model_config = {"from_attributes": True}


class LunchItem(BaseModel):
    name: str
    quantity: int = Field(default=1, ge=1)
    price: Decimal = Field(ge=0)


class CreateLunchOrderRequest(BaseModel):
    booking_number: str
    restaurant_name: str = Field(min_length=1)
    restaurant_email: EmailStr
    arrival_time: str
    items: list[LunchItem] = Field(min_length=1)
    dietary_restrictions: str | None = None
    special_requests: str | None = None


class LunchOrderResponse(BaseModel):
    id: uuid.UUID
    booking_id: uuid.UUID
    restaurant_name: str
    restaurant_email: str
    arrival_time: str
    items: list[dict]
    total: float
    dietary_restrictions: str | None
    special_requests: str | None
    status: str
    sent_at: datetime | None = None

    model_config = {"from_attributes": True}


class CreateTourOfferRequest(BaseModel):
    booking_number: str
    driver_name: str = Field(min_length=1)
    driver_email: EmailStr
    pay_amount: Decimal = Field(ge=0)
    estimated_hours: Decimal | None = Field(default=None, gt=0)
    notes: str | None = None
    expires_in_hours: int | None = Field(default=None, ge=1, le=168)


class RespondToOfferRequest(BaseModel):
    action: str  # accept | decline
    vehicle_name: str | None = None


class TourOfferResponse(BaseModel):
    id: uuid.UUID
    booking_id: uuid.UUID
    driver_name: str
    driver_email: str
    pay_amount: float
    estimated_hours: float
    notes: str | None
    expires_at: datetime
    status: str
    responded_at: datetime | None = None

    model_config = {"from_attributes": True}
