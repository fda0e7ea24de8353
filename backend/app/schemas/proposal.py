import uuid
from datetime import date
from decimal import Decimal

from pydantic import BaseModel, EmailStr, Field


class ServiceItemBase(BaseModel):
    service_type: str
    service_date: date | None = None
    party_size: int = Field(ge=1, le=50)
    duration_hours: Decimal | None = Field(default=None, gt=0, le=24)
    price: Decimal | None = Field(default=None, ge=0)
    description: str | None = None
    notes: str | None = None
    route: str | None = None
    miles: Decimal | None = Field(default=None, ge=0)


class CreateProposalRequest(BaseModel):
    customer_name: str = Field(min_length=1, max_length=255)
    customer_email: EmailStr
    customer_phone: str | None = None
    title: str | None = None
    valid_until: date | None = None
    discount_amount: Decimal = Field(default=Decimal("0"), ge=0)
    notes: str | None = None
    service_items: list[ServiceItemBase] = Field(min_length=1)


class ProposalCreatedResponse(BaseModel):
    id: uuid.UUID
    proposal_number: str
    status: str
    subtotal: float
    total: float
