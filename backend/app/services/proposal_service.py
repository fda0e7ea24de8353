"""Proposal service — creates priced proposals and tracks their lifecycle."""

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.data.rates import SERVICE_TYPES
from app.models.proposal import Proposal, ServiceItem
from app.schemas.proposal import CreateProposalRequest
from app.services.booking_service import save_numbered
from app.services.email_service import email_service
from app.services.pricing_service import price_service_item, to_money
from app.services.proposal_display import calculate_totals

logger = logging.getLogger(__name__)


class ProposalService:
    async def get_proposal(self, db: AsyncSession, proposal_number: str) -> Proposal | None:
        result = await db.execute(
            select(Proposal)
            .where(Proposal.proposal_number == proposal_number.upper())
            .options(selectinload(Proposal.service_items))
        )
        return result.scalar_one_or_none()

    async def create_proposal(self, db: AsyncSession, req: CreateProposalRequest) -> Proposal:
        proposal = Proposal(
            title=req.title,
            customer_name=req.customer_name,
            customer_email=str(req.customer_email),
            customer_phone=req.customer_phone,
            valid_until=req.valid_until,
            discount_amount=to_money(req.discount_amount),
            notes=req.notes,
            status="draft",
        )

        for i, item in enumerate(req.service_items):
            if item.service_type not in SERVICE_TYPES:
                raise ValueError(f"Unknown service type '{item.service_type}'")

            if item.price is not None:
                price = to_money(item.price)
            else:
                price = price_service_item(
                    item.service_type,
                    item.party_size,
                    service_date=item.service_date,
                    duration_hours=item.duration_hours,
                    route=item.route,
                    miles=item.miles,
                )

            proposal.service_items.append(ServiceItem(
                sequence=i + 1,
                service_type=item.service_type,
                service_date=item.service_date,
                party_size=item.party_size,
                duration_hours=item.duration_hours,
                price=price,
                description=item.description,
                notes=item.notes,
                route=item.route,
                miles=item.miles,
            ))

        await save_numbered(db, proposal, Proposal.proposal_number, "PROP")
        await db.refresh(proposal, ["service_items"])
        logger.info(f"Proposal {proposal.proposal_number} created with {len(proposal.service_items)} items")
        return proposal

    async def mark_viewed(self, db: AsyncSession, proposal: Proposal) -> Proposal:
        """First customer view of a sent proposal."""
        if proposal.status != "sent":
            return proposal
        proposal.status = "viewed"
        proposal.viewed_at = datetime.now(timezone.utc)
        await db.commit()
        await db.refresh(proposal, ["service_items"])
        return proposal

    async def send_proposal(self, db: AsyncSession, proposal: Proposal) -> Proposal:
        if proposal.status not in ("draft", "sent"):
            raise ValueError(f"Proposal cannot be sent in status '{proposal.status}'")

        proposal.status = "sent"
        proposal.sent_at = datetime.now(timezone.utc)
        await db.commit()
        await db.refresh(proposal, ["service_items"])

        totals = calculate_totals(proposal)
        await email_service.send_proposal(proposal, totals.total)
        return proposal


proposal_service = ProposalService()
