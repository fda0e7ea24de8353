"""Proposals router — priced quotes and their customer-facing view."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.proposal import CreateProposalRequest, ProposalCreatedResponse
from app.services.proposal_display import build_proposal_view, calculate_totals
from app.services.proposal_service import proposal_service

router = APIRouter()


@router.post("", status_code=201, response_model=ProposalCreatedResponse)
async def create_proposal(
    req: CreateProposalRequest,
    db: AsyncSession = Depends(get_db),
):
    """Create a proposal. Items without a quoted price are priced from the rate table."""
    try:
        proposal = await proposal_service.create_proposal(db, req)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    totals = calculate_totals(proposal)
    return ProposalCreatedResponse(
        id=proposal.id,
        proposal_number=proposal.proposal_number,
        status=proposal.status,
        subtotal=float(totals.subtotal),
        total=float(totals.total),
    )


@router.get("/{proposal_number}")
async def get_proposal(
    proposal_number: str,
    db: AsyncSession = Depends(get_db),
):
    """Customer-facing proposal view."""
    proposal = await proposal_service.get_proposal(db, proposal_number)
    if not proposal:
        raise HTTPException(status_code=404, detail="Proposal not found")

    proposal = await proposal_service.mark_viewed(db, proposal)
    return build_proposal_view(proposal).to_dict()


@router.post("/{proposal_number}/send")
async def send_proposal(
    proposal_number: str,
    db: AsyncSession = Depends(get_db),
):
    proposal = await proposal_service.get_proposal(db, proposal_number)
    if not proposal:
        raise HTTPException(status_code=404, detail="Proposal not found")

    try:
        proposal = await proposal_service.send_proposal(db, proposal)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "proposal_number": proposal.proposal_number, "status": proposal.status}
