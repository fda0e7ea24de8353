"""
API tests for driver tour offers and the expiry job.
"""

import uuid
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from sqlalchemy import select, update

from app.models.booking import TourOffer
from app.services.booking_service import booking_service
from app.services.email_service import email_service


@pytest_asyncio.fixture
async def booking(client, booking_payload):
    resp = await client.post("/api/bookings", json=booking_payload)
    assert resp.status_code == 201
    return resp.json()


async def _offer(client, booking_number, driver="Eric", **extra):
    payload = {
        "booking_number": booking_number,
        "driver_name": driver,
        "driver_email": f"{driver.lower()}@example.com",
        "pay_amount": "210",
        **extra,
    }
    resp = await client.post("/api/tour-offers", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def _backdate(session_factory, offer_id):
    async with session_factory() as session:
        await session.execute(
            update(TourOffer)
            .where(TourOffer.id == uuid.UUID(offer_id))
            .values(expires_at=datetime.now(timezone.utc) - timedelta(hours=1))
        )
        await session.commit()


async def _status(session_factory, offer_id):
    async with session_factory() as session:
        result = await session.execute(select(TourOffer.status).where(TourOffer.id == uuid.UUID(offer_id)))
        return result.scalar_one()


async def test_create_offer_emails_driver(client, booking):
    with patch.object(email_service, "send_tour_offer", AsyncMock(return_value=True)) as send:
        offer = await _offer(client, booking["booking_number"], notes="Bring the cooler")

    assert offer["status"] == "pending"
    assert offer["estimated_hours"] == pytest.approx(6)
    assert offer["pay_amount"] == pytest.approx(210)
    send.assert_awaited_once()


async def test_accept_assigns_booking_and_lapses_other_offers(client, booking, session_factory):
    first = await _offer(client, booking["booking_number"], driver="Eric")
    second = await _offer(client, booking["booking_number"], driver="Maria")

    with patch.object(email_service, "send_tour_assignment", AsyncMock(return_value=True)) as send:
        resp = await client.post(
            f"/api/tour-offers/{first['id']}/respond",
            json={"action": "accept", "vehicle_name": "Sprinter 1"},
        )
    assert resp.status_code == 200
    assert resp.json()["status"] == "accepted"
    assert resp.json()["responded_at"] is not None
    send.assert_awaited_once()

    resp = await client.get(f"/api/bookings/{booking['booking_number']}")
    assert resp.json()["status"] == "assigned"
    assert resp.json()["driver_name"] == "Eric"

    assert await _status(session_factory, second["id"]) == "expired"

    resp = await client.post(f"/api/tour-offers/{second['id']}/respond", json={"action": "accept"})
    assert resp.status_code == 400


async def test_decline_leaves_booking_open(client, booking):
    offer = await _offer(client, booking["booking_number"])

    resp = await client.post(f"/api/tour-offers/{offer['id']}/respond", json={"action": "decline"})
    assert resp.json()["status"] == "declined"

    resp = await client.get(f"/api/bookings/{booking['booking_number']}")
    assert resp.json()["status"] == "confirmed"
    assert resp.json()["driver_name"] is None


async def test_invalid_action(client, booking):
    offer = await _offer(client, booking["booking_number"])
    resp = await client.post(f"/api/tour-offers/{offer['id']}/respond", json={"action": "maybe"})
    assert resp.status_code == 400


async def test_responding_after_expiry_marks_offer_expired(client, booking, session_factory):
    offer = await _offer(client, booking["booking_number"])
    await _backdate(session_factory, offer["id"])

    resp = await client.post(f"/api/tour-offers/{offer['id']}/respond", json={"action": "accept"})
    assert resp.status_code == 400
    assert "expired" in resp.json()["detail"]
    assert await _status(session_factory, offer["id"]) == "expired"


async def test_cannot_offer_cancelled_booking(client, booking):
    await client.post(f"/api/bookings/{booking['booking_number']}/cancel")
    resp = await client.post(
        "/api/tour-offers",
        json={
            "booking_number": booking["booking_number"],
            "driver_name": "Eric",
            "driver_email": "eric@example.com",
            "pay_amount": "210",
        },
    )
    assert resp.status_code == 400


async def test_unknown_offer_is_404(client):
    resp = await client.post(f"/api/tour-offers/{uuid.uuid4()}/respond", json={"action": "accept"})
    assert resp.status_code == 404


async def test_expire_tour_offers_only_touches_lapsed_pending(client, booking, session_factory):
    stale = await _offer(client, booking["booking_number"], driver="Eric")
    fresh = await _offer(client, booking["booking_number"], driver="Maria")
    await _backdate(session_factory, stale["id"])

    async with session_factory() as session:
        expired = await booking_service.expire_tour_offers(session)

    assert expired == 1
    assert await _status(session_factory, stale["id"]) == "expired"
    assert await _status(session_factory, fresh["id"]) == "pending"
