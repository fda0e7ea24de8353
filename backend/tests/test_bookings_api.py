"""
API tests for bookings, invoices and lunch orders.
"""

from datetime import date
from unittest.mock import AsyncMock, patch

import pytest

from app.services import booking_service as booking_service_module
from app.services.email_service import email_service

LUNCH_ORDER = {
    "restaurant_name": "Walla Walla Bread Co",
    "restaurant_email": "orders@example.com",
    "arrival_time": "12:30 PM",
    "items": [{"name": "Turkey sandwich", "quantity": 4, "price": "14.50"}],
}


async def _create_booking(client, payload):
    resp = await client.post("/api/bookings", json=payload)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def test_health(client):
    resp = await client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


async def test_create_wine_tour_booking_prices_and_emails(client, booking_payload):
    with patch.object(email_service, "send_booking_confirmation", AsyncMock(return_value=True)) as send:
        data = await _create_booking(client, booking_payload)

    # Saturday, 4 guests → $105/hr × 6 h = 630 + 9.1% tax
    assert data["total_price"] == pytest.approx(687.33)
    assert data["deposit_paid"] == pytest.approx(343.67)
    assert data["balance_due"] == pytest.approx(343.66)
    assert data["status"] == "confirmed"
    assert data["booking_number"].startswith("WWT-")
    assert len(data["wineries"]) == 2

    send.assert_awaited_once()
    assert send.call_args[0][0].booking_number == data["booking_number"]


async def test_booking_without_email_key_still_succeeds(client, booking_payload):
    data = await _create_booking(client, booking_payload)
    assert data["status"] == "confirmed"


async def test_non_tour_booking_requires_total(client, booking_payload):
    booking_payload["service_type"] = "airport_transfer"
    resp = await client.post("/api/bookings", json=booking_payload)
    assert resp.status_code == 422

    booking_payload["total_price"] = 850
    resp = await client.post("/api/bookings", json=booking_payload)
    assert resp.status_code == 201
    assert resp.json()["total_price"] == pytest.approx(850)


async def test_booking_validation(client, booking_payload):
    booking_payload["customer_email"] = "not-an-email"
    resp = await client.post("/api/bookings", json=booking_payload)
    assert resp.status_code == 422

    booking_payload["customer_email"] = "jane@example.com"
    booking_payload["party_size"] = 0
    resp = await client.post("/api/bookings", json=booking_payload)
    assert resp.status_code == 422


async def test_get_list_and_cancel_booking(client, booking_payload):
    created = await _create_booking(client, booking_payload)
    number = created["booking_number"]

    resp = await client.get(f"/api/bookings/{number.lower()}")
    assert resp.status_code == 200
    assert resp.json()["id"] == created["id"]

    resp = await client.get("/api/bookings", params={"status": "confirmed"})
    assert [b["booking_number"] for b in resp.json()] == [number]

    resp = await client.post(f"/api/bookings/{number}/cancel")
    assert resp.json()["status"] == "cancelled"

    resp = await client.post(f"/api/bookings/{number}/cancel")
    assert resp.status_code == 400


async def test_unknown_booking_is_404(client):
    resp = await client.get("/api/bookings/WWT-2025-999999")
    assert resp.status_code == 404


async def test_final_invoice_bills_actual_hours_and_emails_on_approval(client, booking_payload):
    booking = await _create_booking(client, booking_payload)

    resp = await client.post(
        "/api/invoices",
        json={"booking_number": booking["booking_number"], "invoice_type": "final", "actual_hours": 7},
    )
    assert resp.status_code == 201
    invoice = resp.json()
    assert invoice["status"] == "draft"
    assert invoice["hourly_rate"] == pytest.approx(105)
    assert invoice["actual_hours"] == pytest.approx(7)
    # 7 h × $105 = 735 + 66.89 tax = 801.89, less the 343.67 deposit
    assert invoice["amount"] == pytest.approx(458.22)
    assert invoice["due_date"] == "2025-06-21"

    with patch.object(email_service, "send_invoice", AsyncMock(return_value=True)) as send:
        resp = await client.post(f"/api/invoices/{invoice['id']}/approve")
    assert resp.status_code == 200
    assert resp.json()["status"] == "approved"
    send.assert_awaited_once()

    resp = await client.post(f"/api/invoices/{invoice['id']}/approve")
    assert resp.status_code == 400

    resp = await client.get(f"/api/bookings/{booking['booking_number']}")
    assert resp.json()["status"] == "completed"


async def test_deposit_invoice_defaults_to_half(client, booking_payload):
    booking = await _create_booking(client, booking_payload)

    resp = await client.post(
        "/api/invoices",
        json={"booking_number": booking["booking_number"], "invoice_type": "deposit"},
    )
    assert resp.status_code == 201
    assert resp.json()["amount"] == pytest.approx(343.67)


async def test_invalid_invoice_type(client, booking_payload):
    booking = await _create_booking(client, booking_payload)
    resp = await client.post(
        "/api/invoices",
        json={"booking_number": booking["booking_number"], "invoice_type": "refund"},
    )
    assert resp.status_code == 422


async def test_lunch_order_total_and_approval(client, booking_payload):
    booking = await _create_booking(client, booking_payload)

    resp = await client.post(
        "/api/lunch-orders",
        json={
            "booking_number": booking["booking_number"],
            "restaurant_name": "Walla Walla Bread Co",
            "restaurant_email": "orders@example.com",
            "arrival_time": "12:30 PM",
            "items": [
                {"name": "Turkey sandwich", "quantity": 2, "price": "14.50"},
                {"name": "Garden salad", "quantity": 1, "price": "12.00"},
            ],
            "dietary_restrictions": "One vegetarian",
        },
    )
    assert resp.status_code == 201
    order = resp.json()
    assert order["total"] == pytest.approx(41.0)
    assert order["status"] == "pending"

    with patch.object(email_service, "send_lunch_order", AsyncMock(return_value=True)) as send:
        resp = await client.post(f"/api/lunch-orders/{order['id']}/approve")
    assert resp.json()["status"] == "sent"
    assert resp.json()["sent_at"] is not None
    send.assert_awaited_once()

    resp = await client.post(f"/api/lunch-orders/{order['id']}/approve")
    assert resp.status_code == 400


async def test_lunch_order_approved_but_unsent_without_email_key(client, booking_payload):
    booking = await _create_booking(client, booking_payload)
    resp = await client.post(
        "/api/lunch-orders",
        json={
            "booking_number": booking["booking_number"],
            "restaurant_name": "Walla Walla Bread Co",
            "restaurant_email": "orders@example.com",
            "arrival_time": "12:30 PM",
            "items": [{"name": "Turkey sandwich", "quantity": 4, "price": "14.50"}],
        },
    )
    order = resp.json()

    resp = await client.post(f"/api/lunch-orders/{order['id']}/approve")
    assert resp.json()["status"] == "approved"
    assert resp.json()["sent_at"] is None


async def _final_invoice(client, booking_number, **extra):
    resp = await client.post(
        "/api/invoices",
        json={"booking_number": booking_number, "invoice_type": "final", **extra},
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


async def test_final_invoice_credits_deposit(client, booking_payload):
    booking = await _create_booking(client, booking_payload)

    invoice = await _final_invoice(client, booking["booking_number"], actual_hours=6)

    # Tour ran as booked: the final invoice is exactly the balance left after the deposit
    assert invoice["amount"] == pytest.approx(booking["balance_due"])
    assert invoice["amount"] + booking["deposit_paid"] == pytest.approx(booking["total_price"])


async def test_short_saturday_tour_bills_five_hour_minimum(client, booking_payload):
    booking = await _create_booking(client, booking_payload)

    invoice = await _final_invoice(client, booking["booking_number"], actual_hours=2)

    # 5 h minimum × $105 = 525 + 47.78 tax = 572.78, less the 343.67 deposit
    assert invoice["actual_hours"] == pytest.approx(5)
    assert invoice["amount"] == pytest.approx(229.11)


async def test_final_invoice_for_transfer_bills_balance(client, booking_payload):
    booking_payload.update(service_type="airport_transfer", total_price=850)
    booking = await _create_booking(client, booking_payload)

    invoice = await _final_invoice(client, booking["booking_number"])

    assert invoice["amount"] == pytest.approx(425)
    assert invoice["hourly_rate"] is None


async def test_booking_numbers_are_sequential_per_year(client, booking_payload):
    first = await _create_booking(client, booking_payload)
    second = await _create_booking(client, booking_payload)

    year = date.today().year
    assert first["booking_number"] == f"WWT-{year}-000001"
    assert second["booking_number"] == f"WWT-{year}-000002"


async def test_taken_booking_number_is_retried(client, booking_payload):
    numbers = AsyncMock(side_effect=["WWT-2025-000042", "WWT-2025-000042", "WWT-2025-000043"])
    with patch.object(booking_service_module, "next_number", numbers):
        first = await _create_booking(client, booking_payload)
        second = await _create_booking(client, booking_payload)

    assert first["booking_number"] == "WWT-2025-000042"
    assert second["booking_number"] == "WWT-2025-000043"


async def test_booking_number_allocation_gives_up_after_retries(client, booking_payload):
    with patch.object(booking_service_module, "next_number", AsyncMock(return_value="WWT-2025-000042")):
        await _create_booking(client, booking_payload)
        resp = await client.post("/api/bookings", json=booking_payload)

    assert resp.status_code == 422
    assert "reference number" in resp.json()["detail"]


async def test_private_tour_party_size_limit_applies_to_quoted_bookings(client, booking_payload):
    booking_payload.update(party_size=30, total_price=900)
    resp = await client.post("/api/bookings", json=booking_payload)
    assert resp.status_code == 422

    booking_payload["service_type"] = "airport_transfer"
    resp = await client.post("/api/bookings", json=booking_payload)
    assert resp.status_code == 201


async def test_end_time_defaults_to_start_plus_duration(client, booking_payload):
    del booking_payload["end_time"]
    booking = await _create_booking(client, booking_payload)
    assert booking["end_time"] == "4:00 PM"


async def test_no_lunch_order_for_cancelled_booking(client, booking_payload):
    booking = await _create_booking(client, booking_payload)
    await client.post(f"/api/bookings/{booking['booking_number']}/cancel")

    resp = await client.post(
        "/api/lunch-orders", json={"booking_number": booking["booking_number"], **LUNCH_ORDER}
    )
    assert resp.status_code == 422


async def test_pending_lunch_order_not_sent_after_cancellation(client, booking_payload):
    booking = await _create_booking(client, booking_payload)
    resp = await client.post(
        "/api/lunch-orders", json={"booking_number": booking["booking_number"], **LUNCH_ORDER}
    )
    order = resp.json()
    await client.post(f"/api/bookings/{booking['booking_number']}/cancel")

    with patch.object(email_service, "send_lunch_order", AsyncMock(return_value=True)) as send:
        resp = await client.post(f"/api/lunch-orders/{order['id']}/approve")

    assert resp.status_code == 400
    send.assert_not_awaited()
