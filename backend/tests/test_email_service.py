"""
Unit tests for the Resend email adapter.
"""

import json
import logging

import httpx
import pytest

from app.config import settings
from app.services.email_service import EmailService


def _service_with_transport(handler) -> EmailService:
    service = EmailService()
    service._client = httpx.AsyncClient(
        transport=httpx.MockTransport(handler),
        base_url="https://api.resend.com",
    )
    return service


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setattr(settings, "resend_api_key", "re_test_123")


async def test_without_api_key_logs_and_skips(caplog):
    calls = []
    service = _service_with_transport(lambda request: calls.append(request))

    sent = await service.send_email("jane@example.com", "Hello", "<p>Hi</p>")

    assert sent is False
    assert calls == []
    assert "RESEND_API_KEY not configured" in caplog.text


async def test_sends_json_payload_with_bearer_token(api_key):
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers["Authorization"]
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "email_abc"})

    service = _service_with_transport(handler)
    sent = await service.send_email(
        "jane@example.com", "Hello", "<p>Hi</p>", text="Hi", reply_to="ops@example.com"
    )

    assert sent is True
    assert captured["url"] == "https://api.resend.com/emails"
    assert captured["auth"] == "Bearer re_test_123"
    assert captured["body"]["to"] == ["jane@example.com"]
    assert captured["body"]["from"] == settings.from_email
    assert captured["body"]["text"] == "Hi"
    assert captured["body"]["reply_to"] == "ops@example.com"


async def test_provider_error_returns_false(api_key, caplog):
    service = _service_with_transport(
        lambda request: httpx.Response(422, json={"message": "Invalid `to` field"})
    )

    sent = await service.send_email(["bad"], "Hello", "<p>Hi</p>")

    assert sent is False
    assert "Email send failed (422)" in caplog.text


async def test_transport_error_returns_false(api_key, caplog):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    service = _service_with_transport(handler)

    assert await service.send_email("jane@example.com", "Hello", "<p>Hi</p>") is False
    assert "Email send error" in caplog.text


async def test_non_json_success_body_still_counts_as_sent(api_key, caplog):
    caplog.set_level(logging.INFO)
    service = _service_with_transport(lambda request: httpx.Response(200, text="<html>ok</html>"))

    assert await service.send_email("jane@example.com", "Hello", "<p>Hi</p>") is True
    assert "Email sent: None: Hello" in caplog.text
