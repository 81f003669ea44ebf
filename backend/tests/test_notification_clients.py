# backend/tests/test_notification_clients.py

import json

import httpx
import pytest

from foodwise.notifications.client import (
    EmailConnectionError,
    EmailProviderError,
    HttpEmailClient,
    SmsConnectionError,
    SmsProviderError,
    TwilioSmsClient,
)
from foodwise.notifications.config import EmailSettings, TwilioSettings


@pytest.fixture
def twilio_settings() -> TwilioSettings:
    return TwilioSettings(
        account_sid="ACdummy",
        auth_token="dummy-token",
        from_number="+15005550006",
        api_base_url="https://twilio.test/2010-04-01",
    )


@pytest.fixture
def email_settings() -> EmailSettings:
    return EmailSettings(
        api_url="https://mail.test/send",
        api_key="dummy-key",
        from_address="notifications@foodwise.com",
    )


def _json_response(status_code: int, data: dict) -> httpx.Response:
    return httpx.Response(status_code=status_code, content=json.dumps(data).encode("utf-8"))


def test_twilio_send_success(monkeypatch, twilio_settings) -> None:
    captured = {}

    def fake_post(url, **kwargs):
        captured["url"] = url
        captured.update(kwargs)
        return _json_response(201, {"sid": "SM123", "status": "queued"})

    monkeypatch.setattr(httpx, "post", fake_post)

    receipt = TwilioSmsClient(twilio_settings).send("+919876543210", "hello")

    assert receipt.sid == "SM123"
    assert receipt.status == "queued"
    assert captured["url"] == "https://twilio.test/2010-04-01/Accounts/ACdummy/Messages.json"
    assert captured["data"] == {"From": "+15005550006", "To": "+919876543210", "Body": "hello"}
    assert captured["auth"] == ("ACdummy", "dummy-token")


def test_twilio_error_carries_provider_code(monkeypatch, twilio_settings) -> None:
    def fake_post(*args, **kwargs):
        return _json_response(
            400,
            {
                "code": 21211,
                "message": "The 'To' number +91123 is not a valid phone number.",
                "more_info": "https://www.twilio.com/docs/errors/21211",
                "status": 400,
            },
        )

    monkeypatch.setattr(httpx, "post", fake_post)

    with pytest.raises(SmsProviderError) as exc_info:
        TwilioSmsClient(twilio_settings).send("+91123", "hello")

    assert exc_info.value.code == 21211
    assert exc_info.value.status_code == 400
    assert exc_info.value.more_info.endswith("21211")


def test_twilio_auth_failure_without_json_body(monkeypatch, twilio_settings) -> None:
    monkeypatch.setattr(httpx, "post", lambda *a, **k: httpx.Response(401, content=b""))

    with pytest.raises(SmsProviderError) as exc_info:
        TwilioSmsClient(twilio_settings).send("+919876543210", "hello")

    assert exc_info.value.code is None
    assert exc_info.value.status_code == 401


def test_twilio_network_error(monkeypatch, twilio_settings) -> None:
    def fake_post(*args, **kwargs):
        raise httpx.RequestError("network error", request=None)

    monkeypatch.setattr(httpx, "post", fake_post)

    with pytest.raises(SmsConnectionError):
        TwilioSmsClient(twilio_settings).send("+919876543210", "hello")


def test_email_send_posts_payload(monkeypatch, email_settings) -> None:
    captured = {}

    def fake_post(url, **kwargs):
        captured["url"] = url
        captured.update(kwargs)
        return _json_response(202, {"ok": True})

    monkeypatch.setattr(httpx, "post", fake_post)

    HttpEmailClient(email_settings).send("a@example.com", "subj", "<p>hi</p>")

    assert captured["url"] == "https://mail.test/send"
    assert captured["json"] == {
        "to": "a@example.com",
        "subject": "subj",
        "html": "<p>hi</p>",
        "from": "notifications@foodwise.com",
    }
    assert captured["headers"]["Authorization"] == "Bearer dummy-key"


def test_email_http_error(monkeypatch, email_settings) -> None:
    monkeypatch.setattr(httpx, "post", lambda *a, **k: _json_response(500, {"error": "x"}))

    with pytest.raises(EmailProviderError) as exc_info:
        HttpEmailClient(email_settings).send("a@example.com", "subj", "body")

    assert exc_info.value.status_code == 500


def test_email_network_error(monkeypatch, email_settings) -> None:
    def fake_post(*args, **kwargs):
        raise httpx.RequestError("network error", request=None)

    monkeypatch.setattr(httpx, "post", fake_post)

    with pytest.raises(EmailConnectionError):
        HttpEmailClient(email_settings).send("a@example.com", "subj", "body")
