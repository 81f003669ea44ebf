# backend/tests/test_config.py

import pytest

from foodwise.config import DEFAULT_REMINDER_DAYS, get_foodwise_settings
from foodwise.notifications.client import HttpEmailClient, LoggingEmailClient, TwilioSmsClient
from foodwise.notifications.config import get_email_settings, get_twilio_settings
from foodwise.notifications.factory import build_dispatcher
from foodwise.utils.config import EnvVarMissingError, get_env, get_env_bool, get_env_int


def test_get_env_required_missing_raises(monkeypatch) -> None:
    monkeypatch.delenv("FOODWISE_TEST_VALUE", raising=False)

    with pytest.raises(EnvVarMissingError):
        get_env("FOODWISE_TEST_VALUE")

    assert get_env("FOODWISE_TEST_VALUE", default="x", required=False) == "x"


def test_get_env_int_and_bool_fall_back_on_garbage(monkeypatch) -> None:
    monkeypatch.setenv("FOODWISE_TEST_INT", "three")
    monkeypatch.setenv("FOODWISE_TEST_BOOL", "maybe")

    assert get_env_int("FOODWISE_TEST_INT", 3) == 3
    assert get_env_bool("FOODWISE_TEST_BOOL", True) is True

    monkeypatch.setenv("FOODWISE_TEST_INT", "7")
    monkeypatch.setenv("FOODWISE_TEST_BOOL", "off")

    assert get_env_int("FOODWISE_TEST_INT", 3) == 7
    assert get_env_bool("FOODWISE_TEST_BOOL", True) is False


def test_foodwise_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("FOODWISE_DEFAULT_COUNTRY_CODE", "+44")
    monkeypatch.setenv("FOODWISE_SWEEP_INTERVAL_HOURS", "6")
    monkeypatch.setenv("FOODWISE_DEFAULT_REMINDER_DAYS", "0")
    get_foodwise_settings.cache_clear()

    settings = get_foodwise_settings()

    assert settings.default_country_code == "44"
    assert settings.sweep_interval_hours == 6
    # 0 以下は 1 に丸める
    assert settings.default_reminder_days == 1
    assert settings.scheduler_enabled is False


def test_foodwise_settings_defaults(monkeypatch) -> None:
    for name in (
        "FOODWISE_DEFAULT_COUNTRY_CODE",
        "FOODWISE_SWEEP_INTERVAL_HOURS",
        "FOODWISE_DEFAULT_REMINDER_DAYS",
    ):
        monkeypatch.delenv(name, raising=False)
    get_foodwise_settings.cache_clear()

    settings = get_foodwise_settings()

    assert settings.default_country_code == "91"
    assert settings.sweep_interval_hours == 3
    assert settings.default_reminder_days == DEFAULT_REMINDER_DAYS


def test_twilio_settings_require_all_three_values(monkeypatch) -> None:
    monkeypatch.setenv("TWILIO_ACCOUNT_SID", "ACtest")
    monkeypatch.setenv("TWILIO_AUTH_TOKEN", "token")
    get_twilio_settings.cache_clear()

    assert get_twilio_settings() is None

    monkeypatch.setenv("TWILIO_PHONE_NUMBER", "+15550001111")
    get_twilio_settings.cache_clear()

    settings = get_twilio_settings()
    assert settings is not None
    assert settings.from_number == "+15550001111"


def test_build_dispatcher_without_credentials_degrades(caplog) -> None:
    dispatcher = build_dispatcher()

    assert dispatcher.sms_configured is False
    assert isinstance(dispatcher._email_client, LoggingEmailClient)

    result = dispatcher.send_sms("9876543210", "hello")
    assert result.success is False
    assert "not configured" in result.error


def test_build_dispatcher_with_credentials(monkeypatch) -> None:
    monkeypatch.setenv("TWILIO_ACCOUNT_SID", "ACtest")
    monkeypatch.setenv("TWILIO_AUTH_TOKEN", "token")
    monkeypatch.setenv("TWILIO_PHONE_NUMBER", "+15550001111")
    monkeypatch.setenv("EMAIL_API_KEY", "key")
    get_twilio_settings.cache_clear()
    get_email_settings.cache_clear()

    dispatcher = build_dispatcher()

    assert dispatcher.sms_configured is True
    assert isinstance(dispatcher._sms_client, TwilioSmsClient)
    assert isinstance(dispatcher._email_client, HttpEmailClient)
