# backend/tests/conftest.py
"""
Pytest configuration for FoodWise backend tests.

- Ensures that the project root (backend/) is added to sys.path
  so that `import foodwise.*` works correctly in tests.
- Sets safe dummy environment variables (scheduler disabled, no real
  provider credentials) and resets shared state between tests.
"""

import os
import sys
from pathlib import Path

import pytest


def _ensure_project_root_in_sys_path() -> None:
    # This file is located at: backend/tests/conftest.py
    # parents[1] -> backend/
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)

    if project_root_str not in sys.path:
        sys.path.insert(0, project_root_str)


def _ensure_test_env_vars() -> None:
    """
    Set dummy environment variables required for tests.

    These values are only for local testing and do NOT contain real secrets.
    """
    os.environ.setdefault("FOODWISE_SCHEDULER_ENABLED", "false")
    os.environ.setdefault("FOODWISE_STARTUP_DELAY_SECONDS", "3600")
    # 実プロバイダへ送信しないよう、認証情報は空にしておく
    for name in ("TWILIO_ACCOUNT_SID", "TWILIO_AUTH_TOKEN", "TWILIO_PHONE_NUMBER", "EMAIL_API_KEY"):
        os.environ.pop(name, None)


_ensure_project_root_in_sys_path()
_ensure_test_env_vars()


@pytest.fixture(autouse=True)
def _reset_shared_state():
    from foodwise.automation.state import reset_state
    from foodwise.config import get_foodwise_settings
    from foodwise.notifications.config import get_email_settings, get_twilio_settings

    get_foodwise_settings.cache_clear()
    get_twilio_settings.cache_clear()
    get_email_settings.cache_clear()
    reset_state()
    yield
    reset_state()
