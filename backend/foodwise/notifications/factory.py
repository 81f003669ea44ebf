# backend/foodwise/notifications/factory.py

"""
NotificationDispatcher の簡易ファクトリ。

- Twilio 設定が揃っていれば TwilioSmsClient、無ければ SMS 未構成
- EMAIL_API_KEY があれば HttpEmailClient、無ければ LoggingEmailClient（縮退）

グローバルな共有クライアントは持たず、呼び出し側（起動処理）が生成した
インスタンスを保持・注入する。
"""

from __future__ import annotations

import logging
from typing import Optional

from foodwise.config import FoodWiseSettings, get_foodwise_settings

from .client import HttpEmailClient, LoggingEmailClient, TwilioSmsClient
from .config import EmailSettings, TwilioSettings, get_email_settings, get_twilio_settings
from .dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)


def build_dispatcher(
    *,
    settings: Optional[FoodWiseSettings] = None,
    twilio_settings: Optional[TwilioSettings] = None,
    email_settings: Optional[EmailSettings] = None,
) -> NotificationDispatcher:
    settings = settings or get_foodwise_settings()
    twilio_settings = twilio_settings or get_twilio_settings()
    email_settings = email_settings or get_email_settings()

    sms_client = None
    if twilio_settings is not None:
        sms_client = TwilioSmsClient(twilio_settings)
    else:
        logger.warning("Twilio is not configured; SMS notifications will fail.")

    if email_settings.is_configured:
        email_client = HttpEmailClient(email_settings)
    else:
        logger.warning("EMAIL_API_KEY is not set; emails will only be logged.")
        email_client = LoggingEmailClient()

    return NotificationDispatcher(
        sms_client=sms_client,
        email_client=email_client,
        default_country_code=settings.default_country_code,
    )
