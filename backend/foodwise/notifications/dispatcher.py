# backend/foodwise/notifications/dispatcher.py

"""
チャンネル（SMS / Email）ごとの送信を担う Dispatcher。

- 1回の呼び出しにつき外部呼び出しは 1回だけ
- リトライはしない（次回のスイープで再度対象になる）
- プロバイダの例外は境界で捕捉して DispatchResult(success=False) に変換する
"""

from __future__ import annotations

import html
import logging
from typing import Optional

from foodwise.users.schemas import NotificationSettings, User

from .client import EmailClient, SmsClient, SmsProviderError
from .phone import normalize_phone_number
from .schemas import DispatchResult, NotificationChannel

logger = logging.getLogger(__name__)

TEST_SMS_BODY = (
    "This is a test SMS notification from FoodWise. "
    "If you received this, your SMS notifications are working properly!"
)
TEST_EMAIL_SUBJECT = "FoodWise test notification"
TEST_EMAIL_BODY = "This is a test email notification.\nYour notification system is working!"


def render_email_html(body: str) -> str:
    """
    プレーンテキスト本文をメール用の最小限の HTML に変換する。
    """
    escaped = html.escape(body)
    return "<div>" + escaped.replace("\n", "<br>\n") + "</div>"


class NotificationDispatcher:
    """
    SMS / Email クライアントを保持し、送信結果を DispatchResult で返すサービス。

    クライアントはプロセス起動時に明示的に構築して注入する（factory.build_dispatcher）。
    sms_client が None の場合、SMS は「未構成」として常に失敗を返す。
    """

    def __init__(
        self,
        *,
        sms_client: Optional[SmsClient],
        email_client: EmailClient,
        default_country_code: str = "91",
    ) -> None:
        self._sms_client = sms_client
        self._email_client = email_client
        self._default_country_code = default_country_code

    @property
    def sms_configured(self) -> bool:
        return self._sms_client is not None

    def send_sms(self, to_raw_number: str, body: str) -> DispatchResult:
        """
        番号を正規化してから SMS を 1通送信する。例外は外に出さない。
        """
        if self._sms_client is None:
            logger.warning("SMS provider is not configured; dropping SMS.")
            return DispatchResult(
                channel=NotificationChannel.SMS,
                success=False,
                error="SMS provider is not configured.",
            )

        to_number = normalize_phone_number(to_raw_number, self._default_country_code)

        try:
            receipt = self._sms_client.send(to_number, body)
        except SmsProviderError as exc:
            logger.error(
                "Failed to send SMS to %s: %s (provider code=%s)", to_number, exc, exc.code
            )
            if exc.more_info:
                logger.error("More info: %s", exc.more_info)
            return DispatchResult(
                channel=NotificationChannel.SMS,
                success=False,
                error=str(exc),
                error_code=exc.code,
            )
        except Exception as exc:  # noqa: BLE001 - 送信失敗はスイープを止めない
            logger.error("Failed to send SMS to %s: %s", to_number, exc)
            return DispatchResult(
                channel=NotificationChannel.SMS,
                success=False,
                error=str(exc),
            )

        logger.info("SMS sent to %s, SID: %s", to_number, receipt.sid)
        return DispatchResult(
            channel=NotificationChannel.SMS,
            success=True,
            provider_id=receipt.sid,
        )

    def send_email(self, to_address: str, subject: str, body: str) -> DispatchResult:
        """
        プレーンテキスト本文を HTML 化して Email を 1通送信する。例外は外に出さない。
        """
        try:
            self._email_client.send(to_address, subject, render_email_html(body))
        except Exception as exc:  # noqa: BLE001 - 送信失敗はスイープを止めない
            logger.error("Failed to send email to %s: %s", to_address, exc)
            return DispatchResult(
                channel=NotificationChannel.EMAIL,
                success=False,
                error=str(exc),
            )

        logger.info("Email sent to %s (%s)", to_address, subject)
        return DispatchResult(channel=NotificationChannel.EMAIL, success=True)


class NotificationTestError(ValueError):
    """テスト通知の前提条件を満たさない・送信に失敗した場合の例外。"""


def send_test_notification(
    user: User,
    channel: NotificationChannel,
    dispatcher: NotificationDispatcher,
) -> DispatchResult:
    """
    ユーザーの設定画面から呼ばれるテスト通知。

    連絡先が無い・設定で無効・SMS プロバイダ未構成・送信失敗の場合は NotificationTestError を投げる。
    """
    settings = user.notification_settings or NotificationSettings()

    if channel == NotificationChannel.SMS:
        if not user.has_mobile:
            raise NotificationTestError(
                "Mobile number not found. Please add your mobile number in your profile."
            )
        if not settings.sms_notifications:
            raise NotificationTestError("SMS notifications are not enabled in your settings.")
        if not dispatcher.sms_configured:
            raise NotificationTestError(
                "SMS notifications are currently unavailable: SMS provider is not configured."
            )
        result = dispatcher.send_sms(user.mobile, TEST_SMS_BODY)
        if not result.success:
            raise NotificationTestError(f"Failed to send SMS notification: {result.error}")
        return result

    if not user.has_email:
        raise NotificationTestError("Email not found. Please add your email in your profile.")
    if not settings.email_notifications:
        raise NotificationTestError("Email notifications are not enabled in your settings.")
    result = dispatcher.send_email(user.email, TEST_EMAIL_SUBJECT, TEST_EMAIL_BODY)
    if not result.success:
        raise NotificationTestError("Failed to send email notification.")
    return result
