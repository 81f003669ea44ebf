# backend/foodwise/notifications/policy.py

"""
ユーザーごとの通知ポリシー（有効チャンネル・リマインド日数）の解決。

NotificationSettings のデフォルト値と保存済みの上書きを組み合わせ、
1つの NotificationPolicy に確定させる。入力だけから決まる純粋関数。
"""

from __future__ import annotations

from dataclasses import dataclass

from foodwise.config import DEFAULT_REMINDER_DAYS
from foodwise.users.schemas import NotificationSettings, User


@dataclass(frozen=True)
class NotificationPolicy:
    """1ユーザー・1スイープ分の通知判断。"""

    sms_enabled: bool
    email_enabled: bool
    reminder_days: int
    expiry_enabled: bool = True
    expired_alert_enabled: bool = True
    low_stock_enabled: bool = True

    @property
    def has_channel(self) -> bool:
        return self.sms_enabled or self.email_enabled

    @property
    def should_send_expiry_alerts(self) -> bool:
        """
        期限通知スイープの対象か。

        expiry_notifications が無効なら、チャンネル設定に関係なく両チャンネルとも送らない。
        """
        return self.expiry_enabled and self.has_channel


def resolve_policy(
    user: User,
    *,
    default_reminder_days: int = DEFAULT_REMINDER_DAYS,
) -> NotificationPolicy:
    """
    User から NotificationPolicy を解決する。

    - sms_enabled   = sms_notifications かつ mobile が空でない
    - email_enabled = email_notifications かつ email が空でない
    - reminder_days = 正の整数ならその値、それ以外は default_reminder_days
    """
    settings = user.notification_settings or NotificationSettings()

    reminder_days = settings.reminder_days
    if not isinstance(reminder_days, int) or reminder_days <= 0:
        reminder_days = default_reminder_days

    return NotificationPolicy(
        sms_enabled=bool(settings.sms_notifications and user.has_mobile),
        email_enabled=bool(settings.email_notifications and user.has_email),
        reminder_days=reminder_days,
        expiry_enabled=settings.expiry_notifications,
        expired_alert_enabled=settings.expired_items_alert,
        low_stock_enabled=settings.low_stock_notifications,
    )
