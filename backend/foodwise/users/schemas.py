# backend/foodwise/users/schemas.py

"""
ユーザーと通知設定のスキーマ定義。

通知設定は User に埋め込まれた NotificationSettings を唯一の正とする。
旧 NotificationPreference レコードの項目は以下のように移行している:

- expiringItemsAlert → expiry_notifications
- expiredItemsAlert  → expired_items_alert
- lowStockAlert      → low_stock_notifications
- dailyDigest        → daily_digest
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from foodwise.config import MAX_REMINDER_DAYS


class NotificationSettings(BaseModel):
    """
    ユーザーごとの通知設定。

    デフォルト値はここ 1か所でのみ定義する（利用側でフォールバックを散らさない）。
    sms_notifications=True でも mobile が空ならチャンネルは「利用不可」として扱う。
    """

    email_notifications: bool = Field(True, description="メール通知を受け取るか")
    sms_notifications: bool = Field(False, description="SMS 通知を受け取るか")
    expiry_notifications: bool = Field(
        True,
        description="期限間近アラートを受け取るか。False の場合は期限通知スイープ全体から除外される。",
    )
    expired_items_alert: bool = Field(True, description="アプリ内フィードで期限切れを表示するか")
    low_stock_notifications: bool = Field(True, description="在庫僅少アラートを受け取るか")
    daily_digest: bool = Field(False, description="日次ダイジェストを希望するか")
    reminder_days: int = Field(
        3,
        ge=0,
        le=MAX_REMINDER_DAYS,
        description="何日前から『期限間近』とみなすか（0 の場合はデフォルト値を使用、上限 365）",
    )


class NotificationSettingsUpdate(BaseModel):
    """
    通知設定の部分更新リクエスト。指定されたフィールドのみ反映する。
    """

    email_notifications: Optional[bool] = None
    sms_notifications: Optional[bool] = None
    expiry_notifications: Optional[bool] = None
    expired_items_alert: Optional[bool] = None
    low_stock_notifications: Optional[bool] = None
    daily_digest: Optional[bool] = None
    reminder_days: Optional[int] = Field(None, ge=0, le=MAX_REMINDER_DAYS)


class UserCreate(BaseModel):
    name: str = Field(..., min_length=1, description="表示名")
    email: Optional[str] = Field(None, description="メールアドレス")
    mobile: Optional[str] = Field(None, description="携帯電話番号（形式は問わない）")


class User(BaseModel):
    """
    FoodWise のユーザー。

    notification_settings は初回アクセス時に Preference Store が作成する。
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, description="ユーザー ID")
    name: str
    email: Optional[str] = None
    mobile: Optional[str] = None
    notification_settings: Optional[NotificationSettings] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def has_mobile(self) -> bool:
        return bool(self.mobile and self.mobile.strip())

    @property
    def has_email(self) -> bool:
        return bool(self.email and self.email.strip())
