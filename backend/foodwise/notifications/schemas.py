# backend/foodwise/notifications/schemas.py

"""
通知まわりの共通スキーマ定義。

- プッシュ通知（SMS / Email）の送信結果: DispatchResult
- アプリ内通知フィード: FeedNotification

※ DispatchResult には認証情報などの機密情報を含めないこと。
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from foodwise.inventory.schemas import Item


class NotificationChannel(str, Enum):
    """
    外部通知のチャンネル種別。
    """

    SMS = "sms"
    EMAIL = "email"


class DispatchResult(BaseModel):
    """
    1回の送信結果。

    Dispatcher は例外を投げず、失敗も success=False のこのモデルで返す。
    """

    channel: NotificationChannel = Field(..., description="送信に使ったチャンネル")
    success: bool = Field(..., description="送信に成功したか")
    provider_id: Optional[str] = Field(
        None,
        description="プロバイダ側のメッセージ ID（Twilio の SID など）",
    )
    error: Optional[str] = Field(None, description="失敗時のエラーメッセージ")
    error_code: Optional[int] = Field(
        None,
        description="プロバイダのエラーコード（例: Twilio 21211 = 無効な番号）",
    )


class FeedKind(str, Enum):
    EXPIRED = "expired"
    EXPIRING_SOON = "expiring-soon"
    LOW_STOCK = "low-stock"


class FeedSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class FeedNotification(BaseModel):
    """
    アプリ内通知フィードの 1件。

    読み出しのたびに在庫から計算し直すため、永続化はしない。
    read だけは ReadStateStore の内容から決まる。
    """

    id: FeedKind = Field(..., description="通知 ID（種別と同じ値）")
    title: str
    message: str
    type: FeedSeverity = Field(..., description="表示上の重要度")
    time: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    read: bool = False
    items: List[Item] = Field(default_factory=list)


class FeedResponse(BaseModel):
    notifications: List[FeedNotification]
    unread_count: int


class MarkReadResponse(BaseModel):
    message: str
    id: Optional[FeedKind] = None


class SendTestNotificationRequest(BaseModel):
    channel: NotificationChannel = Field(..., description="テスト送信するチャンネル")


class SendTestNotificationResponse(BaseModel):
    success: bool
    message: str
    provider_id: Optional[str] = None
