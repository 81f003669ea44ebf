# backend/foodwise/automation/schemas.py

"""
期限通知スイープとスケジューラの共通スキーマ定義。
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from foodwise.notifications.schemas import DispatchResult


class UserSweepStatus(str, Enum):
    """
    スイープにおける 1ユーザー分の処理結果。

    - NOTIFIED: 少なくとも 1チャンネルで送信成功
    - NOTHING_TO_SEND: 期限間近アイテムなし
    - SKIPPED: ポリシーにより対象外（期限通知オフ / 有効チャンネルなし）
    - FAILED: 処理中に例外、または試行した全チャンネルで送信失敗
    """

    NOTIFIED = "notified"
    NOTHING_TO_SEND = "nothing_to_send"
    SKIPPED = "skipped"
    FAILED = "failed"


class UserSweepResult(BaseModel):
    user_id: str = Field(..., description="対象ユーザー ID")
    status: UserSweepStatus
    item_count: int = Field(0, ge=0, description="期限間近アイテム数")
    reminder_days: Optional[int] = Field(None, description="適用したリマインド日数")
    dispatches: List[DispatchResult] = Field(default_factory=list)
    error: Optional[str] = Field(None, description="FAILED 時のエラー内容")


class SweepSummary(BaseModel):
    """
    スイープ 1回分のサマリ。
    """

    started_at: datetime
    finished_at: datetime
    users_checked: int = 0
    users_notified: int = 0
    users_skipped: int = 0
    users_without_items: int = 0
    users_failed: int = 0
    notifications_sent: int = Field(0, description="成功した送信（チャンネル単位）の件数")
    notifications_failed: int = Field(0, description="失敗した送信（チャンネル単位）の件数")
    results: List[UserSweepResult] = Field(default_factory=list)


class SchedulerStatus(BaseModel):
    running: bool
    interval_hours: int
    next_run_time: Optional[datetime] = None
    sweep_in_progress: bool = False
    sweeps_completed: int = 0
    sweeps_skipped: int = 0
    sweeps_errored: int = 0
    last_summary: Optional[SweepSummary] = None
