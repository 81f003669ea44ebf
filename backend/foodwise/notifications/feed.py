# backend/foodwise/notifications/feed.py

"""
アプリ内通知フィード。

SMS / Email のプッシュ通知とは別機能として扱い、状態も分ける:
- フィードの中身は読み出しのたびに在庫から計算し直す
- 既読状態だけを ReadStateStore に保持する

既読は「既読にした時点の対象アイテム集合」を覚えておき、
集合が変わったら（新しいアイテムが期限切れになった等）再び未読に戻る。
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple

from foodwise.config import DEFAULT_REMINDER_DAYS
from foodwise.inventory.expiry import ExpiryQuery, normalize_now
from foodwise.inventory.schemas import Item
from foodwise.users.schemas import User

from .policy import resolve_policy
from .schemas import FeedKind, FeedNotification, FeedSeverity


class ReadStateStore:
    """
    (user_id, kind) → 既読時点のアイテム ID 集合 を保持するインメモリストア。
    """

    def __init__(self) -> None:
        self._read: Dict[Tuple[str, FeedKind], FrozenSet[str]] = {}
        self._lock = threading.Lock()

    def mark_read(self, user_id: str, kind: FeedKind, item_ids: Iterable[str]) -> None:
        with self._lock:
            self._read[(user_id, kind)] = frozenset(item_ids)

    def is_read(self, user_id: str, kind: FeedKind, item_ids: Iterable[str]) -> bool:
        with self._lock:
            marked = self._read.get((user_id, kind))
        return marked is not None and marked == frozenset(item_ids)


def _plural(count: int) -> str:
    return "" if count == 1 else "s"


class NotificationFeedService:
    """
    在庫とユーザー設定からフィードを組み立て、既読操作を受け付けるサービス。
    """

    def __init__(
        self,
        expiry_query: ExpiryQuery,
        read_state: ReadStateStore,
        *,
        default_reminder_days: int = DEFAULT_REMINDER_DAYS,
    ) -> None:
        self._expiry_query = expiry_query
        self._read_state = read_state
        self._default_reminder_days = default_reminder_days

    def _collect(
        self,
        user: User,
        now: datetime,
    ) -> List[Tuple[FeedKind, List[Item], int]]:
        policy = resolve_policy(user, default_reminder_days=self._default_reminder_days)
        groups: List[Tuple[FeedKind, List[Item], int]] = []

        if policy.expired_alert_enabled:
            expired = self._expiry_query.find_expired_items(user.id, now=now)
            groups.append((FeedKind.EXPIRED, expired, policy.reminder_days))

        if policy.expiry_enabled:
            expiring = self._expiry_query.find_expiring_items(
                user.id, policy.reminder_days, now=now
            )
            groups.append((FeedKind.EXPIRING_SOON, expiring, policy.reminder_days))

        if policy.low_stock_enabled:
            low_stock = self._expiry_query.find_low_stock_items(user.id)
            groups.append((FeedKind.LOW_STOCK, low_stock, policy.reminder_days))

        return [(kind, items, days) for kind, items, days in groups if items]

    def build_feed(
        self,
        user: User,
        *,
        now: Optional[datetime] = None,
    ) -> List[FeedNotification]:
        """
        expired / expiring-soon / low-stock の順で、該当アイテムがあるものだけを返す。
        """
        now_norm = normalize_now(now)
        notifications: List[FeedNotification] = []

        for kind, items, reminder_days in self._collect(user, now_norm):
            count = len(items)
            if kind == FeedKind.EXPIRED:
                title = "Items Expired"
                message = f"You have {count} expired item{_plural(count)} in your inventory"
                severity = FeedSeverity.ERROR
            elif kind == FeedKind.EXPIRING_SOON:
                title = "Items Expiring Soon"
                message = (
                    f"You have {count} item{_plural(count)} expiring in the next "
                    f"{reminder_days} days"
                )
                severity = FeedSeverity.WARNING
            else:
                title = "Low Stock Items"
                message = f"You have {count} item{_plural(count)} with low stock"
                severity = FeedSeverity.INFO

            notifications.append(
                FeedNotification(
                    id=kind,
                    title=title,
                    message=message,
                    type=severity,
                    time=now_norm,
                    read=self._read_state.is_read(user.id, kind, (i.id for i in items)),
                    items=items,
                )
            )

        return notifications

    def mark_as_read(
        self,
        user: User,
        kind: FeedKind,
        *,
        now: Optional[datetime] = None,
    ) -> None:
        """
        指定種別の通知を、現在の対象アイテム集合で既読にする。
        """
        now_norm = normalize_now(now)
        for group_kind, items, _ in self._collect(user, now_norm):
            if group_kind == kind:
                self._read_state.mark_read(user.id, kind, (i.id for i in items))
                return
        # 対象が無い種別は空集合で既読にしておく
        self._read_state.mark_read(user.id, kind, ())

    def mark_all_as_read(self, user: User, *, now: Optional[datetime] = None) -> None:
        now_norm = normalize_now(now)
        for kind, items, _ in self._collect(user, now_norm):
            self._read_state.mark_read(user.id, kind, (i.id for i in items))
