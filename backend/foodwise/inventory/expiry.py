# backend/foodwise/inventory/expiry.py

"""
期限切れ / 期限間近 / 在庫僅少アイテムの抽出ロジック。

- expired: expiry_date < now
- expiring soon: now < expiry_date <= now + window_days
- low stock: quantity <= low_stock_threshold（両方が設定されている場合のみ）

expired と expiring soon は重複しない（期限切れは expiring soon に含めない）。
このモジュールは Inventory Store を読むだけで副作用は持たない。
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from foodwise.config import MAX_REMINDER_DAYS

from .schemas import Item
from .store import InventoryStore, ItemFilter

_ONE_DAY_SECONDS = 24 * 60 * 60


def normalize_now(now: Optional[datetime]) -> datetime:
    """
    naive な datetime が渡された場合でも UTC として扱うヘルパー。
    """
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def days_until_expiry(expiry_date: datetime, now: Optional[datetime] = None) -> int:
    """
    残り日数を「差分の切り上げ日数」で返す。

    例: 残り 1.2 日 → 2、残り 0.5 日 → 1、期限切れ（負の差分）→ 0 以下。
    """
    now_norm = normalize_now(now)
    delta = expiry_date - now_norm
    return math.ceil(delta.total_seconds() / _ONE_DAY_SECONDS)


class ExpiryQuery:
    """
    Inventory Store に対する期限関連の読み取りクエリ。
    """

    def __init__(self, store: InventoryStore) -> None:
        self._store = store

    def find_expiring_items(
        self,
        user_id: str,
        window_days: int,
        *,
        now: Optional[datetime] = None,
    ) -> List[Item]:
        """
        now < expiry_date <= now + window_days のアイテムを期限の近い順に返す。

        window_days が 0 以下の場合は常に空。MAX_REMINDER_DAYS を超える値は上限に丸める。
        """
        if window_days <= 0:
            return []
        window_days = min(window_days, MAX_REMINDER_DAYS)

        now_norm = normalize_now(now)
        item_filter = ItemFilter(
            expiry_after=now_norm,
            expiry_until=now_norm + timedelta(days=window_days),
        )
        return self._store.find_items_by_user(user_id, item_filter)

    def find_expired_items(
        self,
        user_id: str,
        *,
        now: Optional[datetime] = None,
    ) -> List[Item]:
        """
        expiry_date < now のアイテムを期限の古い順に返す。
        """
        now_norm = normalize_now(now)
        return self._store.find_items_by_user(user_id, ItemFilter(expiry_before=now_norm))

    def find_low_stock_items(self, user_id: str) -> List[Item]:
        """
        quantity <= low_stock_threshold のアイテムを返す。順序は保証しない。
        """
        return [
            item
            for item in self._store.find_items_by_user(user_id)
            if item.quantity is not None
            and item.low_stock_threshold is not None
            and item.quantity <= item.low_stock_threshold
        ]
