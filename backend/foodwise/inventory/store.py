# backend/foodwise/inventory/store.py

"""
Inventory Store（永続化レイヤ）のインターフェースと最小実装。

本番の永続化先は外部コラボレータ扱い。
ここでは Protocol と、テスト・単一プロセス運用向けのインメモリ実装のみを提供する。
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Protocol

from .schemas import Item


@dataclass(frozen=True)
class ItemFilter:
    """
    find_items_by_user 用の絞り込み条件。

    - expiry_after: expiry_date > expiry_after（下限は含まない）
    - expiry_until: expiry_date <= expiry_until（上限は含む）
    - expiry_before: expiry_date < expiry_before

    いずれかの期限条件が指定された場合、結果は expiry_date の昇順で返す。
    """

    expiry_after: Optional[datetime] = None
    expiry_until: Optional[datetime] = None
    expiry_before: Optional[datetime] = None

    @property
    def has_expiry_range(self) -> bool:
        return any(
            bound is not None
            for bound in (self.expiry_after, self.expiry_until, self.expiry_before)
        )

    def matches(self, item: Item) -> bool:
        expiry = item.expiry_date
        if self.expiry_after is not None and not expiry > self.expiry_after:
            return False
        if self.expiry_until is not None and not expiry <= self.expiry_until:
            return False
        if self.expiry_before is not None and not expiry < self.expiry_before:
            return False
        return True


class InventoryStore(Protocol):
    """
    Inventory Store の最小インターフェース。
    """

    def find_items_by_user(
        self,
        user_id: str,
        item_filter: Optional[ItemFilter] = None,
    ) -> List[Item]:  # pragma: no cover - Protocol
        ...

    def add_item(self, item: Item) -> Item:  # pragma: no cover - Protocol
        ...


class InMemoryInventoryStore:
    """
    dict ベースのインメモリ Inventory Store。

    スレッドセーフ（スケジューラのバックグラウンドスレッドと API から同時に触られる）。
    """

    def __init__(self) -> None:
        self._items: Dict[str, Item] = {}
        self._lock = threading.Lock()

    def add_item(self, item: Item) -> Item:
        with self._lock:
            self._items[item.id] = item
        return item

    def get_item(self, item_id: str) -> Optional[Item]:
        with self._lock:
            return self._items.get(item_id)

    def find_items_by_user(
        self,
        user_id: str,
        item_filter: Optional[ItemFilter] = None,
    ) -> List[Item]:
        with self._lock:
            items = [item for item in self._items.values() if item.owner_id == user_id]

        if item_filter is not None:
            items = [item for item in items if item_filter.matches(item)]
            if item_filter.has_expiry_range:
                items.sort(key=lambda item: item.expiry_date)

        return items
