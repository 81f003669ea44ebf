# backend/foodwise/automation/state.py

"""
アプリ全体で共有するストア・サービスの状態管理モジュール。

- User / Inventory / 既読状態のインメモリストア
- 起動時に設定から組み立てる NotificationDispatcher
- 期限通知スケジューラ

FastAPI の Depends から使い、テスト時は reset_state() で作り直す。
"""

from __future__ import annotations

from typing import Optional

from foodwise.config import get_foodwise_settings
from foodwise.inventory.expiry import ExpiryQuery
from foodwise.inventory.store import InMemoryInventoryStore
from foodwise.notifications.dispatcher import NotificationDispatcher
from foodwise.notifications.factory import build_dispatcher
from foodwise.notifications.feed import NotificationFeedService, ReadStateStore
from foodwise.users.store import InMemoryUserStore, PreferenceStore

from .scheduler import ExpiryNotificationScheduler
from .sweep_service import ExpirySweepService

_user_store: Optional[InMemoryUserStore] = None
_preference_store: Optional[PreferenceStore] = None
_inventory_store: Optional[InMemoryInventoryStore] = None
_read_state_store: Optional[ReadStateStore] = None
_dispatcher: Optional[NotificationDispatcher] = None
_scheduler: Optional[ExpiryNotificationScheduler] = None


def get_user_store() -> InMemoryUserStore:
    global _user_store
    if _user_store is None:
        _user_store = InMemoryUserStore()
    return _user_store


def get_preference_store() -> PreferenceStore:
    global _preference_store
    if _preference_store is None:
        _preference_store = PreferenceStore(get_user_store())
    return _preference_store


def get_inventory_store() -> InMemoryInventoryStore:
    global _inventory_store
    if _inventory_store is None:
        _inventory_store = InMemoryInventoryStore()
    return _inventory_store


def get_read_state_store() -> ReadStateStore:
    global _read_state_store
    if _read_state_store is None:
        _read_state_store = ReadStateStore()
    return _read_state_store


def get_dispatcher() -> NotificationDispatcher:
    """
    共有の NotificationDispatcher を返す。初回呼び出し時に設定から組み立てる。
    """
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = build_dispatcher()
    return _dispatcher


def get_feed_service() -> NotificationFeedService:
    settings = get_foodwise_settings()
    return NotificationFeedService(
        ExpiryQuery(get_inventory_store()),
        get_read_state_store(),
        default_reminder_days=settings.default_reminder_days,
    )


def get_scheduler() -> ExpiryNotificationScheduler:
    """
    共有の ExpiryNotificationScheduler を返す（開始はしない）。
    """
    global _scheduler
    if _scheduler is None:
        settings = get_foodwise_settings()
        sweep_service = ExpirySweepService(
            get_user_store(),
            get_inventory_store(),
            get_dispatcher(),
            default_reminder_days=settings.default_reminder_days,
        )
        _scheduler = ExpiryNotificationScheduler(
            sweep_service,
            interval_hours=settings.sweep_interval_hours,
            startup_delay_seconds=settings.startup_delay_seconds,
        )
    return _scheduler


def reset_state() -> None:
    """
    テスト用に共有状態をリセットする。動作中のスケジューラは停止する。
    """
    global _user_store, _preference_store, _inventory_store, _read_state_store
    global _dispatcher, _scheduler
    if _scheduler is not None:
        _scheduler.stop(wait=False)
    _user_store = None
    _preference_store = None
    _inventory_store = None
    _read_state_store = None
    _dispatcher = None
    _scheduler = None
