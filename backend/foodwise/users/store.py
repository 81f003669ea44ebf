# backend/foodwise/users/store.py

"""
User Store / Preference Store。

本番の永続化先は外部コラボレータ扱いのため、Protocol とインメモリ実装を置く。
Preference Store は User Store 上の notification_settings を読み書きする薄い層。
"""

from __future__ import annotations

import threading
from typing import Dict, List, Optional, Protocol

from .schemas import NotificationSettings, NotificationSettingsUpdate, User


class UserNotFoundError(LookupError):
    """指定 ID のユーザーが存在しない場合の例外。"""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"User '{user_id}' not found.")
        self.user_id = user_id


class UserStore(Protocol):
    def get_user(self, user_id: str) -> Optional[User]:  # pragma: no cover - Protocol
        ...

    def save_user(self, user: User) -> User:  # pragma: no cover - Protocol
        ...

    def list_contactable_users(self) -> List[User]:  # pragma: no cover - Protocol
        ...


class InMemoryUserStore:
    """
    dict ベースのインメモリ User Store。
    """

    def __init__(self) -> None:
        self._users: Dict[str, User] = {}
        self._lock = threading.Lock()

    def get_user(self, user_id: str) -> Optional[User]:
        with self._lock:
            return self._users.get(user_id)

    def save_user(self, user: User) -> User:
        with self._lock:
            self._users[user.id] = user
        return user

    def list_users(self) -> List[User]:
        with self._lock:
            return list(self._users.values())

    def list_contactable_users(self) -> List[User]:
        """
        mobile または email が空でないユーザー（スイープの対象候補）を返す。
        """
        return [user for user in self.list_users() if user.has_mobile or user.has_email]


class PreferenceStore:
    """
    ユーザーの通知設定（NotificationSettings）を扱うストア。

    - get_or_create: 未作成ならデフォルト値で作成して保存する
    - update: 指定されたフィールドのみを反映する

    読み出しから保存までをロックで囲むため、同時更新でも変更は失われない。
    プロセス内では 1インスタンスを共有すること（state.get_preference_store）。
    """

    def __init__(self, users: UserStore) -> None:
        self._users = users
        self._lock = threading.Lock()

    def _require_user(self, user_id: str) -> User:
        user = self._users.get_user(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def get_or_create(self, user_id: str) -> NotificationSettings:
        with self._lock:
            user = self._require_user(user_id)
            if user.notification_settings is None:
                settings = NotificationSettings()
                self._users.save_user(
                    user.model_copy(update={"notification_settings": settings})
                )
                return settings
            return user.notification_settings

    def update(
        self,
        user_id: str,
        partial: NotificationSettingsUpdate,
    ) -> NotificationSettings:
        changes = {
            key: value
            for key, value in partial.model_dump(exclude_unset=True).items()
            if value is not None
        }

        with self._lock:
            user = self._require_user(user_id)
            current = user.notification_settings or NotificationSettings()
            updated = current.model_copy(update=changes)
            self._users.save_user(user.model_copy(update={"notification_settings": updated}))
        return updated
