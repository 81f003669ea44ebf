# backend/foodwise/automation/sweep_service.py

"""
期限通知スイープ本体。

1回のスイープで連絡先を持つ全ユーザーを順に処理する:
  ポリシー解決 → 期限間近アイテム取得 → 本文生成 → 有効チャンネルごとに送信

1ユーザーの失敗（ストレージ例外など）は、そのユーザーの中で捕捉して記録し、
残りのユーザーの処理は必ず続行する。
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from foodwise.config import DEFAULT_REMINDER_DAYS
from foodwise.inventory.expiry import ExpiryQuery, normalize_now
from foodwise.inventory.store import InventoryStore
from foodwise.notifications.composer import compose_expiry_digest, compose_expiry_subject
from foodwise.notifications.dispatcher import NotificationDispatcher
from foodwise.notifications.policy import resolve_policy
from foodwise.notifications.schemas import DispatchResult
from foodwise.users.schemas import User
from foodwise.users.store import UserStore

from .schemas import SweepSummary, UserSweepResult, UserSweepStatus

logger = logging.getLogger(__name__)


class ExpirySweepService:
    """
    全ユーザーに対する期限通知スイープを実行するサービス。

    ストア・Dispatcher はコンストラクタで注入する（テストではダミーを渡す）。
    """

    def __init__(
        self,
        users: UserStore,
        inventory: InventoryStore,
        dispatcher: NotificationDispatcher,
        *,
        default_reminder_days: int = DEFAULT_REMINDER_DAYS,
    ) -> None:
        self._users = users
        self._expiry_query = ExpiryQuery(inventory)
        self._dispatcher = dispatcher
        self._default_reminder_days = default_reminder_days

    # ------------------------------------------------------------------
    # 公開 API
    # ------------------------------------------------------------------
    def run_sweep(
        self,
        *,
        now: Optional[datetime] = None,
        window_days: Optional[int] = None,
    ) -> SweepSummary:
        """
        スイープを 1回実行してサマリを返す。

        :param window_days: 指定時は全ユーザーのリマインド日数をこの値で上書きする（手動確認用）
        """
        now_norm = normalize_now(now)
        started_at = datetime.now(timezone.utc)

        candidates = self._users.list_contactable_users()
        logger.info("Expiry sweep started: %d candidate user(s)", len(candidates))

        results: List[UserSweepResult] = []
        for user in candidates:
            try:
                result = self._process_user(user, now_norm, window_days)
            except Exception as exc:  # noqa: BLE001 - 1ユーザーの失敗でスイープを止めない
                logger.exception("Expiry sweep failed for user %s", user.id)
                result = UserSweepResult(
                    user_id=user.id,
                    status=UserSweepStatus.FAILED,
                    error=str(exc),
                )
            results.append(result)

        summary = self._summarize(results, started_at)
        logger.info(
            "Expiry sweep finished: checked=%d notified=%d skipped=%d failed=%d "
            "sent=%d send_failures=%d",
            summary.users_checked,
            summary.users_notified,
            summary.users_skipped,
            summary.users_failed,
            summary.notifications_sent,
            summary.notifications_failed,
        )
        return summary

    # ------------------------------------------------------------------
    # 内部処理
    # ------------------------------------------------------------------
    def _process_user(
        self,
        user: User,
        now: datetime,
        window_days: Optional[int],
    ) -> UserSweepResult:
        policy = resolve_policy(user, default_reminder_days=self._default_reminder_days)

        if not policy.should_send_expiry_alerts:
            logger.debug(
                "Skipping user %s (expiry_enabled=%s, sms=%s, email=%s)",
                user.id,
                policy.expiry_enabled,
                policy.sms_enabled,
                policy.email_enabled,
            )
            return UserSweepResult(user_id=user.id, status=UserSweepStatus.SKIPPED)

        reminder_days = window_days if window_days is not None else policy.reminder_days
        items = self._expiry_query.find_expiring_items(user.id, reminder_days, now=now)

        body = compose_expiry_digest(user.name, items, now=now)
        if body is None:
            logger.debug(
                "User %s has no items expiring in the next %d days", user.id, reminder_days
            )
            return UserSweepResult(
                user_id=user.id,
                status=UserSweepStatus.NOTHING_TO_SEND,
                reminder_days=reminder_days,
            )

        logger.info("User %s has %d item(s) expiring soon", user.id, len(items))

        # SMS → Email の順で送る
        dispatches: List[DispatchResult] = []
        if policy.sms_enabled:
            dispatches.append(self._dispatcher.send_sms(user.mobile, body))
        if policy.email_enabled:
            dispatches.append(
                self._dispatcher.send_email(user.email, compose_expiry_subject(len(items)), body)
            )

        if any(d.success for d in dispatches):
            status = UserSweepStatus.NOTIFIED
            error = None
        else:
            status = UserSweepStatus.FAILED
            error = "; ".join(d.error or "unknown error" for d in dispatches)

        return UserSweepResult(
            user_id=user.id,
            status=status,
            item_count=len(items),
            reminder_days=reminder_days,
            dispatches=dispatches,
            error=error,
        )

    @staticmethod
    def _summarize(results: List[UserSweepResult], started_at: datetime) -> SweepSummary:
        counts = {status: 0 for status in UserSweepStatus}
        sent = 0
        send_failures = 0

        for result in results:
            counts[result.status] += 1
            for dispatch in result.dispatches:
                if dispatch.success:
                    sent += 1
                else:
                    send_failures += 1

        return SweepSummary(
            started_at=started_at,
            finished_at=datetime.now(timezone.utc),
            users_checked=len(results),
            users_notified=counts[UserSweepStatus.NOTIFIED],
            users_skipped=counts[UserSweepStatus.SKIPPED],
            users_without_items=counts[UserSweepStatus.NOTHING_TO_SEND],
            users_failed=counts[UserSweepStatus.FAILED],
            notifications_sent=sent,
            notifications_failed=send_failures,
            results=results,
        )
