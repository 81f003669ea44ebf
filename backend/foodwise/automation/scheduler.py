# backend/foodwise/automation/scheduler.py

"""
期限通知スイープのスケジューラ。

- 起動時: ウォームアップ（ストレージ接続の安定待ち）後に 1回実行
- 以降: 一定間隔（デフォルト 3時間）ごとに実行
- 前回のスイープが終わっていない場合は、そのティックをスキップ
- stop() で新規ティックの受付を止め、実行中のスイープは完了を待つ

APScheduler の BackgroundScheduler を使うため、スイープは API のリクエスト処理とは
別スレッドで動く。
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler

from foodwise.config import DEFAULT_STARTUP_DELAY_SECONDS, DEFAULT_SWEEP_INTERVAL_HOURS

from .schemas import SchedulerStatus, SweepSummary
from .sweep_service import ExpirySweepService

logger = logging.getLogger(__name__)

SWEEP_JOB_ID = "expiry-notification-sweep"

SchedulerFactory = Callable[[], BackgroundScheduler]


def _default_scheduler_factory() -> BackgroundScheduler:
    return BackgroundScheduler(timezone=timezone.utc)


class ExpiryNotificationScheduler:
    """
    ExpirySweepService を定期実行するスケジューラ。

    状態遷移: Idle → Running(sweep) → Idle
    """

    def __init__(
        self,
        sweep_service: ExpirySweepService,
        *,
        interval_hours: int = DEFAULT_SWEEP_INTERVAL_HOURS,
        startup_delay_seconds: int = DEFAULT_STARTUP_DELAY_SECONDS,
        scheduler_factory: SchedulerFactory = _default_scheduler_factory,
    ) -> None:
        self._sweep_service = sweep_service
        self._interval_hours = int(interval_hours)
        self._startup_delay_seconds = int(startup_delay_seconds)
        self._scheduler_factory = scheduler_factory

        self._scheduler: Optional[BackgroundScheduler] = None
        self._sweep_lock = threading.Lock()
        self._state_lock = threading.Lock()

        self._sweeps_completed = 0
        self._sweeps_skipped = 0
        self._sweeps_errored = 0
        self._last_summary: Optional[SweepSummary] = None

    # ------------------------------------------------------------------
    # ライフサイクル
    # ------------------------------------------------------------------
    @property
    def is_running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> None:
        """
        スケジューラを開始する。既に動いている場合は何もしない。
        """
        if self.is_running:
            return

        first_run = datetime.now(timezone.utc) + timedelta(seconds=self._startup_delay_seconds)

        scheduler = self._scheduler_factory()
        scheduler.add_job(
            self.run_once,
            "interval",
            hours=self._interval_hours,
            next_run_time=first_run,
            id=SWEEP_JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        scheduler.start()
        self._scheduler = scheduler

        logger.info(
            "Expiry notification scheduler started (interval=%dh, first run at %s)",
            self._interval_hours,
            first_run.isoformat(),
        )

    def stop(self, *, wait: bool = True) -> None:
        """
        スケジューラを停止する。wait=True の場合は実行中のスイープの完了を待つ。
        """
        scheduler = self._scheduler
        if scheduler is None:
            return

        self._scheduler = None
        if scheduler.running:
            scheduler.shutdown(wait=wait)
        logger.info("Expiry notification scheduler stopped")

    # ------------------------------------------------------------------
    # 実行
    # ------------------------------------------------------------------
    def run_once(
        self,
        *,
        now: Optional[datetime] = None,
        window_days: Optional[int] = None,
    ) -> Optional[SweepSummary]:
        """
        スイープを 1回実行する。タイマー・手動実行の両方から呼ばれる。

        - 別のスイープが実行中なら何もせず None を返す
        - スイープ全体が例外で落ちても、ログに残して None を返す（プロセスは落とさない）
        """
        if not self._sweep_lock.acquire(blocking=False):
            logger.warning("Previous expiry sweep is still running; skipping this tick")
            with self._state_lock:
                self._sweeps_skipped += 1
            return None

        try:
            summary = self._sweep_service.run_sweep(now=now, window_days=window_days)
        except Exception:  # noqa: BLE001 - スケジューラはプロセスを落とさない
            logger.exception("Expiry sweep aborted")
            with self._state_lock:
                self._sweeps_errored += 1
            return None
        finally:
            self._sweep_lock.release()

        with self._state_lock:
            self._sweeps_completed += 1
            self._last_summary = summary
        return summary

    def status(self) -> SchedulerStatus:
        next_run_time: Optional[datetime] = None
        scheduler = self._scheduler
        if scheduler is not None:
            job = scheduler.get_job(SWEEP_JOB_ID)
            if job is not None:
                next_run_time = job.next_run_time

        with self._state_lock:
            return SchedulerStatus(
                running=self.is_running,
                interval_hours=self._interval_hours,
                next_run_time=next_run_time,
                sweep_in_progress=self._sweep_lock.locked(),
                sweeps_completed=self._sweeps_completed,
                sweeps_skipped=self._sweeps_skipped,
                sweeps_errored=self._sweeps_errored,
                last_summary=self._last_summary,
            )
