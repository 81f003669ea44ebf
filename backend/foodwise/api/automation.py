# backend/foodwise/api/automation.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from pydantic import BaseModel

from foodwise.automation.scheduler import ExpiryNotificationScheduler
from foodwise.automation.schemas import SchedulerStatus
from foodwise.automation.state import get_scheduler
from foodwise.config import MAX_SWEEP_WINDOW_DAYS

router = APIRouter(prefix="/automation", tags=["automation"])


class SweepAccepted(BaseModel):
    accepted: bool
    window_days: Optional[int] = None


@router.get(
    "/status",
    response_model=SchedulerStatus,
    summary="期限通知スケジューラの状態",
)
def get_scheduler_status(
    scheduler: ExpiryNotificationScheduler = Depends(get_scheduler),
) -> SchedulerStatus:
    """
    稼働状況・次回実行時刻・直近スイープのサマリを返す。
    """
    try:
        return scheduler.status()
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Failed to get scheduler status: {e}") from e


@router.post(
    "/sweep",
    response_model=SweepAccepted,
    status_code=status.HTTP_202_ACCEPTED,
    summary="期限通知スイープを手動で起動",
)
def trigger_sweep(
    background_tasks: BackgroundTasks,
    days: Optional[int] = Query(
        None,
        ge=1,
        le=MAX_SWEEP_WINDOW_DAYS,
        description="リマインド日数を全ユーザー共通で上書きする場合に指定",
    ),
    scheduler: ExpiryNotificationScheduler = Depends(get_scheduler),
) -> SweepAccepted:
    """
    スイープはリクエスト処理の外（バックグラウンドタスク）で実行する。
    既に実行中の場合、そのスイープはスキップされ status の sweeps_skipped に計上される。
    """
    background_tasks.add_task(scheduler.run_once, window_days=days)
    return SweepAccepted(accepted=True, window_days=days)
