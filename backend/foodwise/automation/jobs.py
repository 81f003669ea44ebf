# backend/foodwise/automation/jobs.py
from __future__ import annotations

import json
import signal
import threading
from typing import Optional, Sequence

from foodwise.config import MAX_SWEEP_WINDOW_DAYS, get_foodwise_settings
from foodwise.utils.logging_config import configure_logging

from .schemas import SweepSummary
from .scheduler import ExpiryNotificationScheduler
from .state import get_scheduler


def run_sweep_once(
    *,
    scheduler: Optional[ExpiryNotificationScheduler] = None,
    window_days: Optional[int] = None,
) -> Optional[SweepSummary]:
    """
    スイープを同期的に 1回だけ実行する。

    window_days を指定すると全ユーザーのリマインド日数を上書きする（手動確認用）。
    """
    scheduler = scheduler or get_scheduler()
    return scheduler.run_once(window_days=window_days)


def serve_scheduler(
    *,
    scheduler: Optional[ExpiryNotificationScheduler] = None,
    stop_event: Optional[threading.Event] = None,
) -> None:
    """
    スケジューラをフォアグラウンドで動かし、stop_event（SIGINT/SIGTERM）で停止する。
    """
    scheduler = scheduler or get_scheduler()
    stop_event = stop_event or threading.Event()

    scheduler.start()
    try:
        stop_event.wait()
    finally:
        scheduler.stop(wait=True)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    簡易 CLI エントリーポイント。

    例:
        python -m foodwise.automation.jobs sweep
        python -m foodwise.automation.jobs sweep --days 5
        python -m foodwise.automation.jobs serve-scheduler
    """
    import argparse

    parser = argparse.ArgumentParser(description="FoodWise expiry notification jobs")
    subparsers = parser.add_subparsers(dest="job", required=True)

    sweep_parser = subparsers.add_parser("sweep", help="期限通知スイープを 1回実行する")
    sweep_parser.add_argument(
        "--days",
        type=int,
        default=None,
        help="リマインド日数を全ユーザー共通でこの値に上書きする",
    )
    subparsers.add_parser("serve-scheduler", help="スケジューラを常駐実行する")

    args = parser.parse_args(argv)
    if args.job == "sweep" and args.days is not None:
        if not 1 <= args.days <= MAX_SWEEP_WINDOW_DAYS:
            parser.error(f"--days must be between 1 and {MAX_SWEEP_WINDOW_DAYS}")

    configure_logging(get_foodwise_settings().log_level)

    if args.job == "sweep":
        summary = run_sweep_once(window_days=args.days)
        if summary is None:
            print("Sweep did not run (another sweep in progress or aborted).")
            return
        print(json.dumps(summary.model_dump(mode="json", exclude={"results"}), indent=2))
    elif args.job == "serve-scheduler":
        stop_event = threading.Event()

        def _handle_signal(signum, frame) -> None:  # noqa: ARG001
            stop_event.set()

        signal.signal(signal.SIGINT, _handle_signal)
        signal.signal(signal.SIGTERM, _handle_signal)
        serve_scheduler(stop_event=stop_event)


if __name__ == "__main__":
    main()
