# backend/foodwise/notifications/composer.py

"""
期限間近アイテムのダイジェスト本文を組み立てる。

本文はチャンネル非依存のプレーンテキスト。
HTML 化など、チャンネル固有の整形は Dispatcher 側の責務とする。
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional, Sequence

from foodwise.inventory.expiry import days_until_expiry
from foodwise.inventory.schemas import Item

APP_NAME = "FoodWise"

# ロケールに依存させないため月名は固定で持つ
_MONTH_ABBR = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def format_short_date(value: datetime) -> str:
    """
    "Jan 5" 形式の短い日付文字列を返す。

    日付は残り日数の計算と同じく UTC の暦日で表示する（naive な値は UTC とみなす）。
    """
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return f"{_MONTH_ABBR[value.month - 1]} {value.day}"


def compose_expiry_digest(
    user_name: str,
    items: Sequence[Item],
    *,
    now: Optional[datetime] = None,
) -> Optional[str]:
    """
    期限間近アイテムの一覧から通知本文を生成する。

    items が空の場合は None を返す（呼び出し側は「送るものなし」として扱う）。
    """
    if not items:
        return None

    lines: List[str] = [
        f"Hi {user_name}, {APP_NAME} reminder: "
        f"You have {len(items)} item(s) expiring soon:",
        "",
    ]

    for index, item in enumerate(items, start=1):
        days_left = days_until_expiry(item.expiry_date, now)
        lines.append(
            f"{index}. {item.name} - {days_left} day(s) left "
            f"({format_short_date(item.expiry_date)})"
        )

    lines.append("")
    lines.append(f"Open your {APP_NAME} app to see more details.")
    return "\n".join(lines)


def compose_expiry_subject(item_count: int) -> str:
    return f"{APP_NAME}: {item_count} item(s) expiring soon"
