# backend/foodwise/config.py

"""
FoodWise コア（通知パイプライン）の設定値をまとめるモジュール。
"""

from dataclasses import dataclass
from functools import lru_cache

from foodwise.utils.config import get_env, get_env_bool, get_env_int

DEFAULT_COUNTRY_CODE = "91"
DEFAULT_SWEEP_INTERVAL_HOURS = 3
DEFAULT_REMINDER_DAYS = 3
DEFAULT_STARTUP_DELAY_SECONDS = 5

# リマインド日数の上限（通知設定）と、手動スイープでの上書き日数の上限
MAX_REMINDER_DAYS = 365
MAX_SWEEP_WINDOW_DAYS = 30


@dataclass(frozen=True)
class FoodWiseSettings:
    """期限通知パイプライン用の設定値コンテナ。"""

    default_country_code: str = DEFAULT_COUNTRY_CODE
    sweep_interval_hours: int = DEFAULT_SWEEP_INTERVAL_HOURS
    default_reminder_days: int = DEFAULT_REMINDER_DAYS
    startup_delay_seconds: int = DEFAULT_STARTUP_DELAY_SECONDS
    scheduler_enabled: bool = True
    log_level: str = "INFO"


@lru_cache()
def get_foodwise_settings() -> FoodWiseSettings:
    """
    環境変数から FoodWise 設定を読み込む。

    任意:
      - FOODWISE_DEFAULT_COUNTRY_CODE  (デフォルト: 91)
      - FOODWISE_SWEEP_INTERVAL_HOURS  (デフォルト: 3)
      - FOODWISE_DEFAULT_REMINDER_DAYS (デフォルト: 3)
      - FOODWISE_STARTUP_DELAY_SECONDS (デフォルト: 5)
      - FOODWISE_SCHEDULER_ENABLED     (デフォルト: true)
      - FOODWISE_LOG_LEVEL             (デフォルト: INFO)
    """
    country_code = get_env(
        "FOODWISE_DEFAULT_COUNTRY_CODE",
        default=DEFAULT_COUNTRY_CODE,
        required=False,
    )
    # "+91" のように書かれていても数字部分だけを使う
    country_code = "".join(ch for ch in country_code if ch.isdigit()) or DEFAULT_COUNTRY_CODE

    return FoodWiseSettings(
        default_country_code=country_code,
        sweep_interval_hours=max(
            1, get_env_int("FOODWISE_SWEEP_INTERVAL_HOURS", DEFAULT_SWEEP_INTERVAL_HOURS)
        ),
        default_reminder_days=min(
            MAX_REMINDER_DAYS,
            max(1, get_env_int("FOODWISE_DEFAULT_REMINDER_DAYS", DEFAULT_REMINDER_DAYS)),
        ),
        startup_delay_seconds=max(
            0, get_env_int("FOODWISE_STARTUP_DELAY_SECONDS", DEFAULT_STARTUP_DELAY_SECONDS)
        ),
        scheduler_enabled=get_env_bool("FOODWISE_SCHEDULER_ENABLED", True),
        log_level=get_env("FOODWISE_LOG_LEVEL", default="INFO", required=False),
    )
