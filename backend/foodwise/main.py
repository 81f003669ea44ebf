# backend/foodwise/main.py

"""
バックエンドアプリケーションのエントリーポイント。

主な責務:
- ユーザー / 通知設定 / 在庫 / アプリ内通知 のエンドポイントを公開する
- 起動時に期限通知スケジューラを開始し、終了時に停止する
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncIterator

from fastapi import FastAPI

from foodwise.api.automation import router as automation_router
from foodwise.automation.state import get_scheduler
from foodwise.config import get_foodwise_settings
from foodwise.inventory.router import router as inventory_router
from foodwise.notifications.router import router as notifications_router
from foodwise.users.router import router as users_router
from foodwise.utils.logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    スケジューラのライフサイクルをプロセスの起動・終了に合わせる。
    """
    settings = get_foodwise_settings()
    scheduler = None
    if settings.scheduler_enabled:
        scheduler = get_scheduler()
        scheduler.start()
    else:
        logger.info("Expiry notification scheduler is disabled")

    yield

    if scheduler is not None:
        scheduler.stop(wait=True)


def create_app() -> FastAPI:
    """
    FastAPI アプリケーションファクトリ。

    - ユーザー・通知設定 (/users)
    - 在庫 (/users/{user_id}/items)
    - アプリ内通知 (/users/{user_id}/notifications)
    - スケジューラ状態・手動スイープ (/automation)
    - ヘルスチェックエンドポイント (/health)
    """
    configure_logging(get_foodwise_settings().log_level)

    app = FastAPI(title="FoodWise Backend", lifespan=lifespan)

    # ルーター登録
    app.include_router(users_router)
    app.include_router(inventory_router)
    app.include_router(notifications_router)
    app.include_router(automation_router)

    @app.get("/health", tags=["health"])
    def health_check() -> dict:
        """
        簡易ヘルスチェックエンドポイント。
        モニタリングや動作確認用。
        """
        return {"status": "ok"}

    return app


# uvicorn 実行時のエントリーポイント
app = create_app()
