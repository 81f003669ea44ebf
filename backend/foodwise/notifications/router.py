# backend/foodwise/notifications/router.py

from fastapi import APIRouter, Depends, HTTPException, status

from foodwise.automation.state import get_feed_service, get_user_store
from foodwise.users.schemas import User
from foodwise.users.store import InMemoryUserStore

from .feed import NotificationFeedService
from .schemas import FeedKind, FeedResponse, MarkReadResponse

router = APIRouter(prefix="/users/{user_id}/notifications", tags=["notifications"])


def _require_user(user_id: str, users: InMemoryUserStore) -> User:
    user = users.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return user


@router.get(
    "",
    response_model=FeedResponse,
    summary="アプリ内通知フィード",
    description="期限切れ / 期限間近 / 在庫僅少を在庫から都度計算して返す。",
)
def get_notifications(
    user_id: str,
    users: InMemoryUserStore = Depends(get_user_store),
    feed: NotificationFeedService = Depends(get_feed_service),
) -> FeedResponse:
    user = _require_user(user_id, users)
    notifications = feed.build_feed(user)
    unread = sum(1 for n in notifications if not n.read)
    return FeedResponse(notifications=notifications, unread_count=unread)


@router.post(
    "/read-all",
    response_model=MarkReadResponse,
    summary="全通知を既読にする",
)
def mark_all_notifications_read(
    user_id: str,
    users: InMemoryUserStore = Depends(get_user_store),
    feed: NotificationFeedService = Depends(get_feed_service),
) -> MarkReadResponse:
    user = _require_user(user_id, users)
    feed.mark_all_as_read(user)
    return MarkReadResponse(message="All notifications marked as read")


@router.post(
    "/{kind}/read",
    response_model=MarkReadResponse,
    summary="通知を既読にする",
)
def mark_notification_read(
    user_id: str,
    kind: FeedKind,
    users: InMemoryUserStore = Depends(get_user_store),
    feed: NotificationFeedService = Depends(get_feed_service),
) -> MarkReadResponse:
    user = _require_user(user_id, users)
    feed.mark_as_read(user, kind)
    return MarkReadResponse(message="Notification marked as read", id=kind)
