# backend/foodwise/users/router.py

from fastapi import APIRouter, Depends, HTTPException, status

from foodwise.automation.state import get_dispatcher, get_preference_store, get_user_store
from foodwise.notifications.dispatcher import (
    NotificationDispatcher,
    NotificationTestError,
    send_test_notification,
)
from foodwise.notifications.schemas import (
    SendTestNotificationRequest,
    SendTestNotificationResponse,
)

from .schemas import NotificationSettings, NotificationSettingsUpdate, User, UserCreate
from .store import InMemoryUserStore, PreferenceStore, UserNotFoundError

router = APIRouter(prefix="/users", tags=["users"])


def _require_user(user_id: str, users: InMemoryUserStore) -> User:
    user = users.get_user(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")
    return user


@router.post(
    "",
    response_model=User,
    status_code=status.HTTP_201_CREATED,
    summary="ユーザー登録",
)
def create_user(
    body: UserCreate,
    users: InMemoryUserStore = Depends(get_user_store),
) -> User:
    """
    ユーザーを登録する。認証・セッション発行は別サービスの責務。
    """
    user = User(name=body.name, email=body.email, mobile=body.mobile)
    return users.save_user(user)


@router.get("/{user_id}", response_model=User, summary="ユーザー取得")
def get_user(
    user_id: str,
    users: InMemoryUserStore = Depends(get_user_store),
) -> User:
    return _require_user(user_id, users)


@router.get(
    "/{user_id}/notification-settings",
    response_model=NotificationSettings,
    summary="通知設定の取得（未作成ならデフォルトで作成）",
)
def get_notification_settings(
    user_id: str,
    preferences: PreferenceStore = Depends(get_preference_store),
) -> NotificationSettings:
    try:
        return preferences.get_or_create(user_id)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.put(
    "/{user_id}/notification-settings",
    response_model=NotificationSettings,
    summary="通知設定の部分更新",
)
def update_notification_settings(
    user_id: str,
    body: NotificationSettingsUpdate,
    preferences: PreferenceStore = Depends(get_preference_store),
) -> NotificationSettings:
    try:
        return preferences.update(user_id, body)
    except UserNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.post(
    "/{user_id}/send-test-notification",
    response_model=SendTestNotificationResponse,
    summary="テスト通知の送信",
)
def post_test_notification(
    user_id: str,
    body: SendTestNotificationRequest,
    users: InMemoryUserStore = Depends(get_user_store),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> SendTestNotificationResponse:
    """
    設定画面から SMS / Email のテスト通知を送る。

    - 連絡先なし・設定で無効・送信失敗 → 400 Bad Request
    """
    user = _require_user(user_id, users)

    try:
        result = send_test_notification(user, body.channel, dispatcher)
    except NotificationTestError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return SendTestNotificationResponse(
        success=True,
        message=f"Test {body.channel.value} notification sent successfully",
        provider_id=result.provider_id,
    )
