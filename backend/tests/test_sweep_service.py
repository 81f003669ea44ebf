# backend/tests/test_sweep_service.py

import logging

from foodwise.automation.schemas import UserSweepStatus
from foodwise.automation.sweep_service import ExpirySweepService
from foodwise.inventory.store import InMemoryInventoryStore
from foodwise.notifications.client import SmsProviderError
from foodwise.notifications.dispatcher import NotificationDispatcher
from foodwise.users.schemas import NotificationSettings, User
from foodwise.users.store import InMemoryUserStore

from helpers import NOW, DummyEmailClient, DummySmsClient, make_item


class FlakyInventoryStore(InMemoryInventoryStore):
    """特定ユーザーのクエリだけ失敗させる Inventory Store。"""

    def __init__(self, failing_user_id: str) -> None:
        super().__init__()
        self._failing_user_id = failing_user_id

    def find_items_by_user(self, user_id, item_filter=None):
        if user_id == self._failing_user_id:
            raise ConnectionError("inventory store unavailable")
        return super().find_items_by_user(user_id, item_filter)


def _sms_user(name: str, mobile: str, **settings) -> User:
    return User(
        name=name,
        mobile=mobile,
        notification_settings=NotificationSettings(
            sms_notifications=True, email_notifications=False, **settings
        ),
    )


def _service(users, inventory, sms=None, email=None) -> ExpirySweepService:
    dispatcher = NotificationDispatcher(
        sms_client=sms or DummySmsClient(),
        email_client=email or DummyEmailClient(),
    )
    return ExpirySweepService(users, inventory, dispatcher)


def test_storage_failure_for_one_user_does_not_stop_sweep(caplog) -> None:
    users = InMemoryUserStore()
    user_a = users.save_user(_sms_user("A", "9000000001"))
    user_b = users.save_user(_sms_user("B", "9000000002"))
    user_c = users.save_user(_sms_user("C", "9000000003"))

    inventory = FlakyInventoryStore(failing_user_id=user_b.id)
    for user in (user_a, user_b, user_c):
        inventory.add_item(make_item(user.id, "milk", days=1))

    sms = DummySmsClient()
    with caplog.at_level(logging.ERROR):
        summary = _service(users, inventory, sms=sms).run_sweep(now=NOW)

    assert summary.users_checked == 3
    assert summary.users_notified == 2
    assert summary.users_failed == 1
    assert summary.notifications_sent == 2
    assert {to for to, _ in sms.sent} == {"+919000000001", "+919000000003"}

    failed = [r for r in summary.results if r.status == UserSweepStatus.FAILED]
    assert failed[0].user_id == user_b.id
    assert "unavailable" in failed[0].error
    assert any("failed for user" in r.getMessage() for r in caplog.records)


def test_reminder_window_controls_what_is_sent() -> None:
    users = InMemoryUserStore()
    three_days = users.save_user(_sms_user("A", "9000000001", reminder_days=3))
    one_day = users.save_user(_sms_user("B", "9000000002", reminder_days=1))

    inventory = InMemoryInventoryStore()
    inventory.add_item(make_item(three_days.id, "paneer", days=2))
    inventory.add_item(make_item(one_day.id, "paneer", days=2))

    summary = _service(users, inventory).run_sweep(now=NOW)
    by_user = {r.user_id: r for r in summary.results}

    assert by_user[three_days.id].status == UserSweepStatus.NOTIFIED
    assert by_user[one_day.id].status == UserSweepStatus.NOTHING_TO_SEND


def test_expiry_disabled_user_is_skipped() -> None:
    users = InMemoryUserStore()
    user = users.save_user(_sms_user("A", "9000000001", expiry_notifications=False))
    inventory = InMemoryInventoryStore()
    inventory.add_item(make_item(user.id, "milk", days=1))

    sms = DummySmsClient()
    summary = _service(users, inventory, sms=sms).run_sweep(now=NOW)

    assert summary.users_skipped == 1
    assert sms.sent == []


def test_sms_enabled_without_mobile_is_not_an_error() -> None:
    users = InMemoryUserStore()
    user = users.save_user(
        User(
            name="A",
            email="a@example.com",
            notification_settings=NotificationSettings(
                sms_notifications=True, email_notifications=True
            ),
        )
    )
    inventory = InMemoryInventoryStore()
    inventory.add_item(make_item(user.id, "milk", days=1))

    sms = DummySmsClient()
    email = DummyEmailClient()
    summary = _service(users, inventory, sms=sms, email=email).run_sweep(now=NOW)

    assert summary.users_notified == 1
    assert summary.users_failed == 0
    assert sms.sent == []
    assert email.sent[0][0] == "a@example.com"


def test_all_channels_failing_marks_user_failed() -> None:
    users = InMemoryUserStore()
    user = users.save_user(_sms_user("A", "123"))
    inventory = InMemoryInventoryStore()
    inventory.add_item(make_item(user.id, "milk", days=1))

    sms = DummySmsClient(error=SmsProviderError("invalid number", code=21211))
    summary = _service(users, inventory, sms=sms).run_sweep(now=NOW)

    result = summary.results[0]
    assert result.status == UserSweepStatus.FAILED
    assert result.dispatches[0].error_code == 21211
    assert summary.notifications_failed == 1


def test_partial_channel_failure_still_counts_as_notified() -> None:
    users = InMemoryUserStore()
    user = users.save_user(
        User(
            name="A",
            mobile="9000000001",
            email="a@example.com",
            notification_settings=NotificationSettings(
                sms_notifications=True, email_notifications=True
            ),
        )
    )
    inventory = InMemoryInventoryStore()
    inventory.add_item(make_item(user.id, "milk", days=1))

    sms = DummySmsClient(error=SmsProviderError("auth failed", code=20003))
    summary = _service(users, inventory, sms=sms).run_sweep(now=NOW)

    assert summary.results[0].status == UserSweepStatus.NOTIFIED
    assert summary.notifications_sent == 1
    assert summary.notifications_failed == 1


def test_users_without_contacts_are_not_candidates() -> None:
    users = InMemoryUserStore()
    users.save_user(User(name="ghost"))

    summary = _service(users, InMemoryInventoryStore()).run_sweep(now=NOW)

    assert summary.users_checked == 0


def test_window_override_applies_to_all_users() -> None:
    users = InMemoryUserStore()
    user = users.save_user(_sms_user("A", "9000000001", reminder_days=1))
    inventory = InMemoryInventoryStore()
    inventory.add_item(make_item(user.id, "rice", days=4))

    summary = _service(users, inventory).run_sweep(now=NOW, window_days=5)

    assert summary.results[0].status == UserSweepStatus.NOTIFIED
    assert summary.results[0].reminder_days == 5


def test_oversized_reminder_days_still_notifies() -> None:
    users = InMemoryUserStore()
    # スキーマ検証を通さずに保存された値を想定
    defaults = NotificationSettings().model_dump()
    settings = NotificationSettings.model_construct(
        **{**defaults, "sms_notifications": True, "reminder_days": 5_000_000}
    )
    user = users.save_user(User(name="A", mobile="9000000001", notification_settings=settings))
    inventory = InMemoryInventoryStore()
    inventory.add_item(make_item(user.id, "milk", days=1))

    summary = _service(users, inventory).run_sweep(now=NOW)

    assert summary.results[0].status == UserSweepStatus.NOTIFIED
    assert summary.users_failed == 0
