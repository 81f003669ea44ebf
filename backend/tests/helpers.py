# backend/tests/helpers.py

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from foodwise.inventory.schemas import Item
from foodwise.notifications.client import SmsSendReceipt

NOW = datetime(2025, 1, 10, 12, 0, tzinfo=timezone.utc)


def make_item(
    owner_id: str,
    name: str,
    *,
    days: float,
    quantity: Optional[float] = None,
    low_stock_threshold: Optional[float] = None,
) -> Item:
    return Item(
        owner_id=owner_id,
        name=name,
        expiry_date=NOW + timedelta(days=days),
        quantity=quantity,
        low_stock_threshold=low_stock_threshold,
    )


class DummySmsClient:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.sent: List[tuple] = []

    def send(self, to: str, body: str) -> SmsSendReceipt:
        if self.error is not None:
            raise self.error
        self.sent.append((to, body))
        return SmsSendReceipt(sid=f"SM{len(self.sent):04d}", status="queued")


class DummyEmailClient:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.sent: List[tuple] = []

    def send(self, to: str, subject: str, html_body: str) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append((to, subject, html_body))
