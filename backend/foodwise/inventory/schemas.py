# backend/foodwise/inventory/schemas.py

"""
在庫アイテムのスキーマ定義。

登録経路（手入力 / OCR / 音声）は問わず、最終的にこの Item の形で保存される。
期限切れになっても自動削除はしない（ユーザーが操作するまで残る）。
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # naive な datetime は UTC とみなす
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ItemBase(BaseModel):
    name: str = Field(..., min_length=1, description="アイテム名")
    category: Optional[str] = Field(None, description="カテゴリ（Dairy, Produce など）")
    quantity: Optional[float] = Field(None, ge=0, description="現在の数量")
    unit: Optional[str] = Field(None, description="数量の単位（pcs, kg, L など）")
    purchase_date: Optional[datetime] = Field(None, description="購入日")
    expiry_date: datetime = Field(..., description="賞味・消費期限")
    low_stock_threshold: Optional[float] = Field(
        None,
        ge=0,
        description="この数量以下になったら在庫僅少とみなすしきい値。未設定なら判定しない。",
    )

    @field_validator("purchase_date", "expiry_date")
    @classmethod
    def _normalize_tz(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)


class ItemCreate(ItemBase):
    """POST /users/{user_id}/items のリクエストボディ。"""


class Item(ItemBase):
    """
    1ユーザーに属する在庫アイテム。
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, description="アイテム ID")
    owner_id: str = Field(..., description="所有ユーザーの ID")


class ItemListResponse(BaseModel):
    items: List[Item]
    count: int
