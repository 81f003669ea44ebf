# backend/foodwise/inventory/router.py

from fastapi import APIRouter, Depends, HTTPException, status

from foodwise.automation.state import get_inventory_store, get_user_store
from foodwise.users.store import InMemoryUserStore

from .schemas import Item, ItemCreate, ItemListResponse
from .store import InMemoryInventoryStore

router = APIRouter(prefix="/users/{user_id}/items", tags=["inventory"])


def _ensure_user(user_id: str, users: InMemoryUserStore) -> None:
    if users.get_user(user_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found.")


@router.post(
    "",
    response_model=Item,
    status_code=status.HTTP_201_CREATED,
    summary="在庫アイテムの登録",
)
def create_item(
    user_id: str,
    body: ItemCreate,
    users: InMemoryUserStore = Depends(get_user_store),
    store: InMemoryInventoryStore = Depends(get_inventory_store),
) -> Item:
    """
    在庫アイテムを 1件登録する。OCR / 音声入力の結果もこのエンドポイントで保存する想定。
    """
    _ensure_user(user_id, users)
    item = Item(owner_id=user_id, **body.model_dump())
    return store.add_item(item)


@router.get(
    "",
    response_model=ItemListResponse,
    summary="在庫アイテム一覧（期限の近い順）",
)
def list_items(
    user_id: str,
    users: InMemoryUserStore = Depends(get_user_store),
    store: InMemoryInventoryStore = Depends(get_inventory_store),
) -> ItemListResponse:
    _ensure_user(user_id, users)
    items = sorted(store.find_items_by_user(user_id), key=lambda item: item.expiry_date)
    return ItemListResponse(items=items, count=len(items))
