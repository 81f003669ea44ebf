# backend/foodwise/inventory/__init__.py

"""
在庫（Item）関連モジュール群。

- schemas: Item と登録リクエストの Pydantic モデル
- store: Inventory Store のインターフェースとインメモリ実装
- expiry: 期限切れ / 期限間近 / 在庫僅少の抽出ロジック
- router: /users/{user_id}/items エンドポイント
"""
