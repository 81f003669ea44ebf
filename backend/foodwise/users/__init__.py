# backend/foodwise/users/__init__.py

"""
ユーザーと通知設定のモジュール群。

- schemas: User / NotificationSettings（正規の通知設定レコード）
- store: User Store と Preference Store
- router: /users 以下の登録・通知設定・テスト通知エンドポイント
"""
