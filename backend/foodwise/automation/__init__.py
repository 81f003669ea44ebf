# backend/foodwise/automation/__init__.py

"""
期限通知の自動実行モジュール群。

- schemas: スイープ結果 / スケジューラ状態の Pydantic モデル
- sweep_service: 全ユーザーを 1周する期限通知スイープ本体
- scheduler: 起動時 1回 + 一定間隔でスイープを実行するスケジューラ
- state: アプリ全体で共有するストア・サービスの管理
- jobs: CLI エントリーポイント
"""
