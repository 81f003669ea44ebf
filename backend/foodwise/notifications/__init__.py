# backend/foodwise/notifications/__init__.py

"""
通知レイヤ用モジュール群。

構成イメージ:
- schemas: チャンネル種別・送信結果・アプリ内フィードのスキーマ
- config: Twilio / Email プロバイダの設定値
- phone: 電話番号の正規化
- composer: 期限間近ダイジェスト本文の組み立て
- client: SMS / Email プロバイダへの HTTP クライアント
- dispatcher: チャンネルごとの送信（例外を外に出さない）
- policy: ユーザーごとの有効チャンネル・リマインド日数の解決
- feed: アプリ内通知フィード（既読状態は別ストア）
- factory: 設定から NotificationDispatcher を組み立てる
"""
