# backend/foodwise/notifications/config.py

"""
通知プロバイダ（Twilio SMS / Email API）に必要な設定値をまとめるモジュール。

認証情報はコアロジックからは不透明で、クライアントにだけ渡る。
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from foodwise.utils.config import get_env, get_env_int


@dataclass(frozen=True)
class TwilioSettings:
    """Twilio REST API 用の設定値コンテナ。"""

    account_sid: str
    auth_token: str
    from_number: str
    api_base_url: str = "https://api.twilio.com/2010-04-01"
    timeout_seconds: int = 10


@dataclass(frozen=True)
class EmailSettings:
    """Email 送信 API 用の設定値コンテナ。"""

    api_url: str
    api_key: Optional[str]
    from_address: str
    timeout_seconds: int = 10

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


@lru_cache()
def get_twilio_settings() -> Optional[TwilioSettings]:
    """
    環境変数から Twilio 設定を読み込む。

    以下の 3つが揃っていない場合は None（SMS チャンネル未構成）を返す:
      - TWILIO_ACCOUNT_SID
      - TWILIO_AUTH_TOKEN
      - TWILIO_PHONE_NUMBER

    任意:
      - TWILIO_API_BASE_URL    (デフォルト: https://api.twilio.com/2010-04-01)
      - TWILIO_TIMEOUT_SECONDS (デフォルト: 10)
    """
    account_sid = get_env("TWILIO_ACCOUNT_SID", required=False)
    auth_token = get_env("TWILIO_AUTH_TOKEN", required=False)
    from_number = get_env("TWILIO_PHONE_NUMBER", required=False)

    if not (account_sid and auth_token and from_number):
        return None

    return TwilioSettings(
        account_sid=account_sid,
        auth_token=auth_token,
        from_number=from_number,
        api_base_url=get_env(
            "TWILIO_API_BASE_URL",
            default="https://api.twilio.com/2010-04-01",
            required=False,
        ),
        timeout_seconds=get_env_int("TWILIO_TIMEOUT_SECONDS", 10),
    )


@lru_cache()
def get_email_settings() -> EmailSettings:
    """
    環境変数から Email 設定を読み込む。

    任意:
      - EMAIL_API_URL  (デフォルト: https://api.emailservice.com/send)
      - EMAIL_API_KEY  (未設定の場合はログ出力のみの縮退モード)
      - EMAIL_FROM     (デフォルト: notifications@foodwise.com)
      - EMAIL_TIMEOUT_SECONDS (デフォルト: 10)
    """
    return EmailSettings(
        api_url=get_env(
            "EMAIL_API_URL",
            default="https://api.emailservice.com/send",
            required=False,
        ),
        api_key=get_env("EMAIL_API_KEY", required=False),
        from_address=get_env(
            "EMAIL_FROM",
            default="notifications@foodwise.com",
            required=False,
        ),
        timeout_seconds=get_env_int("EMAIL_TIMEOUT_SECONDS", 10),
    )
