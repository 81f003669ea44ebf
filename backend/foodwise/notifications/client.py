# backend/foodwise/notifications/client.py

"""
SMS / Email プロバイダとの通信を担当するクライアントモジュール。

- TwilioSmsClient: Twilio REST API (Messages.json) の薄いラッパー
- HttpEmailClient: Email 送信 API (JSON POST) の薄いラッパー
- LoggingEmailClient: API キー未設定時の縮退実装（ログ出力のみ）

どのクライアントも失敗時は例外を投げる。例外を結果に変換するのは Dispatcher の役割。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol

import httpx

from .config import EmailSettings, TwilioSettings

logger = logging.getLogger(__name__)


class SmsClientError(RuntimeError):
    """SMS クライアント全般の例外。"""


class SmsProviderError(SmsClientError):
    """
    SMS プロバイダがエラーを返した場合の例外。

    code はプロバイダ固有の数値コード（Twilio: 21211 = 無効な電話番号 など）。
    """

    def __init__(
        self,
        message: str,
        *,
        code: Optional[int] = None,
        status_code: Optional[int] = None,
        more_info: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code
        self.more_info = more_info


class SmsConnectionError(SmsClientError):
    """接続エラー・タイムアウト時の例外。"""


class EmailClientError(RuntimeError):
    """Email クライアント全般の例外。"""


class EmailProviderError(EmailClientError):
    """Email API が 4xx/5xx を返した場合の例外。"""

    def __init__(self, status_code: int, body: Any | None = None) -> None:
        super().__init__(f"Email API error: status_code={status_code}")
        self.status_code = status_code
        self.body = body


class EmailConnectionError(EmailClientError):
    """接続エラー・タイムアウト時の例外。"""


@dataclass(frozen=True)
class SmsSendReceipt:
    sid: str
    status: Optional[str] = None


class SmsClient(Protocol):
    def send(self, to: str, body: str) -> SmsSendReceipt:  # pragma: no cover - Protocol
        ...


class EmailClient(Protocol):
    def send(self, to: str, subject: str, html_body: str) -> None:  # pragma: no cover - Protocol
        ...


class TwilioSmsClient:
    """
    Twilio Messages API クライアント。

    構築後は状態を持たないため、全ての送信で 1インスタンスを共有してよい。
    """

    def __init__(self, settings: TwilioSettings) -> None:
        self._settings = settings

    @property
    def from_number(self) -> str:
        return self._settings.from_number

    @property
    def timeout(self) -> int:
        return self._settings.timeout_seconds

    def _messages_url(self) -> str:
        return (
            f"{self._settings.api_base_url}/Accounts/"
            f"{self._settings.account_sid}/Messages.json"
        )

    def _raise_for_status(self, response: httpx.Response) -> None:
        """
        Twilio のエラーレスポンス（{code, message, more_info, status}）を例外に変換する。
        """
        if response.status_code < 400:
            return

        try:
            data: Dict[str, Any] = response.json()
        except ValueError:
            data = {}

        raw_code = data.get("code")
        code = raw_code if isinstance(raw_code, int) else None
        message = data.get("message") or f"Twilio API error: {response.status_code}"

        raise SmsProviderError(
            str(message),
            code=code,
            status_code=response.status_code,
            more_info=data.get("more_info"),
        )

    def send(self, to: str, body: str) -> SmsSendReceipt:
        """
        SMS を 1通送信する。

        :param to: 正規化済みの宛先番号（"+" 始まり）
        :raises SmsProviderError: Twilio がエラーを返した場合
        :raises SmsConnectionError: 接続エラーやタイムアウト時
        """
        form = {
            "From": self.from_number,
            "To": to,
            "Body": body,
        }

        try:
            response = httpx.post(
                self._messages_url(),
                data=form,
                auth=(self._settings.account_sid, self._settings.auth_token),
                timeout=self.timeout,
            )
        except httpx.RequestError as exc:
            raise SmsConnectionError(f"Failed to call Twilio API: {exc}") from exc

        self._raise_for_status(response)

        try:
            data = response.json()
        except ValueError as exc:
            raise SmsProviderError(
                "Unexpected Twilio API response format.",
                status_code=response.status_code,
            ) from exc

        return SmsSendReceipt(sid=str(data.get("sid", "")), status=data.get("status"))


class HttpEmailClient:
    """
    JSON で {to, subject, html, from} を POST する Email 送信 API クライアント。
    """

    def __init__(self, settings: EmailSettings) -> None:
        self._settings = settings

    def _build_headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._settings.api_key}",
            "Content-Type": "application/json",
        }

    def send(self, to: str, subject: str, html_body: str) -> None:
        payload = {
            "to": to,
            "subject": subject,
            "html": html_body,
            "from": self._settings.from_address,
        }

        try:
            response = httpx.post(
                self._settings.api_url,
                headers=self._build_headers(),
                json=payload,
                timeout=self._settings.timeout_seconds,
            )
        except httpx.RequestError as exc:
            raise EmailConnectionError(f"Failed to call Email API: {exc}") from exc

        if response.status_code // 100 != 2:
            try:
                body = response.json()
            except ValueError:
                body = response.text
            raise EmailProviderError(status_code=response.status_code, body=body)


class LoggingEmailClient:
    """
    メールを実際には送らず、logger に記録するだけの縮退クライアント。

    EMAIL_API_KEY 未設定の開発環境などで使う。呼び出し側のロジックを保つため成功扱い。
    """

    def __init__(self, logger_: logging.Logger | None = None) -> None:
        self._logger = logger_ or logger

    def send(self, to: str, subject: str, html_body: str) -> None:
        self._logger.warning(
            "[EMAIL NOT SENT - no provider configured] to=%s subject=%s", to, subject
        )
        self._logger.debug("Email body for %s: %s", to, html_body)
