# backend/foodwise/notifications/phone.py

"""
電話番号の正規化（E.164 風の "+<国番号><番号>" 形式へ）。

不正な番号でも例外は投げない。実際に有効かどうかは SMS プロバイダへの送信結果で判断する。
"""

import logging
import re

logger = logging.getLogger(__name__)

_NON_DIGITS = re.compile(r"\D")


def normalize_phone_number(raw: str, default_country_code: str = "91") -> str:
    """
    生の電話番号文字列を "+" 始まりの正規形に変換する。

    - 数字以外を除去
    - 10桁 → "+<default_country_code>" を付与
    - 国番号の数字で始まり 12桁 → "+" を付与
    - 10桁超 → 国番号付きとみなして "+" を付与
    - それ以外（短い・曖昧）→ "+" を付与し warning を出す
    """
    digits = _NON_DIGITS.sub("", raw or "")

    if len(digits) == 10:
        return f"+{default_country_code}{digits}"

    if digits.startswith(default_country_code) and len(digits) == 12:
        return f"+{digits}"

    if len(digits) > 10:
        return f"+{digits}"

    logger.warning("Unusual phone number format: %r", raw)
    return f"+{digits}"
