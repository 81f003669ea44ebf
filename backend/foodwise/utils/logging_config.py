# backend/foodwise/utils/logging_config.py

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """
    プロセス起動時に一度だけ呼び出すロギング初期化。

    既にハンドラが設定済みの場合（uvicorn / pytest 配下など）は basicConfig が
    何もしないので、そのまま既存設定を尊重する。
    """
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
    logging.getLogger("foodwise").setLevel(numeric_level)
