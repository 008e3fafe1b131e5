"""
日誌模組
統一的 logging 設定，matcher 評估、macro 註冊、棄用警告都從這裡輸出。

支援：
- Console 輸出（人類可讀格式）
- 檔案輸出（可選 JSON 結構化格式）
- 環境變數控制:
    MODEL_MATCHERS_LOG_LEVEL: console 日誌等級 (預設 WARNING)
    MODEL_MATCHERS_LOG_JSON: 設為 "1" 啟用 JSON 結構化日誌檔
"""

import json
import logging
import sys
from datetime import datetime, timezone

from model_matchers.config.config import Config


class JsonFormatter(logging.Formatter):
    """JSON 結構化日誌格式器，適合 ELK / Loki 等日誌系統"""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        event = getattr(record, "event", None)
        if event:
            log_entry["event"] = event
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False, default=str)


def _create_logger() -> logging.Logger:
    _logger = logging.getLogger("model_matchers")
    _logger.setLevel(logging.DEBUG)
    _logger.propagate = False

    console_level = getattr(logging, Config.LOG_LEVEL, logging.WARNING)

    fmt = logging.Formatter(
        "[%(asctime)s] %(levelname)-7s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console handler（人類可讀）
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    _logger.addHandler(console)

    # JSON file handler（可選，設 MODEL_MATCHERS_LOG_JSON=1 啟用）
    if Config.LOG_JSON:
        Config.LOG_DIR.mkdir(parents=True, exist_ok=True)
        json_handler = logging.FileHandler(
            Config.LOG_DIR / "model_matchers.json.log", encoding="utf-8"
        )
        json_handler.setLevel(logging.DEBUG)
        json_handler.setFormatter(JsonFormatter())
        _logger.addHandler(json_handler)

    return _logger


logger = _create_logger()
