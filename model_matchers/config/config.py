"""
設定管理模組
統一管理 matcher 執行時的設定：使用哪個資料庫連線、是否比對 live schema、
棄用警告是否升級為錯誤、日誌輸出等。
支援透過環境變數覆蓋預設值，方便 CI/CD 整合。
"""

import os
from pathlib import Path


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE_VALUES


class ConfigValidationError(Exception):
    """設定值驗證失敗"""

    def __init__(self, errors: list[str]):
        self.errors = errors
        msg = "model_matchers 設定驗證失敗:\n" + "\n".join(f"  - {e}" for e in errors)
        super().__init__(msg)


class Config:
    """框架全域設定"""

    # Django 資料庫連線別名
    DATABASE_ALIAS = os.getenv("MODEL_MATCHERS_DB", "default")

    # 欄位 / 關聯欄位是否也要存在於 live table（關掉則只看 model metadata）
    REFLECT_SCHEMA = _env_flag("MODEL_MATCHERS_REFLECT_SCHEMA", True)

    # 棄用的 macro 直接拋錯，而不是只發警告
    STRICT_DEPRECATIONS = _env_flag("MODEL_MATCHERS_STRICT_DEPRECATIONS", False)

    # 日誌
    LOG_LEVEL = os.getenv("MODEL_MATCHERS_LOG_LEVEL", "WARNING").upper()
    LOG_JSON = _env_flag("MODEL_MATCHERS_LOG_JSON", False)
    LOG_DIR = Path(os.getenv("MODEL_MATCHERS_LOG_DIR", str(Path.cwd() / "reports")))

    @classmethod
    def validate(cls) -> list[str]:
        """
        驗證目前設定。

        Returns:
            警告訊息列表

        Raises:
            ConfigValidationError: 設定值無效時拋出
        """
        errors: list[str] = []
        warnings: list[str] = []

        if not cls.DATABASE_ALIAS:
            errors.append("DATABASE_ALIAS 不可為空")

        if cls.LOG_LEVEL not in _LOG_LEVELS:
            errors.append(f"LOG_LEVEL 無效: {cls.LOG_LEVEL}")

        for name in ("MODEL_MATCHERS_REFLECT_SCHEMA", "MODEL_MATCHERS_STRICT_DEPRECATIONS"):
            raw = os.getenv(name)
            if raw is not None and raw.strip().lower() not in _TRUE_VALUES | _FALSE_VALUES:
                warnings.append(f"{name}={raw} 無法辨識，視為關閉")

        if errors:
            raise ConfigValidationError(errors)

        return warnings
