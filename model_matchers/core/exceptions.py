"""
自訂 Exception 體系

統一的錯誤處理階層，讓每種失敗都有明確的分類與訊息。
上層可以 catch 大類別 (如 ModelMatchersError)，
也可以精準 catch 子類別 (如 UnsupportedOptionError)。

matcher 比對失敗不在這裡：那是測試失敗，一律用 AssertionError 回報給 pytest。

Exception 樹：
    ModelMatchersError
    ├── ConfigError
    │   ├── UnsupportedOptionError
    │   ├── MissingSubjectError
    │   └── UnknownAttributeError
    ├── AdapterError
    │   └── PersistenceRequiredError
    └── DeprecatedMacroError
"""


class ModelMatchersError(Exception):
    """框架所有例外的基底，catch 這個就能攔截一切框架錯誤"""

    def __init__(self, message: str = "", context: dict | None = None):
        self.context = context or {}
        super().__init__(message)


# ── Config 相關 ──

class ConfigError(ModelMatchersError):
    """macro / fixture 設定錯誤，在測試定義階段就拋出"""


class UnsupportedOptionError(ConfigError):
    """macro 收到不認得的 option（多半是打錯字）"""

    def __init__(self, keys: list | tuple = (), allowed: list | tuple = ()):
        self.keys = sorted(str(k) for k in keys)
        self.allowed = list(allowed)
        msg = f"不支援的 option: {', '.join(self.keys)}"
        if self.allowed:
            msg += f"（可用: {', '.join(str(k) for k in self.allowed)}）"
        else:
            msg += "（此 macro 不接受任何 option）"
        super().__init__(msg, context={"keys": self.keys, "allowed": self.allowed})


class MissingSubjectError(ConfigError):
    """測試沒有宣告 described_type，也沒有覆寫 subject fixture"""

    def __init__(self, where: str = ""):
        msg = "找不到 subject：請在測試類別或模組宣告 described_type，或自訂 subject fixture"
        if where:
            msg += f" ({where})"
        super().__init__(msg, context={"where": where})


class UnknownAttributeError(ConfigError):
    """mass assignment / 唯讀檢查的屬性在 model 上不存在（多半是打錯字）"""

    def __init__(self, model_name: str = "", attribute: str = ""):
        super().__init__(
            f"{model_name} 沒有名為 {attribute} 的屬性",
            context={"model": model_name, "attribute": attribute},
        )


# ── Adapter 相關 ──

class AdapterError(ModelMatchersError):
    """ORM adapter 無法完成操作"""


class PersistenceRequiredError(AdapterError):
    """需要寫入資料庫才能判斷的 matcher 拿到不能儲存的 subject"""

    def __init__(self, model_name: str = "", original: Exception | None = None):
        self.original = original
        msg = f"無法儲存 {model_name} 以檢查唯讀欄位"
        if original:
            msg += f" ({type(original).__name__}: {original})"
        super().__init__(msg, context={"model": model_name})


# ── 棄用 ──

class DeprecatedMacroError(ModelMatchersError):
    """STRICT_DEPRECATIONS 開啟時，呼叫已棄用的 macro"""

    def __init__(self, name: str = "", replacement: str = ""):
        super().__init__(
            f"{name} 已棄用，請改用 {replacement}",
            context={"macro": name, "replacement": replacement},
        )
