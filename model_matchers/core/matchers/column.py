"""
db 欄位 matcher

    have_db_column("email").of_type("string").with_options(limit=255)
    have_db_column("salary").of_type("decimal").with_options(precision=15, scale=2)
    have_db_column("admin").with_options(default=False, null=False)

只檢查有設定的屬性，全部符合才算通過。
"""

from __future__ import annotations

from typing import Any

from model_matchers.adapters.base import ModelAdapter
from model_matchers.core.exceptions import UnsupportedOptionError
from model_matchers.core.matchers.base import Matcher

COLUMN_OPTIONS = ("precision", "limit", "default", "null", "scale", "sql_type")


class ColumnMatcher(Matcher):
    """確認 model 的資料表有指定欄位，且型別與屬性符合"""

    kind = "column"

    def __init__(self, column: str):
        super().__init__()
        self.column = str(column)
        self._type: str | None = None
        self._options: dict[str, Any] = {}

    def of_type(self, column_type: str | None) -> "ColumnMatcher":
        return self._clone(_type=column_type)

    def with_options(self, **options: Any) -> "ColumnMatcher":
        """值為 None 的 option 視為未設定"""
        unknown = [key for key in options if key not in COLUMN_OPTIONS]
        if unknown:
            raise UnsupportedOptionError(unknown, COLUMN_OPTIONS)
        merged = dict(self._options)
        merged.update({key: value for key, value in options.items() if value is not None})
        return self._clone(_options=merged)

    def description(self) -> str:
        description = f"have db column named {self.column}"
        if self._type is not None:
            description += f" of type {self._type}"
        for key in COLUMN_OPTIONS:
            if key in self._options:
                description += f" of {key} {self._options[key]}"
        return description

    def _evaluate(self, subject: Any, model: type, adapter: ModelAdapter) -> bool:
        columns = adapter.columns(adapter.table_name(model)) or {}
        info = columns.get(self.column)
        if info is None:
            return self._fail(f"{model.__name__} 沒有名為 {self.column} 的 db 欄位")

        if self._type is not None and info.type != str(self._type).lower():
            return self._fail(
                f"{model.__name__} 的 db 欄位 {self.column} 型別是 {info.type}，不是 {self._type}"
            )

        for key in COLUMN_OPTIONS:
            if key not in self._options:
                continue
            expected = self._options[key]
            actual = getattr(info, key)
            if actual != expected:
                return self._fail(
                    f"{model.__name__} 的 db 欄位 {self.column} {key} 是 {actual!r}，不是 {expected!r}"
                )
        return True


def have_db_column(column: str) -> ColumnMatcher:
    return ColumnMatcher(column)
