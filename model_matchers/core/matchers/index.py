"""
db index matcher

    have_db_index("email")
    have_db_index(["commentable_type", "commentable_id"])   # 欄位順序有意義
    have_db_index("ssn").unique(True)

unique: True 必須是 unique index，False 必須不是，None 不在意。
"""

from __future__ import annotations

from typing import Any, Sequence

from model_matchers.adapters.base import ModelAdapter
from model_matchers.core.matchers.base import Matcher


class IndexMatcher(Matcher):
    """確認資料表上有完全相同欄位順序的 index"""

    kind = "index"

    def __init__(self, columns: str | Sequence[str]):
        super().__init__()
        if isinstance(columns, str):
            columns = [columns]
        self.columns = tuple(str(c) for c in columns)
        self._unique: bool | None = None

    def unique(self, unique: bool | None = True) -> "IndexMatcher":
        return self._clone(_unique=unique)

    def _index_type(self) -> str:
        if self._unique is None:
            return ""
        return "unique " if self._unique else "non-unique "

    def description(self) -> str:
        return f"have a {self._index_type()}index on columns {' and '.join(self.columns)}"

    def _evaluate(self, subject: Any, model: type, adapter: ModelAdapter) -> bool:
        table = adapter.table_name(model)
        matched = [index for index in adapter.indices(table) if index.columns == self.columns]
        if not matched:
            return self._fail(f"{table} 沒有 {list(self.columns)} 上的 index")

        if self._unique is None:
            return True
        if any(index.unique == bool(self._unique) for index in matched):
            return True
        return self._fail(
            f"{table} 的 index {matched[0].name} unique 是 {matched[0].unique}，不是 {bool(self._unique)}"
        )


def have_db_index(columns: str | Sequence[str]) -> IndexMatcher:
    return IndexMatcher(columns)
