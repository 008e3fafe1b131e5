"""
ORM adapter 介面

matcher 只透過這組窄介面讀取 ORM metadata 與 schema，不直接碰具體的 ORM 型別。
Reflection / ColumnInfo / IndexInfo 是 adapter 回傳的唯讀值物件。
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Protocol, runtime_checkable

BELONGS_TO = "belongs_to"
HAS_ONE = "has_one"
HAS_MANY = "has_many"
HAS_AND_BELONGS_TO_MANY = "has_and_belongs_to_many"


@dataclass(frozen=True)
class Reflection:
    """一個已宣告的關聯"""
    name: str
    macro: str
    target: type | None = None
    # 應該有 foreign key 欄位的 table，與欄位名稱
    foreign_key_table: str | None = None
    foreign_keys: tuple[str, ...] = ()
    through: str | None = None
    through_model: type | None = None
    dependent: str | None = None
    on_delete: Callable | None = None
    polymorphic: bool = False
    join_table: str | None = None


@dataclass(frozen=True)
class ColumnInfo:
    """一個資料表欄位"""
    name: str
    type: str | None = None
    limit: int | None = None
    precision: int | None = None
    scale: int | None = None
    default: Any = None
    null: bool = True
    sql_type: str | None = None


@dataclass(frozen=True)
class IndexInfo:
    """一個 index（或 unique constraint）"""
    name: str
    columns: tuple[str, ...] = field(default_factory=tuple)
    unique: bool = False


@runtime_checkable
class ModelAdapter(Protocol):
    """matcher 依賴的 ORM 能力"""

    def model_class(self, subject: Any) -> type: ...

    def table_name(self, model: type) -> str: ...

    def reflection(self, model: type, name: str) -> Reflection | None: ...

    def columns(self, table: str) -> Mapping[str, ColumnInfo] | None: ...

    def attribute_name(self, instance: Any, name: str) -> str | None: ...

    def column_for_attribute(self, model: type, name: str) -> ColumnInfo | None: ...

    def indices(self, table: str) -> list[IndexInfo]: ...

    def assign_attributes(self, instance: Any, values: Mapping[str, Any]) -> None: ...

    def persist(self, instance: Any) -> None: ...

    def reload(self, instance: Any) -> None: ...

    def transient(self, instance: Any) -> AbstractContextManager: ...

    def scope(self, model: type, scope_call: str | Callable) -> Any: ...

    def find(self, model: type, options: Mapping[str, Any]) -> Any: ...

    def query_signature(self, query: Any) -> str | None: ...
