"""
探測值產生器

mass assignment / 唯讀檢查要「試著改一個值，再看有沒有改到」，
這裡依欄位型別產生一個一定跟目前值不同、且能存進資料庫的值。
"""

from __future__ import annotations

import copy
import uuid
from contextlib import contextmanager
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any, Iterator

_TEXT_CANDIDATES = ("probe", "PROBE", "x", "y")


class Probe:
    """沒有型別資訊時使用的哨兵值"""

    def __repr__(self) -> str:
        return "<probe>"


def _infer_type(value: Any) -> str | None:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, Decimal):
        return "decimal"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "string"
    if isinstance(value, datetime):
        return "datetime"
    if isinstance(value, date):
        return "date"
    if isinstance(value, time):
        return "time"
    if isinstance(value, uuid.UUID):
        return "uuid"
    return None


def probe_value(current: Any, column_type: str | None = None, limit: int | None = None) -> Any:
    """
    產生與 current 不同的值。

    Args:
        current: 目前的值
        column_type: 欄位邏輯型別（string / integer / boolean ...），None 則依 current 推斷
        limit: 字串長度上限
    """
    kind = column_type or _infer_type(current)

    if kind == "boolean":
        return not bool(current)
    if kind in ("integer", "big_integer"):
        return (current or 0) + 1
    if kind == "decimal":
        return (current or Decimal(0)) + 1
    if kind == "float":
        return float(current or 0) + 1.0
    if kind in ("string", "text"):
        for candidate in _TEXT_CANDIDATES:
            candidate = candidate[:limit] if limit else candidate
            if candidate != current:
                return candidate
    if kind == "datetime":
        return (current or datetime(2000, 1, 1)) + timedelta(days=1)
    if kind == "date":
        return (current or date(2000, 1, 1)) + timedelta(days=1)
    if kind == "time":
        return time(12, 0) if current != time(12, 0) else time(13, 0)
    if kind == "uuid":
        return uuid.uuid4()
    if kind == "json":
        return {"probe": current != {"probe": True}}
    return Probe()


@contextmanager
def preserved_state(instance: Any) -> Iterator[None]:
    """區塊結束後把 instance 的屬性還原成進入前的樣子"""
    snapshot = copy.copy(instance.__dict__)
    state = copy.copy(instance._state) if hasattr(instance, "_state") else None
    try:
        yield
    finally:
        instance.__dict__.clear()
        instance.__dict__.update(snapshot)
        if state is not None:
            instance._state = state
