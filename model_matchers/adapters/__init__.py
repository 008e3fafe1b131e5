"""
adapters — ORM 能力介面與 Django 實作

用法：
    from model_matchers.adapters import DjangoAdapter, ModelAdapter
"""

from model_matchers.adapters.base import (
    BELONGS_TO,
    HAS_AND_BELONGS_TO_MANY,
    HAS_MANY,
    HAS_ONE,
    ColumnInfo,
    IndexInfo,
    ModelAdapter,
    Reflection,
)
from model_matchers.adapters.django_adapter import DjangoAdapter

__all__ = [
    "BELONGS_TO",
    "HAS_ONE",
    "HAS_MANY",
    "HAS_AND_BELONGS_TO_MANY",
    "ColumnInfo",
    "IndexInfo",
    "Reflection",
    "ModelAdapter",
    "DjangoAdapter",
]
