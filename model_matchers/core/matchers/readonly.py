"""
唯讀欄位 matcher

建立紀錄後用一般 setter 改值、儲存、重新讀回，值沒變才算唯讀。
整個過程包在會 rollback 的 transaction 裡，instance 的記憶體狀態也會還原。
"""

from __future__ import annotations

from typing import Any

from model_matchers.adapters.base import ModelAdapter
from model_matchers.core.exceptions import UnknownAttributeError
from model_matchers.core.matchers.base import Matcher
from model_matchers.utils.probes import probe_value


class ReadonlyAttributeMatcher(Matcher):
    kind = "readonly"

    def __init__(self, attribute: str):
        super().__init__()
        self.attribute = str(attribute)

    def description(self) -> str:
        return f"make {self.attribute} read-only"

    def _evaluate(self, subject: Any, model: type, adapter: ModelAdapter) -> bool:
        instance = model() if isinstance(subject, type) else subject
        attribute = adapter.attribute_name(instance, self.attribute)
        if attribute is None:
            raise UnknownAttributeError(model.__name__, self.attribute)
        column = adapter.column_for_attribute(model, attribute)

        with adapter.transient(instance):
            adapter.persist(instance)
            adapter.reload(instance)
            original = getattr(instance, attribute, None)
            probe = probe_value(
                original,
                column.type if column else None,
                column.limit if column else None,
            )
            try:
                setattr(instance, attribute, probe)
            except AttributeError:
                # setter 本身就拒絕寫入
                return True
            adapter.persist(instance)
            adapter.reload(instance)
            stored = getattr(instance, attribute, None)

        if stored != original:
            return self._fail(f"{self.attribute} 在建立後仍可修改（{original!r} → {stored!r}）")
        return True


def have_readonly_attribute(attribute: str) -> ReadonlyAttributeMatcher:
    return ReadonlyAttributeMatcher(attribute)
