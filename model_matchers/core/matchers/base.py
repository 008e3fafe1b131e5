"""
Matcher 基底

所有 matcher 走同一個兩階段流程：

    1. 建構：鏈式設定，每次呼叫回傳新的 matcher，原本的不受影響
           matcher = have_many("dogs").through("ownerships")
    2. 評估：matches(subject) → bool，subject 可以是 model class 或 instance

description() 同時是產生的測試名稱與失敗訊息的一部分。
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import Any

from model_matchers.adapters.base import ModelAdapter
from model_matchers.core.event_bus import event_bus
from model_matchers.utils.logger import logger


class Matcher(ABC):
    """ORM model matcher 的共同介面"""

    kind = "matcher"

    def __init__(self):
        self._adapter: ModelAdapter | None = None
        self._missing = ""
        self._model_name = ""

    # ── 建構 ──

    def _clone(self, **changes: Any) -> "Matcher":
        clone = copy.copy(self)
        clone.__dict__.update(changes)
        clone._missing = ""
        clone._model_name = ""
        return clone

    def using(self, adapter: ModelAdapter | None) -> "Matcher":
        """綁定 ORM adapter，None 表示使用預設的 DjangoAdapter"""
        return self._clone(_adapter=adapter)

    @property
    def adapter(self) -> ModelAdapter:
        if self._adapter is None:
            from model_matchers.adapters.django_adapter import DjangoAdapter
            self._adapter = DjangoAdapter()
        return self._adapter

    # ── 評估 ──

    def matches(self, subject: Any) -> bool:
        """對 subject 評估，記下失敗原因供 failure_message 使用"""
        adapter = self.adapter
        model = adapter.model_class(subject)
        self._model_name = model.__name__
        self._missing = ""

        matched = bool(self._evaluate(subject, model, adapter))

        logger.debug(
            f"[{self.kind}] {self._model_name} {self.description()} → "
            f"{'符合' if matched else '不符合'}"
            + (f"（{self._missing}）" if self._missing else "")
        )
        event_bus.emit("matcher.evaluated", {
            "matcher": self.kind,
            "description": self.description(),
            "model": self._model_name,
            "matched": matched,
        }, source=type(self).__name__)
        return matched

    @abstractmethod
    def _evaluate(self, subject: Any, model: type, adapter: ModelAdapter) -> bool:
        """實際比對邏輯；不符合時設定 self._missing 並回傳 False"""

    def _fail(self, reason: str) -> bool:
        self._missing = reason
        return False

    @property
    def missing(self) -> str:
        """最後一次評估的失敗原因"""
        return self._missing

    # ── 描述 ──

    @abstractmethod
    def description(self) -> str:
        """完整的描述句，例如 "have many dogs through ownerships" """

    def failure_message(self) -> str:
        msg = f"預期 {self._model_name or '?'} should {self.description()}"
        if self._missing:
            msg += f"（{self._missing}）"
        return msg

    def failure_message_when_negated(self) -> str:
        return f"預期 {self._model_name or '?'} should not {self.description()}"

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.description()!r}>"


def label(value: Any) -> str:
    """描述句裡顯示的名稱：class / function 用 __name__，其餘 str()"""
    if isinstance(value, (list, tuple)):
        return " and ".join(label(v) for v in value)
    name = getattr(value, "__name__", None)
    if name is not None and callable(value):
        return name
    return str(value)
