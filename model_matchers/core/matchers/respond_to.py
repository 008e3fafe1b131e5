"""class / instance method 是否存在"""

from __future__ import annotations

from typing import Any

from model_matchers.adapters.base import ModelAdapter
from model_matchers.core.matchers.base import Matcher


class RespondToMatcher(Matcher):
    kind = "respond_to"

    def __init__(self, method: str, instance: bool = False):
        super().__init__()
        self.method = str(method)
        self.instance = instance

    def description(self) -> str:
        scope = "instance" if self.instance else "class"
        return f"respond to {scope} method {self.method}"

    def _evaluate(self, subject: Any, model: type, adapter: ModelAdapter) -> bool:
        if self.instance:
            target = model() if isinstance(subject, type) else subject
        else:
            target = model
        if not callable(getattr(target, self.method, None)):
            scope = "instance" if self.instance else "class"
            return self._fail(f"{model.__name__} 沒有 {scope} method {self.method}")
        return True


def have_class_method(method: str) -> RespondToMatcher:
    return RespondToMatcher(method)


def have_instance_method(method: str) -> RespondToMatcher:
    return RespondToMatcher(method, instance=True)
