"""
named scope matcher（已棄用，保留給舊測試）

scope 是 default manager（或 model）上回傳 QuerySet 的方法。
比對方式：scope 產生的 SQL 必須等於直接用 finder options 組出來的 SQL。

    have_named_scope("visible").finding({"conditions": {"visible": True}})
    have_named_scope(lambda m: m.objects.recent(5), name="recent(5)").finding({"limit": 5})
    have_named_scope("recent").finding(lambda m: m.objects.order_by("-created"))
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from model_matchers.adapters.base import ModelAdapter
from model_matchers.core.matchers.base import Matcher, label
from model_matchers.core.options import extract_options

FINDER_OPTIONS = ("conditions", "order", "limit", "offset", "select", "distinct")


class NamedScopeMatcher(Matcher):
    kind = "named_scope"

    def __init__(self, scope_call: str | Callable, name: str | None = None):
        super().__init__()
        self.scope_call = scope_call
        self.name = name or label(scope_call)
        self._finding: Mapping[str, Any] | Callable | None = None

    def finding(self, options: Mapping[str, Any] | Callable | None) -> "NamedScopeMatcher":
        """
        預期的查詢：finder options dict，或 (model) -> QuerySet。

        Raises:
            UnsupportedOptionError: dict 裡有不認得的 finder option
        """
        if options is None or callable(options):
            return self._clone(_finding=options)
        values = extract_options([options], *FINDER_OPTIONS)
        finding = {key: value for key, value in zip(FINDER_OPTIONS, values) if value is not None}
        return self._clone(_finding=finding)

    def description(self) -> str:
        description = f"have a named scope for {self.name}"
        if callable(self._finding):
            description += f" finding {label(self._finding)}"
        elif self._finding is not None:
            rendered = ", ".join(f"{key}={value!r}" for key, value in self._finding.items())
            description += f" finding {rendered}"
        return description

    def _evaluate(self, subject: Any, model: type, adapter: ModelAdapter) -> bool:
        query = adapter.scope(model, self.scope_call)
        if query is None:
            return self._fail(f"{model.__name__} 沒有名為 {self.name} 的 scope")

        actual = adapter.query_signature(query)
        if actual is None:
            return self._fail(f"{self.name} 回傳的不是 QuerySet（{type(query).__name__}）")

        if self._finding is None:
            return True

        if callable(self._finding):
            expected_query = self._finding(model)
        else:
            expected_query = adapter.find(model, self._finding)
        expected = adapter.query_signature(expected_query)

        if actual != expected:
            return self._fail(f"scope 的 SQL 不同\n  實際: {actual}\n  預期: {expected}")
        return True


def have_named_scope(scope_call: str | Callable, name: str | None = None) -> NamedScopeMatcher:
    return NamedScopeMatcher(scope_call, name=name)
