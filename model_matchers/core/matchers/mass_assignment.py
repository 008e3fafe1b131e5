"""
mass assignment matcher

不讀受保護欄位清單，而是實際透過 mass assignment 路徑寫一個探測值，
看值有沒有變。結束後 instance 還原成原本的狀態。
"""

from __future__ import annotations

from typing import Any

from model_matchers.adapters.base import ModelAdapter
from model_matchers.core.exceptions import UnknownAttributeError
from model_matchers.core.matchers.base import Matcher
from model_matchers.utils.probes import preserved_state, probe_value


class MassAssignmentMatcher(Matcher):
    kind = "mass_assignment"

    def __init__(self, attribute: str):
        super().__init__()
        self.attribute = str(attribute)

    def description(self) -> str:
        return f"allow mass assignment of {self.attribute}"

    def _evaluate(self, subject: Any, model: type, adapter: ModelAdapter) -> bool:
        instance = model() if isinstance(subject, type) else subject
        attribute = adapter.attribute_name(instance, self.attribute)
        if attribute is None:
            raise UnknownAttributeError(model.__name__, self.attribute)
        column = adapter.column_for_attribute(model, attribute)

        with preserved_state(instance):
            current = getattr(instance, attribute, None)
            probe = probe_value(
                current,
                column.type if column else None,
                column.limit if column else None,
            )
            adapter.assign_attributes(instance, {attribute: probe})
            changed = getattr(instance, attribute, None) != current

        if not changed:
            return self._fail(f"{self.attribute} 在 mass assignment 時受到保護")
        return True


def allow_mass_assignment_of(attribute: str) -> MassAssignmentMatcher:
    return MassAssignmentMatcher(attribute)
