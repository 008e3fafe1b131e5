"""
關聯 matcher：belong_to / have_one / have_many / have_and_belong_to_many

檢查順序：
    1. model 上有這個關聯
    2. 關聯種類正確
    3. through / dependent（有設定才檢查）
    4. foreign key 欄位（或 join table）真的存在於 schema

用法：
    assert_accepts(have_many("dogs").through("ownerships"), User)
    assert_accepts(belong_to("owner").dependent("cascade"), Dog)
"""

from __future__ import annotations

from typing import Any

from model_matchers.adapters.base import (
    BELONGS_TO,
    HAS_AND_BELONGS_TO_MANY,
    HAS_MANY,
    HAS_ONE,
    ModelAdapter,
    Reflection,
)
from model_matchers.core.matchers.base import Matcher, label

_MACRO_DESCRIPTIONS = {
    BELONGS_TO: "belong to",
    HAS_ONE: "have one",
    HAS_MANY: "have many",
    HAS_AND_BELONGS_TO_MANY: "have and belong to many",
}


class AssociationMatcher(Matcher):
    """確認 model 宣告了指定種類的關聯，且 schema 上有對應欄位"""

    kind = "association"

    def __init__(self, macro: str, name: str):
        super().__init__()
        self.macro = macro
        self.name = str(name)
        self._through: Any = None
        self._dependent: Any = None

    def through(self, through: Any) -> "AssociationMatcher":
        """through 關聯名稱或 through model；None 表示不檢查"""
        return self._clone(_through=through)

    def dependent(self, dependent: Any) -> "AssociationMatcher":
        """on_delete 行為：名稱（"cascade"）或 Django handler（models.CASCADE）；None 表示不檢查"""
        return self._clone(_dependent=dependent)

    def description(self) -> str:
        description = f"{_MACRO_DESCRIPTIONS[self.macro]} {self.name}"
        if self._through is not None:
            description += f" through {label(self._through)}"
        if self._dependent is not None:
            description += f" dependent => {label(self._dependent)}"
        return description

    def _evaluate(self, subject: Any, model: type, adapter: ModelAdapter) -> bool:
        reflection = adapter.reflection(model, self.name)
        if reflection is None:
            return self._fail(f"找不到名為 {self.name} 的關聯")

        if reflection.macro != self.macro:
            return self._fail(f"實際的關聯種類是 {reflection.macro}")

        if not self._through_matches(reflection, model, adapter):
            return False

        if not self._dependent_matches(reflection):
            return False

        if reflection.through_model is not None:
            return True
        return self._foreign_keys_exist(reflection, adapter)

    def _through_matches(self, reflection: Reflection, model: type, adapter: ModelAdapter) -> bool:
        if self._through is None:
            return True

        candidates = [reflection.through, reflection.through_model]
        if reflection.through_model is not None:
            candidates.append(reflection.through_model.__name__)
        if reflection.through_model is None or self._through not in candidates:
            return self._fail(f"{self.name} 沒有透過 {label(self._through)} 的關聯")

        if reflection.through and adapter.reflection(model, reflection.through) is None:
            return self._fail(f"through 關聯 {reflection.through} 不存在")
        return True

    def _dependent_matches(self, reflection: Reflection) -> bool:
        if self._dependent is None:
            return True

        if callable(self._dependent):
            ok = self._dependent is reflection.on_delete
        else:
            ok = str(self._dependent).lower() == (reflection.dependent or "")
        if not ok:
            return self._fail(
                f"{self.name} 應該有 {label(self._dependent)} dependency"
                f"（實際: {reflection.dependent}）"
            )
        return True

    def _foreign_keys_exist(self, reflection: Reflection, adapter: ModelAdapter) -> bool:
        table = reflection.foreign_key_table
        if not table:
            return True

        columns = adapter.columns(table)
        if columns is None:
            if reflection.join_table:
                return self._fail(f"join table {table} 不存在")
            return self._fail(f"資料表 {table} 不存在")

        for column in reflection.foreign_keys:
            if column not in columns:
                return self._fail(f"{table} 沒有 foreign key 欄位 {column}")
        return True


def belong_to(name: str) -> AssociationMatcher:
    return AssociationMatcher(BELONGS_TO, name)


def have_one(name: str) -> AssociationMatcher:
    return AssociationMatcher(HAS_ONE, name)


def have_many(name: str) -> AssociationMatcher:
    return AssociationMatcher(HAS_MANY, name)


def have_and_belong_to_many(name: str) -> AssociationMatcher:
    return AssociationMatcher(HAS_AND_BELONGS_TO_MANY, name)
