"""
Matcher 斷言

matcher 評估結果與 pytest 通過/失敗之間唯一的橋樑。
支援 soft assert（收集所有失敗，最後一次報告）。

用法：
    from model_matchers.core.assertions import assert_accepts, assert_rejects, soft_assert

    assert_accepts(have_many("dogs"), User)
    assert_rejects(allow_mass_assignment_of("is_admin"), user)

    # Soft Assert（不立即中斷）
    with soft_assert() as sa:
        sa.accepts(have_db_column("email"), User)
        sa.accepts(have_db_index("email").unique(), User)
    # 結束 with 時，如果有任何失敗，才一次拋出全部
"""

from __future__ import annotations

from typing import Any

from model_matchers.core.matchers.base import Matcher


def assert_accepts(matcher: Matcher, subject: Any, msg: str = "") -> None:
    """matcher 必須接受 subject，否則以 failure_message 讓測試失敗"""
    if not matcher.matches(subject):
        raise AssertionError(msg or matcher.failure_message())


def assert_rejects(matcher: Matcher, subject: Any, msg: str = "") -> None:
    """matcher 必須拒絕 subject，否則以 failure_message_when_negated 讓測試失敗"""
    if matcher.matches(subject):
        raise AssertionError(msg or matcher.failure_message_when_negated())


class SoftAssert:
    """
    Soft Assert — 收集所有失敗，最後一次報告。

    用法:
        with soft_assert() as sa:
            sa.accepts(have_one("profile"), User)
            sa.rejects(allow_mass_assignment_of("password"), User)
        # 結束 with 時才 raise（如果有失敗）
    """

    def __init__(self):
        self._failures: list[str] = []

    def accepts(self, matcher: Matcher, subject: Any) -> bool:
        if matcher.matches(subject):
            return True
        self._failures.append(matcher.failure_message())
        return False

    def rejects(self, matcher: Matcher, subject: Any) -> bool:
        if not matcher.matches(subject):
            return True
        self._failures.append(matcher.failure_message_when_negated())
        return False

    def __enter__(self) -> "SoftAssert":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is None and self._failures:
            summary = f"Soft Assert: {len(self._failures)} 項失敗\n"
            for i, msg in enumerate(self._failures, 1):
                summary += f"  {i}. {msg}\n"
            raise AssertionError(summary)

    @property
    def failure_count(self) -> int:
        return len(self._failures)


def soft_assert() -> SoftAssert:
    """建立 Soft Assert context manager"""
    return SoftAssert()
