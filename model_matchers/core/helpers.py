"""
輔助函式

pretty_error_messages() 把驗證錯誤轉成一行一則的可讀訊息，
除了非欄位錯誤之外，都附上目前的值：

    try:
        user.full_clean()
    except ValidationError as e:
        pretty_error_messages(user, e)
        # ["email 此欄位不可為空 ('')", "__all__ 密碼不一致"]
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable

# 不屬於任何欄位的錯誤 key
NON_FIELD_KEYS = {"__all__", "base"}


def _iter_errors(errors: Any) -> Iterable[tuple[str, str]]:
    message_dict = getattr(errors, "message_dict", None)
    if message_dict is not None:
        errors = message_dict
    if isinstance(errors, Mapping):
        for attribute, messages in errors.items():
            if isinstance(messages, str):
                messages = [messages]
            for message in messages:
                yield str(attribute), str(message)
        return
    if hasattr(errors, "messages"):
        # 沒有欄位資訊的 ValidationError
        for message in errors.messages:
            yield "__all__", str(message)
        return
    for attribute, message in errors:
        yield str(attribute), str(message)


def pretty_error_messages(obj: Any, errors: Any = None) -> list[str]:
    """
    Args:
        obj: 有錯誤的 model instance
        errors: ValidationError、{欄位: [訊息]} 或 (欄位, 訊息) 序列；
                省略時使用 obj.errors

    Returns:
        "欄位 訊息 (值)" 格式的字串列表
    """
    if errors is None:
        errors = getattr(obj, "errors", {})

    messages = []
    for attribute, message in _iter_errors(errors):
        line = f"{attribute} {message}"
        if attribute not in NON_FIELD_KEYS:
            line += f" ({getattr(obj, attribute, None)!r})"
        messages.append(line)
    return messages
