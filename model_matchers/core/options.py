"""
Macro option 解析

macro 的參數長這樣：目標名稱…，最後一個可以是 option dict。

    targets = ["dogs", "cats", {"through": "owners"}]
    through, dependent = extract_options(targets, "through", "dependent")
    # targets == ["dogs", "cats"]
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from model_matchers.core.exceptions import UnsupportedOptionError


def extract_options(args: list, *keys: str) -> Any:
    """
    從 args 尾端取出 option dict，依 keys 順序回傳值。

    Args:
        args: 目標名稱列表，會被原地修改（移除尾端的 dict）
        keys: 認得的 option 名稱

    Returns:
        只有一個 key 時回傳該值，其餘情況回傳 tuple；沒給的 key 為 None

    Raises:
        UnsupportedOptionError: dict 裡有不認得的 key
    """
    options: dict = {}
    if args and isinstance(args[-1], Mapping):
        options = dict(args.pop())

    values = tuple(options.pop(key, None) for key in keys)
    if options:
        raise UnsupportedOptionError(list(options), keys)

    if len(keys) == 1:
        return values[0]
    return values
