"""
Macro — 宣告式產生 model 測試

在測試類別（或模組）裡呼叫，每個目標產生一個 pytest 測試函式：

    class TestUser:
        described_type = User

        should_not_allow_mass_assignment_of("is_admin")
        should_have_one("profile")
        should_have_many("dogs", through="ownerships")
        should_belong_to("company", dependent="cascade")
        should_have_db_column("email", type="string", limit=255)
        should_have_db_index(["commentable_type", "commentable_id"])

產生的測試名稱來自 matcher 的 description，例如
`test_should_have_many_dogs_through_ownerships`；測試本體使用
`subject` 與 `model_adapter` 兩個 fixture（由 model_matchers.plugin 提供）。

最後一個參數可以是 option dict，也可以直接用 keyword 傳入；
不認得的 option 在定義階段就拋出 UnsupportedOptionError。
"""

from __future__ import annotations

import functools
import re
import sys
import warnings
from typing import Any, Callable

import pytest

from model_matchers.config.config import Config
from model_matchers.core.assertions import assert_accepts, assert_rejects
from model_matchers.core.event_bus import event_bus
from model_matchers.core.exceptions import ConfigError, DeprecatedMacroError
from model_matchers.core.matchers import (
    allow_mass_assignment_of,
    belong_to,
    have_and_belong_to_many,
    have_class_method,
    have_db_column,
    have_db_index,
    have_instance_method,
    have_many,
    have_named_scope,
    have_one,
    have_readonly_attribute,
)
from model_matchers.core.matchers.base import Matcher
from model_matchers.core.matchers.named_scope import FINDER_OPTIONS
from model_matchers.core.options import extract_options
from model_matchers.utils.logger import logger


def _macro(func: Callable) -> Callable:
    """把呼叫端的 namespace（class body 或模組）當成第一個參數傳進 macro"""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        namespace = sys._getframe(1).f_locals
        return func(namespace, *args, **kwargs)
    return wrapper


def _targets(names: tuple, options: dict) -> list:
    targets = list(names)
    if options:
        if targets and isinstance(targets[-1], dict):
            raise ConfigError("option dict 與 keyword option 不能同時使用")
        targets.append(options)
    return targets


def _slug(text: str) -> str:
    return re.sub(r"[^0-9a-zA-Z]+", "_", text).strip("_").lower()


def _define_test(namespace: dict, matcher: Matcher, accept: bool = True) -> Callable:
    """在 namespace 裡註冊一個執行 assert_accepts / assert_rejects 的測試函式"""
    title = f"should {'' if accept else 'not '}{matcher.description()}"
    name = f"test_{_slug(title)}"
    if name in namespace:
        suffix = 2
        while f"{name}_{suffix}" in namespace:
            suffix += 1
        name = f"{name}_{suffix}"

    assertion = assert_accepts if accept else assert_rejects
    in_class = "__module__" in namespace and "__qualname__" in namespace

    if in_class:
        def test(self, subject, model_adapter):
            assertion(matcher.using(model_adapter), subject)
        test.__qualname__ = f"{namespace['__qualname__']}.{name}"
    else:
        def test(subject, model_adapter):
            assertion(matcher.using(model_adapter), subject)
        test.__qualname__ = name

    test.__name__ = name
    test.__doc__ = title
    test.__module__ = namespace.get("__module__") or namespace.get("__name__")
    namespace[name] = pytest.mark.model_matchers(test)

    logger.debug(f"[macro] 註冊 {name}")
    event_bus.emit("macro.registered", {
        "test": name,
        "description": title,
        "matcher": matcher.kind,
    }, source="macros")
    return test


def _deprecate(name: str, replacement: str) -> None:
    if Config.STRICT_DEPRECATIONS:
        raise DeprecatedMacroError(name, replacement)
    logger.warning(
        f"[DEPRECATION] {name} 已棄用，請改用 {replacement}",
        extra={"event": {"macro": name, "replacement": replacement}},
    )
    event_bus.emit("macro.deprecated", {"macro": name, "replacement": replacement}, source="macros")
    warnings.warn(
        f"{name} is deprecated. Use {replacement} instead.",
        DeprecationWarning,
        stacklevel=4,
    )


# ── mass assignment / 唯讀 ──

@_macro
def should_allow_mass_assignment_of(namespace: dict, *attributes: Any, **options: Any) -> None:
    """
    欄位可以透過 mass assignment 設定。

        should_allow_mass_assignment_of("first_name", "last_name")
    """
    targets = _targets(attributes, options)
    extract_options(targets)
    for attribute in targets:
        _define_test(namespace, allow_mass_assignment_of(attribute))


@_macro
def should_not_allow_mass_assignment_of(namespace: dict, *attributes: Any, **options: Any) -> None:
    """
    欄位不能透過 mass assignment 設定。

        should_not_allow_mass_assignment_of("password", "is_admin")
    """
    targets = _targets(attributes, options)
    extract_options(targets)
    for attribute in targets:
        _define_test(namespace, allow_mass_assignment_of(attribute), accept=False)


@_macro
def should_have_readonly_attributes(namespace: dict, *attributes: Any, **options: Any) -> None:
    """
    紀錄建立後欄位就不能再修改。

        should_have_readonly_attributes("ssn")
    """
    targets = _targets(attributes, options)
    extract_options(targets)
    for attribute in targets:
        _define_test(namespace, have_readonly_attribute(attribute))


# ── 關聯 ──

@_macro
def should_have_many(namespace: dict, *associations: Any, **options: Any) -> None:
    """
    has_many 關聯存在，且對方資料表有 foreign key 欄位。支援 GenericRelation。

    Options:
        through: through 關聯名稱或 through model
        dependent: on_delete 行為（"cascade" 或 models.CASCADE）

        should_have_many("friends")
        should_have_many("enemies", through="friendships")
        should_have_many("enemies", dependent="cascade")
    """
    targets = _targets(associations, options)
    through, dependent = extract_options(targets, "through", "dependent")
    for association in targets:
        _define_test(namespace, have_many(association).through(through).dependent(dependent))


@_macro
def should_have_one(namespace: dict, *associations: Any, **options: Any) -> None:
    """
    has_one 關聯（反向 OneToOneField）存在，且對方資料表有 foreign key 欄位。

        should_have_one("profile", dependent="cascade")
    """
    targets = _targets(associations, options)
    dependent, through = extract_options(targets, "dependent", "through")
    for association in targets:
        _define_test(namespace, have_one(association).dependent(dependent).through(through))


@_macro
def should_have_and_belong_to_many(namespace: dict, *associations: Any, **options: Any) -> None:
    """
    ManyToMany 關聯存在，且 join table 就位。

        should_have_and_belong_to_many("tags", "categories")
    """
    targets = _targets(associations, options)
    extract_options(targets)
    for association in targets:
        _define_test(namespace, have_and_belong_to_many(association))


@_macro
def should_belong_to(namespace: dict, *associations: Any, **options: Any) -> None:
    """
    belongs_to 關聯存在，且自己的資料表有 foreign key 欄位。支援 GenericForeignKey。

        should_belong_to("owner", dependent="cascade")
    """
    targets = _targets(associations, options)
    dependent = extract_options(targets, "dependent")
    for association in targets:
        _define_test(namespace, belong_to(association).dependent(dependent))


# ── methods ──

@_macro
def should_have_class_methods(namespace: dict, *methods: Any, **options: Any) -> None:
    """
    model class 上有這些方法。

        should_have_class_methods("from_db", "check")
    """
    targets = _targets(methods, options)
    extract_options(targets)
    for method in targets:
        _define_test(namespace, have_class_method(method))


@_macro
def should_have_instance_methods(namespace: dict, *methods: Any, **options: Any) -> None:
    """
    model instance 上有這些方法。

        should_have_instance_methods("save", "full_clean")
    """
    targets = _targets(methods, options)
    extract_options(targets)
    for method in targets:
        _define_test(namespace, have_instance_method(method))


# ── schema ──

@_macro
def should_have_db_columns(namespace: dict, *columns: Any, **options: Any) -> None:
    """
    model 的資料表上有這些欄位。也可以用 should_have_db_column。

    Options（與欄位定義相同）:
        type, precision, limit, default, null, scale, sql_type

        should_have_db_columns("id", "email", "name", "created_at")
        should_have_db_column("email", type="string", limit=255)
        should_have_db_column("salary", type="decimal", precision=15, scale=2)
        should_have_db_column("admin", default=False, null=False)
    """
    targets = _targets(columns, options)
    column_type, precision, limit, default, null, scale, sql_type = extract_options(
        targets, "type", "precision", "limit", "default", "null", "scale", "sql_type",
    )
    for name in targets:
        matcher = have_db_column(name).of_type(column_type).with_options(
            precision=precision, limit=limit,
            default=default, null=null,
            scale=scale, sql_type=sql_type,
        )
        _define_test(namespace, matcher)


should_have_db_column = should_have_db_columns


@_macro
def should_have_db_indices(namespace: dict, *columns: Any, **options: Any) -> None:
    """
    資料表上有這些欄位（或欄位組合）的 index。也可以用 should_have_db_index。

    Options:
        unique: True 必須是 unique、False 必須不是、None（預設）不在意

        should_have_db_indices("email", "name", ["commentable_type", "commentable_id"])
        should_have_db_index("age")
        should_have_db_index("ssn", unique=True)
    """
    targets = _targets(columns, options)
    unique = extract_options(targets, "unique")
    for column in targets:
        _define_test(namespace, have_db_index(column).unique(unique))


should_have_db_index = should_have_db_indices


@_macro
def should_have_index(namespace: dict, *args: Any, **kwargs: Any) -> None:
    """已棄用，請改用 should_have_db_index"""
    _deprecate("should_have_index", "should_have_db_index")
    should_have_db_index.__wrapped__(namespace, *args, **kwargs)


@_macro
def should_have_indices(namespace: dict, *args: Any, **kwargs: Any) -> None:
    """已棄用，請改用 should_have_db_indices"""
    _deprecate("should_have_indices", "should_have_db_indices")
    should_have_db_indices.__wrapped__(namespace, *args, **kwargs)


# ── scopes ──

@_macro
def should_have_named_scope(namespace: dict, scope_call: Any, find_options: Any = None,
                            name: str | None = None, **options: Any) -> None:
    """
    已棄用的寫法，保留給舊測試。

    scope_call 是 default manager 上的方法名稱，或 (model) -> QuerySet；
    find_options 是 finder options（conditions / order / limit / offset / select / distinct）
    或 (model) -> QuerySet。產生的 SQL 必須相同。

        should_have_named_scope("visible", conditions={"visible": True})
        should_have_named_scope(lambda m: m.objects.recent(5), name="recent(5)", limit=5)
    """
    if options:
        if find_options is not None:
            raise ConfigError("find_options 與 keyword option 不能同時使用")
        extract_options([options], *FINDER_OPTIONS)
        find_options = options
    matcher = have_named_scope(scope_call, name=name).finding(find_options or None)
    _define_test(namespace, matcher)
