"""
Django ORM adapter

把 Django 的 `Model._meta`、`connection.introspection`、`transaction.atomic`
轉成 matcher 用的 Reflection / ColumnInfo / IndexInfo。

關聯種類對照：
    ForeignKey / OneToOneField / GenericForeignKey   → belongs_to
    OneToOneRel（反向）                               → has_one
    ManyToOneRel（反向）/ GenericRelation              → has_many
    ManyToManyField / ManyToManyRel                   → has_and_belongs_to_many
    ManyToManyField(through=自訂 model)               → has_many through

用法：
    adapter = DjangoAdapter()            # 預設連線
    adapter = DjangoAdapter(using="replica")
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Iterator, Mapping

from django.apps import apps
from django.core.exceptions import EmptyResultSet, FieldDoesNotExist
from django.db import DatabaseError, connections, transaction
from django.db.models import Q
from django.db.models.query import QuerySet

from model_matchers.adapters.base import (
    BELONGS_TO,
    HAS_AND_BELONGS_TO_MANY,
    HAS_MANY,
    HAS_ONE,
    ColumnInfo,
    IndexInfo,
    Reflection,
)
from model_matchers.config.config import Config
from model_matchers.core.exceptions import PersistenceRequiredError
from model_matchers.utils.logger import logger
from model_matchers.utils.probes import preserved_state

# Django internal type → 欄位的邏輯型別
_LOGICAL_TYPES = {
    "AutoField": "integer",
    "SmallAutoField": "integer",
    "BigAutoField": "big_integer",
    "IntegerField": "integer",
    "SmallIntegerField": "integer",
    "PositiveIntegerField": "integer",
    "PositiveSmallIntegerField": "integer",
    "BigIntegerField": "big_integer",
    "PositiveBigIntegerField": "big_integer",
    "CharField": "string",
    "SlugField": "string",
    "GenericIPAddressField": "string",
    "FileField": "string",
    "FilePathField": "string",
    "TextField": "text",
    "BooleanField": "boolean",
    "NullBooleanField": "boolean",
    "DecimalField": "decimal",
    "FloatField": "float",
    "DateField": "date",
    "DateTimeField": "datetime",
    "TimeField": "time",
    "DurationField": "duration",
    "BinaryField": "binary",
    "UUIDField": "uuid",
    "JSONField": "json",
}


def logical_type(internal_type: str | None) -> str | None:
    """CharField → string，未知型別去掉 Field 後轉小寫"""
    if not internal_type:
        return None
    if internal_type in _LOGICAL_TYPES:
        return _LOGICAL_TYPES[internal_type]
    return internal_type.removesuffix("Field").lower()


def _as_list(value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


class DjangoAdapter:
    """以 Django ORM 實作 ModelAdapter"""

    def __init__(self, using: str | None = None, reflect_schema: bool | None = None):
        self.using = using or Config.DATABASE_ALIAS
        self.reflect_schema = Config.REFLECT_SCHEMA if reflect_schema is None else reflect_schema

    def __repr__(self) -> str:
        return f"DjangoAdapter(using={self.using!r})"

    @property
    def connection(self):
        return connections[self.using]

    # ── model / table ──

    def model_class(self, subject: Any) -> type:
        return subject if isinstance(subject, type) else type(subject)

    def table_name(self, model: type) -> str:
        return model._meta.db_table

    def _models_by_table(self) -> dict[str, type]:
        models: dict[str, type] = {}
        for model in apps.get_models(include_auto_created=True):
            if model._meta.proxy:
                continue
            models.setdefault(model._meta.db_table, model)
        return models

    # ── associations ──

    def _find_relation(self, model: type, name: str):
        opts = model._meta
        try:
            field = opts.get_field(name)
        except FieldDoesNotExist:
            field = None
        if field is not None and not field.is_relation:
            return None
        if field is not None and not (field.auto_created and not field.concrete):
            return field

        # 反向關聯只認 accessor 名稱（dog_set），不認 related_query_name（dog）
        for rel in opts.get_fields(include_hidden=True):
            if rel.is_relation and rel.auto_created and not rel.concrete:
                if rel.get_accessor_name() == name:
                    return rel
        return None

    def reflection(self, model: type, name: str) -> Reflection | None:
        field = self._find_relation(model, name)
        if field is None:
            return None

        opts = model._meta

        # GenericForeignKey：polymorphic belongs_to
        if hasattr(field, "ct_field") and hasattr(field, "fk_field"):
            return Reflection(
                name=name,
                macro=BELONGS_TO,
                foreign_key_table=opts.db_table,
                foreign_keys=(
                    opts.get_field(field.fk_field).column,
                    opts.get_field(field.ct_field).column,
                ),
                polymorphic=True,
            )

        target = field.related_model

        # GenericRelation：polymorphic has_many
        if hasattr(field, "object_id_field_name"):
            target_opts = target._meta
            return Reflection(
                name=name,
                macro=HAS_MANY,
                target=target,
                foreign_key_table=target_opts.db_table,
                foreign_keys=(
                    target_opts.get_field(field.object_id_field_name).column,
                    target_opts.get_field(field.content_type_field_name).column,
                ),
                polymorphic=True,
            )

        if field.many_to_many:
            return self._many_to_many_reflection(model, name, field)

        if not field.auto_created:
            # ForeignKey / OneToOneField，foreign key 在自己身上
            on_delete = field.remote_field.on_delete
            return Reflection(
                name=name,
                macro=BELONGS_TO,
                target=target,
                foreign_key_table=opts.db_table,
                foreign_keys=(field.column,),
                dependent=self._dependent_name(on_delete),
                on_delete=on_delete,
            )

        # 反向關聯，foreign key 在對方身上
        return Reflection(
            name=name,
            macro=HAS_ONE if field.one_to_one else HAS_MANY,
            target=target,
            foreign_key_table=target._meta.db_table,
            foreign_keys=(field.field.column,),
            dependent=self._dependent_name(field.on_delete),
            on_delete=field.on_delete,
        )

    def _many_to_many_reflection(self, model: type, name: str, field) -> Reflection:
        forward = not field.auto_created
        m2m_field = field if forward else field.field
        through = m2m_field.remote_field.through

        if through._meta.auto_created:
            return Reflection(
                name=name,
                macro=HAS_AND_BELONGS_TO_MANY,
                target=field.related_model,
                foreign_key_table=through._meta.db_table,
                foreign_keys=(m2m_field.m2m_column_name(), m2m_field.m2m_reverse_name()),
                join_table=through._meta.db_table,
            )

        return Reflection(
            name=name,
            macro=HAS_MANY,
            target=field.related_model,
            through=self._through_accessor(model, through),
            through_model=through,
        )

    def _through_accessor(self, model: type, through: type) -> str | None:
        """model 上指向 through model 的反向關聯名稱（例如 ownerships）"""
        for rel in model._meta.related_objects:
            if rel.related_model is through and rel.one_to_many:
                return rel.get_accessor_name()
        return None

    @staticmethod
    def _dependent_name(on_delete: Callable | None) -> str | None:
        if on_delete is None:
            return None
        return getattr(on_delete, "__name__", str(on_delete)).lower()

    # ── columns ──

    def _field_column(self, field) -> ColumnInfo:
        internal = field.get_internal_type()
        if field.is_relation:
            internal = field.target_field.get_internal_type()
        return ColumnInfo(
            name=field.column,
            type=logical_type(internal),
            limit=getattr(field, "max_length", None),
            precision=getattr(field, "max_digits", None),
            scale=getattr(field, "decimal_places", None),
            default=field.default if field.has_default() else None,
            null=field.null,
            sql_type=field.db_type(self.connection),
        )

    def attribute_name(self, instance: Any, name: str) -> str | None:
        """
        屬性名稱對應到實際存放值的 attribute。

        外鍵 company 對應 company_id；property 或非 Django 物件照原名；
        完全找不到回傳 None。
        """
        opts = getattr(instance, "_meta", None)
        if opts is not None:
            try:
                field = opts.get_field(name)
            except FieldDoesNotExist:
                field = None
            if field is not None and field.concrete:
                return field.attname
        if hasattr(instance, name):
            return name
        return None

    def column_for_attribute(self, model: type, name: str) -> ColumnInfo | None:
        """只看 model metadata，不碰資料庫；不是 Django model 回傳 None"""
        opts = getattr(model, "_meta", None)
        if opts is None:
            return None
        try:
            field = opts.get_field(name)
        except FieldDoesNotExist:
            return None
        if not field.concrete or field.column is None:
            return None
        return self._field_column(field)

    def _live_columns(self, table: str) -> dict[str, ColumnInfo] | None:
        introspection = self.connection.introspection
        with self.connection.cursor() as cursor:
            if table not in introspection.table_names(cursor):
                return None
            description = introspection.get_table_description(cursor, table)

        columns: dict[str, ColumnInfo] = {}
        for info in description:
            try:
                internal = introspection.get_field_type(info.type_code, info)
            except KeyError:
                internal = None
            columns[info.name] = ColumnInfo(
                name=info.name,
                type=logical_type(internal),
                limit=info.internal_size or None,
                precision=info.precision,
                scale=info.scale,
                default=info.default,
                null=bool(info.null_ok),
                sql_type=str(info.type_code),
            )
        return columns

    def columns(self, table: str) -> dict[str, ColumnInfo] | None:
        """
        取得 table 的欄位。

        Model 上的欄位定義提供型別、長度、預設值等屬性；
        reflect_schema 開啟時，只保留 live table 也有的欄位。

        Returns:
            欄位名稱 → ColumnInfo；table 不存在回傳 None
        """
        model = self._models_by_table().get(table)
        declared: dict[str, ColumnInfo] = {}
        if model is not None:
            for field in model._meta.local_concrete_fields:
                declared[field.column] = self._field_column(field)

        if not self.reflect_schema:
            return declared if model is not None else None

        live = self._live_columns(table)
        if live is None:
            logger.debug(f"資料表 {table} 不存在於 {self.using} 連線")
            return None

        merged = {name: declared.get(name, info) for name, info in live.items()}
        missing = sorted(set(declared) - set(live))
        if missing:
            logger.debug(f"{table} 缺少 live 欄位: {', '.join(missing)}")
        return merged

    # ── indices ──

    def _live_indices(self, table: str) -> list[IndexInfo]:
        with self.connection.cursor() as cursor:
            constraints = self.connection.introspection.get_constraints(cursor, table)

        indices = []
        for name, info in constraints.items():
            if info.get("primary_key"):
                continue
            if not (info.get("index") or info.get("unique")):
                continue
            indices.append(IndexInfo(
                name=name,
                columns=tuple(info["columns"]),
                unique=bool(info["unique"]),
            ))
        return indices

    def _declared_indices(self, model: type) -> list[IndexInfo]:
        opts = model._meta

        def column(name: str) -> str:
            return opts.get_field(name.lstrip("-")).column

        indices = []
        for field in opts.local_concrete_fields:
            if field.primary_key:
                continue
            if field.unique or field.db_index:
                indices.append(IndexInfo(name=field.column, columns=(field.column,), unique=field.unique))
        for index in opts.indexes:
            columns = tuple(column(f) for f in index.fields)
            indices.append(IndexInfo(name=index.name or "_".join(columns), columns=columns))
        for fields in opts.unique_together:
            columns = tuple(column(f) for f in fields)
            indices.append(IndexInfo(name="_".join(columns), columns=columns, unique=True))
        for constraint in opts.constraints:
            fields = getattr(constraint, "fields", ())
            if fields:
                columns = tuple(column(f) for f in fields)
                indices.append(IndexInfo(name=constraint.name, columns=columns, unique=True))
        return indices

    def indices(self, table: str) -> list[IndexInfo]:
        if self.reflect_schema:
            return self._live_indices(table)
        model = self._models_by_table().get(table)
        return self._declared_indices(model) if model is not None else []

    # ── attribute 寫入 ──

    def assign_attributes(self, instance: Any, values: Mapping[str, Any]) -> None:
        """
        mass assignment：model 有 assign_attributes() 就交給它，
        否則跳過 editable=False 的欄位（與 ModelForm 的規則相同）。
        """
        hook = getattr(instance, "assign_attributes", None)
        if callable(hook):
            hook(dict(values))
            return

        opts = getattr(instance, "_meta", None)
        for name, value in values.items():
            field = None
            if opts is not None:
                try:
                    field = opts.get_field(name)
                except FieldDoesNotExist:
                    field = None
            if field is not None and not field.editable:
                logger.debug(f"mass assignment 略過受保護欄位 {name}")
                continue
            setattr(instance, name, value)

    def persist(self, instance: Any) -> None:
        try:
            instance.save(using=self.using)
        except DatabaseError as e:
            raise PersistenceRequiredError(type(instance).__name__, e) from e

    def reload(self, instance: Any) -> None:
        instance.refresh_from_db(using=self.using)

    @contextmanager
    def transient(self, instance: Any) -> Iterator[None]:
        """區塊內的寫入一律 rollback，instance 的記憶體狀態也還原"""
        with preserved_state(instance):
            with transaction.atomic(using=self.using):
                yield
                transaction.set_rollback(True, using=self.using)

    # ── scopes ──

    def scope(self, model: type, scope_call: str | Callable) -> Any:
        if callable(scope_call):
            return scope_call(model)
        method = getattr(model._default_manager, scope_call, None)
        if method is None:
            method = getattr(model, scope_call, None)
        if method is None:
            return None
        return method() if callable(method) else method

    def find(self, model: type, options: Mapping[str, Any]) -> QuerySet:
        """用 finder options 直接組出 QuerySet"""
        queryset = model._default_manager.all()
        conditions = options.get("conditions")
        if conditions is not None:
            if isinstance(conditions, Q):
                queryset = queryset.filter(conditions)
            else:
                queryset = queryset.filter(**conditions)
        if options.get("select") is not None:
            queryset = queryset.only(*_as_list(options["select"]))
        if options.get("order") is not None:
            queryset = queryset.order_by(*_as_list(options["order"]))
        if options.get("distinct"):
            queryset = queryset.distinct()

        offset = options.get("offset")
        limit = options.get("limit")
        if offset is not None or limit is not None:
            start = offset or 0
            stop = start + limit if limit is not None else None
            queryset = queryset[start:stop]
        return queryset

    def query_signature(self, query: Any) -> str | None:
        """QuerySet 編譯後的 SQL + 參數，不是 QuerySet 則回傳 None"""
        if not isinstance(query, QuerySet):
            return None
        try:
            sql, params = query.query.get_compiler(using=query.db).as_sql()
        except EmptyResultSet:
            return "<empty>"
        return f"{sql} -- {params!r}"
