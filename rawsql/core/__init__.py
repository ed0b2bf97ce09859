"""Public core API for case conversion, WHERE compilation, and CRUD helpers."""

from .case import camel_key, snake_key, to_camel, to_snake
from .conditions import (
    MappingWhereBuilder,
    OrderBy,
    ensure_identifier,
    where_and,
    where_and_like,
    where_in,
    where_or,
    where_or_like,
)
from .diagnostics import dump_error
from .query_builder import (
    CompiledStatement,
    DeleteQuery,
    InsertQuery,
    QueryBuilder,
    SelectQuery,
    UpdateQuery,
    bind_params,
)
from .raw_sql import PageResult, RawSQL
from .types import ExecuteResult, FieldMapping

__all__ = [
    "camel_key",
    "snake_key",
    "to_camel",
    "to_snake",
    "MappingWhereBuilder",
    "OrderBy",
    "ensure_identifier",
    "where_and",
    "where_and_like",
    "where_in",
    "where_or",
    "where_or_like",
    "dump_error",
    "CompiledStatement",
    "DeleteQuery",
    "InsertQuery",
    "QueryBuilder",
    "SelectQuery",
    "UpdateQuery",
    "bind_params",
    "PageResult",
    "RawSQL",
    "ExecuteResult",
    "FieldMapping",
]
