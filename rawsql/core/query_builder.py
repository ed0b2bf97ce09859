"""Immutable statement builders executed through an async database port.

Statements are written with `:name` placeholders and a named parameter
mapping. `bind_params` rewrites them for dialects whose driver expects
positional parameters, so WHERE fragments compiled from field mappings work
the same on every backend.

Every builder method returns a new statement, so a filtered `SelectQuery`
(a "view") can be counted, ordered, and sliced without mutating the
original.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from .conditions import OrderBy, ensure_identifier
from .contracts import AsyncDatabasePort, DialectPort
from .types import ExecuteResult, MaybeRow, NamedParams, QueryParams, Rows

# Quoted literals and identifiers are matched whole so colons inside them
# are never taken for placeholders; only group 1 marks a placeholder.
_NAMED_PARAM_RE = re.compile(
    r"'(?:[^']|'')*'"
    r"|\"(?:[^\"]|\"\")*\""
    r"|(?<![:\w]):([A-Za-z_][A-Za-z0-9_]*)"
)

LIMIT_KEY = "__limit"
OFFSET_KEY = "__offset"
SET_PREFIX = "__set_"


@dataclass(frozen=True)
class CompiledStatement:
    """Represents a compiled SQL statement with its bound parameters."""

    sql: str
    params: QueryParams


def bind_params(
    sql: str, params: Optional[Mapping[str, Any]], dialect: DialectPort
) -> Tuple[str, QueryParams]:
    """Adapt `:name` placeholders and named parameters to the dialect.

    `:name` inside single-quoted strings or double-quoted identifiers is
    left as literal text.

    Args:
        sql: SQL written with `:name` placeholders.
        params: Named parameters; unused keys are ignored.
        dialect: Target dialect.

    Returns:
        SQL and parameters in the dialect's paramstyle.

    Raises:
        ValueError: If a placeholder has no matching parameter.
    """

    if dialect.paramstyle == "named":
        return sql, dict(params) if params else None

    matches = [m for m in _NAMED_PARAM_RE.finditer(sql) if m.group(1)]
    if not matches:
        return sql, None

    values = params or {}
    positional: List[Any] = []
    pieces: List[str] = []
    last = 0
    for match in matches:
        name = match.group(1)
        if name not in values:
            raise ValueError(f"Missing value for parameter :{name}")
        pieces.append(_escape_literal(sql[last : match.start()], dialect))
        pieces.append(dialect.placeholder(name))
        positional.append(values[name])
        last = match.end()
    pieces.append(_escape_literal(sql[last:], dialect))
    return "".join(pieces), positional


def _escape_literal(text: str, dialect: DialectPort) -> str:
    if dialect.paramstyle == "format":
        return text.replace("%", "%%")
    return text


def quote_column(col: str, dialect: DialectPort) -> str:
    """Quote a plain or dotted column name part by part."""

    ensure_identifier(col)
    return ".".join(dialect.q(part) for part in col.split("."))


def compile_order_by(order_by: Sequence[OrderBy], dialect: DialectPort) -> str:
    """Compile `ORDER BY` clause from ordering inputs, or `""` when empty."""

    if not order_by:
        return ""

    ordered_cols = ", ".join(
        f"{quote_column(item.col, dialect)} {'DESC' if item.desc else 'ASC'}"
        for item in order_by
    )
    return f" ORDER BY {ordered_cols}"


_LEADING_JOINER_RE = re.compile(r"^\s*(AND|OR)\s+", re.IGNORECASE)


def _where_clause(where_sql: str) -> str:
    # An empty mapping followed by " AND ..." leaves a dangling joiner.
    body = _LEADING_JOINER_RE.sub("", where_sql or "").strip()
    return f" WHERE {body}" if body else ""


async def _execute(
    db: AsyncDatabasePort, compiled: CompiledStatement
) -> ExecuteResult:
    cursor = await db.execute(compiled.sql, compiled.params)
    return ExecuteResult(
        rowcount=getattr(cursor, "rowcount", -1),
        lastrowid=db.dialect.get_lastrowid(cursor),
    )


@dataclass(frozen=True)
class SelectQuery:
    """An unmaterialised `SELECT` over one table.

    Attributes:
        db: Database port the query executes on.
        table: Table reference, used verbatim.
        columns: Select list, used verbatim.
        where_sql: WHERE body with `:name` placeholders.
        params: Named parameters for `where_sql`.
        order: Ordering expressions.
        offset: Rows to skip.
        limit: Rows to take.
    """

    db: AsyncDatabasePort
    table: str
    columns: str = "*"
    where_sql: str = ""
    params: Mapping[str, Any] = field(default_factory=dict)
    order: Tuple[OrderBy, ...] = ()
    offset: Optional[int] = None
    limit: Optional[int] = None

    def select(self, expr: str, alias: Optional[str] = None) -> SelectQuery:
        """Replace the select list, optionally as `expr AS alias`."""

        columns = f"{expr} AS {ensure_identifier(alias)}" if alias else expr
        return replace(self, columns=columns)

    def where(
        self, where_sql: str, params: Optional[Mapping[str, Any]] = None
    ) -> SelectQuery:
        """Replace the WHERE body and its named parameters."""

        return replace(self, where_sql=where_sql, params=dict(params or {}))

    def order_by(self, col: str, direction: str = "ASC") -> SelectQuery:
        """Replace ordering with one column; `direction` is `ASC` or `DESC`."""

        direction = direction.upper()
        if direction not in ("ASC", "DESC"):
            raise ValueError(f"Unsupported sort direction: {direction}")
        ensure_identifier(col)
        return replace(self, order=(OrderBy(col, desc=direction == "DESC"),))

    def add_order_by(self, col: str, direction: str = "ASC") -> SelectQuery:
        """Append one ordering column after the existing ones."""

        extra = self.order_by(col, direction).order
        return replace(self, order=self.order + extra)

    def skip(self, offset: int) -> SelectQuery:
        """Skip the first `offset` rows; requires `take`."""

        if offset < 0:
            raise ValueError("skip() requires a non-negative offset.")
        return replace(self, offset=offset)

    def take(self, limit: int) -> SelectQuery:
        """Return at most `limit` rows."""

        if limit < 0:
            raise ValueError("take() requires a non-negative limit.")
        return replace(self, limit=limit)

    def compile(self) -> CompiledStatement:
        """Compile to SQL and parameters in the dialect's paramstyle."""

        dialect = self.db.dialect
        sql = f"SELECT {self.columns} FROM {self.table}{_where_clause(self.where_sql)}"
        sql += compile_order_by(self.order, dialect)
        params: NamedParams = dict(self.params)

        if self.limit is not None:
            params[LIMIT_KEY] = self.limit
            offset_key = None
            if self.offset is not None:
                params[OFFSET_KEY] = self.offset
                offset_key = OFFSET_KEY
            sql += dialect.limit_clause(LIMIT_KEY, offset_key)
        elif self.offset is not None:
            raise ValueError("skip() without take() is not supported.")

        return CompiledStatement(*bind_params(sql, params, dialect))

    async def get_many(self) -> Rows:
        """Execute and return all rows."""

        compiled = self.compile()
        return await self.db.fetchall(compiled.sql, compiled.params)

    async def get_one(self) -> MaybeRow:
        """Execute and return the first row, or `None`."""

        compiled = self.compile()
        return await self.db.fetchone(compiled.sql, compiled.params)


@dataclass(frozen=True)
class InsertQuery:
    """An `INSERT` of one row."""

    db: AsyncDatabasePort
    table: str
    values: Mapping[str, Any] = field(default_factory=dict)

    def compile(self) -> CompiledStatement:
        """Compile the insert; empty values insert `DEFAULT VALUES`."""

        dialect = self.db.dialect
        if not self.values:
            sql = f"INSERT INTO {self.table} DEFAULT VALUES"
            return CompiledStatement(sql, None)

        names = list(self.values)
        column_sql = ", ".join(quote_column(name, dialect) for name in names)
        keys = [f"{SET_PREFIX}{name.replace('.', '__')}" for name in names]
        placeholders = ", ".join(f":{key}" for key in keys)
        sql = f"INSERT INTO {self.table} ({column_sql}) VALUES ({placeholders})"
        params = {key: self.values[name] for key, name in zip(keys, names)}
        return CompiledStatement(*bind_params(sql, params, dialect))

    async def execute(self) -> ExecuteResult:
        """Execute and report the cursor's row count and last row id."""

        return await _execute(self.db, self.compile())


@dataclass(frozen=True)
class UpdateQuery:
    """An `UPDATE` of all rows matching a WHERE body.

    Set values are bound under `__set_<column>` so the same column may be
    both filtered on and written.
    """

    db: AsyncDatabasePort
    table: str
    values: Mapping[str, Any] = field(default_factory=dict)
    where_sql: str = ""
    params: Mapping[str, Any] = field(default_factory=dict)

    def set(self, values: Mapping[str, Any]) -> UpdateQuery:
        """Replace the column values to write."""

        return replace(self, values=dict(values))

    def where(
        self, where_sql: str, params: Optional[Mapping[str, Any]] = None
    ) -> UpdateQuery:
        """Replace the WHERE body and its named parameters."""

        return replace(self, where_sql=where_sql, params=dict(params or {}))

    def compile(self) -> CompiledStatement:
        """Compile the update; raises `ValueError` without values."""

        if not self.values:
            raise ValueError("Cannot UPDATE without values to set.")

        dialect = self.db.dialect
        params: NamedParams = dict(self.params)
        assignments = []
        for name, value in self.values.items():
            key = f"{SET_PREFIX}{name.replace('.', '__')}"
            assignments.append(f"{quote_column(name, dialect)} = :{key}")
            params[key] = value

        sql = f"UPDATE {self.table} SET {', '.join(assignments)}"
        sql += _where_clause(self.where_sql)
        return CompiledStatement(*bind_params(sql, params, dialect))

    async def execute(self) -> ExecuteResult:
        """Execute and report the cursor's row count and last row id."""

        return await _execute(self.db, self.compile())


@dataclass(frozen=True)
class DeleteQuery:
    """A `DELETE` of all rows matching a WHERE body."""

    db: AsyncDatabasePort
    table: str
    where_sql: str = ""
    params: Mapping[str, Any] = field(default_factory=dict)

    def where(
        self, where_sql: str, params: Optional[Mapping[str, Any]] = None
    ) -> DeleteQuery:
        """Replace the WHERE body and its named parameters."""

        return replace(self, where_sql=where_sql, params=dict(params or {}))

    def compile(self) -> CompiledStatement:
        """Compile the delete statement."""

        sql = f"DELETE FROM {self.table}{_where_clause(self.where_sql)}"
        return CompiledStatement(*bind_params(sql, self.params, self.db.dialect))

    async def execute(self) -> ExecuteResult:
        """Execute and report the cursor's row count and last row id."""

        return await _execute(self.db, self.compile())


class QueryBuilder:
    """Entry point creating statements bound to one database port."""

    def __init__(self, db: AsyncDatabasePort):
        self.db = db

    def select_from(self, table: str, columns: str = "*") -> SelectQuery:
        """Start a select over `table`."""

        return SelectQuery(self.db, table, columns=columns)

    def insert_into(self, table: str, values: Mapping[str, Any]) -> InsertQuery:
        """Start a single-row insert."""

        return InsertQuery(self.db, table, dict(values))

    def update(
        self, table: str, values: Optional[Mapping[str, Any]] = None
    ) -> UpdateQuery:
        """Start an update of `table`."""

        return UpdateQuery(self.db, table, dict(values or {}))

    def delete_from(self, table: str) -> DeleteQuery:
        """Start a delete from `table`."""

        return DeleteQuery(self.db, table)

    async def run(
        self, sql: str, params: Optional[Mapping[str, Any]] = None
    ) -> ExecuteResult:
        """Execute a raw statement written with `:name` placeholders."""

        compiled = CompiledStatement(*bind_params(sql, params, self.db.dialect))
        return await _execute(self.db, compiled)

    async def fetch(
        self, sql: str, params: Optional[Mapping[str, Any]] = None
    ) -> Rows:
        """Run a raw query written with `:name` placeholders and return rows."""

        bound_sql, bound_params = bind_params(sql, params, self.db.dialect)
        return await self.db.fetchall(bound_sql, bound_params)
