"""CRUD and pagination helpers over one injected async database port.

`RawSQL` works on plain table names and field mappings. With
`change_keys=True` (the default everywhere) condition and value keys are
converted from camelCase to snake_case before compiling, and returned rows
are converted back to camelCase.
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional, Sequence

from .case import to_camel, to_snake
from .conditions import (
    MappingWhereBuilder,
    bind_conditions,
    ensure_identifier,
    where_in,
)
from .contracts import AsyncDatabasePort, WhereBuilderPort
from .diagnostics import dump_error
from .query_builder import QueryBuilder, SelectQuery
from .types import ExecuteResult, FieldMapping, MaybeRow, RowMapping, Rows

LOG = logging.getLogger("rawsql")


@dataclass(frozen=True)
class PageResult:
    """One page of rows plus the total number of matching rows."""

    total: int
    list: List[RowMapping] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"total": self.total, "list": self.list}


class RawSQL:
    """Table-name based CRUD facade.

    Args:
        db: Async database port every operation runs on.
        columns: Optional known column names per table. Converted keys that
            are not listed for a registered table raise `ValueError`.
        where_builder: WHERE compiler; defaults to `MappingWhereBuilder`.
        error_reporter: Called with the exception when `save` fails.
    """

    def __init__(
        self,
        db: AsyncDatabasePort,
        *,
        columns: Mapping[str, Collection[str]] | None = None,
        where_builder: WhereBuilderPort | None = None,
        error_reporter: Callable[[BaseException], None] = dump_error,
    ):
        self.db = db
        self.where_builder = where_builder or MappingWhereBuilder()
        self.error_reporter = error_reporter
        self._columns = {
            table: frozenset(cols) for table, cols in (columns or {}).items()
        }

    def build(self) -> QueryBuilder:
        """Return a statement builder bound to this database port."""

        return QueryBuilder(self.db)

    def _prepare(
        self, table_name: str, data: FieldMapping, change_keys: bool
    ) -> dict[str, Any]:
        prepared = to_snake(data) if change_keys else dict(data)
        known = self._columns.get(table_name)
        if known is not None:
            unknown = sorted(key for key in prepared if key not in known)
            if unknown:
                raise ValueError(
                    f"Unknown column(s) for table {table_name}: {', '.join(unknown)}"
                )
        return prepared

    def _rows_out(self, rows: Rows, change_keys: bool) -> Rows:
        return to_camel(rows) if change_keys else list(rows)

    def _filtered(
        self,
        table_name: str,
        conditions: FieldMapping,
        change_keys: bool,
        *,
        op: str = "=",
        extra_where: str = "",
    ) -> SelectQuery:
        snake_conditions = self._prepare(table_name, conditions, change_keys)
        where_sql = self.where_builder.compile(
            snake_conditions, op=op, extra_where=extra_where
        )
        return (
            self.build()
            .select_from(table_name)
            .where(where_sql, bind_conditions(snake_conditions))
        )

    async def query(
        self, sql: str, params: Optional[Mapping[str, Any]] = None
    ) -> Rows:
        """Run a raw query written with `:name` placeholders."""

        return await self.build().fetch(sql, params)

    async def execute(
        self, sql: str, params: Optional[Mapping[str, Any]] = None
    ) -> ExecuteResult:
        """Run a raw statement written with `:name` placeholders."""

        return await self.build().run(sql, params)

    async def proc(self, name: str, params: Mapping[str, Any]) -> Rows:
        """Call a stored procedure as `EXEC name @k1=:k1, @k2=:k2`."""

        args = ", ".join(f"@{ensure_identifier(key)}=:{key}" for key in params)
        sql = f"EXEC {name} {args}".rstrip()
        return await self.query(sql, params)

    async def select_many(
        self, table_name: str, conditions: FieldMapping, change_keys: bool = True
    ) -> Rows:
        """Return all rows matching every condition by equality."""

        rows = await self._filtered(table_name, conditions, change_keys).get_many()
        return self._rows_out(rows, change_keys)

    async def select_one(
        self, table_name: str, conditions: FieldMapping, change_keys: bool = True
    ) -> MaybeRow:
        """Return the first matching row, or `None` when nothing matches."""

        row = await self._filtered(table_name, conditions, change_keys).get_one()
        if row is None:
            return None
        return to_camel(row) if change_keys else row

    async def _count(self, query: SelectQuery) -> int:
        row = await query.select("COUNT(*)", "count").get_one()
        if not row:
            return 0
        return int(row["count"] if "count" in row else next(iter(row.values())))

    async def count(
        self,
        table_name: str,
        conditions: FieldMapping,
        change_keys: bool = True,
        extra_where: str = "",
    ) -> int:
        """Count rows matching every condition by equality plus `extra_where`."""

        query = self._filtered(
            table_name, conditions, change_keys, extra_where=extra_where
        )
        return await self._count(query)

    async def count_like(
        self,
        table_name: str,
        conditions: FieldMapping,
        change_keys: bool = True,
        extra_where: str = "",
    ) -> int:
        """Count rows matching every condition by `LIKE` plus `extra_where`."""

        return await self._count(
            self._filtered(
                table_name, conditions, change_keys, op="LIKE", extra_where=extra_where
            )
        )

    async def exists(
        self, table_name: str, conditions: FieldMapping, change_keys: bool = True
    ) -> bool:
        """Return whether `select_many` would return at least one row."""

        query = self._filtered(table_name, conditions, change_keys)
        return await self._count(query) > 0

    async def insert(
        self, table_name: str, values: FieldMapping, change_keys: bool = True
    ) -> ExecuteResult:
        """Insert one row."""

        snake_values = self._prepare(table_name, values, change_keys)
        return await self.build().insert_into(table_name, snake_values).execute()

    async def update(
        self,
        table_name: str,
        conditions: FieldMapping,
        values: FieldMapping,
        change_keys: bool = True,
    ) -> ExecuteResult:
        """Set `values` on every row matching all conditions by equality.

        Raises:
            ValueError: If `conditions` is empty.
        """

        snake_conditions = self._prepare(table_name, conditions, change_keys)
        snake_values = self._prepare(table_name, values, change_keys)
        where_sql = self.where_builder.compile(snake_conditions)
        _require_where(where_sql, "UPDATE")
        return await (
            self.build()
            .update(table_name, snake_values)
            .where(where_sql, bind_conditions(snake_conditions))
            .execute()
        )

    async def save(
        self,
        table_name: str,
        conditions: FieldMapping,
        values: FieldMapping,
        change_keys: bool = True,
    ) -> bool:
        """Update the matching row if one exists, otherwise insert `values`.

        The existence check and the write are separate statements; wrap the
        call in `db.transaction()` where concurrent writers matter.

        Returns:
            `True` on success, `False` if any step failed. Failures are
            reported through `error_reporter` and never propagate.
        """

        try:
            if await self.exists(table_name, conditions, change_keys):
                await self.update(table_name, conditions, values, change_keys)
            else:
                await self.insert(table_name, values, change_keys)
        except Exception as exc:  # noqa: BLE001
            self.error_reporter(exc)
            return False
        return True

    async def remove(
        self, table_name: str, ids: Sequence[Any], primary_key: str = "id"
    ) -> ExecuteResult:
        """Delete rows whose `primary_key` is one of `ids`.

        An empty `ids` deletes nothing and issues no statement.
        """

        if not ids:
            LOG.debug("remove(%s) called with no ids; nothing deleted", table_name)
            return ExecuteResult(rowcount=0)
        where_sql, params = where_in(primary_key, ids)
        query = self.build().delete_from(table_name).where(where_sql, params)
        return await query.execute()

    async def remove_one(
        self,
        table_name: str,
        conditions: FieldMapping,
        change_keys: bool = True,
        extra_where: str = "",
    ) -> ExecuteResult:
        """Delete rows matching every condition by equality plus `extra_where`.

        Raises:
            ValueError: If both `conditions` and `extra_where` are empty.
        """

        snake_conditions = self._prepare(table_name, conditions, change_keys)
        where_sql = self.where_builder.compile(
            snake_conditions, extra_where=extra_where
        )
        _require_where(where_sql, "DELETE")
        return await (
            self.build()
            .delete_from(table_name)
            .where(where_sql, bind_conditions(snake_conditions))
            .execute()
        )

    def view(
        self,
        table_name: str,
        conditions: FieldMapping,
        change_keys: bool = True,
        extra_where: str = "",
    ) -> SelectQuery:
        """Return an unexecuted equality-filtered select over `table_name`."""

        return self._filtered(
            table_name, conditions, change_keys, extra_where=extra_where
        )

    def view_like(
        self,
        table_name: str,
        conditions: FieldMapping,
        change_keys: bool = True,
        extra_where: str = "",
    ) -> SelectQuery:
        """Return an unexecuted `LIKE`-filtered select over `table_name`."""

        return self._filtered(
            table_name, conditions, change_keys, op="LIKE", extra_where=extra_where
        )

    async def page(
        self,
        table_name: str,
        conditions: FieldMapping,
        page_number: int,
        page_size: int,
        order_col: str = "id",
        ascending: bool = False,
        change_keys: bool = True,
        extra_where: str = "",
    ) -> PageResult:
        """Return one page of equality-filtered rows and the total count."""

        view = self.view(table_name, conditions, change_keys, extra_where)
        return await self._page(
            view, page_number, page_size, order_col, ascending, change_keys
        )

    async def page_like(
        self,
        table_name: str,
        conditions: FieldMapping,
        page_number: int,
        page_size: int,
        order_col: str = "id",
        ascending: bool = False,
        change_keys: bool = True,
        extra_where: str = "",
    ) -> PageResult:
        """Return one page of `LIKE`-filtered rows and the total count."""

        view = self.view_like(table_name, conditions, change_keys, extra_where)
        return await self._page(
            view, page_number, page_size, order_col, ascending, change_keys
        )

    async def _page(
        self,
        view: SelectQuery,
        page_number: int,
        page_size: int,
        order_col: str,
        ascending: bool,
        change_keys: bool,
    ) -> PageResult:
        if page_number < 1:
            raise ValueError("page_number must be >= 1.")
        if page_size < 1:
            raise ValueError("page_size must be >= 1.")
        ensure_identifier(order_col)

        skip = (page_number - 1) * page_size
        total = await self._count(view)
        if total == 0:
            return PageResult(total=0, list=[])

        rows = await (
            view.order_by(order_col, "ASC" if ascending else "DESC")
            .skip(skip)
            .take(page_size)
            .get_many()
        )
        return PageResult(total=total, list=self._rows_out(rows, change_keys))


def _require_where(where_sql: str, statement: str) -> None:
    if not where_sql.strip():
        raise ValueError(f"Refusing to {statement} without conditions.")
