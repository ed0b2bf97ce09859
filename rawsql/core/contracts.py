"""Core port contracts used by adapters, builders, and the CRUD facade."""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Any, List, Mapping, Optional, Protocol

from .types import MaybeRow, QueryParams, RowMapping


class DialectPort(Protocol):
    """Dialect behavior required by statement compilation."""

    name: str
    paramstyle: str

    def q(self, ident: str) -> str: ...

    def placeholder(self, key: str) -> str: ...

    def limit_clause(self, limit_key: str, offset_key: Optional[str] = None) -> str: ...

    def get_lastrowid(self, cursor: Any) -> Optional[int]: ...


class AsyncDatabasePort(Protocol):
    """Async database adapter behavior required by `RawSQL`."""

    dialect: DialectPort

    def transaction(self) -> AbstractAsyncContextManager[None]: ...

    async def execute(self, sql: str, params: QueryParams = None) -> Any: ...

    async def fetchone(self, sql: str, params: QueryParams = None) -> MaybeRow: ...

    async def fetchall(
        self, sql: str, params: QueryParams = None
    ) -> List[RowMapping]: ...


class WhereBuilderPort(Protocol):
    """Turns a snake-cased field mapping into a WHERE body."""

    def compile(
        self,
        conditions: Mapping[str, Any],
        *,
        joiner: str = "AND",
        op: str = "=",
        extra_where: str = "",
    ) -> str: ...
