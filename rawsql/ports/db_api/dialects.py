"""Concrete SQL dialect implementations for DB-API adapters."""

from __future__ import annotations

from typing import Any, Optional


class Dialect:
    """Base dialect that defines SQL quoting, placeholders, and paging."""

    name: str = "generic"
    paramstyle: str = "named"
    quote_char: str = '"'

    def q(self, ident: str) -> str:
        """Quote SQL identifier."""

        return f"{self.quote_char}{ident}{self.quote_char}"

    def placeholder(self, key: str) -> str:
        """Return parameter placeholder for current param style."""

        if self.paramstyle == "named":
            return f":{key}"
        if self.paramstyle == "qmark":
            return "?"
        if self.paramstyle == "format":
            return "%s"
        raise ValueError(f"Unsupported paramstyle: {self.paramstyle}")

    def limit_clause(self, limit_key: str, offset_key: Optional[str] = None) -> str:
        """Return the paging clause referencing `:limit_key` / `:offset_key`."""

        sql = f" LIMIT :{limit_key}"
        if offset_key is not None:
            sql += f" OFFSET :{offset_key}"
        return sql

    def get_lastrowid(self, cursor: Any) -> Optional[int]:
        """Extract `lastrowid` from DB-API cursor when available."""

        return getattr(cursor, "lastrowid", None)


class SQLiteDialect(Dialect):
    """SQLite dialect (`:name` parameters)."""

    name = "sqlite"
    paramstyle = "named"
    quote_char = '"'


class PostgresDialect(Dialect):
    """PostgreSQL dialect (`%s` positional parameters)."""

    name = "postgres"
    paramstyle = "format"
    quote_char = '"'

    def get_lastrowid(self, cursor: Any) -> Optional[int]:
        # psycopg reports the OID here, not the inserted key.
        return None


class MySQLDialect(Dialect):
    """MySQL dialect (`%s` positional parameters)."""

    name = "mysql"
    paramstyle = "format"
    quote_char = "`"


class MSSQLDialect(Dialect):
    """SQL Server dialect (`?` parameters, `OFFSET ... FETCH` paging)."""

    name = "mssql"
    paramstyle = "qmark"

    def q(self, ident: str) -> str:
        return f"[{ident}]"

    def limit_clause(self, limit_key: str, offset_key: Optional[str] = None) -> str:
        # OFFSET is mandatory before FETCH and both need an ORDER BY.
        offset_sql = f":{offset_key}" if offset_key is not None else "0"
        return f" OFFSET {offset_sql} ROWS FETCH NEXT :{limit_key} ROWS ONLY"
