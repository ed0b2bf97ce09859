from __future__ import annotations

import sqlite3
import unittest
from typing import Any

from rawsql import AsyncDatabase, SQLiteDialect
from rawsql.ports.db_api.dialects import Dialect, MSSQLDialect, MySQLDialect, PostgresDialect


class _AsyncCursor:
    def __init__(self, rows: list[Any], description: Any = None) -> None:
        self._rows = rows
        self.description = description
        self.closed = False
        self.executed: list[tuple[str, Any]] = []

    async def execute(self, sql: str, params: Any = None) -> None:
        self.executed.append((sql, params))

    async def fetchone(self) -> Any:
        return self._rows[0] if self._rows else None

    async def fetchall(self) -> list[Any]:
        return list(self._rows)

    async def close(self) -> None:
        self.closed = True


class _AsyncConn:
    def __init__(self, cursor: _AsyncCursor) -> None:
        self._cursor = cursor
        self.closed = False

    async def cursor(self) -> _AsyncCursor:
        return self._cursor

    async def close(self) -> None:
        self.closed = True


class DialectTests(unittest.TestCase):
    def test_quoting_and_placeholders(self) -> None:
        self.assertEqual(SQLiteDialect().q("id"), '"id"')
        self.assertEqual(MySQLDialect().q("id"), "`id`")
        self.assertEqual(MSSQLDialect().q("id"), "[id]")
        self.assertEqual(SQLiteDialect().placeholder("id"), ":id")
        self.assertEqual(PostgresDialect().placeholder("id"), "%s")
        self.assertEqual(MSSQLDialect().placeholder("id"), "?")

    def test_unknown_paramstyle_raises(self) -> None:
        class _Broken(Dialect):
            paramstyle = "numeric"

        with self.assertRaises(ValueError):
            _Broken().placeholder("id")

    def test_limit_clause(self) -> None:
        self.assertEqual(SQLiteDialect().limit_clause("l"), " LIMIT :l")
        self.assertEqual(SQLiteDialect().limit_clause("l", "o"), " LIMIT :l OFFSET :o")
        self.assertEqual(
            MSSQLDialect().limit_clause("l", "o"),
            " OFFSET :o ROWS FETCH NEXT :l ROWS ONLY",
        )


class AsyncDatabaseSQLiteTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.conn = sqlite3.connect(":memory:")
        self.db = AsyncDatabase(self.conn, SQLiteDialect())

    async def asyncTearDown(self) -> None:
        self.conn.close()

    async def test_execute_fetchone_fetchall(self) -> None:
        await self.db.execute('CREATE TABLE "t" ("id" INTEGER, "name" TEXT);')
        await self.db.execute(
            'INSERT INTO "t" ("id", "name") VALUES (:id, :name);',
            {"id": 1, "name": "a"},
        )
        await self.db.execute(
            'INSERT INTO "t" ("id", "name") VALUES (:id, :name);',
            {"id": 2, "name": "b"},
        )

        row = await self.db.fetchone('SELECT * FROM "t" WHERE "id" = :id;', {"id": 1})
        rows = await self.db.fetchall('SELECT * FROM "t" ORDER BY "id" ASC;')
        missing = await self.db.fetchone('SELECT * FROM "t" WHERE "id" = :id;', {"id": 9})

        self.assertEqual(row, {"id": 1, "name": "a"})
        self.assertEqual([r["name"] for r in rows], ["a", "b"])
        self.assertIsNone(missing)

    async def test_transaction_rolls_back_on_error(self) -> None:
        await self.db.execute('CREATE TABLE "t" ("id" INTEGER);')

        with self.assertRaises(RuntimeError):
            async with self.db.transaction():
                await self.db.execute('INSERT INTO "t" ("id") VALUES (1);')
                raise RuntimeError("boom")

        count = await self.db.fetchone('SELECT COUNT(*) AS "count" FROM "t";')
        self.assertEqual(count["count"], 0)

    async def test_transaction_commits(self) -> None:
        await self.db.execute('CREATE TABLE "t" ("id" INTEGER);')
        async with self.db.transaction():
            await self.db.execute('INSERT INTO "t" ("id") VALUES (1);')

        self.assertFalse(self.conn.in_transaction)
        count = await self.db.fetchone('SELECT COUNT(*) AS "count" FROM "t";')
        self.assertEqual(count["count"], 1)

    async def test_execute_errors_propagate(self) -> None:
        with self.assertRaises(sqlite3.OperationalError):
            await self.db.execute("SELECT * FROM missing_table")

    async def test_debug_logging_of_statements(self) -> None:
        with self.assertLogs("rawsql", level="DEBUG") as logs:
            await self.db.execute("SELECT 1")
        self.assertTrue(any("SELECT 1" in line for line in logs.output))


class AsyncDatabaseAsyncDriverTests(unittest.IsolatedAsyncioTestCase):
    async def test_awaits_async_driver_and_maps_tuple_rows(self) -> None:
        cursor = _AsyncCursor([(1, "a")], description=[("id",), ("name",)])
        conn = _AsyncConn(cursor)
        db = AsyncDatabase(conn, PostgresDialect())

        rows = await db.fetchall("SELECT id, name FROM t WHERE id = %s", [1])

        self.assertEqual(rows, [{"id": 1, "name": "a"}])
        self.assertEqual(cursor.executed, [("SELECT id, name FROM t WHERE id = %s", [1])])
        self.assertTrue(cursor.closed)

    async def test_tuple_rows_without_description_raise(self) -> None:
        db = AsyncDatabase(_AsyncConn(_AsyncCursor([(1,)])), PostgresDialect())
        with self.assertRaises(TypeError):
            await db.fetchone("SELECT 1")

    async def test_context_manager_closes_connection(self) -> None:
        conn = _AsyncConn(_AsyncCursor([]))
        async with AsyncDatabase(conn, PostgresDialect()) as db:
            self.assertIsNone(await db.fetchone("SELECT 1"))
        self.assertTrue(conn.closed)


if __name__ == "__main__":
    unittest.main()
