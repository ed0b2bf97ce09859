"""Basic CRUD example: insert/select/update/save/remove with camelCase keys."""

from __future__ import annotations

import asyncio
import sqlite3
import sys
from pathlib import Path

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "rawsql").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from rawsql import AsyncDatabase, RawSQL, SQLiteDialect


async def main() -> None:
    conn = sqlite3.connect(":memory:")
    db = AsyncDatabase(conn, SQLiteDialect())
    sql = RawSQL(db)

    try:
        await sql.execute(
            "CREATE TABLE customer ("
            "id INTEGER PRIMARY KEY, full_name TEXT, email_address TEXT)"
        )

        created = await sql.insert(
            "customer", {"fullName": "Alice", "emailAddress": "alice@example.com"}
        )
        print("inserted id:", created.lastrowid)

        print("select_one:", await sql.select_one("customer", {"id": created.lastrowid}))

        await sql.update("customer", {"id": created.lastrowid}, {"fullName": "Alice B."})
        print("after update:", await sql.select_many("customer", {}))

        # Upsert: id 2 does not exist yet, so this inserts.
        saved = await sql.save(
            "customer", {"id": 2}, {"id": 2, "fullName": "Bob", "emailAddress": "b@x.io"}
        )
        print("save ok:", saved, "count:", await sql.count("customer", {}))

        removed = await sql.remove("customer", [1, 2])
        print("removed:", removed.rowcount, "exists:", await sql.exists("customer", {}))
    finally:
        conn.close()


if __name__ == "__main__":
    asyncio.run(main())
