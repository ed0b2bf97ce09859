"""Pagination example: page/page_like and refining a view before execution."""

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


async def seed(sql: RawSQL) -> None:
    await sql.execute(
        "CREATE TABLE article (id INTEGER PRIMARY KEY, title TEXT, topic_name TEXT)"
    )
    topics = ["python", "sql", "ops"]
    for index in range(1, 26):
        await sql.insert(
            "article",
            {"title": f"Article {index:02d}", "topicName": topics[index % 3]},
        )


async def main() -> None:
    conn = sqlite3.connect(":memory:")
    sql = RawSQL(AsyncDatabase(conn, SQLiteDialect()))

    try:
        await seed(sql)

        first = await sql.page("article", {}, 1, 10)
        print("total:", first.total, "ids:", [row["id"] for row in first.list])

        sql_topic = await sql.page(
            "article", {"topicName": "sql"}, 1, 5, order_col="title", ascending=True
        )
        print("sql topic:", [row["title"] for row in sql_topic.list])

        titled = await sql.page_like("article", {"title": "Article 1%"}, 2, 5)
        print("like page 2:", titled.to_dict())

        empty = await sql.page("article", {"topicName": "missing"}, 3, 10)
        print("empty:", empty.to_dict())

        view = sql.view("article", {"topicName": "ops"})
        newest = await view.order_by("id", "DESC").take(3).get_many()
        print("newest ops:", newest)
    finally:
        conn.close()


if __name__ == "__main__":
    asyncio.run(main())
