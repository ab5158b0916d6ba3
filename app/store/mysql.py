"""MySQL / MariaDB store adapter (aiomysql)."""

from typing import Any, List, Optional, Sequence, Tuple

import aiomysql

from app.config import Settings
from app.core.errors import StoreError
from app.core.schema import ID, ZERO_ID, ColumnMetadata
from app.store.base import StoreAdapter


# SHOW FULL COLUMNS: Field, Type, Collation, Null, Key, Default, Extra, Privileges, Comment
_COL_FIELD = 0
_COL_TYPE = 1
_COL_NULL = 3
_COL_KEY = 4
_COL_DEFAULT = 5
_COL_EXTRA = 6


def _text(value: Any) -> Optional[str]:
    # MySQL 8 reports some metadata columns as binary strings.
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8")
    return str(value)


def _args(params: Sequence[Any]) -> Tuple[Any, ...]:
    # Never None, so the cursor %-formats every statement.
    return tuple(params)


class MySQLStore(StoreAdapter):
    """MySQL implementation of the store adapter."""

    dialect = "mysql"
    empty_insert_clause = "() VALUES ()"

    def __init__(self, pool: Any):
        self.pool = pool

    @classmethod
    async def create(cls, settings: Settings) -> "MySQLStore":
        try:
            pool = await aiomysql.create_pool(
                host=settings.target_db_host,
                port=int(settings.target_db_port),
                user=settings.target_db_user,
                password=settings.target_db_password,
                db=settings.target_db_name,
                minsize=max(1, settings.db_pool_min_size),
                maxsize=max(1, settings.db_pool_max_size),
                autocommit=True,
                charset="utf8mb4",
            )
        except (aiomysql.Error, OSError) as exc:
            raise StoreError(f"MySQL connection failed: {exc}") from exc
        return cls(pool)

    def quote_identifier(self, name: str) -> str:
        # %% collapses to % when the cursor formats the statement.
        return "`" + name.replace("`", "``").replace("%", "%%") + "`"

    def placeholder(self, index: int) -> str:
        return "%s"

    async def list_tables(self) -> List[str]:
        rows = await self.fetch_all("SHOW TABLES")
        return [_text(row[0]) for row in rows]

    async def list_columns(self, table: str) -> List[ColumnMetadata]:
        rows = await self.fetch_all(f"SHOW FULL COLUMNS FROM {self.quote_identifier(table)}")
        return [
            ColumnMetadata(
                field=_text(row[_COL_FIELD]),
                type=_text(row[_COL_TYPE]) or "",
                null=_text(row[_COL_NULL]) or "",
                key=_text(row[_COL_KEY]) or "",
                default=_text(row[_COL_DEFAULT]),
                extra=_text(row[_COL_EXTRA]) or "",
            )
            for row in rows
        ]

    async def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[Tuple[Any, ...]]:
        try:
            async with self.pool.acquire() as conn:
                async with conn.cursor() as cursor:
                    await cursor.execute(sql, _args(params))
                    rows = await cursor.fetchall()
        except aiomysql.Error as exc:
            raise StoreError(f"Database error: {exc}") from exc
        return [tuple(row) for row in rows]

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        try:
            async with self.pool.acquire() as conn:
                async with conn.cursor() as cursor:
                    await cursor.execute(sql, _args(params))
                    return int(cursor.rowcount or 0)
        except aiomysql.Error as exc:
            raise StoreError(f"Database error: {exc}") from exc

    async def insert(self, sql: str, params: Sequence[Any], returning: Optional[str] = None) -> ID:
        try:
            async with self.pool.acquire() as conn:
                async with conn.cursor() as cursor:
                    await cursor.execute(sql, _args(params))
                    if returning is None:
                        return ZERO_ID
                    return ID(int(cursor.lastrowid or 0))
        except aiomysql.Error as exc:
            raise StoreError(f"Database error: {exc}") from exc

    async def close(self) -> None:
        self.pool.close()
        await self.pool.wait_closed()
