"""PostgreSQL store adapter (asyncpg)."""

from typing import Any, List, Optional, Sequence, Tuple

import asyncpg

from app.config import Settings
from app.core.errors import StoreError
from app.core.schema import ID, ZERO_ID, ColumnMetadata
from app.store.base import StoreAdapter


# InterfaceError covers client-side failures: bind encoding, closed connections.
_DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


class PostgreSQLStore(StoreAdapter):
    """PostgreSQL implementation of the store adapter.

    Column metadata from ``information_schema`` is normalized to the
    ``SHOW FULL COLUMNS`` shape: ``YES``/``NO`` nullability, ``PRI`` key and
    ``auto_increment`` extra for serial and identity columns.
    """

    dialect = "postgresql"
    empty_insert_clause = "DEFAULT VALUES"

    def __init__(self, pool: Any, schema: str = "public"):
        self.pool = pool
        self.schema = schema

    @classmethod
    async def create(cls, settings: Settings) -> "PostgreSQLStore":
        ssl_mode = settings.target_db_ssl if settings.target_db_ssl != "disable" else False
        try:
            pool = await asyncpg.create_pool(
                host=settings.target_db_host,
                port=settings.target_db_port,
                database=settings.target_db_name,
                user=settings.target_db_user,
                password=settings.target_db_password,
                ssl=ssl_mode,
                min_size=max(1, settings.db_pool_min_size),
                max_size=max(1, settings.db_pool_max_size),
            )
        except _DRIVER_ERRORS as exc:
            raise StoreError(f"PostgreSQL connection failed: {exc}") from exc
        return cls(pool, schema=settings.target_db_schema)

    def quote_identifier(self, name: str) -> str:
        return '"' + name.replace('"', '""') + '"'

    def placeholder(self, index: int) -> str:
        return f"${index}"

    async def list_tables(self) -> List[str]:
        rows = await self.fetch_all(_TABLES_SQL, [self.schema])
        return [row[0] for row in rows]

    async def list_columns(self, table: str) -> List[ColumnMetadata]:
        rows = await self.fetch_all(_COLUMNS_SQL, [self.schema, table])
        columns = []
        for name, data_type, is_nullable, column_default, is_identity, is_pk in rows:
            serial = column_default is not None and str(column_default).startswith("nextval(")
            identity = (is_identity or "").upper() == "YES"
            columns.append(
                ColumnMetadata(
                    field=name,
                    type=data_type,
                    null=is_nullable,
                    key="PRI" if is_pk else "",
                    default=None if serial else column_default,
                    extra="auto_increment" if serial or identity else "",
                )
            )
        return columns

    async def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[Tuple[Any, ...]]:
        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(sql, *params)
        except _DRIVER_ERRORS as exc:
            raise StoreError(f"Database error: {exc}") from exc
        return [tuple(row.values()) for row in rows]

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        try:
            async with self.pool.acquire() as conn:
                status = await conn.execute(sql, *params)
        except _DRIVER_ERRORS as exc:
            raise StoreError(f"Database error: {exc}") from exc
        return _affected_rows(status)

    async def insert(self, sql: str, params: Sequence[Any], returning: Optional[str] = None) -> ID:
        try:
            async with self.pool.acquire() as conn:
                if returning is None:
                    await conn.execute(sql, *params)
                    return ZERO_ID
                value = await conn.fetchval(
                    f"{sql} RETURNING {self.quote_identifier(returning)}", *params
                )
        except _DRIVER_ERRORS as exc:
            raise StoreError(f"Database error: {exc}") from exc
        return ID(int(value or 0))

    async def close(self) -> None:
        await self.pool.close()


def _affected_rows(status: str) -> int:
    # Command tags look like "UPDATE 1", "DELETE 0", "INSERT 0 1".
    try:
        return int((status or "").rsplit(" ", 1)[-1])
    except ValueError:
        return 0


_TABLES_SQL = """
SELECT table_name
FROM information_schema.tables
WHERE table_schema = $1
  AND table_type = 'BASE TABLE'
ORDER BY table_name
"""

_COLUMNS_SQL = """
SELECT
    c.column_name,
    c.data_type,
    c.is_nullable,
    c.column_default,
    c.is_identity,
    EXISTS (
        SELECT 1
        FROM information_schema.table_constraints tc
        JOIN information_schema.key_column_usage k
          ON k.constraint_name = tc.constraint_name
         AND k.table_schema = tc.table_schema
         AND k.table_name = tc.table_name
        WHERE tc.constraint_type = 'PRIMARY KEY'
          AND tc.table_schema = c.table_schema
          AND tc.table_name = c.table_name
          AND k.column_name = c.column_name
    ) AS is_pk
FROM information_schema.columns c
WHERE c.table_schema = $1
  AND c.table_name = $2
ORDER BY c.ordinal_position
"""
