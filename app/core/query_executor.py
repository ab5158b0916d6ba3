"""Parameterized SQL for the generic CRUD operations"""
from typing import Any, List, Optional, Sequence

from app.core.catalog import SchemaCatalog
from app.core.errors import InvalidFieldTypeError
from app.core.records import Record, decode, decode_rows
from app.core.schema import ID, ZERO_ID, TableDescriptor
from app.smart_logger import SmartLogger
from app.store.base import StoreAdapter


class QueryExecutor:
    """Build and run one SQL statement per operation.

    Only catalog-derived identifiers are interpolated into SQL text; every
    value, including limit, offset and ids, is passed as a parameter.
    """

    def __init__(self, catalog: SchemaCatalog, store: StoreAdapter):
        self.catalog = catalog
        self.store = store

    def _q(self, name: str) -> str:
        return self.store.quote_identifier(name)

    def _select_sql(self, table: TableDescriptor) -> str:
        columns = ", ".join(self._q(name) for name in table.field_names())
        return f"SELECT {columns} FROM {self._q(table.name)}"

    def _log(self, operation: str, table: str, sql: str, params: Optional[dict] = None) -> None:
        SmartLogger.log(
            "DEBUG",
            f"executor.{operation}: table={table}",
            category=f"executor.{operation}",
            params={"sql": sql, **(params or {})},
            max_inline_chars=500,
        )

    async def list(self, table_name: str, limit: int, offset: int) -> List[Record]:
        table = self.catalog.require(table_name)
        sql = (
            f"{self._select_sql(table)} ORDER BY {self._q(table.primary_key)} ASC"
            f" LIMIT {self.store.placeholder(1)} OFFSET {self.store.placeholder(2)}"
        )
        self._log("list", table.name, sql, {"limit": limit, "offset": offset})

        rows = await self.store.fetch_all(sql, [int(limit), int(offset)])
        return decode_rows(table.fields, rows)

    async def get(self, table_name: str, record_id: ID) -> Optional[Record]:
        table = self.catalog.require(table_name)
        sql = f"{self._select_sql(table)} WHERE {self._q(table.primary_key)} = {self.store.placeholder(1)}"
        self._log("get", table.name, sql, {"id": record_id})

        rows = await self.store.fetch_all(sql, [record_id])
        if not rows:
            return None
        return decode(table.fields, rows[0])

    async def delete(self, table_name: str, record_id: ID) -> bool:
        table = self.catalog.require(table_name)
        sql = f"DELETE FROM {self._q(table.name)} WHERE {self._q(table.primary_key)} = {self.store.placeholder(1)}"
        self._log("delete", table.name, sql, {"id": record_id})

        affected = await self.store.execute(sql, [record_id])
        return affected > 0

    async def create(self, table_name: str, names: Sequence[str], values: Sequence[Any]) -> ID:
        """
        Insert one row with exactly ``names``/``values``.

        Returns:
            The generated key for auto-increment primary keys, ZERO_ID otherwise.
        """
        table = self.catalog.require(table_name)
        self._check_columns(table, names, values)
        for name in names:
            if table.get_field(name).is_auto_increment:
                raise ValueError(f"create: auto increment field {name} cannot be inserted")

        if names:
            columns = ", ".join(self._q(name) for name in names)
            markers = ", ".join(self.store.placeholders(len(names)))
            sql = f"INSERT INTO {self._q(table.name)} ({columns}) VALUES ({markers})"
        else:
            sql = f"INSERT INTO {self._q(table.name)} {self.store.empty_insert_clause}"
        self._log("create", table.name, sql, {"names": list(names)})

        returning = table.primary_key if table.has_auto_increment_key else None
        new_id = await self.store.insert(sql, list(values), returning=returning)
        return new_id if returning is not None else ZERO_ID

    async def update(self, table_name: str, record_id: ID, names: Sequence[str], values: Sequence[Any]) -> bool:
        """
        Update only ``names`` of the row ``record_id``.

        An empty ``names`` runs no statement and reports False.
        """
        table = self.catalog.require(table_name)
        self._check_columns(table, names, values)
        if table.primary_key in names:
            raise InvalidFieldTypeError(table.primary_key)
        if not names:
            return False

        assignments = ", ".join(
            f"{self._q(name)} = {marker}"
            for name, marker in zip(names, self.store.placeholders(len(names)))
        )
        sql = (
            f"UPDATE {self._q(table.name)} SET {assignments}"
            f" WHERE {self._q(table.primary_key)} = {self.store.placeholder(len(names) + 1)}"
        )
        self._log("update", table.name, sql, {"id": record_id, "names": list(names)})

        affected = await self.store.execute(sql, [*values, record_id])
        return affected > 0

    @staticmethod
    def _check_columns(table: TableDescriptor, names: Sequence[str], values: Sequence[Any]) -> None:
        if len(names) != len(values):
            raise ValueError("names and values must have equal length")
        for name in names:
            if name not in table:
                raise ValueError(f"table {table.name} has no column {name}")
