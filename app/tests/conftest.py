"""Shared fixtures: a scripted store double and a `users` catalog."""

from collections import deque
from typing import Any, Dict, List, Optional, Sequence

import pytest

from app.core.catalog import SchemaCatalog
from app.core.errors import StoreError
from app.core.query_executor import QueryExecutor
from app.core.schema import ID, ZERO_ID, ColumnMetadata, TableDescriptor
from app.store.base import StoreAdapter


class ScriptedStore(StoreAdapter):
    """Store double with MySQL quoting that records every call.

    Results are consumed in order from per-call queues; ``fail_with`` makes the
    next data call raise a StoreError.
    """

    dialect = "mysql"

    def __init__(self, tables: Optional[Dict[str, List[ColumnMetadata]]] = None):
        self.tables = dict(tables or {})
        self.calls: List[tuple] = []
        self.fetch_results: deque = deque()
        self.execute_results: deque = deque()
        self.insert_results: deque = deque()
        self.fail_with: Optional[str] = None
        self.failing_tables: set = set()
        self.closed = False

    def quote_identifier(self, name: str) -> str:
        return "`" + name.replace("`", "``") + "`"

    def placeholder(self, index: int) -> str:
        return "%s"

    def _maybe_fail(self):
        if self.fail_with is not None:
            message, self.fail_with = self.fail_with, None
            raise StoreError(message)

    async def list_tables(self) -> List[str]:
        self.calls.append(("list_tables",))
        self._maybe_fail()
        return list(self.tables)

    async def list_columns(self, table: str) -> List[ColumnMetadata]:
        self.calls.append(("list_columns", table))
        if table in self.failing_tables:
            raise StoreError(f"Database error: cannot describe {table}")
        return list(self.tables[table])

    async def fetch_all(self, sql: str, params: Sequence[Any] = ()):
        self.calls.append(("fetch_all", sql, list(params)))
        self._maybe_fail()
        return self.fetch_results.popleft() if self.fetch_results else []

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        self.calls.append(("execute", sql, list(params)))
        self._maybe_fail()
        return self.execute_results.popleft() if self.execute_results else 0

    async def insert(self, sql: str, params: Sequence[Any], returning: Optional[str] = None) -> ID:
        self.calls.append(("insert", sql, list(params), returning))
        self._maybe_fail()
        new_id = self.insert_results.popleft() if self.insert_results else 1
        return ID(new_id) if returning is not None else ZERO_ID

    async def close(self) -> None:
        self.closed = True

    def statements(self) -> List[str]:
        return [call[1] for call in self.calls if call[0] in {"fetch_all", "execute", "insert"}]


USERS_COLUMNS = [
    ColumnMetadata(field="id", type="int(11)", null="NO", key="PRI", default=None, extra="auto_increment"),
    ColumnMetadata(field="name", type="text", null="NO", key="", default=None, extra=""),
    ColumnMetadata(field="age", type="int(11)", null="YES", key="", default=None, extra=""),
]

ITEMS_COLUMNS = [
    ColumnMetadata(field="id", type="int(11)", null="NO", key="PRI", default=None, extra="auto_increment"),
    ColumnMetadata(field="title", type="varchar(255)", null="NO", key="", default=None, extra=""),
    ColumnMetadata(field="description", type="text", null="NO", key="", default=None, extra=""),
    ColumnMetadata(field="price", type="double", null="NO", key="", default="0", extra=""),
    ColumnMetadata(field="updated", type="varchar(255)", null="YES", key="", default=None, extra=""),
]

CODES_COLUMNS = [
    ColumnMetadata(field="code", type="bigint", null="NO", key="PRI", default=None, extra=""),
    ColumnMetadata(field="label", type="char(8)", null="NO", key="", default="none", extra=""),
]


@pytest.fixture
def store() -> ScriptedStore:
    return ScriptedStore(
        {
            "users": list(USERS_COLUMNS),
            "items": list(ITEMS_COLUMNS),
            "codes": list(CODES_COLUMNS),
        }
    )


@pytest.fixture
def store_factory():
    return ScriptedStore


@pytest.fixture
def catalog(store) -> SchemaCatalog:
    return SchemaCatalog(TableDescriptor.from_columns(name, columns) for name, columns in store.tables.items())


@pytest.fixture
def executor(catalog, store) -> QueryExecutor:
    return QueryExecutor(catalog, store)
