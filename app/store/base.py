"""Base classes and interfaces for backing store adapters."""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence, Tuple

from app.core.schema import ID, ColumnMetadata


class StoreAdapter(ABC):
    """Dialect-specific access to the relational store.

    The adapter owns the connection pool, identifier quoting, placeholder
    syntax and the introspection queries. SQL text itself is built by the
    query executor.
    """

    dialect: str = ""

    # Appended to ``INSERT INTO <table>`` when no column is supplied.
    empty_insert_clause: str = "() VALUES ()"

    @classmethod
    async def create(cls, settings: Any) -> "StoreAdapter":
        """Open the connection pool described by ``settings``."""
        raise NotImplementedError

    @abstractmethod
    def quote_identifier(self, name: str) -> str:
        """Quote a catalog-derived table or column name."""

    @abstractmethod
    def placeholder(self, index: int) -> str:
        """Parameter marker for the 1-based ``index``-th parameter."""

    @abstractmethod
    async def list_tables(self) -> List[str]:
        """Names of every base table visible to the connection."""

    @abstractmethod
    async def list_columns(self, table: str) -> List[ColumnMetadata]:
        """Column metadata of ``table`` in declaration order."""

    @abstractmethod
    async def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[Tuple[Any, ...]]:
        """Run a query and return every row as a tuple."""

    @abstractmethod
    async def execute(self, sql: str, params: Sequence[Any] = ()) -> int:
        """Run a statement and return the affected row count."""

    @abstractmethod
    async def insert(self, sql: str, params: Sequence[Any], returning: Optional[str] = None) -> ID:
        """Run an INSERT and return the generated id of column ``returning``.

        Returns ZERO_ID when ``returning`` is None.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release pooled connections."""

    def placeholders(self, count: int, start: int = 1) -> List[str]:
        return [self.placeholder(i) for i in range(start, start + count)]
