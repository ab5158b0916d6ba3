"""Schema catalog built once from live introspection"""
from types import MappingProxyType
from typing import Iterable, Iterator, List, Optional, Tuple

from app.core.errors import IntrospectionError, SchemaDefinitionError, StoreError, UnknownTableError
from app.core.schema import TableDescriptor
from app.smart_logger import SmartLogger


class SchemaCatalog:
    """Immutable snapshot of the discovered tables.

    Built once before the server accepts traffic and shared read-only by
    every request afterwards.
    """

    def __init__(self, tables: Iterable[TableDescriptor]):
        ordered: Tuple[TableDescriptor, ...] = tuple(tables)
        index = {}
        for table in ordered:
            if table.name in index:
                raise SchemaDefinitionError(f"duplicate table {table.name}")
            index[table.name] = table
        self._tables = ordered
        self._index = MappingProxyType(index)

    @classmethod
    async def build(cls, store, exclude: Iterable[str] = ()) -> "SchemaCatalog":
        """
        Introspect every table of ``store``.

        Args:
            store: StoreAdapter used for the metadata queries.
            exclude: Table names that are skipped entirely.

        Raises:
            IntrospectionError: on any store failure or any table that cannot
                be described (no columns, unsupported column type, missing or
                multiple primary keys).
        """
        skipped = set(exclude)
        try:
            table_names = await store.list_tables()
        except StoreError as exc:
            raise IntrospectionError(f"listing tables failed: {exc}") from exc

        tables: List[TableDescriptor] = []
        for name in table_names:
            if name in skipped:
                SmartLogger.log(
                    "INFO",
                    f"catalog.build: skipping excluded table {name}",
                    category="catalog.build",
                )
                continue
            try:
                columns = await store.list_columns(name)
            except StoreError as exc:
                raise IntrospectionError(f"listing columns of {name} failed: {exc}") from exc
            try:
                tables.append(TableDescriptor.from_columns(name, columns))
            except SchemaDefinitionError as exc:
                raise IntrospectionError(str(exc)) from exc

        try:
            catalog = cls(tables)
        except SchemaDefinitionError as exc:
            raise IntrospectionError(str(exc)) from exc

        SmartLogger.log(
            "INFO",
            f"catalog.build: found {len(catalog)} tables",
            category="catalog.build",
            params={
                t.name: {"primary_key": t.primary_key, "fields": [f.name for f in t.fields]}
                for t in catalog
            },
            max_inline_chars=2000,
        )
        return catalog

    def __len__(self) -> int:
        return len(self._tables)

    def __iter__(self) -> Iterator[TableDescriptor]:
        return iter(self._tables)

    def __contains__(self, name: str) -> bool:
        return name in self._index

    def table_names(self) -> List[str]:
        return [t.name for t in self._tables]

    def lookup(self, name: str) -> Optional[TableDescriptor]:
        return self._index.get(name)

    def require(self, name: str) -> TableDescriptor:
        table = self._index.get(name)
        if table is None:
            raise UnknownTableError(name)
        return table
