"""Factory for creating dialect-specific store adapters."""

from typing import Dict, Type

from app.config import Settings
from app.store.base import StoreAdapter
from app.store.mysql import MySQLStore
from app.store.postgresql import PostgreSQLStore


# Registry mapping database types to their adapter classes
_STORE_REGISTRY: Dict[str, Type[StoreAdapter]] = {
    "mysql": MySQLStore,
    "mariadb": MySQLStore,  # Alias
    "postgresql": PostgreSQLStore,
    "postgres": PostgreSQLStore,  # Alias
}


def get_store_class(db_type: str) -> Type[StoreAdapter]:
    """Resolve the adapter class for a database type.

    Args:
        db_type: Database type identifier (e.g., "mysql", "postgresql").
                Case-insensitive.

    Raises:
        NotImplementedError: If the database type is not supported.
    """
    normalized_type = (db_type or "").lower().strip()
    store_class = _STORE_REGISTRY.get(normalized_type)

    if store_class is None:
        supported = ", ".join(sorted(_STORE_REGISTRY.keys()))
        raise NotImplementedError(
            f"Database type '{db_type}' is not supported. "
            f"Supported types: {supported}"
        )

    return store_class


async def create_store(settings: Settings) -> StoreAdapter:
    """Open a pooled store adapter for the configured target database.

    Examples:
        >>> store = await create_store(settings)
        >>> tables = await store.list_tables()
    """
    return await get_store_class(settings.target_db_type).create(settings)
