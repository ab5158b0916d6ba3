"""Backing store adapters."""

from app.store.base import StoreAdapter
from app.store.factory import create_store, get_store_class
from app.store.mysql import MySQLStore
from app.store.postgresql import PostgreSQLStore

__all__ = [
    "StoreAdapter",
    "create_store",
    "get_store_class",
    "MySQLStore",
    "PostgreSQLStore",
]
