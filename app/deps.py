"""Dependency injection for FastAPI"""
from fastapi import Request

from app.core.catalog import SchemaCatalog
from app.core.query_executor import QueryExecutor
from app.store.base import StoreAdapter


class ExplorerState:
    """Process-scoped objects created in the lifespan"""

    def __init__(self, store: StoreAdapter, catalog: SchemaCatalog):
        self.store = store
        self.catalog = catalog
        self.executor = QueryExecutor(catalog, store)


def get_state(request: Request) -> ExplorerState:
    state = getattr(request.app.state, "explorer", None)
    if state is None:
        raise RuntimeError("schema catalog is not initialized")
    return state


def get_catalog(request: Request) -> SchemaCatalog:
    """FastAPI dependency for the schema catalog"""
    return get_state(request).catalog


def get_executor(request: Request) -> QueryExecutor:
    """FastAPI dependency for the query executor"""
    return get_state(request).executor
