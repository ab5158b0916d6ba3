"""FastAPI main application"""
from dotenv import load_dotenv
load_dotenv()

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.core.catalog import SchemaCatalog
from app.core.errors import ExplorerError, MethodNotAllowedError, StoreError, UnknownTableError
from app.deps import ExplorerState
from app.models.envelope import ErrorBody
from app.routers import tables
from app.sanity_checks.runner import run_startup_sanity_checks_or_raise
from app.smart_logger import SmartLogger
from app.store.factory import create_store


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    SmartLogger.instance().min_level = settings.log_level
    SmartLogger.log(
        "INFO",
        "Starting DB Explorer API...",
        category="main.lifespan.start",
        params={
            "target_db": f"{settings.target_db_type}://{settings.target_db_host}:{settings.target_db_port}/{settings.target_db_name}",
        },
    )

    store = await create_store(settings)
    try:
        # Fail-fast: never serve with a partial or absent catalog.
        await run_startup_sanity_checks_or_raise(store)
        catalog = await SchemaCatalog.build(store, exclude=settings.excluded_tables())
    except Exception as e:
        SmartLogger.log(
            "CRITICAL",
            "main.lifespan.catalog.failed",
            category="main.lifespan.start",
            params={"error": str(e)},
            max_inline_chars=0,
        )
        await store.close()
        raise

    app.state.explorer = ExplorerState(store, catalog)
    SmartLogger.log(
        "INFO",
        f"Serving {len(catalog)} tables",
        category="main.lifespan.start",
        params={"tables": catalog.table_names()},
    )

    yield

    SmartLogger.log("INFO", "Shutting down...", category="main.lifespan.stop")
    app.state.explorer = None
    await store.close()


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorBody(error=message).model_dump())


async def explorer_error_handler(request: Request, exc: ExplorerError) -> JSONResponse:
    if isinstance(exc, StoreError):
        # Backend details stay in the logs.
        SmartLogger.log(
            "ERROR",
            f"{exc.status_code}: {exc.message}",
            category="http.error",
            params={"method": request.method, "path": request.url.path},
        )
        return _error_response(exc.status_code, exc.public_message)
    return _error_response(exc.status_code, exc.message)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 405:
        # The table is resolved before the method.
        table = request.url.path.strip("/").split("/", 1)[0]
        state = getattr(request.app.state, "explorer", None)
        if table and state is not None and table not in state.catalog:
            return _error_response(404, UnknownTableError(table).message)
        return _error_response(405, MethodNotAllowedError().message)
    if exc.status_code == 404:
        return _error_response(404, "not found")
    return _error_response(exc.status_code, str(exc.detail).lower())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    SmartLogger.log(
        "ERROR",
        f"500: {exc!r}",
        category="http.error",
        params={"method": request.method, "path": request.url.path},
    )
    return _error_response(500, StoreError.public_message)


def create_app(*, with_lifespan: bool = True) -> FastAPI:
    app = FastAPI(
        title="DB Explorer API",
        description="""
    Generic CRUD over every table discovered in the target database.

    ## Endpoints
    - `GET /` table names
    - `GET /{table}?limit=&offset=` page of records ordered by primary key
    - `PUT /{table}` create a record
    - `GET /{table}/{id}` read a record
    - `POST /{table}/{id}` update the supplied fields
    - `DELETE /{table}/{id}` delete a record
    """,
        version="1.0.0",
        # Every top-level path segment is a table name.
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan if with_lifespan else None,
    )

    app.add_exception_handler(ExplorerError, explorer_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(tables.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
    )
