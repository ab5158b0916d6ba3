"""Generic CRUD endpoints driven by the schema catalog"""
import asyncio
import json
from typing import Any, Awaitable, Dict, Optional, Tuple, TypeVar

from fastapi import APIRouter, Depends, Query, Request

from app.config import settings
from app.core.catalog import SchemaCatalog
from app.core.coercion import coerce_create_body, coerce_update_body, parse
from app.core.errors import InvalidFieldTypeError, InvalidRequestError, RecordNotFoundError, StoreError
from app.core.query_executor import QueryExecutor
from app.core.records import new_record
from app.core.schema import ID, FieldDescriptor, FieldKind
from app.deps import get_catalog, get_executor
from app.models.envelope import (
    DeletedPayload,
    RecordPayload,
    RecordsPayload,
    TablesPayload,
    UpdatedPayload,
    envelope,
)


router = APIRouter(tags=["Tables"])

T = TypeVar("T")

_ID_PARAM = FieldDescriptor(name="id", kind=FieldKind.INTEGER)
_LIMIT_PARAM = FieldDescriptor(name="limit", kind=FieldKind.INTEGER)
_OFFSET_PARAM = FieldDescriptor(name="offset", kind=FieldKind.INTEGER)


def _int_param(field: FieldDescriptor, text: Optional[str], default: int, minimum: int) -> int:
    # Non-numeric or out-of-range values fall back to the default.
    if text is None:
        return default
    try:
        value = parse(field, text)
    except InvalidFieldTypeError:
        return default
    return value if value >= minimum else default


def page_params(limit: Optional[str], offset: Optional[str]) -> Tuple[int, int]:
    return (
        _int_param(_LIMIT_PARAM, limit, settings.default_limit, 1),
        _int_param(_OFFSET_PARAM, offset, settings.default_offset, 0),
    )


def record_id_param(text: str) -> ID:
    try:
        value = parse(_ID_PARAM, text)
    except InvalidFieldTypeError:
        value = None
    if value is None or value < 1:
        raise InvalidRequestError("entry id must be int >= 1")
    return ID(value)


async def read_body(request: Request) -> Dict[str, Any]:
    """Decode the request body into a generic map; nothing else is trusted."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = json.loads(raw)
    except ValueError:
        raise InvalidRequestError("request body must be a JSON object") from None
    if not isinstance(body, dict):
        raise InvalidRequestError("request body must be a JSON object")
    return body


async def bounded(call: Awaitable[T]) -> T:
    try:
        return await asyncio.wait_for(call, timeout=settings.request_timeout_seconds)
    except asyncio.TimeoutError:
        raise StoreError(
            f"store call exceeded {settings.request_timeout_seconds} seconds"
        ) from None


@router.get("/")
async def list_tables(catalog: SchemaCatalog = Depends(get_catalog)):
    """Names of every served table."""
    return envelope(TablesPayload(tables=catalog.table_names()))


@router.get("/{table}")
async def list_records(
    table: str,
    limit: Optional[str] = Query(None),
    offset: Optional[str] = Query(None),
    executor: QueryExecutor = Depends(get_executor),
):
    """Page through a table ordered by primary key."""
    executor.catalog.require(table)
    limit_value, offset_value = page_params(limit, offset)
    records = await bounded(executor.list(table, limit_value, offset_value))
    return envelope(RecordsPayload(records=records))


@router.put("/{table}")
async def create_record(
    table: str,
    request: Request,
    executor: QueryExecutor = Depends(get_executor),
):
    """Insert a record; responds with the generated primary key."""
    descriptor = executor.catalog.require(table)
    body = await read_body(request)
    names, values = coerce_create_body(descriptor, body)
    new_id = await bounded(executor.create(table, names, values))
    return envelope(new_record([descriptor.primary_key], [new_id]))


@router.get("/{table}/{record_id}")
async def get_record(
    table: str,
    record_id: str,
    executor: QueryExecutor = Depends(get_executor),
):
    executor.catalog.require(table)
    entry_id = record_id_param(record_id)
    record = await bounded(executor.get(table, entry_id))
    if record is None:
        raise RecordNotFoundError()
    return envelope(RecordPayload(record=record))


@router.post("/{table}/{record_id}")
async def update_record(
    table: str,
    record_id: str,
    request: Request,
    executor: QueryExecutor = Depends(get_executor),
):
    """Update the supplied fields; others are left untouched."""
    descriptor = executor.catalog.require(table)
    entry_id = record_id_param(record_id)
    body = await read_body(request)
    names, values = coerce_update_body(descriptor, body)
    updated = await bounded(executor.update(table, entry_id, names, values))
    return envelope(UpdatedPayload(updated=1 if updated else 0))


@router.delete("/{table}/{record_id}")
async def delete_record(
    table: str,
    record_id: str,
    executor: QueryExecutor = Depends(get_executor),
):
    executor.catalog.require(table)
    entry_id = record_id_param(record_id)
    deleted = await bounded(executor.delete(table, entry_id))
    return envelope(DeletedPayload(deleted=1 if deleted else 0))
