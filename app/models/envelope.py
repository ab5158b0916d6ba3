"""Response envelopes: {"response": ...} on success, {"error": ...} on failure"""
from typing import Any, Dict, List, Union

from pydantic import BaseModel


class TablesPayload(BaseModel):
    tables: List[str]


class RecordsPayload(BaseModel):
    records: List[Dict[str, Any]]


class RecordPayload(BaseModel):
    record: Dict[str, Any]


class UpdatedPayload(BaseModel):
    updated: int


class DeletedPayload(BaseModel):
    deleted: int


class ErrorBody(BaseModel):
    error: str


def envelope(payload: Union[BaseModel, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(payload, BaseModel):
        payload = payload.model_dump()
    return {"response": payload}
