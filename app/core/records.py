"""Conversion between scanned rows and transport records"""
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from app.core.schema import FieldDescriptor, FieldKind


Record = Dict[str, Any]


def _native(field: FieldDescriptor, value: Any) -> Any:
    if value is None:
        return None
    if field.kind is FieldKind.INTEGER:
        return int(value)
    if field.kind is FieldKind.TEXT:
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value).decode("utf-8")
        return str(value)
    if field.kind is FieldKind.FLOAT64:
        return float(value)
    raise AssertionError(f"unhandled field kind {field.kind!r}")


def new_record(names: Sequence[str], values: Sequence[Any]) -> Record:
    if len(names) != len(values):
        raise ValueError("new_record: names and values must have equal length")
    return dict(zip(names, values))


def decode(fields: Sequence[FieldDescriptor], row: Sequence[Any]) -> Record:
    """Build a record from one scanned row.

    NULL (``None``) stays ``None``; every other value is normalized to the
    Python type of its field's kind.
    """
    if len(fields) != len(row):
        raise ValueError("decode: row width does not match field count")
    return {f.name: _native(f, v) for f, v in zip(fields, row)}


def decode_rows(fields: Sequence[FieldDescriptor], rows: Sequence[Sequence[Any]]) -> List[Record]:
    return [decode(fields, row) for row in rows]


def encode(record: Mapping[str, Any]) -> Tuple[List[str], List[Any]]:
    return list(record.keys()), list(record.values())
