"""Coercion of loosely typed request values into field kinds

JSON bodies arrive as ``str``, ``int``, ``float``, ``bool`` or ``None``;
query-string parameters arrive as ``str``. Nothing downstream of this module
trusts the runtime type of a request value.
"""
import math
import re
from typing import Any, List, Mapping, Tuple

from app.core.errors import FieldRequiredError, InvalidFieldTypeError
from app.core.schema import FieldDescriptor, FieldKind, TableDescriptor


NULL_LITERAL = "null"

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

# INTEGER columns are signed 64-bit.
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


def _in_int64(value: int) -> bool:
    return INT64_MIN <= value <= INT64_MAX


def convert(field: FieldDescriptor, raw: Any) -> Any:
    """Coerce a decoded JSON value into the native value of ``field``.

    Raises:
        InvalidFieldTypeError: if the value does not fit the field. Values are
            never truncated.
    """
    if raw is None:
        if field.is_nullable:
            return None
        raise InvalidFieldTypeError(field.name)

    # bool is an int subclass; JSON true/false never fits a column kind here.
    if isinstance(raw, bool):
        raise InvalidFieldTypeError(field.name)

    if field.kind is FieldKind.INTEGER:
        if isinstance(raw, int) and _in_int64(raw):
            return raw
        if isinstance(raw, float) and math.isfinite(raw) and round(raw) == raw and _in_int64(int(raw)):
            return int(raw)
    elif field.kind is FieldKind.TEXT:
        if isinstance(raw, str):
            return raw
    elif field.kind is FieldKind.FLOAT64:
        if isinstance(raw, float) and math.isfinite(raw):
            return raw
        # JSON does not distinguish 3 from 3.0
        if isinstance(raw, int):
            return float(raw)
    else:
        raise AssertionError(f"unhandled field kind {field.kind!r}")

    raise InvalidFieldTypeError(field.name)


def parse(field: FieldDescriptor, text: str) -> Any:
    """Parse a raw string parameter into the native value of ``field``.

    The literal ``null`` (case-sensitive) stands for NULL.
    """
    if text == NULL_LITERAL:
        if not field.is_nullable:
            raise InvalidFieldTypeError(field.name, f"{field.name} cannot be null")
        return None

    if field.kind is FieldKind.INTEGER:
        if not _INTEGER_RE.fullmatch(text):
            raise InvalidFieldTypeError(field.name, f"{field.name}: invalid integer {text!r}")
        value = int(text)
        if not _in_int64(value):
            raise InvalidFieldTypeError(field.name, f"{field.name}: integer out of range {text!r}")
        return value
    if field.kind is FieldKind.TEXT:
        return text
    if field.kind is FieldKind.FLOAT64:
        try:
            value = float(text)
        except ValueError:
            raise InvalidFieldTypeError(field.name, f"{field.name}: invalid float {text!r}") from None
        if not math.isfinite(value):
            raise InvalidFieldTypeError(field.name, f"{field.name}: invalid float {text!r}")
        return value
    raise AssertionError(f"unhandled field kind {field.kind!r}")


def coerce_create_body(table: TableDescriptor, body: Mapping[str, Any]) -> Tuple[List[str], List[Any]]:
    """Validate an insert body against ``table``.

    Auto-increment primary keys are dropped even when supplied. Fields absent
    from the body must be nullable or have a default. Keys that are not
    columns are ignored.

    Returns:
        (names, values) in table field order.
    """
    names: List[str] = []
    values: List[Any] = []
    for field in table.fields:
        if field.is_primary_key and field.is_auto_increment:
            continue
        if field.name in body:
            values.append(convert(field, body[field.name]))
            names.append(field.name)
        elif not field.is_nullable and not field.has_default:
            raise FieldRequiredError(field.name)
    return names, values


def coerce_update_body(table: TableDescriptor, body: Mapping[str, Any]) -> Tuple[List[str], List[Any]]:
    """Validate a partial update body against ``table``.

    Only supplied fields are returned; the primary key may not be supplied.
    """
    names: List[str] = []
    values: List[Any] = []
    for field in table.fields:
        if field.name not in body:
            continue
        if field.is_primary_key:
            raise InvalidFieldTypeError(field.name)
        values.append(convert(field, body[field.name]))
        names.append(field.name)
    return names, values
