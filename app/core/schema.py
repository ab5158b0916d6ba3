"""Typed schema model built from introspected column metadata"""
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, List, Mapping, NewType, Optional, Tuple

from app.core.errors import SchemaDefinitionError


ID = NewType("ID", int)
ZERO_ID = ID(0)


class FieldKind(str, Enum):
    """Storage kinds the explorer can serve"""

    INTEGER = "integer"
    TEXT = "text"
    FLOAT64 = "float64"


# Evaluated in order against the lower-cased declared type.
_KIND_MARKERS: Tuple[Tuple[FieldKind, Tuple[str, ...]], ...] = (
    (FieldKind.TEXT, ("char", "text")),
    (FieldKind.INTEGER, ("int",)),
    (FieldKind.FLOAT64, ("float", "real", "double")),
)


def classify_kind(declared_type: str) -> Optional[FieldKind]:
    """Map a declared SQL type (``varchar(255)``, ``int(11)``, ``double``) to a kind.

    Returns None when the type is not supported.
    """
    lowered = (declared_type or "").lower()
    for kind, markers in _KIND_MARKERS:
        if any(marker in lowered for marker in markers):
            return kind
    return None


@dataclass(frozen=True)
class ColumnMetadata:
    """One column as reported by the store, in ``SHOW FULL COLUMNS`` shape."""

    field: str
    type: str
    null: str = "NO"
    key: str = ""
    default: Optional[str] = None
    extra: str = ""


@dataclass(frozen=True)
class FieldDescriptor:
    """Immutable description of one column"""

    name: str
    kind: FieldKind
    is_primary_key: bool = False
    is_auto_increment: bool = False
    is_nullable: bool = False
    has_default: bool = False

    @classmethod
    def from_column(cls, table: str, column: ColumnMetadata) -> "FieldDescriptor":
        kind = classify_kind(column.type)
        if kind is None:
            raise SchemaDefinitionError(
                f"table {table}: column {column.field} has unsupported type {column.type!r}"
            )
        return cls(
            name=column.field,
            kind=kind,
            is_primary_key=(column.key or "").lower() == "pri",
            is_auto_increment="auto_increment" in (column.extra or "").lower(),
            is_nullable=(column.null or "").lower() == "yes",
            has_default=column.default is not None,
        )


@dataclass(frozen=True)
class TableDescriptor:
    """Immutable description of one table.

    ``fields`` keeps discovery order. The table must have exactly one
    primary-key field; only that field may be auto-increment.
    """

    name: str
    fields: Tuple[FieldDescriptor, ...]
    primary_key: str = field(init=False)
    _by_name: Mapping[str, FieldDescriptor] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        fields = tuple(self.fields)
        if not fields:
            raise SchemaDefinitionError(f"table {self.name} has no columns")

        by_name = {}
        for f in fields:
            if f.name in by_name:
                raise SchemaDefinitionError(f"table {self.name}: duplicate column {f.name}")
            by_name[f.name] = f

        keys = [f.name for f in fields if f.is_primary_key]
        if len(keys) != 1:
            raise SchemaDefinitionError(
                f"table {self.name} must have exactly one primary key column, found {len(keys)}"
            )

        for f in fields:
            if f.is_auto_increment and not f.is_primary_key:
                raise SchemaDefinitionError(
                    f"table {self.name}: auto increment column {f.name} is not the primary key"
                )

        object.__setattr__(self, "fields", fields)
        object.__setattr__(self, "primary_key", keys[0])
        object.__setattr__(self, "_by_name", MappingProxyType(by_name))

    @classmethod
    def from_columns(cls, name: str, columns: Iterable[ColumnMetadata]) -> "TableDescriptor":
        return cls(name=name, fields=tuple(FieldDescriptor.from_column(name, c) for c in columns))

    def __contains__(self, field_name: str) -> bool:
        return field_name in self._by_name

    def get_field(self, name: str) -> Optional[FieldDescriptor]:
        return self._by_name.get(name)

    @property
    def primary_key_field(self) -> FieldDescriptor:
        return self._by_name[self.primary_key]

    @property
    def has_auto_increment_key(self) -> bool:
        return self.primary_key_field.is_auto_increment

    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]
