"""
Base for the in-memory entity views.

A model is built from a row (from_row) and flattened back to one (to_row);
the row is always the source of truth. Column conversion is declared per
model through the *_FIELDS class attributes and handled by db.serialization.
"""
from __future__ import annotations

import uuid
from datetime import date, datetime
from enum import Enum
from functools import lru_cache
from typing import Any, ClassVar, Mapping, TypeVar, get_args, get_origin

import structlog
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from gatehouse.db.serialization import (
    deserialize_array,
    deserialize_bool,
    deserialize_date,
    deserialize_datetime,
    deserialize_object,
    serialize_array,
    serialize_bool,
    serialize_date,
    serialize_datetime,
    serialize_object,
    utcnow,
)

logger = structlog.get_logger()

E = TypeVar("E", bound="Entity")


def new_id() -> str:
    return str(uuid.uuid4())


class Entity(BaseModel):
    TABLE: ClassVar[str] = ""
    JSON_ARRAY_FIELDS: ClassVar[tuple[str, ...]] = ()
    JSON_OBJECT_FIELDS: ClassVar[tuple[str, ...]] = ()
    DATETIME_FIELDS: ClassVar[tuple[str, ...]] = ("created_at", "updated_at")
    DATE_FIELDS: ClassVar[tuple[str, ...]] = ()
    BOOL_FIELDS: ClassVar[tuple[str, ...]] = ()

    id: str = Field(default_factory=new_id)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def touch(self) -> None:
        self.updated_at = utcnow()

    def snapshot(self) -> dict[str, Any]:
        """JSON-safe copy for audit old/new values."""
        return self.model_dump(mode="json")

    def to_row(self) -> dict[str, Any]:
        row: dict[str, Any] = {}
        for name, value in self.model_dump().items():
            if value is None:
                row[name] = None
            elif name in self.JSON_ARRAY_FIELDS:
                row[name] = serialize_array(value)
            elif name in self.JSON_OBJECT_FIELDS:
                row[name] = serialize_object(value)
            elif name in self.BOOL_FIELDS:
                row[name] = serialize_bool(value)
            elif isinstance(value, datetime):
                row[name] = serialize_datetime(value)
            elif isinstance(value, date):
                row[name] = serialize_date(value)
            elif isinstance(value, Enum):
                row[name] = value.value
            else:
                row[name] = value
        return row

    @classmethod
    def from_row(cls: type[E], row: Mapping[str, Any]) -> E:
        """
        Build the model from a stored row.

        Conversion never raises on bad column content. A JSON column of the
        wrong shape keeps only its valid entries (list items, dict values)
        or falls back to the field default. A NULL or unparseable column is
        left out, so the field default applies: None for optional fields,
        load time for required timestamps such as created_at. Fallbacks are
        logged as json_column_invalid or column_defaulted.
        """
        converters = [
            (cls.JSON_ARRAY_FIELDS, deserialize_array),
            (cls.JSON_OBJECT_FIELDS, deserialize_object),
            (cls.BOOL_FIELDS, deserialize_bool),
            (cls.DATETIME_FIELDS, deserialize_datetime),
            (cls.DATE_FIELDS, deserialize_date),
        ]
        data = {k: v for k, v in dict(row).items() if k in cls.model_fields}
        for names, convert in converters:
            for name in names:
                raw = data.get(name)
                if raw is None:
                    continue
                data[name] = convert(raw)
                if data[name] is None:
                    cls._log_defaulted(name, raw)

        for name in cls.JSON_ARRAY_FIELDS + cls.JSON_OBJECT_FIELDS:
            if data.get(name) is not None:
                data[name] = cls._coerce_json_field(name, data[name])

        data = {k: v for k, v in data.items() if v is not None}
        return cls.model_validate(data)

    @classmethod
    def _coerce_json_field(cls, name: str, value: Any) -> Any:
        annotation = cls.model_fields[name].annotation
        if _is_valid(annotation, value):
            return value

        origin, args = get_origin(annotation), get_args(annotation)
        if origin is list and isinstance(value, list):
            kept = [item for item in value if _is_valid(args[0], item)]
        elif origin is dict and isinstance(value, dict):
            kept = {k: v for k, v in value.items() if _is_valid(args[1], v)}
        else:
            kept = None
        logger.warning(
            "json_column_invalid",
            table=cls.TABLE,
            column=name,
            dropped=len(value) - len(kept) if kept is not None else None,
        )
        if kept is None:
            cls._log_defaulted(name, value)
        return kept

    @classmethod
    def _log_defaulted(cls, name: str, raw: Any) -> None:
        logger.warning("column_defaulted", table=cls.TABLE, column=name, value=str(raw)[:40])


@lru_cache(maxsize=None)
def _adapter(annotation: Any) -> TypeAdapter:
    return TypeAdapter(annotation)


def _is_valid(annotation: Any, value: Any) -> bool:
    try:
        _adapter(annotation).validate_python(value)
    except ValidationError:
        return False
    return True
