"""SQLAlchemy column type for JSONField values.

The column holds the field's raw JSON bytes in a ``LargeBinary`` column.
The database never sees individual fields: no JSON operators, no indexes
on nested values. Reads wrap the stored bytes without decoding them;
validation happens on first access through the field.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import LargeBinary
from sqlalchemy.engine import Dialect
from sqlalchemy.types import TypeDecorator

from jsonblob.field import JSONField


class JSONFieldType(TypeDecorator[JSONField[Any]]):
    """Persist a :class:`JSONField` of *model_type* as a binary column.

    Bind values may be a JSONField, a bare *model_type* value (encoded on
    the way in), or raw bytes (stored verbatim). ``None`` maps to NULL.

    Usage::

        Column("job", JSONFieldType(JobModel), nullable=False)
    """

    impl = LargeBinary
    cache_ok = True

    def __init__(
        self,
        model_type: Any,
        *,
        strict: bool | None = None,
        length: int | None = None,
    ) -> None:
        super().__init__(length=length)
        self.model_type = model_type
        self.strict = strict

    @property
    def python_type(self) -> type[JSONField[Any]]:
        return JSONField

    def process_bind_param(self, value: Any, dialect: Dialect) -> bytes | None:
        if value is None:
            return None
        if isinstance(value, JSONField):
            return value.raw_bytes()
        if isinstance(value, bytes | bytearray | memoryview):
            return bytes(value)
        return JSONField(self.model_type, value, strict=self.strict).raw_bytes()

    def process_result_value(self, value: Any, dialect: Dialect) -> JSONField[Any] | None:
        if value is None:
            return None
        return JSONField.from_bytes(self.model_type, value, strict=self.strict)

    def copy_value(self, value: Any) -> Any:
        if isinstance(value, JSONField):
            return value.refreshed()
        return value

    def compare_values(self, x: Any, y: Any) -> bool:
        return bool(x == y)

    def __repr__(self) -> str:
        name = getattr(self.model_type, "__name__", repr(self.model_type))
        return f"JSONFieldType({name})"
