"""JSON codec for a single value type, backed by a pydantic ``TypeAdapter``.

Payloads are UTF-8 JSON text. Fields are written under their alias when
one is declared, matching what validation expects on the way back in.
Dates and datetimes use pydantic's JSON mode: ISO-8601 strings, with the
UTC offset kept on aware datetimes.

INVARIANT: ``decode(encode(v)) == v`` for every value ``encode`` accepts.
Values that cannot round-trip (NaN, infinities, cycles) raise EncodeError
instead of being written as ``null``.
"""

from __future__ import annotations

import functools
import logging
import math
import typing
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from jsonblob.domain.errors import DecodeError, EncodeError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class JsonCodec(Generic[T]):
    """Encode/decode values of *model_type* to and from JSON bytes.

    Args:
        model_type: Anything pydantic can validate: a ``BaseModel``
            subclass, a dataclass, a ``TypedDict``, or a builtin generic
            such as ``list[str]``.
        strict: Disable pydantic's lax coercion on decode (e.g. ``"42"``
            is no longer accepted for an ``int`` field).
    """

    def __init__(self, model_type: Any, *, strict: bool = False) -> None:
        self._model_type = model_type
        self._adapter: TypeAdapter[T] = _adapter_for(model_type)
        self._strict = strict

    def __repr__(self) -> str:
        return f"JsonCodec({self.type_name}, strict={self._strict})"

    @property
    def model_type(self) -> Any:
        return self._model_type

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def type_name(self) -> str:
        return type_name(self._model_type)

    def encode(self, value: T) -> bytes:
        """Serialize *value* to UTF-8 JSON bytes.

        Lax coercion applies on the way out (``"5"`` for a ``float`` field is
        written as ``5.0``), so the stored bytes always decode as the type.

        Raises:
            EncodeError: If the value holds a non-finite float or a cycle,
                does not validate as the bound type, or pydantic cannot
                serialize it.
        """
        try:
            plain = self._adapter.dump_python(
                value, mode="python", by_alias=True, warnings=False
            )
        except (PydanticSerializationError, ValueError, TypeError) as exc:
            logger.debug("Encode failed for %s", self.type_name, exc_info=True)
            msg = f"Cannot encode {self.type_name} value: {exc}"
            raise EncodeError(msg) from exc

        location = find_non_finite(plain)
        if location is not None:
            msg = f"Cannot encode {self.type_name} value: non-finite number at {location}"
            logger.debug(msg)
            raise EncodeError(msg)

        # Stored bytes must decode as the type; model_copy(update=...) does not validate.
        try:
            checked = self._adapter.validate_python(plain)
        except ValidationError as exc:
            msg = f"Cannot encode {self.type_name} value: {_summarize(exc)}"
            logger.debug(msg)
            raise EncodeError(msg) from exc

        try:
            return self._adapter.dump_json(checked, by_alias=True, warnings=False)
        except (PydanticSerializationError, ValueError, TypeError) as exc:
            logger.debug("Encode failed for %s", self.type_name, exc_info=True)
            msg = f"Cannot encode {self.type_name} value: {exc}"
            raise EncodeError(msg) from exc

    def decode(self, data: bytes | bytearray | memoryview) -> T:
        """Parse and validate *data* into a value of the bound type.

        Raises:
            DecodeError: If *data* is empty, is not JSON, or does not match
                the bound type's shape.
        """
        payload = bytes(data)
        if not payload:
            raise DecodeError(f"Cannot decode {self.type_name}: payload is empty")
        try:
            return self._adapter.validate_json(payload, strict=self._strict or None)
        except ValidationError as exc:
            logger.debug(
                "Decode failed for %s (%d error(s))", self.type_name, exc.error_count()
            )
            msg = f"Cannot decode {self.type_name}: {_summarize(exc)}"
            raise DecodeError(msg) from exc


@functools.lru_cache(maxsize=128)
def codec_for(model_type: Any, *, strict: bool = False) -> JsonCodec[Any]:
    """Shared codec per ``(model_type, strict)`` pair."""
    return JsonCodec(model_type, strict=strict)


@functools.lru_cache(maxsize=128)
def _adapter_for(model_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(model_type)


def type_name(model_type: Any) -> str:
    """Readable name for a value type (``JobModel``, ``list[str]``)."""
    if typing.get_origin(model_type) is not None:
        return repr(model_type).removeprefix("typing.")
    return getattr(model_type, "__name__", repr(model_type))


def find_non_finite(value: Any, _where: str = "$") -> str | None:
    """Return the JSON-path-ish location of the first NaN/inf, or None."""
    if isinstance(value, float):
        return None if math.isfinite(value) else _where
    if isinstance(value, dict):
        for key, item in value.items():
            found = find_non_finite(item, f"{_where}.{key}")
            if found is not None:
                return found
    elif isinstance(value, list | tuple | set | frozenset):
        for i, item in enumerate(value):
            found = find_non_finite(item, f"{_where}[{i}]")
            if found is not None:
                return found
    return None


def _summarize(exc: ValidationError) -> str:
    first = exc.errors(include_url=False)[0]
    loc = ".".join(str(p) for p in first["loc"]) or "<root>"
    extra = exc.error_count() - 1
    more = f" (+{extra} more)" if extra else ""
    return f"{loc}: {first['msg']}{more}"
