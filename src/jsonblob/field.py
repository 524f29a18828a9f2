"""JSONField: a structured value stored as UTF-8 JSON bytes.

The only state is the byte payload. Every read decodes the whole payload,
every write re-encodes the whole value; nothing is cached, so a write is
visible to the very next read.

Usage::

    job = JSONField(JobModel, JobModel(company="Apple", salary=120000.0, remote=True))
    job.company                        # "Apple" (read-only attribute sugar)
    job.get("department.name")         # nested read
    job.mutable.company = "Google"     # decode, replace one field, re-encode
    job.mutable["department.name"] = "Platform"
    job.raw_bytes()                    # b'{"company":"Google",...}'

Names that collide with JSONField's own attributes (``value``, ``get``,
``mutable`` ...) are read with :meth:`JSONField.get` instead of dot syntax.
"""

from __future__ import annotations

import logging
import typing
from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

from jsonblob.config.settings import get_settings
from jsonblob.domain.codec import JsonCodec, codec_for
from jsonblob.domain.errors import DecodeError, EncodeError, FieldPathError, JsonBlobError
from jsonblob.domain.paths import FieldPath, Segment
from jsonblob.result import DECODE_FAILED, ENCODE_FAILED, FieldError, FieldResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

PathLike = str | Sequence[Segment] | FieldPath


def _codec(model_type: Any, strict: bool | None) -> JsonCodec[Any]:
    if strict is None:
        strict = get_settings().codec.strict
    return codec_for(model_type, strict=strict)


class JSONField(Generic[T]):
    """A value of type ``T`` persisted as JSON bytes.

    Args:
        model_type: The value type (``BaseModel`` subclass, dataclass,
            ``list[str]`` ...). Python generics are erased at runtime, so
            the type is passed explicitly.
        value: The initial value; encoded immediately.
        strict: Decode without type coercion. None reads ``[codec] strict``.

    Raises:
        EncodeError: If *value* cannot be encoded.
    """

    __slots__ = ("_codec", "_data")

    _codec: JsonCodec[T]
    _data: bytes

    def __init__(self, model_type: Any, value: T, *, strict: bool | None = None) -> None:
        codec = _codec(model_type, strict)
        self._codec = codec
        self._data = codec.encode(value)

    @classmethod
    def from_bytes(
        cls,
        model_type: Any,
        data: bytes | bytearray | memoryview,
        *,
        strict: bool | None = None,
    ) -> JSONField[Any]:
        """Wrap *data* verbatim; validation is deferred to the first read."""
        field = cls.__new__(cls)
        field._codec = _codec(model_type, strict)
        field._data = bytes(data)
        return field

    @classmethod
    def from_json_string(
        cls,
        model_type: Any,
        text: str,
        *,
        strict: bool | None = None,
    ) -> JSONField[Any] | None:
        """Wrap the UTF-8 encoding of *text*.

        Returns None if *text* cannot be encoded as UTF-8 (lone surrogates).
        The JSON itself is not validated until the first read.
        """
        try:
            data = text.encode("utf-8")
        except UnicodeEncodeError:
            logger.debug("JSON string is not encodable as UTF-8")
            return None
        return cls.from_bytes(model_type, data, strict=strict)

    # --- Typed value ---------------------------------------------------------

    @property
    def model_type(self) -> Any:
        return self._codec.model_type

    @property
    def value(self) -> T:
        """The decoded value. Decodes the full payload on every access.

        Raises:
            DecodeError: If the payload is empty, malformed, or mis-shaped.
        """
        return self._codec.decode(self._data)

    @value.setter
    def value(self, new_value: T) -> None:
        # Bytes stay untouched when encoding fails.
        self._data = self._codec.encode(new_value)

    def load(self) -> FieldResult:
        """Decode without raising; failures come back as ``ok=False``."""
        try:
            decoded = self.value
        except DecodeError as exc:
            return FieldResult(
                ok=False,
                op="load",
                error=FieldError(
                    code=DECODE_FAILED,
                    message=str(exc),
                    detail={"type": self._codec.type_name, "size": len(self._data)},
                ),
            )
        return FieldResult(ok=True, op="load", value=decoded)

    def store(self, new_value: T) -> FieldResult:
        """Encode and replace the payload without raising."""
        try:
            self.value = new_value
        except EncodeError as exc:
            return FieldResult(
                ok=False,
                op="store",
                error=FieldError(
                    code=ENCODE_FAILED,
                    message=str(exc),
                    detail={"type": self._codec.type_name},
                ),
            )
        return FieldResult(ok=True, op="store", value=new_value)

    # --- Field access --------------------------------------------------------

    def get(self, path: PathLike) -> Any:
        """Read the field at *path*: ``decode(raw_bytes()).<path>``.

        Raises:
            DecodeError: If the payload does not decode.
            FieldPathError: If *path* does not resolve.
        """
        return FieldPath.of(path).get(self.value)

    access = get

    def setting(self, path: PathLike, new_value: Any) -> JSONField[T]:
        """Return a new field with *path* replaced; this field is unchanged."""
        updated = FieldPath.of(path).set(self.value, new_value)
        field = type(self).from_bytes(self.model_type, self._data, strict=self._codec.strict)
        field.value = updated
        return field

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self.get(name)
        except FieldPathError as exc:
            raise AttributeError(str(exc)) from exc

    @property
    def mutable(self) -> MutableProxy[T]:
        """A write-through view: ``field.mutable.company = "Google"``."""
        return MutableProxy(self)

    # --- Raw payload ---------------------------------------------------------

    def raw_bytes(self) -> bytes:
        """The stored payload, verbatim."""
        return self._data

    def json_string(self) -> str | None:
        """The payload as text, or None if it is not valid UTF-8."""
        try:
            return self._data.decode("utf-8")
        except UnicodeDecodeError:
            return None

    def refreshed(self) -> JSONField[T]:
        """A new field holding a copy of the same bytes."""
        return type(self).from_bytes(self.model_type, self._data, strict=self._codec.strict)

    def __bytes__(self) -> bytes:
        return self._data

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JSONField):
            return NotImplemented
        return self.model_type == other.model_type and self._data == other._data

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        preview = self._data[:60]
        suffix = "..." if len(self._data) > 60 else ""
        return f"JSONField[{self._codec.type_name}]({preview!r}{suffix})"

    # --- Pydantic integration ------------------------------------------------

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """Allow ``JSONField[Model]`` as a pydantic field annotation.

        Validates from the ``{"data": ...}`` envelope, a bare payload, an
        existing JSONField, or a ``Model`` instance; serializes to the
        envelope.
        """
        from jsonblob.serialization import from_serialized, to_serialized

        args = typing.get_args(source_type)
        model_type = args[0] if args else Any

        def _validate(raw: Any) -> JSONField[Any]:
            try:
                return from_serialized(model_type, raw)
            except JsonBlobError as exc:
                raise ValueError(str(exc)) from exc

        return core_schema.no_info_plain_validator_function(
            _validate,
            serialization=core_schema.plain_serializer_function_ser_schema(to_serialized),
        )


class MutableProxy(Generic[T]):
    """Field-level read/write view bound to one :class:`JSONField`.

    Holds nothing but the field reference. Each write decodes the full
    value, replaces one field, re-encodes, and stores into the field.
    Nested paths use item syntax: ``proxy["address.city"] = "Paris"``.
    """

    __slots__ = ("_field",)

    _field: JSONField[T]

    def __init__(self, field: JSONField[T]) -> None:
        object.__setattr__(self, "_field", field)

    def get(self, path: PathLike) -> Any:
        return self._field.get(path)

    def set(self, path: PathLike, new_value: Any) -> None:
        """Write *new_value* at *path* through the bound field.

        Raises:
            DecodeError: If the current payload does not decode.
            FieldPathError: If *path* does not resolve.
            EncodeError: If the updated value cannot be encoded; the
                field's bytes are left unchanged.
        """
        field = self._field
        field.value = FieldPath.of(path).set(field.value, new_value)

    def __getitem__(self, path: PathLike) -> Any:
        return self.get(path)

    def __setitem__(self, path: PathLike, new_value: Any) -> None:
        self.set(path, new_value)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._field.get(name)
        except FieldPathError as exc:
            raise AttributeError(str(exc)) from exc

    def __setattr__(self, name: str, new_value: Any) -> None:
        if name.startswith("_"):
            raise AttributeError(f"Cannot set private attribute {name!r} through a proxy")
        self.set(name, new_value)

    def __repr__(self) -> str:
        return f"MutableProxy({self._field!r})"
