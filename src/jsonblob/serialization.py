"""Serialized form of a JSONField.

Primary (keyed) form, written by :func:`to_serialized`::

    {"data": "eyJjb21wYW55IjoiQXBwbGUiLC4uLn0="}

The payload is the field's UTF-8 JSON bytes, base64-encoded by default or
as a list of byte integers (``[serialized] payload_encoding = "array"``).

Fallback (bare) form, accepted by :func:`from_serialized` only: the payload
on its own, with no enclosing key. Both payload encodings and raw ``bytes``
are recognised on read, whatever the configured write encoding is.
"""

from __future__ import annotations

import base64
import binascii
import json
import typing
from collections.abc import Mapping
from typing import Any

from jsonblob.config.models import PayloadEncoding
from jsonblob.config.settings import get_settings
from jsonblob.domain.errors import SerializedFormError
from jsonblob.field import JSONField


def encode_payload(data: bytes, encoding: PayloadEncoding | str) -> str | list[int]:
    """Render raw payload bytes in the given envelope encoding."""
    if PayloadEncoding(encoding) is PayloadEncoding.ARRAY:
        return list(data)
    return base64.b64encode(data).decode("ascii")


def decode_payload(payload: Any) -> bytes:
    """Recover raw payload bytes from any accepted payload encoding.

    Raises:
        SerializedFormError: If *payload* is not base64 text, a list of
            byte values, or a bytes-like object.
    """
    if isinstance(payload, bytes | bytearray | memoryview):
        return bytes(payload)
    if isinstance(payload, str):
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise SerializedFormError(f"Payload is not valid base64: {exc}") from exc
    if isinstance(payload, list | tuple):
        try:
            return bytes(payload)
        except (TypeError, ValueError) as exc:
            raise SerializedFormError(f"Payload is not a list of byte values: {exc}") from exc
    raise SerializedFormError(f"Unsupported payload type: {type(payload).__name__}")


def to_serialized(
    field: JSONField[Any],
    *,
    key: str | None = None,
    encoding: PayloadEncoding | str | None = None,
) -> dict[str, Any]:
    """Return the keyed envelope for *field*."""
    cfg = get_settings().serialized
    key = cfg.key if key is None else key
    encoding = cfg.payload_encoding if encoding is None else encoding
    return {key: encode_payload(field.raw_bytes(), encoding)}


def from_serialized(
    model_type: Any,
    obj: Any,
    *,
    key: str | None = None,
    accept_bare: bool | None = None,
    strict: bool | None = None,
) -> JSONField[Any]:
    """Rebuild a JSONField from its keyed envelope or a bare payload.

    Also accepts an existing JSONField (rebound to *model_type* if needed) or an instance of
    *model_type* (encoded into a new field).

    Raises:
        SerializedFormError: If *obj* is neither form, or the bare form is
            disabled and no keyed envelope is present.
        EncodeError: If a *model_type* instance cannot be encoded.
    """
    cfg = get_settings().serialized
    key = cfg.key if key is None else key
    accept_bare = cfg.accept_bare_payload if accept_bare is None else accept_bare

    if isinstance(obj, JSONField):
        if obj.model_type == model_type or model_type is Any:
            return obj
        return JSONField.from_bytes(model_type, obj.raw_bytes(), strict=strict)
    if _is_value_of(obj, model_type):
        return JSONField(model_type, obj, strict=strict)

    if isinstance(obj, Mapping):
        if key not in obj:
            msg = f"Serialized field is missing the {key!r} key (got {sorted(map(str, obj))})"
            raise SerializedFormError(msg)
        payload = obj[key]
    elif accept_bare:
        payload = obj
    else:
        raise SerializedFormError(
            f"Expected a {{{key!r}: ...}} envelope, got {type(obj).__name__}"
        )
    return JSONField.from_bytes(model_type, decode_payload(payload), strict=strict)


def dumps(field: JSONField[Any], **kwargs: Any) -> str:
    """Serialize *field*'s envelope to JSON text."""
    return json.dumps(to_serialized(field, **kwargs), separators=(",", ":"))


def loads(model_type: Any, text: str | bytes, **kwargs: Any) -> JSONField[Any]:
    """Parse JSON text holding an envelope or a bare payload.

    Raises:
        SerializedFormError: If *text* is not JSON or holds neither form.
    """
    try:
        obj = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise SerializedFormError(f"Serialized field is not JSON: {exc}") from exc
    return from_serialized(model_type, obj, **kwargs)


def _is_value_of(obj: Any, model_type: Any) -> bool:
    # Envelope and payload shapes are never treated as values.
    if model_type is Any:
        return False
    if typing.get_origin(model_type) is not None or not isinstance(model_type, type):
        return False
    if isinstance(obj, dict | list | tuple | str | bytes | bytearray | memoryview):
        return False
    return isinstance(obj, model_type)
