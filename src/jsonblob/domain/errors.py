"""Exception hierarchy for jsonblob.

Encode and decode failures are ordinary exceptions, never process exits.
Callers that prefer values over exceptions use ``JSONField.load`` and
``JSONField.store``, which wrap these into a :class:`FieldResult`.
"""

from __future__ import annotations


class JsonBlobError(Exception):
    """Base class for every error raised by jsonblob."""


class EncodeError(JsonBlobError):
    """A value could not be represented as JSON.

    Raised for non-finite floats, cyclic structures, and any other
    serialization failure reported by pydantic.
    """


class DecodeError(JsonBlobError):
    """Stored bytes are not valid JSON for the bound value type.

    Covers empty payloads, malformed JSON, and shape mismatches such as a
    missing required field or a wrongly typed one.
    """


class SerializedFormError(DecodeError):
    """The ``{"data": ...}`` envelope (or bare payload) is malformed."""


class FieldPathError(JsonBlobError, LookupError):
    """A field path is malformed or does not resolve against a value."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path


class ConfigError(JsonBlobError):
    """A jsonblob settings file is missing or not valid TOML."""
