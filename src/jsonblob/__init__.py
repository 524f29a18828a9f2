"""jsonblob: structured values stored as JSON bytes with field-level access."""

from jsonblob.domain.errors import (
    ConfigError,
    DecodeError,
    EncodeError,
    FieldPathError,
    JsonBlobError,
    SerializedFormError,
)
from jsonblob.domain.paths import FieldPath, Lens
from jsonblob.field import JSONField, MutableProxy
from jsonblob.result import FieldError, FieldResult

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "DecodeError",
    "EncodeError",
    "FieldError",
    "FieldPath",
    "FieldPathError",
    "FieldResult",
    "JSONField",
    "JsonBlobError",
    "Lens",
    "MutableProxy",
    "SerializedFormError",
    "__version__",
]
