"""FieldResult and FieldError: value-returning encode/decode outcomes.

``JSONField.value`` raises on failure; ``JSONField.load`` and
``JSONField.store`` return these instead, so a corrupted or outdated
payload never has to escape as an exception.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from jsonblob.domain.errors import DecodeError, EncodeError

DECODE_FAILED = "DECODE_FAILED"
ENCODE_FAILED = "ENCODE_FAILED"


class FieldError(BaseModel):
    """Structured error payload within a FieldResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class FieldResult(BaseModel):
    """Outcome of a single load or store on a JSON field.

    Attributes:
        ok: Whether the operation succeeded.
        op: ``"load"`` or ``"store"``.
        value: The decoded value on a successful load; the stored value
            on a successful store; None on failure.
        error: Structured error if ``ok`` is False.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    value: Any = None
    error: FieldError | None = None

    def unwrap(self) -> Any:
        """Return ``value``, or re-raise the failure as EncodeError/DecodeError."""
        if self.ok:
            return self.value
        assert self.error is not None
        exc_type = EncodeError if self.error.code == ENCODE_FAILED else DecodeError
        raise exc_type(self.error.message)
