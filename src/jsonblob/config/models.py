"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, a settings file only contains
overrides. An empty file (or no file at all) is a valid configuration.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class PayloadEncoding(StrEnum):
    """How the JSON bytes are written inside the serialized envelope."""

    BASE64 = "base64"
    ARRAY = "array"


class CodecConfig(BaseModel):
    """[codec] section."""

    model_config = {"frozen": True}

    strict: bool = False


class SerializedConfig(BaseModel):
    """[serialized] section."""

    model_config = {"frozen": True}

    key: str = "data"
    payload_encoding: PayloadEncoding = PayloadEncoding.BASE64
    accept_bare_payload: bool = True


class LogConfig(BaseModel):
    """[log] section."""

    model_config = {"frozen": True}

    verbose: bool = False
    json_output: bool = False
