"""Unified settings: init kwargs, env vars, and an optional TOML file.

Priority chain (highest to lowest):
  1. Init kwargs: passed by the host application
  2. Env vars: ``JSONBLOB_*`` prefix, ``__`` for nested sections
  3. TOML file: explicit path, or ``JSONBLOB_CONFIG``
  4. Code defaults: baked into the section models

The process-wide instance is read through :func:`get_settings`; fields
capture the codec and envelope options at construction time.
"""

from __future__ import annotations

import os
import threading
import tomllib
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from jsonblob.config.models import CodecConfig, LogConfig, SerializedConfig
from jsonblob.domain.errors import ConfigError

CONFIG_ENV_VAR = "JSONBLOB_CONFIG"


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from an explicit TOML file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path is None:
            return
        if not toml_path.is_file():
            raise ConfigError(f"Settings file not found: {toml_path}")
        raw = toml_path.read_text(encoding="utf-8")
        try:
            self._data = tomllib.loads(raw)
        except tomllib.TOMLDecodeError as exc:
            msg = f"Invalid TOML in {toml_path}: {exc}"
            raise ConfigError(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class JsonBlobSettings(BaseSettings):
    """Settings for every jsonblob component.

    Attributes:
        config_path: The TOML file the settings were read from, if any.
        codec: Decode strictness.
        serialized: Envelope key, payload encoding, bare-payload fallback.
        log: Verbosity and JSON log output.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "JSONBLOB_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None

    codec: CodecConfig = Field(default_factory=CodecConfig)
    serialized: SerializedConfig = Field(default_factory=SerializedConfig)
    log: LogConfig = Field(default_factory=LogConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def load(cls, config_path: str | Path | None = None, **overrides: Any) -> JsonBlobSettings:
        """Build settings from an optional TOML file plus overrides.

        Falls back to ``JSONBLOB_CONFIG`` when *config_path* is None.

        Raises:
            ConfigError: If the file does not exist or is not valid TOML.
        """
        if config_path is None:
            config_path = os.environ.get(CONFIG_ENV_VAR) or None
        toml_path = Path(config_path) if config_path is not None else None

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None


_lock = threading.Lock()
_current: JsonBlobSettings | None = None


def get_settings() -> JsonBlobSettings:
    """Return the process-wide settings, loading them on first use."""
    global _current
    with _lock:
        if _current is None:
            _current = JsonBlobSettings.load()
        return _current


def set_settings(settings: JsonBlobSettings | None) -> None:
    """Replace the process-wide settings (None reloads on next access)."""
    global _current
    with _lock:
        _current = settings


@contextmanager
def use_settings(settings: JsonBlobSettings) -> Generator[JsonBlobSettings]:
    """Temporarily install *settings* as the process-wide settings."""
    global _current
    with _lock:
        previous = _current
        _current = settings
    try:
        yield settings
    finally:
        with _lock:
            _current = previous
