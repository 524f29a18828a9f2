"""Tests for JsonBlobSettings: env vars, TOML source, process-wide instance."""

from pathlib import Path

import pytest

from jsonblob import ConfigError
from jsonblob.config.models import PayloadEncoding
from jsonblob.config.settings import JsonBlobSettings, get_settings, set_settings, use_settings


class TestDefaults:
    def test_all_defaults(self) -> None:
        settings = JsonBlobSettings.load()
        assert settings.config_path is None
        assert settings.codec.strict is False
        assert settings.serialized.key == "data"
        assert settings.serialized.payload_encoding is PayloadEncoding.BASE64
        assert settings.serialized.accept_bare_payload is True
        assert settings.log.verbose is False
        assert settings.log.json_output is False

    def test_frozen(self) -> None:
        settings = JsonBlobSettings.load()
        with pytest.raises(Exception):
            settings.config_path = Path("x.toml")  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        toml = tmp_path / "jsonblob.toml"
        toml.write_text('[codec]\nstrict = true\n[serialized]\npayload_encoding = "array"\n')
        settings = JsonBlobSettings.load(toml)
        assert settings.codec.strict is True
        assert settings.serialized.payload_encoding is PayloadEncoding.ARRAY
        assert settings.serialized.key == "data"  # default preserved
        assert settings.config_path == toml

    def test_empty_toml_uses_defaults(self, tmp_path: Path) -> None:
        toml = tmp_path / "jsonblob.toml"
        toml.write_text("")
        assert JsonBlobSettings.load(toml).codec.strict is False

    def test_env_var_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        toml = tmp_path / "custom.toml"
        toml.write_text('[serialized]\nkey = "blob"\n')
        monkeypatch.setenv("JSONBLOB_CONFIG", str(toml))
        assert JsonBlobSettings.load().serialized.key == "blob"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            JsonBlobSettings.load(tmp_path / "absent.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        toml = tmp_path / "jsonblob.toml"
        toml.write_text("[codec\n")
        with pytest.raises(ConfigError, match="Invalid TOML"):
            JsonBlobSettings.load(toml)


class TestPriority:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        toml = tmp_path / "jsonblob.toml"
        toml.write_text("[codec]\nstrict = false\n")
        monkeypatch.setenv("JSONBLOB_CODEC__STRICT", "true")
        assert JsonBlobSettings.load(toml).codec.strict is True

    def test_kwargs_override_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JSONBLOB_SERIALIZED__KEY", "env")
        settings = JsonBlobSettings.load(serialized={"key": "kwarg"})
        assert settings.serialized.key == "kwarg"


class TestProcessSettings:
    def test_get_settings_cached(self) -> None:
        assert get_settings() is get_settings()

    def test_set_settings(self) -> None:
        custom = JsonBlobSettings.load(codec={"strict": True})
        set_settings(custom)
        assert get_settings() is custom
        set_settings(None)
        assert get_settings() is not custom

    def test_use_settings_restores(self) -> None:
        original = get_settings()
        custom = JsonBlobSettings.load(codec={"strict": True})
        with use_settings(custom):
            assert get_settings().codec.strict is True
        assert get_settings() is original
