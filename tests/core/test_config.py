"""Tests for the configuration system."""

from dataclasses import dataclass
from pathlib import Path

import pytest

from mlsession.core.config import Config, config_properties


class TestConfig:
    def test_get_value(self):
        config = Config({"mlsession": {"store": {"host": "ml.local", "port": 8010}}})
        assert config.get("mlsession.store.host") == "ml.local"
        assert config.get("mlsession.store.port") == 8010

    def test_get_with_default(self):
        config = Config({})
        assert config.get("missing.key", "default") == "default"

    def test_false_value_is_not_replaced_by_default(self):
        config = Config({"mlsession": {"store": {"ssl": False}}})
        assert config.get("mlsession.store.ssl", True) is False

    def test_load_from_yaml_file(self, tmp_path: Path):
        config_file = tmp_path / "settings.yaml"
        config_file.write_text("mlsession:\n  store:\n    collection: web\n")
        config = Config.from_file(config_file, load_defaults=False)
        assert config.get("mlsession.store.collection") == "web"

    def test_load_from_toml_file(self, tmp_path: Path):
        config_file = tmp_path / "settings.toml"
        config_file.write_text('[mlsession.store]\nhost = "toml-host"\n')
        config = Config.from_file(config_file, load_defaults=False)
        assert config.get("mlsession.store.host") == "toml-host"

    def test_missing_file_leaves_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("MLSESSION_STORE_PORT", raising=False)
        config = Config.from_file(tmp_path / "absent.yaml")
        assert config.get("mlsession.store.port") == 8000

    def test_packaged_defaults_loaded(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("MLSESSION_STORE_COLLECTION", raising=False)
        monkeypatch.delenv("MLSESSION_STORE_TTL", raising=False)
        config = Config.from_sources(tmp_path)
        assert config.get("mlsession.store.collection") == "sessions"
        assert config.get("mlsession.store.ttl") == 1000 * 60 * 60 * 24 * 14

    def test_file_values_merge_over_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.delenv("MLSESSION_STORE_HOST", raising=False)
        monkeypatch.delenv("MLSESSION_STORE_PORT", raising=False)
        (tmp_path / "mlsession.yml").write_text("mlsession:\n  store:\n    host: ml-01\n")
        config = Config.from_sources(tmp_path)
        assert config.get("mlsession.store.host") == "ml-01"
        assert config.get("mlsession.store.port") == 8000

    def test_config_subdirectory_loaded_before_root(self, tmp_path):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "mlsession.yaml").write_text("mlsession:\n  store:\n    host: a\n    port: 1\n")
        (tmp_path / "mlsession.yaml").write_text("mlsession:\n  store:\n    host: b\n")

        config = Config.from_sources(tmp_path, load_defaults=False)
        assert config.get("mlsession.store.host") == "b"
        assert config.get("mlsession.store.port") == 1

    def test_env_var_override(self, monkeypatch):
        monkeypatch.setenv("MLSESSION_STORE_HOST", "env-host")
        config = Config({"mlsession": {"store": {"host": "file-host"}}})
        assert config.get("mlsession.store.host") == "env-host"

    def test_env_vars_win_over_files(self, tmp_path, monkeypatch):
        (tmp_path / "mlsession.yaml").write_text("mlsession:\n  store:\n    collection: base\n")
        monkeypatch.setenv("MLSESSION_STORE_COLLECTION", "env-wins")
        config = Config.from_sources(tmp_path)
        assert config.get("mlsession.store.collection") == "env-wins"

    def test_env_key_maps_hyphens(self, monkeypatch):
        monkeypatch.setenv("MLSESSION_STORE_AUTH_TYPE", "basic")
        assert Config({}).get("mlsession.store.auth-type") == "basic"


class TestConfigProperties:
    def test_bind_to_dataclass(self):
        @config_properties(prefix="mlsession.store")
        @dataclass
        class Connection:
            host: str = "127.0.0.1"
            port: int = 8000

        config = Config({"mlsession": {"store": {"host": "ml.internal", "port": 8020}}})
        bound = config.bind(Connection)
        assert bound.host == "ml.internal"
        assert bound.port == 8020

    def test_bind_uses_defaults(self):
        @config_properties(prefix="mlsession.store")
        @dataclass
        class Connection:
            host: str = "127.0.0.1"
            port: int = 8000

        bound = Config({}).bind(Connection)
        assert bound.host == "127.0.0.1"
        assert bound.port == 8000

    def test_bind_coerces_env_strings(self, monkeypatch):
        @config_properties(prefix="mlsession.store")
        @dataclass
        class Connection:
            port: int = 8000
            ssl: bool = False
            timeout: float = 30.0

        monkeypatch.setenv("MLSESSION_STORE_PORT", "8040")
        monkeypatch.setenv("MLSESSION_STORE_SSL", "true")
        monkeypatch.setenv("MLSESSION_STORE_TIMEOUT", "2.5")
        bound = Config({}).bind(Connection)
        assert (bound.port, bound.ssl, bound.timeout) == (8040, True, 2.5)

    def test_bind_nested_dataclass(self):
        @dataclass
        class Inner:
            salt: str = "x"

        @config_properties(prefix="outer")
        @dataclass
        class Outer:
            inner: Inner | None = None

        bound = Config({"outer": {"inner": {"salt": "y"}}}).bind(Outer)
        assert bound.inner == Inner(salt="y")

    def test_bind_requires_decorator(self):
        @dataclass
        class Plain:
            x: int = 1

        with pytest.raises(ValueError, match="config_properties"):
            Config({}).bind(Plain)
