"""Tests for configuration loading and validation."""

import pytest
import yaml

from photoingest.config import ConfigError, ConfigManager, DEFAULT_CONFIG


@pytest.fixture
def no_config_file(monkeypatch):
    monkeypatch.setattr(ConfigManager, "_find_config_file", staticmethod(lambda: None))


def test_defaults(no_config_file):
    config = ConfigManager.load(environ={})

    assert config.config_path is None
    assert config.get("storage.bucket") == "000-photos"
    assert config.get("storage.table") == "000-photos"
    assert config.get("processing.web_size") == 1080
    assert config.get("processing.thumbnail_size") == 300
    assert config.get("processing.key_prefix") == "photos/"


def test_load_merges_file_with_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"storage": {"bucket": "my-photos"}}))

    config = ConfigManager.load(str(path), environ={})

    assert config.config_path == path
    assert config.get("storage.bucket") == "my-photos"
    assert config.get("storage.table") == "000-photos"
    assert config.get("processing.jpeg_quality") == 85


def test_defaults_are_not_mutated():
    config = ConfigManager.from_dict({"processing": {"web_size": 2048}})
    config.set("storage.bucket", "changed")

    assert DEFAULT_CONFIG["processing"]["web_size"] == 1080
    assert DEFAULT_CONFIG["storage"]["bucket"] == "000-photos"


def test_environment_overrides(no_config_file):
    config = ConfigManager.load(environ={
        "PHOTOINGEST_BUCKET": "env-bucket",
        "PHOTOINGEST_TABLE": "env-table",
        "PHOTOINGEST_LOG_LEVEL": "DEBUG",
    })

    assert config.get("storage.bucket") == "env-bucket"
    assert config.get("storage.table") == "env-table"
    assert config.get("logging.level") == "DEBUG"


def test_environment_ignored_when_disabled(no_config_file):
    config = ConfigManager.load(use_environment=False, environ={"PHOTOINGEST_BUCKET": "env-bucket"})

    assert config.get("storage.bucket") == "000-photos"


def test_missing_explicit_file(tmp_path):
    with pytest.raises(ConfigError):
        ConfigManager.load(str(tmp_path / "missing.yaml"))


def test_invalid_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("storage: [unclosed")

    with pytest.raises(ConfigError):
        ConfigManager.load(str(path), environ={})


def test_non_mapping_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n")

    with pytest.raises(ConfigError):
        ConfigManager.load(str(path), environ={})


def test_empty_file_uses_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")

    assert ConfigManager.load(str(path), environ={}).get("storage.bucket") == "000-photos"


def test_empty_bucket_is_rejected():
    with pytest.raises(ConfigError) as excinfo:
        ConfigManager.from_dict({"storage": {"bucket": ""}})
    assert "storage.bucket" in str(excinfo.value)


@pytest.mark.parametrize("key, value", [
    ("web_size", 0),
    ("thumbnail_size", -5),
    ("thumbnail_size", "300"),
    ("jpeg_quality", 120),
])
def test_invalid_processing_values(key, value):
    with pytest.raises(ConfigError):
        ConfigManager.from_dict({"processing": {key: value}})


def test_get_with_default_and_set():
    config = ConfigManager.from_dict()

    assert config.get("nonexistent.key", "fallback") == "fallback"
    config.set("processing.timeout", 30)
    assert config.get("processing.timeout") == 30



def test_set_does_not_touch_config_file(tmp_path):
    path = tmp_path / "config.yaml"
    original = yaml.safe_dump({"storage": {"bucket": "file-bucket"}})
    path.write_text(original)
    config = ConfigManager.load(str(path), environ={})

    config.set("storage.bucket", "changed")

    assert config.get("storage.bucket") == "changed"
    assert path.read_text() == original
