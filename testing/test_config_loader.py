"""
Tests for system configuration loading.
"""

from pathlib import Path

import pytest

from lorechat_engine.config import ConfigLoader, ConfigLoadError, ConfigValidationError, SystemConfig


def _write_config(tmp_path: Path, text: str) -> Path:
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    path = config_dir / "system.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_missing_file_uses_defaults(tmp_path):
    config = ConfigLoader(tmp_path).load_system_config()

    assert config.api_port == 8080
    assert config.import_.default_avatar == "🐱"
    assert config.database_url == f"sqlite:///{Path('data') / 'lorechat.db'}"


def test_load_values(tmp_path):
    _write_config(tmp_path, """
debug: true
api_port: 9000
paths:
  data: runtime
import:
  default_avatar: "🦊"
  max_upload_bytes: 1024
""")

    config = ConfigLoader(tmp_path).load_system_config()

    assert config.debug is True
    assert config.api_port == 9000
    assert config.import_.default_avatar == "🦊"
    assert config.import_.max_upload_bytes == 1024
    assert config.database_url == f"sqlite:///{Path('runtime') / 'lorechat.db'}"


def test_explicit_database_url(tmp_path):
    _write_config(tmp_path, "database:\n  url: sqlite:///other.db\n")

    assert ConfigLoader(tmp_path).load_system_config().database_url == "sqlite:///other.db"


def test_empty_file(tmp_path):
    _write_config(tmp_path, "")

    assert ConfigLoader(tmp_path).load_system_config() == SystemConfig()


def test_invalid_value(tmp_path):
    path = _write_config(tmp_path, "api_port: 70000\n")

    with pytest.raises(ConfigValidationError) as exc_info:
        ConfigLoader(tmp_path).load_system_config()

    assert exc_info.value.file_path == path
    assert "api_port" in str(exc_info.value)


def test_non_sqlite_database_rejected(tmp_path):
    _write_config(tmp_path, "database:\n  url: postgresql://localhost/db\n")

    with pytest.raises(ConfigValidationError):
        ConfigLoader(tmp_path).load_system_config()


def test_invalid_yaml(tmp_path):
    _write_config(tmp_path, "api_port: [unclosed\n")

    with pytest.raises(ConfigLoadError):
        ConfigLoader(tmp_path).load_system_config()


def test_non_mapping_yaml(tmp_path):
    _write_config(tmp_path, "- just\n- a list\n")

    with pytest.raises(ConfigLoadError):
        ConfigLoader(tmp_path).load_system_config()
