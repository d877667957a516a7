"""Unit tests for configuration loading."""

from pathlib import Path
from textwrap import dedent

import pytest

from taskboard.config import (
    ConfigError,
    TaskboardConfig,
    find_config,
    load_config,
)


@pytest.fixture
def temp_config(tmp_path: Path) -> Path:
    """Create a temporary config file."""
    config_content = dedent("""
        api_url: http://board.local:8080/api
        request_timeout: 2.5
        db_path: data/board.db
        port: 8080
    """).strip()

    config_path = tmp_path / "taskboard.yaml"
    config_path.write_text(config_content)
    return config_path


@pytest.mark.unit
class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_valid_config(self, temp_config: Path) -> None:
        config = load_config(temp_config, environ={})

        assert config.api_url == "http://board.local:8080/api"
        assert config.request_timeout == 2.5
        assert config.db_path == "data/board.db"
        assert config.port == 8080

    def test_unset_keys_keep_defaults(self, temp_config: Path) -> None:
        config = load_config(temp_config, environ={})

        assert config.host == "127.0.0.1"
        assert config.log_level == "INFO"

    def test_env_overrides_file(self, temp_config: Path) -> None:
        config = load_config(
            temp_config,
            environ={"TASKBOARD_PORT": "9000", "TASKBOARD_API_URL": "http://other/api"},
        )

        assert config.port == 9000
        assert config.api_url == "http://other/api"
        assert config.request_timeout == 2.5

    def test_log_settings_from_env(self, temp_config: Path, tmp_path: Path) -> None:
        log_dir = str(tmp_path / "board-logs")

        config = load_config(
            temp_config,
            environ={"TASKBOARD_LOG_DIR": log_dir, "TASKBOARD_LOG_LEVEL": "DEBUG"},
        )

        assert config.log_dir == log_dir
        assert config.log_level == "DEBUG"

    def test_missing_explicit_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.yaml", environ={})

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        config_path = tmp_path / "taskboard.yaml"
        config_path.write_text("port: [unclosed")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(config_path, environ={})

    def test_non_mapping_raises(self, tmp_path: Path) -> None:
        config_path = tmp_path / "taskboard.yaml"
        config_path.write_text("- just\n- a list\n")

        with pytest.raises(ConfigError, match="mapping"):
            load_config(config_path, environ={})

    def test_empty_file_means_defaults(self, tmp_path: Path) -> None:
        config_path = tmp_path / "taskboard.yaml"
        config_path.write_text("")

        assert load_config(config_path, environ={}) == TaskboardConfig()

    def test_auto_detect_without_file_uses_defaults(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)

        assert load_config(environ={}) == TaskboardConfig()


@pytest.mark.unit
class TestFromDict:
    """Tests for TaskboardConfig.from_dict."""

    def test_unknown_key_raises(self) -> None:
        with pytest.raises(ConfigError, match="Unknown configuration keys: colour"):
            TaskboardConfig.from_dict({"colour": "red"})

    def test_bad_value_raises(self) -> None:
        with pytest.raises(ConfigError, match="port"):
            TaskboardConfig.from_dict({"port": "not-a-number"})

    def test_non_positive_timeout_raises(self) -> None:
        with pytest.raises(ConfigError, match="request_timeout"):
            TaskboardConfig.from_dict({"request_timeout": 0})

    @pytest.mark.parametrize("key", ["request_timeout", "port"])
    def test_yaml_boolean_for_number_raises(self, key: str) -> None:
        with pytest.raises(ConfigError, match=f"Invalid value for '{key}': True"):
            TaskboardConfig.from_dict({key: True})

    def test_yaml_boolean_from_file_raises(self, tmp_path: Path) -> None:
        config_path = tmp_path / "taskboard.yaml"
        config_path.write_text("request_timeout: yes\n")

        with pytest.raises(ConfigError, match="request_timeout"):
            load_config(config_path, environ={})

    def test_list_value_raises(self) -> None:
        with pytest.raises(ConfigError, match="host"):
            TaskboardConfig.from_dict({"host": ["a", "b"]})


@pytest.mark.unit
class TestFindConfig:
    """Tests for find_config function."""

    def test_finds_in_parent_directory(self, temp_config: Path) -> None:
        nested = temp_config.parent / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config(nested) == temp_config.resolve()

    def test_returns_none_when_absent(self, tmp_path: Path) -> None:
        assert find_config(tmp_path) is None
