"""Tests for YAML configuration loading."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from pydantic import ValidationError

from sessionview.config import config_path, get_config
from sessionview.config.loader import load_app_config
from sessionview.config.schema import AppConfig


pytestmark = pytest.mark.unit


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "sessionview.yml"
    path.write_text(text, encoding="utf-8")
    return path


def test_missing_file_yields_defaults(tmp_path: Path) -> None:
    config = load_app_config(tmp_path / "absent.yml")

    assert config == AppConfig()
    assert config.sessions.limit == 50
    assert config.api.host == "127.0.0.1"
    assert config.api.port == 8420
    assert config.logging.level == "INFO"
    assert config.claude_home_path() == Path("~/.claude").expanduser()


def test_values_are_loaded_and_env_vars_expanded(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SV_TEST_HOME", str(tmp_path / "claude"))
    path = _write(
        tmp_path,
        """
claude_home: ${SV_TEST_HOME}
sessions:
  limit: 5
api:
  port: 9000
logging:
  level: debug
""",
    )

    config = load_app_config(path)

    assert config.claude_home_path() == tmp_path / "claude"
    assert config.sessions.limit == 5
    assert config.api.port == 9000
    assert config.logging.level == "DEBUG"


def test_unset_env_var_is_left_untouched(tmp_path: Path) -> None:
    config = load_app_config(_write(tmp_path, "claude_home: ${SV_TEST_SURELY_UNSET}\n"))
    assert config.claude_home == "${SV_TEST_SURELY_UNSET}"


def test_env_var_fallback_used_when_unset(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write(tmp_path, "claude_home: ${SV_TEST_SURELY_UNSET:-/opt/claude}\napi:\n  host: ${SV_TEST_HOST:-0.0.0.0}\n")
    monkeypatch.setenv("SV_TEST_HOST", "10.0.0.5")

    config = load_app_config(path)

    assert config.claude_home == "/opt/claude"
    assert config.api.host == "10.0.0.5"


def test_plans_path_defaults_under_claude_home(tmp_path: Path) -> None:
    config = load_app_config(_write(tmp_path, f"claude_home: {tmp_path}\n"))
    assert config.plans_path() == tmp_path / "plans"

    config = load_app_config(_write(tmp_path, f"plans:\n  directory: {tmp_path / 'elsewhere'}\n"))
    assert config.plans_path() == tmp_path / "elsewhere"


def test_unknown_keys_warn(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    path = _write(tmp_path, "colour: blue\napi:\n  tls: true\n")
    with caplog.at_level(logging.WARNING, logger="sessionview.config.loader"):
        load_app_config(path)

    messages = [record.getMessage() for record in caplog.records]
    assert any("root" in m and "colour" in m for m in messages)
    assert any("root.api" in m and "tls" in m for m in messages)


@pytest.mark.parametrize("text", ["key: [unclosed\n", "- just\n- a list\n"])
def test_unusable_yaml_falls_back_to_defaults(tmp_path: Path, text: str) -> None:
    assert load_app_config(_write(tmp_path, text)) == AppConfig()


def test_empty_file_yields_defaults(tmp_path: Path) -> None:
    assert load_app_config(_write(tmp_path, "")) == AppConfig()


@pytest.mark.parametrize("text", ["sessions:\n  limit: 0\n", "api:\n  port: 70000\n", "logging:\n  level: LOUD\n"])
def test_invalid_values_raise(tmp_path: Path, text: str) -> None:
    with pytest.raises(ValidationError):
        load_app_config(_write(tmp_path, text))


def test_config_path_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    assert config_path() == Path("~/.sessionview/sessionview.yml").expanduser()

    path = _write(tmp_path, "sessions:\n  limit: 7\n")
    monkeypatch.setenv("SESSIONVIEW_CONFIG_PATH", str(path))
    assert config_path() == path
    assert get_config().sessions.limit == 7
