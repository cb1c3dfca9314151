"""Pytest configuration for sessionview tests."""

import json
import logging
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolate_logging():
    """Keep handlers installed by setup_logging() from leaking across tests."""
    logger = logging.getLogger("sessionview")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    monkeypatch.delenv("SESSIONVIEW_LOG_LEVEL", raising=False)
    monkeypatch.delenv("SESSIONVIEW_CONFIG_PATH", raising=False)


def jsonl(*entries: dict) -> str:  # type: ignore[type-arg]
    """Serialize entries as JSONL text."""
    return "".join(json.dumps(entry) + "\n" for entry in entries)


@pytest.fixture
def write_jsonl(tmp_path: Path):
    """Write JSONL entries to a file under tmp_path and return its path."""

    def _write(name: str, *entries: dict) -> Path:  # type: ignore[type-arg]
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(jsonl(*entries), encoding="utf-8")
        return path

    return _write


def pytest_collection_modifyitems(config, items):
    """Set per-marker timeouts: unit=1s, integration=5s."""
    for item in items:
        # Directory names are keywords too, so tests/unit alone would match "unit"
        if item.get_closest_marker("integration"):
            item.add_marker(pytest.mark.timeout(5))
        elif item.get_closest_marker("unit"):
            item.add_marker(pytest.mark.timeout(1))
