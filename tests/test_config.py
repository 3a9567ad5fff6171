"""Tests for settings and structured logging."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from config import Settings, get_settings, setup_logging


@pytest.fixture()
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_settings_defaults():
    settings = Settings()

    assert settings.feed_max_retries == 3
    assert settings.http_client_kwargs == {"timeout": 10.0}
    assert settings.scenario_store_path == Path("data") / "saved_scenarios.json"
    assert [settings.backoff_delay(a) for a in range(3)] == [1.0, 2.0, 4.0]


def test_settings_read_prefixed_environment(monkeypatch):
    monkeypatch.setenv("FOODBANK_DONATIONS_PROXY_URL", "https://example.org/proxy")
    monkeypatch.setenv("FOODBANK_USE_MOCK_FALLBACK", "false")

    settings = get_settings()

    assert settings.donations_proxy_url == "https://example.org/proxy"
    assert settings.use_mock_fallback is False
    assert get_settings() is settings


def test_setup_logging_emits_json(capsys, restore_root_logger):
    setup_logging("debug")

    logging.getLogger("foodbank.test").info("Fetched donations", extra={"records": 3})

    line = capsys.readouterr().out.strip().splitlines()[-1]
    payload = json.loads(line)
    assert payload["message"] == "Fetched donations"
    assert payload["level"] == "INFO"
    assert payload["service"] == "foodbank-pulse"
    assert payload["records"] == 3
    assert payload["name"] == "foodbank.test"
    assert "timestamp" in payload
