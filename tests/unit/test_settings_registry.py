"""Tests for settings, JSON configuration and the provider registry."""
from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from config import AppConfig, LlmRoute, Settings, get_provider, load_config, registered_providers, resolve_route


def test_settings_defaults():
    cfg = Settings(_env_file=None)
    assert cfg.MAX_UPLOAD_BYTES == 10 * 1024 * 1024
    assert ".pdf" in cfg.ALLOWED_UPLOAD_EXTENSIONS
    assert cfg.CONTEXT_WINDOW_TURNS == 10


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("DB_PATH", "/tmp/other.db")
    assert Settings(_env_file=None).DB_PATH == "/tmp/other.db"


def _write(tmp_path, data):
    path = tmp_path / "app_config.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_load_config_and_resolve(tmp_path):
    path = _write(
        tmp_path,
        {
            "llm_routes": {
                "local": {"name": "local", "provider": "ollama", "base_url": "http://localhost:11434/", "model": "llama3.1"},
                "remote": {"name": "remote", "base_url": "https://api.example.com", "model": "m", "timeout_s": 15},
            },
            "active_route": "local",
            "flow": {"question_target": 3},
        },
    )

    cfg = load_config(path)

    assert cfg.flow.question_target == 3
    assert cfg.flow.context_window == 10
    assert resolve_route(cfg).url() == "http://localhost:11434/api/generate"
    remote = resolve_route(cfg, "remote")
    assert remote.url() == "https://api.example.com/chat/completions"
    assert remote.timeout_s == 15
    with pytest.raises(KeyError):
        resolve_route(cfg, "missing")


def test_active_route_must_exist():
    with pytest.raises(ValidationError):
        AppConfig(
            llm_routes={"a": LlmRoute(name="a", base_url="http://x", model="m")},
            active_route="b",
        )


def test_flow_rejects_zero_target():
    with pytest.raises(ValidationError):
        AppConfig.model_validate(
            {
                "llm_routes": {"a": {"name": "a", "base_url": "http://x", "model": "m"}},
                "active_route": "a",
                "flow": {"question_target": 0},
            }
        )


def test_shipped_config_is_valid():
    from pathlib import Path

    cfg = load_config(Path(__file__).resolve().parents[2] / "app_config.json")
    assert cfg.active_route in cfg.llm_routes


def test_registry_knows_both_providers():
    import llm_gateway  # noqa: F401  registers providers on import

    assert {"ollama", "chat_completions"} <= set(registered_providers())
    with pytest.raises(KeyError, match="Provider not bound"):
        get_provider("carrier-pigeon")
