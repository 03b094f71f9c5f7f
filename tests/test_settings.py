"""Tests for settings loading and client construction."""

import os
from pathlib import Path

import pytest

from textsynth.engines.definition import CustomEngineDefinition, KnownEngine
from textsynth.engines.endpoints import build_client, resolve_api_key
from textsynth.settings import get_setting, load_settings


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch) -> None:
    """Keep a developer's .env and API key out of these tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("TEXTSYNTH_API_KEY", raising=False)


def test_defaults_load_without_config() -> None:
    settings = load_settings()
    assert settings["api"]["base_url"] == "https://api.textsynth.com/v1"
    assert settings["api"]["api_key_env"] == "TEXTSYNTH_API_KEY"
    assert settings["api"]["timeout_s"] is None
    assert settings["engine"]["id"] == "gptj_6B"
    assert settings["_warnings"] == []


def test_config_file_and_overrides_merge(tmp_path: Path) -> None:
    config = tmp_path / "textsynth.yaml"
    config.write_text("api:\n  timeout_s: 30\nengine:\n  id: boris_6B\n")

    settings = load_settings(config, overrides={"engine": {"id": "my_engine", "max_tokens": 4096}})

    assert settings["api"]["timeout_s"] == 30
    # Untouched defaults survive the merge
    assert settings["api"]["api_key_env"] == "TEXTSYNTH_API_KEY"
    assert settings["engine"] == {"id": "my_engine", "max_tokens": 4096}


def test_missing_config_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "nope.yaml")


def test_env_placeholders(monkeypatch) -> None:
    monkeypatch.setenv("TS_ENGINE", "gptneox_20B")
    monkeypatch.delenv("TS_MISSING", raising=False)
    settings = load_settings(overrides={"engine": {"id": "${TS_ENGINE}"}, "labels": ["${TS_MISSING}"]})
    assert settings["engine"]["id"] == "gptneox_20B"
    assert settings["labels"] == ["${TS_MISSING}"]
    assert any("TS_MISSING" in w for w in settings["_warnings"])


def test_validation_collects_all_errors() -> None:
    with pytest.raises(ValueError) as excinfo:
        load_settings(overrides={
            "api": {"base_url": "ftp://x", "timeout_s": -1},
            "engine": {"max_tokens": 0},
        })
    message = str(excinfo.value)
    assert "api.base_url" in message
    assert "api.timeout_s" in message
    assert "engine.max_tokens" in message


def test_resolve_api_key_from_env(monkeypatch) -> None:
    monkeypatch.setenv("TEXTSYNTH_API_KEY", "from-env")
    assert resolve_api_key(load_settings()) == "from-env"


def test_resolve_api_key_from_dotenv(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / ".env").write_text("MY_TS_KEY=from-dotenv\n")
    monkeypatch.delenv("MY_TS_KEY", raising=False)
    settings = load_settings(overrides={"api": {"api_key_env": "MY_TS_KEY"}})
    try:
        assert resolve_api_key(settings) == "from-dotenv"
    finally:
        os.environ.pop("MY_TS_KEY", None)


def test_build_client_requires_api_key() -> None:
    with pytest.raises(ValueError, match="TEXTSYNTH_API_KEY"):
        build_client(load_settings())


@pytest.mark.asyncio
async def test_build_client(monkeypatch) -> None:
    monkeypatch.setenv("TEXTSYNTH_API_KEY", "secret")
    text_synth, definition = build_client(load_settings(overrides={"api": {"timeout_s": 5}}))
    try:
        assert definition is KnownEngine.GPTJ_6B
        assert text_synth.api_key == "secret"
        assert text_synth.client.timeout.read == 5
    finally:
        await text_synth.aclose()


def test_build_client_custom_engine(monkeypatch) -> None:
    monkeypatch.setenv("TEXTSYNTH_API_KEY", "secret")
    _, definition = build_client(load_settings(overrides={"engine": {"id": "future_engine", "max_tokens": 8192}}))
    assert definition == CustomEngineDefinition("future_engine", 8192)


def test_get_setting_paths() -> None:
    settings = load_settings()
    assert get_setting(settings, "api.base_url") == "https://api.textsynth.com/v1"
    # Present but null is returned as None, not the default
    assert get_setting(settings, "api.timeout_s", 99) is None
    assert get_setting(settings, "api.missing.deeper", "fallback") == "fallback"
