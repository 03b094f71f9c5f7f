"""Unit tests for the engine catalog."""

import pytest

from textsynth.engines.definition import (
    DEFAULT_MAX_TOKENS,
    CustomEngineDefinition,
    KnownEngine,
    lookup_engine,
)


def test_known_engine_ids_and_ceilings() -> None:
    assert KnownEngine.GPTJ_6B.id == "gptj_6B"
    assert KnownEngine.GPTJ_6B.max_tokens == 2048
    assert KnownEngine.GPTNEOX_20B.max_tokens == 2048
    assert KnownEngine.BORIS_6B.id == "boris_6B"
    assert KnownEngine.BORIS_6B.max_tokens == DEFAULT_MAX_TOKENS
    assert KnownEngine.FAIRSEQ_GPT_13B.id == "fairseq_gpt_13B"
    assert KnownEngine.FAIRSEQ_GPT_13B.max_tokens == DEFAULT_MAX_TOKENS


def test_known_engine_to_custom() -> None:
    for engine in KnownEngine:
        custom = engine.to_custom()
        assert custom == CustomEngineDefinition(engine.id, engine.max_tokens)


def test_custom_engine_uses_stored_values() -> None:
    custom = CustomEngineDefinition("static", 42)
    assert custom.id == "static"
    assert custom.max_tokens == 42
    assert CustomEngineDefinition("dynamic").max_tokens == DEFAULT_MAX_TOKENS


@pytest.mark.parametrize("engine_id, max_tokens", [("", 10), ("x", 0), ("x", True)])
def test_custom_engine_rejects_invalid(engine_id, max_tokens) -> None:
    with pytest.raises(ValueError):
        CustomEngineDefinition(engine_id, max_tokens)


def test_lookup_engine() -> None:
    assert lookup_engine("gptj_6B") is KnownEngine.GPTJ_6B
    # Ceiling of known engines is fixed
    assert lookup_engine("boris_6B", 4096) is KnownEngine.BORIS_6B
    assert lookup_engine("new_engine", 4096) == CustomEngineDefinition("new_engine", 4096)
    assert lookup_engine("new_engine").max_tokens == DEFAULT_MAX_TOKENS
