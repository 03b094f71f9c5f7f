"""Engine catalog: well-known TextSynth engines and custom definitions.

The set of known engines is closed. Engines the catalog does not list are
reached through ``CustomEngineDefinition``, which carries its own id and
token ceiling.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


DEFAULT_MAX_TOKENS = 1024


@dataclass(frozen=True)
class CustomEngineDefinition:
    """An engine definition supplied by the caller.
    
    Attributes:
        id: Engine identifier as used in the API path (assumed URL-safe).
        max_tokens: Maximum number of tokens the engine accepts.
    """
    id: str
    max_tokens: int = DEFAULT_MAX_TOKENS

    def __post_init__(self):
        if not self.id:
            raise ValueError("engine id must be non-empty")
        if isinstance(self.max_tokens, bool) or not isinstance(self.max_tokens, int) or self.max_tokens < 1:
            raise ValueError(f"max_tokens must be a positive int, got {self.max_tokens!r}")


class KnownEngine(Enum):
    """Engines known to this library, with their id and token ceiling."""

    # GPT-J 6B, trained on the Pile by EleutherAI. Mostly English.
    GPTJ_6B = ("gptj_6B", 2048)
    # GPT-NeoX 20B by EleutherAI.
    GPTNEOX_20B = ("gptneox_20B", 2048)
    # GPT-J fine tuned for French.
    BORIS_6B = ("boris_6B", DEFAULT_MAX_TOKENS)
    # Fairseq GPT 13B. Experimental on the API side.
    FAIRSEQ_GPT_13B = ("fairseq_gpt_13B", DEFAULT_MAX_TOKENS)

    def __init__(self, engine_id: str, max_tokens: int):
        self._engine_id = engine_id
        self._max_tokens = max_tokens

    @property
    def id(self) -> str:
        return self._engine_id

    @property
    def max_tokens(self) -> int:
        return self._max_tokens

    def to_custom(self) -> CustomEngineDefinition:
        """Return the equivalent ``CustomEngineDefinition``."""
        return CustomEngineDefinition(self.id, self.max_tokens)


EngineDefinition = Union[KnownEngine, CustomEngineDefinition]

_KNOWN_BY_ID = {engine.id: engine for engine in KnownEngine}


def lookup_engine(engine_id: str, max_tokens: Optional[int] = None) -> EngineDefinition:
    """Map an engine id to its definition.
    
    Args:
        engine_id: Engine identifier (e.g., "gptj_6B").
        max_tokens: Token ceiling for engines not in the catalog. Ignored for
            known engines, whose ceiling is fixed.
    
    Returns:
        The ``KnownEngine`` member for a known id, otherwise a
        ``CustomEngineDefinition`` (ceiling defaults to 1024).
    """
    known = _KNOWN_BY_ID.get(engine_id)
    if known is not None:
        return known
    return CustomEngineDefinition(engine_id, max_tokens if max_tokens is not None else DEFAULT_MAX_TOKENS)
