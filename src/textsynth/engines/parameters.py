"""Validated request parameters.

Each type validates in its constructor (raising ``ValueError``) and offers a
``new`` factory that returns ``None`` instead, so an out-of-range value never
yields an instance and never reaches the network.
"""

from dataclasses import InitVar, dataclass
from typing import Iterable, Optional, Tuple

from .definition import EngineDefinition


TOP_K_MIN = 1
TOP_K_MAX = 1000
STOP_CAPACITY = 5


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class MaxTokens:
    """Maximum number of tokens to generate.
    
    A token is typically 4 or 5 characters for Latin scripts. The upper bound
    is inclusive: ``value <= engine.max_tokens``. Zero and negative values are
    also rejected; that lower bound is added by this library, the API itself
    only documents the ceiling.
    """
    value: int
    engine: InitVar[EngineDefinition]

    def __post_init__(self, engine: EngineDefinition):
        if not _is_int(self.value):
            raise ValueError(f"max_tokens must be an int, got {type(self.value).__name__}")
        if not 1 <= self.value <= engine.max_tokens:
            raise ValueError(
                f"max_tokens must be between 1 and {engine.max_tokens} for engine {engine.id}, got {self.value}"
            )

    @classmethod
    def new(cls, value: int, engine: EngineDefinition) -> Optional["MaxTokens"]:
        try:
            return cls(value, engine)
        except ValueError:
            return None


@dataclass(frozen=True)
class TopP:
    """Nucleus sampling threshold, between 0.0 and 1.0 inclusive.
    
    The next token is chosen among the most probable ones whose cumulative
    probability exceeds ``value``. Higher means more diverse output.
    """
    value: float

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise ValueError(f"top_p must be a number, got {type(self.value).__name__}")
        # NaN fails both comparisons
        if not 0.0 <= self.value <= 1.0:
            raise ValueError(f"top_p must be between 0.0 and 1.0, got {self.value}")

    @classmethod
    def new(cls, value: float) -> Optional["TopP"]:
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class TopK:
    """Sample the next token among the ``value`` most likely ones (1..1000)."""
    value: int

    def __post_init__(self):
        if not _is_int(self.value):
            raise ValueError(f"top_k must be an int, got {type(self.value).__name__}")
        if not TOP_K_MIN <= self.value <= TOP_K_MAX:
            raise ValueError(f"top_k must be between {TOP_K_MIN} and {TOP_K_MAX}, got {self.value}")

    @classmethod
    def new(cls, value: int) -> Optional["TopK"]:
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class Stop:
    """Up to five stop strings, in order.
    
    Generation halts when any of them is produced; the stop string itself is
    not part of the returned text.
    """
    strings: Tuple[str, ...] = ()

    def __post_init__(self):
        # A bare string would otherwise split into one stop string per character
        if isinstance(self.strings, (str, bytes)):
            raise ValueError("stop strings must be given as a sequence of str, not a single string")
        try:
            strings = tuple(self.strings)
        except TypeError:
            raise ValueError(f"stop strings must be iterable, got {type(self.strings).__name__}") from None
        if len(strings) > STOP_CAPACITY:
            raise ValueError(f"at most {STOP_CAPACITY} stop strings are allowed, got {len(strings)}")
        for s in strings:
            if not isinstance(s, str):
                raise ValueError(f"stop strings must be str, got {type(s).__name__}")
        object.__setattr__(self, "strings", strings)

    @classmethod
    def new(cls, strings: Iterable[str]) -> Optional["Stop"]:
        try:
            return cls(strings)
        except ValueError:
            return None

    def __len__(self) -> int:
        return len(self.strings)

    def __iter__(self):
        return iter(self.strings)


@dataclass(frozen=True)
class NonEmptyString:
    """A string with at least one character."""
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise ValueError(f"expected a str, got {type(self.value).__name__}")
        if not self.value:
            raise ValueError("string must not be empty")

    @classmethod
    def new(cls, value: str) -> Optional["NonEmptyString"]:
        try:
            return cls(value)
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value
