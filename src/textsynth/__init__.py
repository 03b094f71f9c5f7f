"""Asynchronous client for the TextSynth text synthesis API."""

from .core import DEFAULT_BASE_URL, TextSynth
from .engines.base import Engine
from .engines.definition import CustomEngineDefinition, EngineDefinition, KnownEngine, lookup_engine
from .engines.log_probabilities import LogProbabilities
from .engines.parameters import MaxTokens, NonEmptyString, Stop, TopK, TopP
from .engines.text_completion import TextCompletion, TextCompletionBuilder, TextCompletionStream
from .errors import ApiError, BuilderConsumedError, DecodeError, TextSynthError
from .untagged import Result

__all__ = [
    "ApiError",
    "BuilderConsumedError",
    "CustomEngineDefinition",
    "DEFAULT_BASE_URL",
    "DecodeError",
    "Engine",
    "EngineDefinition",
    "KnownEngine",
    "LogProbabilities",
    "MaxTokens",
    "NonEmptyString",
    "Result",
    "Stop",
    "TextCompletion",
    "TextCompletionBuilder",
    "TextCompletionStream",
    "TextSynth",
    "TextSynthError",
    "TopK",
    "TopP",
    "lookup_engine",
]
