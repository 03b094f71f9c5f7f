"""Text completion: request builder, response type and stream."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional

import httpx

from ..errors import BuilderConsumedError
from ..untagged import Result, decode_json, optional_field, require_field
from .parameters import MaxTokens, Stop, TopK, TopP
from .stream import ChunkStream, decode_chunk

if TYPE_CHECKING:
    from .base import Engine


@dataclass(frozen=True)
class TextCompletion:
    """One text completion returned by the API.
    
    Streamed requests produce one instance per chunk; only the last one
    carries ``total_tokens``.
    
    Attributes:
        text: Generated text (for streams, the increment in this chunk).
        reached_end: True if this is the last answer of the completion.
        truncated_prompt: True if the prompt was cut to fit the engine's
            context; only its end was used. False when the API omits it.
        total_tokens: Prompt plus generated tokens. None for intermediate
            stream chunks.
    """
    text: str
    reached_end: bool
    truncated_prompt: bool = False
    total_tokens: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TextCompletion":
        """Build from the wire success shape.
        
        Raises:
            KeyError: If a required field is missing.
            TypeError: If a field has the wrong type.
        """
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")
        truncated_prompt = optional_field(data, "truncated_prompt", bool)
        return cls(
            text=require_field(data, "text", str),
            reached_end=require_field(data, "reached_end", bool),
            truncated_prompt=bool(truncated_prompt),
            total_tokens=optional_field(data, "total_tokens", int),
        )


def decode_stream_chunk(chunk: bytes) -> Result[TextCompletion]:
    """Decode one chunk of a streamed completion response."""
    return decode_chunk(chunk, TextCompletion.from_dict)


class TextCompletionStream(ChunkStream[TextCompletion]):
    """Async iterator of ``Result[TextCompletion]``, one per received chunk."""

    def __init__(self, response: httpx.Response):
        super().__init__(response, TextCompletion.from_dict)


@dataclass(frozen=True)
class TextCompletionRequest:
    """Body of a completion request. Unset fields are left out of the payload."""
    prompt: str
    max_tokens: Optional[MaxTokens] = None
    temperature: Optional[float] = None
    top_k: Optional[TopK] = None
    top_p: Optional[TopP] = None
    stream: Optional[bool] = None
    stop: Optional[Stop] = None

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the JSON body, omitting every unset optional field."""
        payload: Dict[str, Any] = {"prompt": self.prompt}
        if self.max_tokens is not None:
            payload["max_tokens"] = self.max_tokens.value
        if self.temperature is not None:
            payload["temperature"] = self.temperature
        if self.top_k is not None:
            payload["top_k"] = self.top_k.value
        if self.top_p is not None:
            payload["top_p"] = self.top_p.value
        if self.stream is not None:
            payload["stream"] = self.stream
        if self.stop is not None:
            payload["stop"] = list(self.stop.strings)
        return payload


class TextCompletionBuilder:
    """Accumulates generation parameters for one completion request.
    
    Setters are chainable and replace any previous value. The builder is
    single use: the first terminal call (``now``, ``now_until``, ``stream``,
    ``stream_until``) consumes it and any later one raises
    ``BuilderConsumedError``.
    
    Example:
        completion = await engine.text_completion("Once upon a time").max_tokens(
            MaxTokens(64, engine.definition)
        ).now()
    """

    def __init__(self, engine: "Engine", prompt: str):
        self.engine = engine
        self.prompt = prompt
        self._max_tokens: Optional[MaxTokens] = None
        self._temperature: Optional[float] = None
        self._top_k: Optional[TopK] = None
        self._top_p: Optional[TopP] = None
        self._consumed = False

    @property
    def consumed(self) -> bool:
        return self._consumed

    def max_tokens(self, max_tokens: MaxTokens) -> "TextCompletionBuilder":
        """Set the maximum number of tokens to generate."""
        self._max_tokens = max_tokens
        return self

    def temperature(self, temperature: float) -> "TextCompletionBuilder":
        """Set the sampling temperature.
        
        Higher values pick less common tokens. Tuning ``top_p`` or ``top_k``
        is usually better.
        """
        self._temperature = temperature
        return self

    def top_k(self, top_k: TopK) -> "TextCompletionBuilder":
        self._top_k = top_k
        return self

    def top_p(self, top_p: TopP) -> "TextCompletionBuilder":
        self._top_p = top_p
        return self

    @property
    def url(self) -> str:
        return self.engine.url("completions")

    def build_request(self, stream: Optional[bool] = None, stop: Optional[Stop] = None) -> TextCompletionRequest:
        return TextCompletionRequest(
            prompt=self.prompt,
            max_tokens=self._max_tokens,
            temperature=self._temperature,
            top_k=self._top_k,
            top_p=self._top_p,
            stream=stream,
            stop=stop,
        )

    def _consume(self) -> None:
        if self._consumed:
            raise BuilderConsumedError("text completion builder has already been used")
        self._consumed = True

    async def _now(self, stop: Optional[Stop]) -> TextCompletion:
        self._consume()
        request = self.build_request(stop=stop)
        body = await self.engine.text_synth.post(self.url, request.to_payload())
        return decode_json(body, TextCompletion.from_dict).unwrap()

    async def _stream(self, stop: Optional[Stop]) -> TextCompletionStream:
        self._consume()
        request = self.build_request(stream=True, stop=stop)
        response = await self.engine.text_synth.open_stream(self.url, request.to_payload())
        return TextCompletionStream(response)

    async def now(self) -> TextCompletion:
        """Request a completion and wait for the whole result.
        
        Returns:
            The completion; ``total_tokens`` is set by the API.
        
        Raises:
            httpx.HTTPError: On transport failure.
            DecodeError: If the body is not a known JSON shape.
            ApiError: If the API returned an error.
        """
        return await self._now(None)

    async def now_until(self, stop: Stop) -> TextCompletion:
        """Like ``now``, stopping at any of the given strings."""
        return await self._now(stop)

    async def stream(self) -> TextCompletionStream:
        """Request a streamed completion.
        
        Use the returned stream in ``async with`` (or call ``aclose()``) when
        the loop may stop before the last chunk; otherwise the response stays
        open until it is garbage collected.
        
        Returns:
            A ``TextCompletionStream`` yielding one ``Result`` per chunk.
        
        Raises:
            httpx.HTTPError: If the request could not be sent.
        """
        return await self._stream(None)

    async def stream_until(self, stop: Stop) -> TextCompletionStream:
        """Like ``stream``, stopping at any of the given strings."""
        return await self._stream(stop)
