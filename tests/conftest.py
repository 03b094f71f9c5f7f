"""Shared fixtures: a mock transport for the TextSynth client and a tracking byte stream."""

import json
from typing import Callable, Iterable, List, Optional

import httpx
import pytest

from textsynth.core import TextSynth
from textsynth.engines.definition import CustomEngineDefinition


class TrackingByteStream(httpx.AsyncByteStream):
    """Async byte stream that records how far it was read and whether it was closed.
    
    An item that is an exception instance is raised instead of yielded.
    """

    def __init__(self, chunks: Iterable):
        self._chunks = list(chunks)
        self.chunks_yielded = 0
        self.close_calls = 0

    @property
    def closed(self) -> bool:
        return self.close_calls > 0

    async def __aiter__(self):
        for chunk in self._chunks:
            if self.closed:
                return
            if isinstance(chunk, Exception):
                raise chunk
            self.chunks_yielded += 1
            yield chunk

    async def aclose(self) -> None:
        self.close_calls += 1


class RecordingHandler:
    """MockTransport handler that records requests and replays a canned response."""

    def __init__(self, respond: Callable[[httpx.Request], httpx.Response]):
        self._respond = respond
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._respond(request)

    @property
    def last_payload(self) -> Optional[dict]:
        if not self.requests:
            return None
        return json.loads(self.requests[-1].content)


@pytest.fixture
def api_key() -> str:
    return "test-api-key"


@pytest.fixture
def engine_definition() -> CustomEngineDefinition:
    return CustomEngineDefinition("custom", 1024)


@pytest.fixture
def chunk_stream() -> Callable[..., TrackingByteStream]:
    """Factory for TrackingByteStream instances."""
    return TrackingByteStream


@pytest.fixture
def make_text_synth(api_key):
    """Build a TextSynth whose HTTP client is served by ``respond``.
    
    Returns (text_synth, handler) so tests can inspect sent requests.
    """
    def _make(respond: Callable[[httpx.Request], httpx.Response]):
        handler = RecordingHandler(respond)
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return TextSynth(api_key, client), handler
    return _make


def json_response(body, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    """Respond with a fixed JSON body."""
    return lambda request: httpx.Response(status_code, json=body)


@pytest.fixture
def respond_json():
    return json_response
