"""Core client shared by every engine and request."""

import logging
import time
from typing import Any, Dict, Optional

import httpx

from .engines.base import Engine
from .engines.definition import EngineDefinition

logger = logging.getLogger(__name__)


DEFAULT_BASE_URL = "https://api.textsynth.com/v1"


class TextSynth:
    """Entry point of the library: an API key plus an ``httpx.AsyncClient``.
    
    The client is shared read-only by every ``Engine`` created from it. No
    timeout is applied per request; whatever timeout the ``httpx`` client
    was built with applies to every call.
    
    Args:
        api_key: Bearer token for the TextSynth API.
        client: Optional client to use. When omitted, one is created and
            owned by this instance (closed by ``aclose``).
        base_url: API root, without the trailing "/engines".
        timeout_s: Timeout for an owned client. None disables timeouts.
    
    Example:
        async with TextSynth(api_key) as text_synth:
            engine = text_synth.engine(KnownEngine.GPTJ_6B)
            completion = await engine.text_completion("Hello").now()
    """

    def __init__(
        self,
        api_key: str,
        client: Optional[httpx.AsyncClient] = None,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout_s: Optional[float] = None
    ):
        if not api_key:
            raise ValueError("api_key must be non-empty")
        self.api_key = api_key
        self.base_url = base_url.rstrip('/')
        self._owns_client = client is None
        self.client = client if client is not None else httpx.AsyncClient(timeout=timeout_s)

    def __repr__(self) -> str:
        # Keep the key out of logs and tracebacks
        return f"TextSynth(base_url={self.base_url!r})"

    def engine(self, definition: EngineDefinition) -> Engine:
        """Create an engine bound to this client."""
        return Engine(self, definition)

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def post(self, url: str, payload: Dict[str, Any]) -> bytes:
        """POST a JSON payload and read the whole body.
        
        The status code is not checked: the API reports errors in the body.
        
        Args:
            url: Endpoint URL.
            payload: JSON-serializable request body.
        
        Returns:
            Raw response body.
        
        Raises:
            httpx.HTTPError: On transport failure.
        """
        start_time = time.perf_counter()
        response = await self.client.post(url, json=payload, headers=self._headers())
        logger.debug(
            "POST %s -> %d (%d bytes) in %.3fs",
            url, response.status_code, len(response.content), time.perf_counter() - start_time
        )
        return response.content

    async def open_stream(self, url: str, payload: Dict[str, Any]) -> httpx.Response:
        """POST a JSON payload and return the response with its body unread.
        
        The caller owns the returned response and must close it.
        
        Raises:
            httpx.HTTPError: If the request could not be sent.
        """
        request = self.client.build_request("POST", url, json=payload, headers=self._headers())
        response = await self.client.send(request, stream=True)
        logger.debug("opened stream POST %s -> %d", url, response.status_code)
        return response

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "TextSynth":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
