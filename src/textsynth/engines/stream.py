"""Lazy decoding of chunked JSON response streams.

The streaming endpoints send one JSON object per transport chunk, each
terminated by a blank line (``b"\\n\\n"``). Chunks are assumed to line up with
records: nothing is buffered or reassembled across chunks, so a record split
by an intermediary decodes as a ``DecodeError``.
"""

import logging
from typing import Any, AsyncIterator, Callable, Generic, Optional, TypeVar

import httpx

from ..untagged import Result, decode_json

logger = logging.getLogger(__name__)

T = TypeVar("T")

CHUNK_DELIMITER = b"\n\n"


def decode_chunk(chunk: bytes, parse: Callable[[Any], T]) -> Result[T]:
    """Strip the trailing delimiter from one chunk and decode it.
    
    The last two bytes are dropped unconditionally.
    
    Args:
        chunk: One raw chunk as delivered by the transport.
        parse: Success-shape parser for the record type.
    
    Returns:
        Result with the record, an ``ApiError`` or a ``DecodeError``.
    """
    return decode_json(chunk[:-len(CHUNK_DELIMITER)], parse)


class ChunkStream(Generic[T]):
    """Single-pass async iterator of decoded records over a streamed response.
    
    Each ``__anext__`` pulls exactly one chunk from the transport. Every
    element is a ``Result``; a transport failure is yielded once (its error
    is the original ``httpx.HTTPError``) and ends the stream.
    
    The response is released when the stream is exhausted, when a transport
    error ends it, on ``aclose()``, or on leaving an ``async with`` block.
    Consumers that stop early should use one of the last two.
    """

    def __init__(self, response: httpx.Response, parse: Callable[[Any], T]):
        self._response = response
        self._parse = parse
        self._chunks: Optional[AsyncIterator[bytes]] = None
        self._closed = False
        self.chunks_read = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def response(self) -> httpx.Response:
        return self._response

    def __aiter__(self) -> "ChunkStream[T]":
        return self

    async def __anext__(self) -> Result[T]:
        if self._closed:
            raise StopAsyncIteration
        if self._chunks is None:
            self._chunks = self._response.aiter_bytes()

        try:
            chunk = await self._chunks.__anext__()
        except StopAsyncIteration:
            await self.aclose()
            raise
        except httpx.HTTPError as e:
            await self.aclose()
            return Result.fail(e)

        self.chunks_read += 1
        return decode_chunk(chunk, self._parse)

    async def aclose(self) -> None:
        """Release the underlying response. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        logger.debug("closing stream %s after %d chunks", self._response.url, self.chunks_read)
        try:
            if self._chunks is not None:
                await self._chunks.aclose()
        finally:
            await self._response.aclose()

    async def __aenter__(self) -> "ChunkStream[T]":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
