"""Error types raised or carried by the TextSynth client.

Transport failures are not wrapped here: they surface as the original
``httpx.HTTPError`` so callers can tell a network failure apart from an API
that answered with something unexpected.
"""

from functools import cached_property
from http import HTTPStatus
from typing import Any, Dict, Optional, Union


class TextSynthError(Exception):
    """Base class for errors produced by this library."""


class DecodeError(TextSynthError):
    """The API answered, but the payload was not valid JSON of a known shape.
    
    Attributes:
        payload: Raw bytes (or decoded object) that failed to decode.
    """

    def __init__(self, message: str, payload: Any = None):
        super().__init__(message)
        self.payload = payload


class BuilderConsumedError(TextSynthError):
    """A request builder was reused after a terminal operation consumed it."""


class ApiError(TextSynthError):
    """Error envelope returned by the TextSynth API.
    
    The wire shape is ``{"status": <int>, "error": <str>}``.
    
    Attributes:
        status: Raw non-zero status number from the payload.
        message: Human readable message from the payload.
    """

    def __init__(self, status: int, message: str):
        if isinstance(status, bool) or not isinstance(status, int) or not 0 < status <= 0xFFFF:
            raise ValueError(f"status must be a non-zero 16-bit integer, got {status!r}")
        if not isinstance(message, str):
            raise ValueError(f"error message must be a string, got {type(message).__name__}")
        super().__init__(status, message)
        self.status = status
        self.message = message

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApiError":
        """Build from the wire error shape.
        
        Raises:
            KeyError: If ``status`` or ``error`` is missing.
            ValueError: If a field has the wrong type.
        """
        return cls(data["status"], data["error"])

    @cached_property
    def status_code(self) -> Union[HTTPStatus, int]:
        """HTTP status view of ``status``, computed once.
        
        Falls back to the raw integer for codes ``http.HTTPStatus`` does not know.
        """
        try:
            return HTTPStatus(self.status)
        except ValueError:
            return self.status

    @property
    def reason(self) -> Optional[str]:
        code = self.status_code
        return code.phrase if isinstance(code, HTTPStatus) else None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApiError):
            return NotImplemented
        return (self.status, self.message) == (other.status, other.message)

    def __hash__(self) -> int:
        return hash((self.status, self.message))

    def __str__(self) -> str:
        reason = self.reason
        code = f"{self.status} {reason}" if reason else str(self.status)
        return f"{code}, {self.message}"

    def __repr__(self) -> str:
        return f"ApiError(status_code={self.status}, error={self.message!r})"
