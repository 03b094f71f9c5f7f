"""Untagged success/error envelope decoding.

TextSynth responses carry no discriminant field: a body is either the success
payload of the endpoint or ``{"status": ..., "error": ...}``. The shape alone
decides which one it is. Success is tried first, then the error shape; a body
matching neither is a decode error.
"""

import json
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from .errors import ApiError, DecodeError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of decoding one response or one stream chunk.
    
    Exactly one of ``value`` and ``error`` is set. ``error`` keeps its layer
    as its type: ``httpx.HTTPError`` for transport failures, ``DecodeError``
    for malformed payloads, ``ApiError`` for errors reported by the API.
    """

    value: Optional[T] = None
    error: Optional[Exception] = None

    def __post_init__(self):
        if (self.value is None) == (self.error is None):
            raise ValueError("Result needs exactly one of value or error")

    @classmethod
    def ok(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, error: Exception) -> "Result[T]":
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value, or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value


def decode_untagged(data: Any, parse: Callable[[Any], T]) -> Result[T]:
    """Resolve a decoded JSON value into a success or API error result.
    
    Args:
        data: Decoded JSON value.
        parse: Builds the success type from ``data``; raises ``KeyError``,
            ``TypeError`` or ``ValueError`` when the shape does not match.
    
    Returns:
        Result holding the parsed value, an ``ApiError``, or a
        ``DecodeError`` when neither shape matches.
    """
    try:
        return Result.ok(parse(data))
    except (KeyError, TypeError, ValueError):
        pass

    try:
        return Result.fail(ApiError.from_dict(data))
    except (KeyError, TypeError, ValueError) as e:
        error = DecodeError("data did not match the success or error shape", payload=data)
        error.__cause__ = e
        return Result.fail(error)


def decode_json(body: bytes, parse: Callable[[Any], T]) -> Result[T]:
    """Parse a JSON body and resolve it as an untagged envelope.
    
    Args:
        body: Raw response bytes (UTF-8 JSON).
        parse: Success-shape parser, see ``decode_untagged``.
    
    Returns:
        Result of ``decode_untagged``, or a ``DecodeError`` if ``body`` is
        not valid JSON.
    """
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        error = DecodeError(f"Invalid JSON response: {e}", payload=body)
        error.__cause__ = e
        return Result.fail(error)
    return decode_untagged(data, parse)


def require_field(data: Dict[str, Any], key: str, expected_type: type) -> Any:
    """Return ``data[key]`` if it has ``expected_type`` (bool is not an int here).
    
    Raises:
        KeyError: If ``key`` is missing.
        TypeError: If the value has another type.
    """
    value = data[key]
    if not isinstance(value, expected_type) or (expected_type is not bool and isinstance(value, bool)):
        raise TypeError(f"{key} must be {expected_type.__name__}, got {type(value).__name__}")
    return value


def optional_field(data: Dict[str, Any], key: str, expected_type: type) -> Any:
    """Like ``require_field``, but absent and null both give None."""
    if data.get(key) is None:
        return None
    return require_field(data, key, expected_type)
