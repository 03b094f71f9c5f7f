"""Log probability of a continuation given a context."""

from dataclasses import dataclass
from typing import Any, Dict

from ..untagged import require_field
from .parameters import NonEmptyString


@dataclass(frozen=True)
class LogProbabilitiesRequest:
    """Body of a log probability request.
    
    An empty ``context`` stands for the End-Of-Text token.
    """
    context: str
    continuation: NonEmptyString

    def to_payload(self) -> Dict[str, Any]:
        return {"context": self.context, "continuation": self.continuation.value}


@dataclass(frozen=True)
class LogProbabilities:
    """Log probability response.
    
    Attributes:
        log_probability: Logarithm of the probability of generating the
            continuation after the context.
        is_greedy: True if the continuation would be produced by greedy
            sampling.
        total_tokens: Tokens in context plus continuation.
    """
    log_probability: float
    is_greedy: bool
    total_tokens: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LogProbabilities":
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")
        log_probability = data["logprob"]
        if isinstance(log_probability, bool) or not isinstance(log_probability, (int, float)):
            raise TypeError(f"logprob must be a number, got {type(log_probability).__name__}")
        return cls(
            log_probability=float(log_probability),
            is_greedy=require_field(data, "is_greedy", bool),
            total_tokens=require_field(data, "total_tokens", int),
        )
