"""Engine handle bound to a shared TextSynth client."""

from typing import TYPE_CHECKING

from ..untagged import decode_json
from .definition import EngineDefinition
from .log_probabilities import LogProbabilities, LogProbabilitiesRequest
from .parameters import NonEmptyString
from .text_completion import TextCompletionBuilder

if TYPE_CHECKING:
    from ..core import TextSynth


class Engine:
    """A TextSynth engine used to synthesize text.
    
    Engines only hold a reference to the client, so any number of them can
    share one connection pool and API key.
    
    Attributes:
        text_synth: Client used to send requests.
        definition: Engine id and token ceiling.
    """

    def __init__(self, text_synth: "TextSynth", definition: EngineDefinition):
        self.text_synth = text_synth
        self.definition = definition

    def __repr__(self) -> str:
        return f"Engine(id={self.definition.id!r}, max_tokens={self.definition.max_tokens})"

    def url(self, endpoint: str) -> str:
        """Build the URL of an endpoint of this engine.
        
        Args:
            endpoint: Endpoint name, e.g. "completions" or "logprob".
        
        Returns:
            "<base_url>/engines/<engine_id>/<endpoint>". The engine id is
            inserted as is.
        """
        return f"{self.text_synth.base_url}/engines/{self.definition.id}/{endpoint}"

    def text_completion(self, prompt: str) -> TextCompletionBuilder:
        """Start a text completion request for ``prompt``."""
        return TextCompletionBuilder(self, prompt)

    async def log_probabilities(self, context: str, continuation: NonEmptyString) -> LogProbabilities:
        """Compute the log probability of ``continuation`` following ``context``.
        
        Args:
            context: Text before the continuation. Empty means End-Of-Text.
            continuation: Text whose probability is computed.
        
        Returns:
            LogProbabilities for the pair.
        
        Raises:
            httpx.HTTPError: On transport failure.
            DecodeError: If the body is not a known JSON shape.
            ApiError: If the API returned an error.
        """
        request = LogProbabilitiesRequest(context, continuation)
        body = await self.text_synth.post(self.url("logprob"), request.to_payload())
        return decode_json(body, LogProbabilities.from_dict).unwrap()
