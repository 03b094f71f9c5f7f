"""Client construction from settings.

Resolves the API key from the environment (and .env) and builds a TextSynth
client plus the configured engine definition.
"""

import os
from typing import Any, Dict, Optional, Tuple

from dotenv import find_dotenv, load_dotenv

from ..core import TextSynth
from ..settings import get_setting
from .definition import EngineDefinition, lookup_engine


def resolve_api_key(settings: Dict[str, Any]) -> Optional[str]:
    """Resolve API key from environment variable.
    
    Loads the nearest .env file at or above the working directory first;
    variables already set in the environment take precedence.
    
    Args:
        settings: Settings dict (from load_settings).
    
    Returns:
        API key string if found, None otherwise.
    """
    api_key_env = get_setting(settings, "api.api_key_env")
    if not api_key_env:
        return None
    
    load_dotenv(find_dotenv(usecwd=True))
    return os.getenv(api_key_env) or None


def build_client(settings: Dict[str, Any]) -> Tuple[TextSynth, EngineDefinition]:
    """Build a TextSynth client and engine definition from settings.
    
    Args:
        settings: Settings dict (from load_settings).
    
    Returns:
        Tuple of (client, engine_definition):
        - client: TextSynth instance owning a new httpx.AsyncClient.
        - engine_definition: Known engine for engine.id, or a custom one
          using engine.max_tokens.
    
    Raises:
        ValueError: If the base URL or API key is missing.
    """
    base_url = get_setting(settings, "api.base_url")
    if not base_url:
        raise ValueError("settings.api.base_url is required")
    
    api_key = resolve_api_key(settings)
    if not api_key:
        raise ValueError(
            f"API key not found; set the {get_setting(settings, 'api.api_key_env')} environment variable"
        )
    
    client = TextSynth(
        api_key,
        base_url=base_url,
        timeout_s=get_setting(settings, "api.timeout_s")
    )
    
    engine_id = get_setting(settings, "engine.id")
    if not engine_id:
        raise ValueError("settings.engine.id is required")
    definition = lookup_engine(engine_id, get_setting(settings, "engine.max_tokens"))
    
    return (client, definition)
