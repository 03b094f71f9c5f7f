"""Configuration loading and validation for the TextSynth client.

Loads default.yaml, merges an optional user config and overrides on top,
resolves ${ENV_VAR} placeholders and validates the result.
"""

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml


DEFAULT_CONFIG_PATH = Path(__file__).parent / "default.yaml"


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Deep merge override dict into base dict (override takes precedence)."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _resolve_env_vars(obj: Any, warnings: List[str]) -> Any:
    """Recursively resolve ${ENV_VAR} placeholders in strings.
    
    If env var is missing, leaves placeholder intact and adds warning.
    """
    if isinstance(obj, str):
        matches = re.findall(r'\$\{([^}]+)\}', obj)
        if not matches:
            return obj
        
        resolved = obj
        for var_name in matches:
            env_value = os.getenv(var_name)
            if env_value is not None:
                resolved = resolved.replace(f"${{{var_name}}}", env_value)
            else:
                warnings.append(f"Environment variable '{var_name}' not set, leaving placeholder intact")
        
        return resolved
    elif isinstance(obj, dict):
        return {k: _resolve_env_vars(v, warnings) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_resolve_env_vars(item, warnings) for item in obj]
    else:
        return obj


def get_setting(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """Get nested value from config using dot-separated path.
    
    Public helper for reading values out of a ``load_settings`` result.
    
    Args:
        config: Settings dict (from load_settings).
        path: Dot-separated key path, e.g. "api.timeout_s".
        default: Returned when any key along the path is missing.
    
    Returns:
        The value at ``path`` (which may itself be None), or ``default``.
    """
    value = config
    for key in path.split('.'):
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value


def _validate_settings(config: Dict[str, Any]) -> List[str]:
    """Validate required keys and types. Returns list of error messages (empty if valid)."""
    errors: List[str] = []
    
    def require(path: str, expected_type: type):
        value = get_setting(config, path)
        if value is None:
            errors.append(f"Missing required key: {path}")
        elif not isinstance(value, expected_type):
            errors.append(f"Key {path} must be {expected_type.__name__}, got {type(value).__name__}")
    
    # API validation
    require("api.base_url", str)
    base_url = get_setting(config, "api.base_url")
    if isinstance(base_url, str) and not base_url.startswith(("http://", "https://")):
        errors.append(f"Key api.base_url must be an http(s) URL, got {base_url!r}")
    require("api.api_key_env", str)
    
    timeout_s = get_setting(config, "api.timeout_s")
    if timeout_s is not None:
        if isinstance(timeout_s, bool) or not isinstance(timeout_s, (int, float)):
            errors.append(f"Key api.timeout_s must be a number or null, got {type(timeout_s).__name__}")
        elif timeout_s <= 0:
            errors.append(f"Key api.timeout_s must be > 0, got {timeout_s}")
    
    # Engine validation
    require("engine.id", str)
    max_tokens = get_setting(config, "engine.max_tokens")
    if max_tokens is not None:
        if isinstance(max_tokens, bool) or not isinstance(max_tokens, int):
            errors.append(f"Key engine.max_tokens must be int, got {type(max_tokens).__name__}")
        elif max_tokens < 1:
            errors.append(f"Key engine.max_tokens must be >= 1, got {max_tokens}")
    
    return errors


def load_settings(
    config_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Load, merge, validate, and resolve environment variables in config.
    
    Args:
        config_path: Optional path to a YAML config file layered over the
            packaged defaults.
        overrides: Optional dict to override config values (highest priority).
    
    Returns:
        Merged and validated config dict with '_warnings' key containing non-fatal warnings.
    
    Raises:
        FileNotFoundError: If config_path doesn't exist.
        ValueError: If validation fails (missing required keys or wrong types).
    """
    with open(DEFAULT_CONFIG_PATH, 'r') as f:
        merged = yaml.safe_load(f) or {}
    
    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        with open(config_path, 'r') as f:
            merged = _deep_merge(merged, yaml.safe_load(f) or {})
    
    if overrides:
        merged = _deep_merge(merged, overrides)
    
    warnings: List[str] = []
    resolved = _resolve_env_vars(merged, warnings)
    
    validation_errors = _validate_settings(resolved)
    if validation_errors:
        error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in validation_errors)
        raise ValueError(error_msg)
    
    resolved['_warnings'] = warnings
    
    return resolved
