"""
Environment variable support for ngdriver configuration.

Every option can be set with an ``NGDRIVER_`` variable named after it, e.g.
``NGDRIVER_ROOT_ELEMENT=#app`` or ``NGDRIVER_SCRIPT_TIMEOUT=20``.
"""

import os
from typing import Any, Optional, Union, get_args, get_origin

from .defaults import ENV_PREFIX


def get_env_key(key: str, prefix: str = ENV_PREFIX) -> str:
    """Convert an option name to its environment variable name.

    ``"root_element"`` becomes ``"NGDRIVER_ROOT_ELEMENT"``.
    """
    return f"{prefix}{key.upper().replace('.', '_').replace('-', '_')}"


def parse_bool(value: str) -> bool:
    """Parse string to boolean."""
    return value.strip().lower() in ("true", "1", "yes", "on", "enabled")


def parse_value(value: str, target_type: Any) -> Any:
    """Parse a string to ``target_type``, unwrapping ``Optional[...]``."""
    if get_origin(target_type) is Union:
        non_none_types = [t for t in get_args(target_type) if t is not type(None)]
        return parse_value(value, non_none_types[0]) if non_none_types else value

    if target_type is bool:
        return parse_bool(value)
    if target_type in (int, float):
        return target_type(value)
    return value


def get_env(
    key: str,
    target_type: Any = str,
    prefix: str = ENV_PREFIX,
) -> Optional[Any]:
    """Read and parse one option from the environment.

    Returns:
        The parsed value, or None if the variable is not set
    """
    value = os.environ.get(get_env_key(key, prefix))
    if value is None:
        return None
    return parse_value(value, target_type)


# Option name -> value type
ENV_MAPPINGS: dict[str, Any] = {
    "root_element": str,
    "ignore_synchronization": bool,
    "script_timeout": float,
    "detection_attempts": int,
    "detection_interval": float,
    "ng12_hybrid": bool,
    "track_outstanding_timeouts": bool,
    "blank_url": str,
}


def load_env_config(prefix: str = ENV_PREFIX) -> dict[str, Any]:
    """Load the options that are set in the environment.

    Raises:
        ValueError: If a numeric variable cannot be parsed
    """
    result: dict[str, Any] = {}

    for option, target_type in ENV_MAPPINGS.items():
        value = get_env(option, target_type, prefix)
        if value is not None:
            result[option] = value

    return result
