"""
Configuration module for ngdriver.

Options can come from code, a configuration file (JSON, YAML, TOML) or
environment variables:

    from ngdriver.config import NgDriverOptions, load_config

    # Programmatic
    options = NgDriverOptions(root_element="#app", script_timeout=20)

    # File + environment, with overrides on top
    options = load_config("ngdriver.config.toml", overrides={"ng12_hybrid": True})

Environment variables:
    NGDRIVER_ROOT_ELEMENT=#app
    NGDRIVER_IGNORE_SYNCHRONIZATION=true
    NGDRIVER_SCRIPT_TIMEOUT=20
    NGDRIVER_DETECTION_ATTEMPTS=10
"""

from ngdriver.exceptions import ConfigurationError

from .defaults import (
    DEFAULT_BLANK_URL,
    DEFAULT_DETECTION_ATTEMPTS,
    DEFAULT_DETECTION_INTERVAL,
    DEFAULT_ROOT_ELEMENT,
    ENV_PREFIX,
)
from .env import ENV_MAPPINGS, get_env, get_env_key, load_env_config
from .loader import (
    ConfigLoader,
    find_config_file,
    load_config,
    load_file,
    merge_configs,
)
from .options import NgDriverOptions

__all__ = [
    "NgDriverOptions",
    # Loader functions
    "ConfigLoader",
    "ConfigurationError",
    "find_config_file",
    "load_config",
    "load_file",
    "merge_configs",
    # Environment functions
    "ENV_MAPPINGS",
    "ENV_PREFIX",
    "get_env",
    "get_env_key",
    "load_env_config",
    # Default values
    "DEFAULT_BLANK_URL",
    "DEFAULT_DETECTION_ATTEMPTS",
    "DEFAULT_DETECTION_INTERVAL",
    "DEFAULT_ROOT_ELEMENT",
]
