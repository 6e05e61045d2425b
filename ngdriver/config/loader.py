"""
Configuration file loader for ngdriver.

Options can be kept in JSON, YAML or TOML files, either at the top level or
under an ``ngdriver`` section of a shared file. ``load_config`` layers them:
programmatic overrides beat environment variables, which beat the file,
which beats the defaults.
"""

import json
import tomllib
from pathlib import Path
from typing import Any, Callable, Optional, Union

from ngdriver.exceptions import ConfigurationError

from .defaults import (
    CONFIG_SECTION,
    DEFAULT_CONFIG_EXTENSIONS,
    DEFAULT_CONFIG_FILENAME,
    DEFAULT_CONFIG_SEARCH_PATHS,
)
from .env import load_env_config
from .options import NgDriverOptions


def _parse_yaml(text: str) -> Any:
    try:
        import yaml
    except ImportError:
        raise ConfigurationError(
            "PyYAML is required for YAML configuration. "
            "Install with: pip install ngdriver[yaml]"
        )
    return yaml.safe_load(text) or {}


_PARSERS: dict[str, Callable[[str], Any]] = {
    ".json": json.loads,
    ".yaml": _parse_yaml,
    ".yml": _parse_yaml,
    ".toml": tomllib.loads,
}


def load_file(path: Union[str, Path]) -> dict[str, Any]:
    """Read options from a configuration file.

    Returns:
        The ``ngdriver`` section if the file has one, else the whole mapping

    Raises:
        ConfigurationError: If the file is missing, malformed or of an
            unsupported format
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    parser = _PARSERS.get(path.suffix.lower())
    if parser is None:
        raise ConfigurationError(f"Unsupported configuration format: {path.suffix}")

    try:
        data = parser(path.read_text(encoding="utf-8"))
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Could not parse configuration file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")

    section = data.get(CONFIG_SECTION)
    return section if isinstance(section, dict) else data


def find_config_file(
    search_paths: Optional[list[str]] = None,
    filename: str = DEFAULT_CONFIG_FILENAME,
) -> Optional[Path]:
    """Return the first ``ngdriver.config.<ext>`` found in the search paths."""
    for directory in search_paths or DEFAULT_CONFIG_SEARCH_PATHS:
        for ext in DEFAULT_CONFIG_EXTENSIONS:
            candidate = Path(directory).expanduser() / f"{filename}{ext}"
            if candidate.exists():
                return candidate
    return None


def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
    """Deep merge configuration dictionaries; later ones win."""
    result: dict[str, Any] = {}
    for config in configs:
        for key, value in config.items():
            if isinstance(result.get(key), dict) and isinstance(value, dict):
                result[key] = merge_configs(result[key], value)
            else:
                result[key] = value
    return result


class ConfigLoader:
    """Build NgDriverOptions from a file, the environment and overrides.

    Args:
        config_file: Explicit configuration file. Must exist if given.
        search_paths: Directories searched when no file is given.
        load_env: Whether ``NGDRIVER_*`` variables are applied.
        auto_find: Whether to search for a file when none is given.
    """

    def __init__(
        self,
        config_file: Optional[Union[str, Path]] = None,
        search_paths: Optional[list[str]] = None,
        load_env: bool = True,
        auto_find: bool = True,
    ):
        self.config_file = Path(config_file) if config_file else None
        self.search_paths = search_paths
        self.load_env = load_env
        self.auto_find = auto_find

    def load(self, overrides: Optional[dict[str, Any]] = None) -> NgDriverOptions:
        """Load and validate options.

        Raises:
            ConfigurationError: If a file cannot be read or a value is invalid
        """
        try:
            env_config = load_env_config() if self.load_env else {}
            return NgDriverOptions.from_dict(
                merge_configs(self._file_config(), env_config, overrides or {})
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid ngdriver configuration: {e}") from e

    def _file_config(self) -> dict[str, Any]:
        path = self.config_file
        if path is None and self.auto_find:
            path = find_config_file(self.search_paths)
        return load_file(path) if path is not None else {}


def load_config(
    config_file: Optional[Union[str, Path]] = None,
    overrides: Optional[dict[str, Any]] = None,
    load_env: bool = True,
    auto_find: bool = True,
) -> NgDriverOptions:
    """Load options from all sources. See ``ConfigLoader``."""
    loader = ConfigLoader(config_file=config_file, load_env=load_env, auto_find=auto_find)
    return loader.load(overrides=overrides)
