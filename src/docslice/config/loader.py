"""Configuration loading and merging logic."""

import json
import os
from pathlib import Path
from typing import Any, Optional

from docslice.config.defaults import CONFIG_SEARCH_PATHS
from docslice.config.models import DocsliceConfig
from docslice.errors import ConfigError


def find_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file.

    Args:
        explicit_path: Explicitly specified config file path (from CLI).

    Returns:
        Path to config file if found, None otherwise.
    """
    if explicit_path is not None:
        if explicit_path.exists():
            return explicit_path
        raise FileNotFoundError(f"Config file not found: {explicit_path}")

    for search_path in CONFIG_SEARCH_PATHS:
        if search_path.exists():
            return search_path

    return None


def load_config_file(path: Path) -> dict[str, Any]:
    """Load configuration from a JSON file.

    Args:
        path: Path to the configuration file.

    Returns:
        Parsed configuration dictionary.
    """
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def merge_cli_overrides(
    config: DocsliceConfig,
    verbose: Optional[int] = None,
    terminator: Optional[str] = None,
    example_prefix: Optional[str] = None,
    fence_language: Optional[str] = None,
) -> DocsliceConfig:
    """Merge CLI overrides into the configuration.

    CLI arguments take precedence over config file values.

    Args:
        config: Base configuration from file.
        verbose: Verbosity level override.
        terminator: Sentence terminator override.
        example_prefix: Example function prefix override.
        fence_language: Code fence language override.

    Returns:
        Configuration with CLI overrides applied.
    """
    data = config.model_dump()

    if verbose is not None:
        data["output"]["verbosity"] = verbose
    if terminator is not None:
        data["slices"]["terminator"] = terminator
    if example_prefix is not None:
        data["scan"]["example_prefix"] = example_prefix
    if fence_language is not None:
        data["render"]["fence_language"] = fence_language

    return DocsliceConfig.model_validate(data)


def load_config(
    config_path: Optional[Path] = None,
    **cli_overrides: Any,
) -> DocsliceConfig:
    """Load configuration with CLI overrides.

    Configuration is loaded from the following sources (in order of priority):
    1. CLI arguments (highest priority)
    2. Environment variables
    3. Config file (if found)
    4. Default values (lowest priority)

    Args:
        config_path: Explicit config file path (from --config CLI option).
        **cli_overrides: CLI argument overrides.

    Returns:
        Merged configuration object.

    Raises:
        ConfigError: If the config file is missing, unreadable or invalid,
            or an override does not validate.
    """
    try:
        config = DocsliceConfig()

        found_config = find_config_file(config_path)
        if found_config is not None:
            file_data = load_config_file(found_config)
            config = DocsliceConfig.model_validate(file_data)

        # CLI options left unset arrive as None
        cli_overrides = {k: v for k, v in cli_overrides.items() if v is not None}

        if verbosity := os.environ.get("DOCSLICE_VERBOSITY"):
            cli_overrides.setdefault("verbose", int(verbosity))

        if terminator := os.environ.get("DOCSLICE_TERMINATOR"):
            cli_overrides.setdefault("terminator", terminator)

        return merge_cli_overrides(config, **cli_overrides)
    except (OSError, ValueError) as e:
        # json and pydantic validation errors are ValueErrors
        raise ConfigError(str(e)) from e
