"""
Module for managing converter configuration.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .constants import DEFAULT_OUTPUT_DIR
from .exceptions import ConfigurationError

# --- Configuration ---
CONFIG_FILE = os.getenv("BACKLOG2MD_CONFIG_FILE", "backlog2md.json")
OUTPUT_DIR = os.getenv("BACKLOG2MD_OUTPUT_DIR", DEFAULT_OUTPUT_DIR)

TRUE_VALUES = ("true", "1", "yes")
FALSE_VALUES = ("false", "0", "no")


@dataclass(frozen=True)
class ConversionOptions:
    """Options read once before a conversion and never changed during it.

    Attributes:
        use_crlf: Write "\\r\\n" line endings in the result
        promote_first_row: Make the first row of a table without header the
            header; when False an empty header row is added instead
    """

    use_crlf: bool = False
    promote_first_row: bool = False


def _env_flag(name: str) -> Optional[bool]:
    """Read a boolean environment variable, None when unset."""
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None

    value = value.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ConfigurationError(f"Environment variable {name} is not a boolean: {value!r}")


def _read_config_file(config_path: Path) -> Dict[str, Any]:
    """
    Read the JSON configuration file.

    Returns:
        Dict[str, Any]: File settings, empty if the file does not exist

    Raises:
        ConfigurationError: If the file is not a valid JSON object
    """
    if not config_path.exists():
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Error parsing JSON file: {e}")
    except OSError as e:
        raise ConfigurationError(f"Error loading configuration: {e}")

    if not isinstance(config, dict):
        raise ConfigurationError(f"Configuration file '{config_path}' must contain a JSON object.")
    return config


def _file_flag(config: Dict[str, Any], key: str) -> Optional[bool]:
    value = config.get(key)
    if value is None:
        return None
    if not isinstance(value, bool):
        raise ConfigurationError(f"'{key}' in configuration file must be true or false.")
    return value


def load_options(
    use_crlf: Optional[bool] = None,
    promote_first_row: Optional[bool] = None,
    config_file: Optional[str] = None,
) -> ConversionOptions:
    """
    Load conversion options from arguments, environment variables or JSON file.

    Explicit arguments win over environment variables, which win over the
    configuration file.

    Args:
        use_crlf: Value given on the command line, if any
        promote_first_row: Value given on the command line, if any
        config_file: Configuration file path (default: CONFIG_FILE)

    Returns:
        ConversionOptions: The resolved options

    Raises:
        ConfigurationError: If a setting is invalid
    """
    config = _read_config_file(Path(config_file or CONFIG_FILE))

    if use_crlf is None:
        use_crlf = _env_flag("BACKLOG2MD_USE_CRLF")
    if use_crlf is None:
        use_crlf = _file_flag(config, "use_crlf")

    if promote_first_row is None:
        promote_first_row = _env_flag("BACKLOG2MD_PROMOTE_FIRST_ROW")
    if promote_first_row is None:
        promote_first_row = _file_flag(config, "promote_first_row")

    return ConversionOptions(
        use_crlf=bool(use_crlf),
        promote_first_row=bool(promote_first_row),
    )


def resolve_output_dir(output_dir: Optional[str] = None, config_file: Optional[str] = None) -> str:
    """Pick the output directory: argument, then environment, then file, then default."""
    if output_dir:
        return output_dir
    env_dir = os.getenv("BACKLOG2MD_OUTPUT_DIR")
    if env_dir:
        return env_dir
    config = _read_config_file(Path(config_file or CONFIG_FILE))
    return config.get("output_dir") or DEFAULT_OUTPUT_DIR


def ensure_directories(output_dir: str = OUTPUT_DIR) -> None:
    """Create the output directory if it doesn't exist."""
    try:
        Path(output_dir).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigurationError(f"Unable to create directories: {e}")
