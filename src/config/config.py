"""Decoder properties from YAML file.

The host ETL job hands decoders a flat mapping of dotted property names
(``camus.message.timestamp.index``). Locally those properties live in a YAML
file where they may be written flat or nested:

    camus:
      message:
        timestamp:
          index: 2
          parse: true
        decoder.class: coders.csv_decoder.CsvStringMessageDecoder

Both forms flatten to the same keys. Values are stringified the way the host
stores them, so ``true`` becomes ``"true"`` and ``2`` becomes ``"2"``.

Environment variables ARE supported using ${VAR_NAME} syntax in YAML files.
"""

import json
import logging
import os
import re
import sys
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from core.errors import ConfigError, wrap_exception

# Configure module logger
logger = logging.getLogger(__name__)

# Default properties file: decoder.yaml beside this module in src/config/
DEFAULT_CONFIG_FILE = Path(__file__).parent / "decoder.yaml"

# Environment variable that points at an alternate properties file
CONFIG_PATH_ENV = "CODERS_CONFIG"


def load_yaml(path: Path) -> Dict[str, Any]:
    """Load YAML file and return dict."""
    if not path.exists():
        return {}
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR_NAME} and ${VAR_NAME:-default} environment variables in config data."""
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        # Support both ${VAR} and ${VAR:-default} syntax
        pattern = r"\$\{([^}:]+)(?::-(([^}]*))?)?\}"

        def replacer(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else match.group(0)
            return os.getenv(var_name, default_value)

        return re.sub(pattern, replacer, data)
    else:
        return data


def _to_property_value(value: Any) -> str:
    """Render a YAML scalar the way it would appear in a properties file."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, list):
        return ",".join(_to_property_value(item) for item in value)
    return str(value)


def flatten_properties(data: Mapping[str, Any], prefix: str = "") -> Dict[str, str]:
    """Flatten nested mappings into dotted property names with string values."""
    flat: Dict[str, str] = {}
    for key, value in data.items():
        name = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            flat.update(flatten_properties(value, name))
        else:
            flat[name] = _to_property_value(value)
    return flat


def load_properties(
    config_path: Optional[Path] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Dict[str, str]:
    """Load decoder properties from a YAML file.

    Resolution order for the file: explicit ``config_path``, then the
    CODERS_CONFIG environment variable, then src/config/decoder.yaml. A missing
    default file yields empty properties; a missing explicit file is an error.

    Args:
        config_path: Path to a YAML properties file
        overrides: Properties applied on top of the file (flat or nested)

    Returns:
        Flat mapping of dotted property name to string value

    Raises:
        ConfigError: If an explicit file is missing, unreadable, or not a mapping
    """
    explicit = config_path is not None or bool(os.getenv(CONFIG_PATH_ENV))
    if config_path is None:
        config_path = Path(os.getenv(CONFIG_PATH_ENV) or DEFAULT_CONFIG_FILE)

    if explicit and not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            context={"config_path": str(config_path)},
        )

    try:
        yaml_data = load_yaml(config_path)
    except (OSError, yaml.YAMLError) as e:
        raise wrap_exception(e, ConfigError, context={"config_path": str(config_path)}) from e

    if not isinstance(yaml_data, dict):
        raise ConfigError(
            f"Invalid config file: expected a mapping at top level in {config_path}",
            context={"config_path": str(config_path)},
        )

    if yaml_data:
        logger.info(f"Loading decoder properties from file: {config_path}")
    else:
        logger.debug(f"No decoder properties found at {config_path}, using defaults")

    properties = flatten_properties(_expand_env_vars(yaml_data))

    if overrides:
        logger.debug(f"Applying overrides: {list(overrides.keys())}")
        properties.update(flatten_properties(overrides))

    return properties


_properties: Optional[Dict[str, str]] = None


def get_properties() -> Dict[str, str]:
    """Get or load the singleton decoder properties."""
    global _properties
    if _properties is None:
        _properties = load_properties()
    return _properties


def set_properties(properties: Mapping[str, Any]) -> None:
    """Set the singleton decoder properties (useful for testing)."""
    global _properties
    _properties = flatten_properties(properties)


def reset_properties() -> None:
    """Reset the singleton properties (forces reload on next get_properties() call)."""
    global _properties
    _properties = None


def _cli_main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point for inspecting resolved decoder properties."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Decoder Properties Tool",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show resolved properties
  python -m config.config --config config/decoder.yaml

  # JSON output for automation
  python -m config.config --config config/decoder.yaml --json
        """,
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML properties file (default: src/config/decoder.yaml)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format instead of key=value lines",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        properties = load_properties(config_path=args.config)
    except ConfigError as e:
        if args.json:
            print(json.dumps({"error": str(e)}))
        else:
            print(f"✗ Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(properties, indent=2, sort_keys=True))
    else:
        for key in sorted(properties):
            print(f"{key}={properties[key]}")
    return 0


if __name__ == "__main__":
    sys.exit(_cli_main())
