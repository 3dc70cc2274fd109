"""Configuration loading for message decoders.

Decoders receive a flat mapping of dotted property names from the host ETL
job. For local runs and tests the same properties are loaded from a YAML
file.

Main Functions
--------------

    - load_properties(): Load and flatten properties from a YAML file
    - get_properties(): Get or load the singleton properties
    - set_properties(): Replace the singleton (useful for testing)
    - reset_properties(): Reset the singleton

Usage Examples
--------------

    >>> from config import load_properties
    >>> from pathlib import Path
    >>>
    >>> props = load_properties(Path("config/decoder.yaml"))
    >>> props["camus.message.timestamp.index"]
    '2'

Configuration Priority
---------------------

1. Overrides passed to load_properties()
2. YAML file (with ${VAR} expansion)
3. Decoder defaults
"""

from config.config import (
    flatten_properties,
    get_properties,
    load_properties,
    reset_properties,
    set_properties,
)

__all__ = [
    "load_properties",
    "flatten_properties",
    "get_properties",
    "set_properties",
    "reset_properties",
]
