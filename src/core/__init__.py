"""
Core library: shared, host-agnostic components.

Modules:
    logging     - Structured JSON/console logging with context propagation
    errors      - Error classification and exception hierarchy
    utils       - JSON serialization helpers

Design Principles:
    - No dependencies on the host ETL framework
    - All modules are independently testable
    - Type hints throughout
"""

from .types import DecodeFallback, Decoder, ErrorCategory

__version__ = "0.1.0"

__all__ = [
    "DecodeFallback",
    "Decoder",
    "ErrorCategory",
]
