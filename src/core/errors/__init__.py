"""
Error classification and exception hierarchy.

Provides:
- ErrorCategory enum for classifying errors
- PipelineError hierarchy for typed exceptions
- Classification utilities for error handling
"""

from core.errors.exceptions import (
    ConfigError,
    DecoderNotFoundError,
    # Enums
    ErrorCategory,
    PermanentError,
    # Base classes
    PipelineError,
    # Classification utilities
    classify_exception,
    wrap_exception,
)

__all__ = [
    # Enums
    "ErrorCategory",
    # Base classes
    "PipelineError",
    "PermanentError",
    "ConfigError",
    "DecoderNotFoundError",
    # Classification utilities
    "classify_exception",
    "wrap_exception",
]
