"""
Unified exception hierarchy for the decoders.

Decoding itself never raises; these exceptions cover the setup paths
(loading property files, resolving decoder classes) where failing loudly
is the right outcome.
"""


# Import ErrorCategory from canonical source to avoid duplicate enum issues
# (comparing enums from different classes always returns False)
from core.types import ErrorCategory


class PipelineError(Exception):
    """
    Base exception for all decoder errors.

    Attributes:
        message: Human-readable error description
        category: Error classification reported in logs
        cause: Original exception if wrapping
        context: Additional context dict for debugging
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


# =============================================================================
# Permanent Errors (Don't Retry)
# =============================================================================


class PermanentError(PipelineError):
    """Base class for permanent/non-retriable errors."""

    category = ErrorCategory.PERMANENT


class ConfigError(PermanentError):
    """Property file missing, unreadable, or not a mapping."""

    pass


class DecoderNotFoundError(PermanentError):
    """Configured decoder class cannot be imported or is not a decoder."""

    def __init__(
        self,
        class_path: str,
        cause: Exception | None = None,
    ):
        message = f"Decoder class '{class_path}' could not be loaded"
        super().__init__(message, cause, {"decoder_class": class_path})
        self.class_path = class_path


# =============================================================================
# Classification Utilities
# =============================================================================


def classify_exception(exc: Exception) -> ErrorCategory:
    """
    Classify any exception into an ErrorCategory.

    PipelineError subclasses carry their own category. Import and lookup
    failures are permanent, OS-level I/O failures are treated as transient.
    """
    if isinstance(exc, PipelineError):
        return exc.category
    if isinstance(exc, (ImportError, AttributeError, TypeError, ValueError)):
        return ErrorCategory.PERMANENT
    if isinstance(exc, OSError):
        return ErrorCategory.TRANSIENT
    return ErrorCategory.UNKNOWN


def wrap_exception(
    exc: Exception,
    default_class: type[PipelineError] = PipelineError,
    context: dict | None = None,
) -> PipelineError:
    """
    Wrap a generic exception in the PipelineError hierarchy.

    Already-typed PipelineErrors are returned unchanged.
    """
    if isinstance(exc, PipelineError):
        return exc

    wrapped = default_class(str(exc), cause=exc, context=context)
    return wrapped
