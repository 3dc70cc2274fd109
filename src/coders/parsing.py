"""
Best-effort parsing helpers for decoder input.

Each helper returns a ParseResult instead of raising, and the caller applies
its own default when ``ok`` is False. This keeps the fallback policy visible
at the call site.
"""

import locale
import re
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")

# Signed 64-bit bounds for epoch values
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1
INT64_MAX_DIGITS = len(str(INT64_MAX))

# Longest value rendered into a log message
DESCRIBE_LIMIT = 100

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")
_FIELD_SEPARATOR = re.compile(r"\s*,\s*")

UTF8 = "utf-8"


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    """Outcome of a best-effort parse.

    Attributes:
        value: Parsed value, or None when ok is False (text decoding always
            carries a value)
        ok: True if the input parsed cleanly
        error: Reason the parse failed, if it did
    """

    value: T | None
    ok: bool
    error: str | None = None

    def or_default(self, default: T) -> T:
        return self.value if self.ok else default


def platform_encoding() -> str:
    """Platform default text encoding used when UTF-8 decoding fails."""
    return locale.getpreferredencoding(False) or UTF8


def decode_text(payload: Any) -> ParseResult[str]:
    """
    Decode a payload as UTF-8, falling back to the platform encoding.

    The fallback decodes with replacement characters so it always produces
    text. ``ok`` is False when the fallback was needed; ``value`` is set
    either way. Payloads that are not bytes-like decode to empty text.
    """
    if payload is None:
        return ParseResult("", True)
    if isinstance(payload, str):
        return ParseResult(payload, True)

    try:
        data = bytes(memoryview(payload))
    except TypeError:
        return ParseResult("", False, f"payload of type {type(payload).__name__} is not bytes")

    try:
        return ParseResult(data.decode(UTF8), True)
    except UnicodeDecodeError as e:
        encoding = platform_encoding()
        try:
            text = data.decode(encoding, errors="replace")
        except LookupError:
            text = data.decode(UTF8, errors="replace")
        return ParseResult(text, False, f"{e.reason} at byte {e.start}; decoded as {encoding}")


def describe_value(value: Any, limit: int = DESCRIBE_LIMIT) -> str:
    """Printable form of a property or field value for log messages, cut to ``limit``."""
    if isinstance(value, int) and not INT64_MIN <= value <= INT64_MAX:
        # str() of a huge int raises once it passes the interpreter's digit limit
        text = f"<int of {value.bit_length()} bits>"
    else:
        text = repr(value)
    return text if len(text) <= limit else text[:limit] + "..."


def parse_bool(value: Any) -> ParseResult[bool]:
    """Parse ``true``/``false`` (case-insensitive, whitespace ignored)."""
    if isinstance(value, bool):
        return ParseResult(value, True)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized == "true":
            return ParseResult(True, True)
        if normalized == "false":
            return ParseResult(False, True)
    return ParseResult(None, False, f"not a boolean: {describe_value(value)}")


def parse_int(value: Any) -> ParseResult[int]:
    """
    Parse a signed 64-bit integer.

    Strings must be an optional sign followed by ASCII digits; no internal
    whitespace, underscores, or decimal points. Surrounding whitespace and
    leading zeros are ignored. ``bool`` is rejected even though it subclasses
    int.
    """
    if isinstance(value, bool):
        return ParseResult(None, False, f"not an integer: {value!r}")

    if isinstance(value, int):
        parsed = value
    elif isinstance(value, str) and _INTEGER_PATTERN.fullmatch(value.strip()):
        text = value.strip()
        sign = text[0] if text[0] in "+-" else ""
        digits = text.lstrip("+-").lstrip("0") or "0"
        # Checked before int() so long digit runs never reach the conversion limit
        if len(digits) > INT64_MAX_DIGITS:
            return ParseResult(None, False, f"out of 64-bit range: {len(digits)} digits")
        parsed = int(sign + digits)
    else:
        return ParseResult(None, False, f"not an integer: {describe_value(value)}")

    if not INT64_MIN <= parsed <= INT64_MAX:
        return ParseResult(None, False, f"out of 64-bit range: {describe_value(value)}")
    return ParseResult(parsed, True)


def split_fields(text: str) -> list[str]:
    """Split a CSV line on commas, trimming whitespace around every field."""
    return [field.strip() for field in _FIELD_SEPARATOR.split(text)]
