"""Exception hierarchy for SSIM decoding and expansion."""

from typing import Optional


class SsimError(Exception):
    """Base exception for all SSIM parsing errors."""


class EmptySourceError(SsimError):
    """Raised when the input source is empty before any line is processed."""


class SchemaError(SsimError):
    """Raised when a schema is malformed or cannot be registered."""


class SourceError(SsimError):
    """Raised when a remote source cannot be fetched."""


class DecodeError(SsimError):
    """Base exception for positional decoding failures."""


class TruncatedRecordError(DecodeError):
    """Raised when a line is shorter than its schema requires."""

    def __init__(self, expected: int, actual: int, field: Optional[str] = None) -> None:
        self.expected = expected
        self.actual = actual
        self.field = field
        location = f" at field {field!r}" if field else ""
        super().__init__(
            f"Record truncated{location}: expected {expected} characters, got {actual}"
        )


class UnknownSchemaError(DecodeError):
    """Raised when no schema is registered for a version."""

    def __init__(self, version: int) -> None:
        self.version = version
        super().__init__(f"No schema registered for SSIM version {version!r}")


class MaterializeError(SsimError):
    """Base exception for failures turning a record into flight occurrences."""


class BadDateError(MaterializeError):
    def __init__(self, field: str, value: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Invalid date in {field}: {value!r}")


class BadTimeError(MaterializeError):
    def __init__(self, field: str, value: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"Invalid time in {field}: {value!r}")


class InvalidFlightNumberError(MaterializeError):
    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(
            f"Invalid flight number {value!r}: only letters (A-Z, a-z) and digits are allowed"
        )


class LineFailedError(SsimError):
    """A decode or materialize failure tied to the input line that caused it."""

    def __init__(self, index: int, line: str, cause: SsimError) -> None:
        self.index = index
        self.line = line
        self.cause = cause
        super().__init__(f"Line {index} failed: {cause}")
        self.__cause__ = cause


__all__ = [
    "SsimError",
    "EmptySourceError",
    "SchemaError",
    "SourceError",
    "DecodeError",
    "TruncatedRecordError",
    "UnknownSchemaError",
    "MaterializeError",
    "BadDateError",
    "BadTimeError",
    "InvalidFlightNumberError",
    "LineFailedError",
]
