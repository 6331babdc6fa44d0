"""Errors raised by the promotion computation engine."""

from enum import Enum

from protean.exceptions import ValidationError


class ErrorKind(Enum):
    INVALID_DATA = "invalid_data"


class InvalidDataError(ValidationError):
    """Required context is structurally absent from a compute call.

    Carries the same ``messages`` dict as any other ``ValidationError`` so the
    pricing pipeline can report it alongside aggregate validation failures.
    """

    kind = ErrorKind.INVALID_DATA
