"""Error types raised by providers.

Stage errors describe what went wrong inside a single backend call. They are
caught at the boundary of every provider method and re-raised as one
:class:`KupmiosError` carrying the original cause.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    TRANSPORT = "transport"
    DECODE = "decode"
    TIMEOUT = "timeout"
    ABSENT = "absent"
    REMOTE = "remote"
    INVARIANT = "invariant"
    UNKNOWN = "unknown"


class ProviderStageError(Exception):
    """Base class for failures raised below the provider boundary."""

    kind: ErrorKind = ErrorKind.UNKNOWN


class TransportError(ProviderStageError):
    """Connection failure or non-2xx HTTP status."""

    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str, url: str, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class DecodeError(ProviderStageError):
    """Response payload did not match the declared schema."""

    kind = ErrorKind.DECODE

    def __init__(self, message: str, url: str, errors: list[Any] | None = None):
        super().__init__(message)
        self.url = url
        self.errors = errors or []


class AbsentValueError(ProviderStageError):
    """A lookup returned nothing where a value was required."""

    kind = ErrorKind.ABSENT


class RemoteRejection(ProviderStageError):
    """The remote service answered with a structured error object."""

    kind = ErrorKind.REMOTE

    def __init__(self, error: Any):
        super().__init__(f"Remote service rejected the request: {error}")
        self.error = error


class InvariantViolation(ProviderStageError):
    """A domain invariant did not hold for the returned data."""

    kind = ErrorKind.INVARIANT


class KupmiosError(Exception):
    """Normalized error raised by every provider method."""

    def __init__(
        self,
        message: str,
        cause: Any = None,
        kind: ErrorKind = ErrorKind.UNKNOWN,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.kind = kind

    @classmethod
    def from_exception(cls, exc: BaseException, operation: str) -> KupmiosError:
        """Wrap any failure raised while running ``operation``."""
        if isinstance(exc, RemoteRejection):
            return cls(f"{operation} failed: {exc}", cause=exc.error, kind=exc.kind)
        if isinstance(exc, ProviderStageError):
            return cls(f"{operation} failed: {exc}", cause=exc, kind=exc.kind)
        if isinstance(exc, TimeoutError):
            return cls(
                f"{operation} timed out", cause=exc, kind=ErrorKind.TIMEOUT
            )
        return cls(f"{operation} failed: {exc!r}", cause=exc)


class AmbiguousUnitError(KupmiosError):
    """More than one UTxO holds a unit that must be unique."""

    def __init__(self, unit: str, count: int):
        violation = InvariantViolation(
            f"Unit {unit} is held by {count} UTxOs; it needs to be an NFT "
            "or only held by one address."
        )
        super().__init__(str(violation), cause=violation, kind=ErrorKind.INVARIANT)
        self.unit = unit
        self.count = count
