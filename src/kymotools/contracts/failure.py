"""Failure taxonomy for kymograph and montage builds.

Two families live here. User-facing errors (configuration, sample type,
per-slice computation) are recovered locally and reported once by the
builder that owns the run. ContractViolation marks a stage that did not
produce the invariants it promised and always propagates.
"""

from enum import Enum


class FailurePolicy(str, Enum):
    """What a builder does with a user-facing error.

    REPORT (default): log once, keep it as ``last_error``, return no result
    RAISE: re-raise to the caller (useful in tests and scripts)
    """
    REPORT = "report"
    RAISE = "raise"


class KymoError(Exception):
    """Base class for recoverable errors raised by kymotools."""
    pass


class ConfigurationError(KymoError, ValueError):
    """No source or molecule set, empty path, invalid channel index, bad time range."""
    pass


class TypeMismatchError(KymoError, TypeError):
    """Non-numeric sample kind, or sources with heterogeneous sample kinds."""
    pass


class StageFailure(KymoError, RuntimeError):
    """A filter or interpolation computation failed for one slice."""

    def __init__(self, message: str, key=None):
        super().__init__(message)
        self.key = key


class ContractViolation(RuntimeError):
    """Raised when a stage contract is violated.

    This indicates a bug in builder logic, not bad user input. It means a
    stage did not produce the axes or sizes it promised.

    Key distinction:
    - ConfigurationError / TypeMismatchError: caller error, reported
    - StageFailure: one slice failed, siblings continue
    - ContractViolation: programmer error, never swallowed
    """
    pass
