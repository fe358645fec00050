"""Stage contracts and the error taxonomy.

Contracts fail immediately and loudly when a stage does not produce its
promised axes and sizes. User-facing errors (ConfigurationError,
TypeMismatchError, StageFailure) are recovered by the builders.

Key principle:
- Pydantic validates config correctness
- Contracts validate stage correctness
- Builders report user errors once and return no result
"""

from kymotools.contracts.failure import (
    ContractViolation,
    FailurePolicy,
    KymoError,
    ConfigurationError,
    TypeMismatchError,
    StageFailure,
)
from kymotools.contracts.base import require
from kymotools.contracts.volume import assert_volume_axes
from kymotools.contracts.kymograph import assert_kymograph, assert_projected_kymograph
from kymotools.contracts.montage import assert_montage

__all__ = [
    "ContractViolation",
    "FailurePolicy",
    "KymoError",
    "ConfigurationError",
    "TypeMismatchError",
    "StageFailure",
    "require",
    "assert_volume_axes",
    "assert_kymograph",
    "assert_projected_kymograph",
    "assert_montage",
]
