"""Base Pydantic model with strict defaults for kymotools configs.

All config schemas and value objects inherit from this base to ensure
consistent validation behavior across parameter, user, CLI, and internal
configs.
"""

from pydantic import BaseModel, ConfigDict


class KymoBaseModel(BaseModel):
    """Base model for all kymotools configuration schemas.

    Enforces strict validation:
    - No extra fields allowed
    - Validates assignments after initialization
    - Strips whitespace from strings
    """

    model_config = ConfigDict(
        extra='forbid',           # Reject unknown fields
        validate_assignment=True, # Validate on field mutation
        use_enum_values=True,     # Convert enums to values
        str_strip_whitespace=True,# Strip whitespace from strings
    )


class FrozenModel(KymoBaseModel):
    """Immutable value object (path geometry, filter and reduction specs)."""

    model_config = ConfigDict(
        extra='forbid',
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,
    )
