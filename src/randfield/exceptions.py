"""Exception hierarchy for randfield.

All exceptions derive from RandFieldError. The stream processor converts
these into boolean success/failure outcomes at its entry points; anything
outside the hierarchy propagates unchanged.
"""


class RandFieldError(Exception):
    """Base exception for all randfield errors."""


class ConfigValidationError(RandFieldError):
    """Configuration validation failed.

    Raised when overrides contain unknown keys or values that fail type
    validation.
    """


class SchemaError(RandFieldError):
    """The output schema could not be constructed.

    Raised when the upstream schema is missing, or when the appended output
    field collides with an existing field name.
    """


class RecordError(RandFieldError):
    """A single record could not be transformed.

    Raised when an incoming record does not match the negotiated input
    schema.
    """
