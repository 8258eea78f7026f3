"""Response builder exception classes.

Every failure is raised synchronously to the caller. None of these are
transient: they signal a programming or configuration mistake.
"""


class BuilderError(Exception):
    """Base response builder error."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class InvalidArgumentError(BuilderError, ValueError):
    """Raised when a caller passes a malformed API code or HTTP code."""


class ConfigurationError(BuilderError):
    """Raised when the builder configuration is structurally invalid."""


class UnknownCodeError(ConfigurationError):
    """Raised when a code or response key role has no known mapping."""

    def __init__(self, message: str, reference: int | str | None = None):
        self.reference = reference
        super().__init__(message)
