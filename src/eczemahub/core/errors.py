class EczemaHubError(Exception):
    """Base error for all user-facing Eczema Hub exceptions."""


class ConfigurationError(EczemaHubError):
    """Raised when configuration is invalid or incomplete."""


class ValidationError(EczemaHubError):
    """Raised when a resource field violates its bounds."""


class NotFoundError(EczemaHubError):
    """Raised when a resource id is absent from the store."""


class AlreadyExistsError(EczemaHubError):
    """Reserved for identifier collisions; no current operation raises it."""


class UnauthorizedError(EczemaHubError):
    """Raised when a caller other than the admin attempts verification."""


class SnapshotError(EczemaHubError):
    """Raised when store state cannot be serialized or restored."""


class IdSpaceExhaustedError(EczemaHubError):
    """Raised when no unsigned 64-bit id remains to allocate."""
