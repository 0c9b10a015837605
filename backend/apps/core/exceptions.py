"""
Error taxonomy shared by all services.

API handlers for these live in config.api and render them as ErrorResponse.
"""


class CplManagerError(Exception):
    """Base exception for domain errors."""

    pass


class InputValidationError(CplManagerError):
    """Input rejected before any persistence call."""

    pass


class PersistenceError(CplManagerError):
    """The data store rejected a read or write."""

    pass


class RecordNotFoundError(CplManagerError):
    """No row matched the id within the caller's scope."""

    pass


class UploadError(CplManagerError):
    """A blob upload failed; the enclosing save is aborted."""

    pass
