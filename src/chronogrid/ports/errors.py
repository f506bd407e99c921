"""Errors shared by all repository implementations."""


class RecordNotFoundError(KeyError):
    """Raised when an event or task id is unknown to the store."""

    pass
