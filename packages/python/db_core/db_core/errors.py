"""Errors raised by the shared MongoDB connection helpers."""


class DatabaseError(Exception):
    """Base class for datastore failures raised outside the driver."""


class DatabaseNotConfiguredError(DatabaseError):
    """Raised when a database handle is requested but no URL is configured."""


class DatabaseConnectionError(DatabaseError):
    """Raised by ``ensure_connected(raise_on_error=True)`` when the server is unreachable."""
