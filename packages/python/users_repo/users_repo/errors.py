"""Domain-level errors for the users repository."""

from __future__ import annotations


class UserRepositoryError(Exception):
    """Base class for datastore failures surfaced by the users repository.

    The original driver/database exception is kept on ``cause`` and chained as
    ``__cause__`` by the raising code.
    """

    action = "access users"

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Failed to {self.action}: {cause}")


class UserWriteError(UserRepositoryError):
    """Raised when a profile cannot be created or updated."""

    action = "create/update user"


class UserReadError(UserRepositoryError):
    """Raised when a single user cannot be fetched."""

    action = "fetch user"


class UserListError(UserRepositoryError):
    """Raised when the user listing query fails."""

    action = "fetch users"


class UserContentError(UserRepositoryError):
    """Raised when a user's authored threads cannot be fetched."""

    action = "fetch user threads"


class UserActivityError(UserRepositoryError):
    """Raised when replies to a user's threads cannot be fetched."""

    action = "fetch activity"
