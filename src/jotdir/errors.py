"""Exceptions raised by jotdir operations.

Filesystem problems that jotdir does not anticipate (permissions, full disks, etc.) are not wrapped;
they surface as the usual :exc:`OSError` subclasses.
"""


class Error(Exception):
    """Base class for the failures jotdir reports to its callers."""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(Error):
    """Raised when a title or group is missing, or sanitizes to nothing."""


class InvalidDateError(Error):
    """Raised when a date filter is neither ``YYYY-MM-DD`` nor an ISO 8601 timestamp."""
    def __init__(self, value: str):
        super().__init__(f'Invalid date format: {value}. Use ISO 8601 or YYYY-MM-DD.')
        self.value = value


class NotFoundError(Error):
    """Raised when a note, group, or notes directory does not exist."""


class NotEmptyError(Error):
    """Raised when deleting a group that still contains files or folders."""
