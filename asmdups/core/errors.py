"""
Error types for asmdups.

Every fatal condition of a run is a ``DupsError``; the command line turns
them into a diagnostic on stderr and a non-zero exit status.
"""

from typing import Optional, Any, Dict


class DupsError(Exception):
    """
    Base exception for all asmdups errors.

    Carries a structured ``details`` dictionary alongside the message.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize error.

        Args:
            message: Error message
            details: Optional detailed error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class TraversalError(DupsError):
    """Raised when a directory cannot be listed during traversal."""

    def __init__(self, message: str, path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.path = path
        self.details.update({'path': path})


class InputReadError(DupsError):
    """Raised when an input file cannot be read or decoded."""

    def __init__(self, message: str, path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.path = path
        self.details.update({'path': path})


class ComparisonError(DupsError):
    """Raised when the ordered comparison is given the wrong inputs."""


class ReportWriteError(DupsError):
    """Raised when the report cannot be written to its destination."""

    def __init__(self, message: str, path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.path = path
        self.details.update({'path': path})


class ConfigError(DupsError):
    """Raised when a configuration file or override is invalid."""


def is_io_error(error: Exception) -> bool:
    """Check if error came from reading or writing the filesystem."""
    return isinstance(error, (TraversalError, InputReadError, ReportWriteError))
