"""Custom exception classes for the School Portal backend.

This module defines application-specific exceptions following Google Python
Style Guide. Managers raise these; route handlers translate them into HTTP
status codes.
"""

from typing import Union


class SchoolPortalError(Exception):
    """Base exception for all School Portal errors."""

    pass


class NotFoundError(SchoolPortalError):
    """Raised when a referenced entity does not exist."""

    def __init__(self, entity: str, identifier: Union[int, str, None] = None):
        """Initialize the exception.

        Args:
            entity: Human readable entity name, e.g. "Course".
            identifier: The ID (or other key) that was looked up.
        """
        self.entity = entity
        self.identifier = identifier
        if identifier is None:
            super().__init__(f"{entity} not found")
        else:
            super().__init__(f"{entity} '{identifier}' not found")


class AlreadyExistsError(SchoolPortalError):
    """Raised when a uniqueness rule would be violated."""

    pass


class InvalidArgumentError(SchoolPortalError):
    """Raised when a request is well-formed but cannot be applied."""

    pass


class InternalError(SchoolPortalError):
    """Raised when a store operation fails unexpectedly."""

    pass


class InvalidOtpError(SchoolPortalError):
    """Raised when an OTP is wrong, expired or already used."""

    pass
