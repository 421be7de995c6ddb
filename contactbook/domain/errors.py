"""Typed errors raised by the contact persistence and service layers."""

from __future__ import annotations

from typing import Optional


class ContactError(Exception):
    """Base class for contact-related exceptions."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ContactNotFoundError(ContactError):
    def __init__(self, contact_id: int):
        super().__init__(f"Contact {contact_id} not found")
        self.contact_id = contact_id


class ValidationError(ContactError):
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ImageTooLargeError(ValidationError):
    def __init__(self, size: int, limit: int):
        super().__init__(
            f"Profile image must be smaller than {limit} bytes",
            field="file",
        )
        self.size = size
        self.limit = limit


class PersistenceError(ContactError):
    """Raised when the store rejects or fails an operation."""

    retryable = False


class DatabaseTimeoutError(PersistenceError):
    """The store did not answer in time or a lock could not be taken."""

    retryable = True


class ProfileImageNotFoundError(ContactNotFoundError):
    def __init__(self, contact_id: int):
        ContactError.__init__(self, f"Contact {contact_id} has no profile image")
        self.contact_id = contact_id
