from typing import Dict, Optional


class CmsError(Exception):
    """Base class for errors raised by the content block layer."""


class ContentNotFound(CmsError):
    """A block, version, content type or related record does not exist."""


class AccessDenied(CmsError):
    """The acting user may not perform the requested action."""

    def __init__(self, message: str = "Access Denied"):
        super().__init__(message)


class EditConflict(CmsError):
    """The stored block changed since the client loaded it."""


class ValidationFailure(CmsError):
    """
    A save or update was rejected by the block's data rules.

    `errors` maps a field name to the list of messages for that field.
    """

    def __init__(self, errors: Optional[Dict[str, list]] = None, message: str | None = None):
        self.errors = errors or {}
        if message is None:
            message = "; ".join(
                f"{field} {msg}" for field, msgs in self.errors.items() for msg in msgs
            ) or "Validation failed"
        super().__init__(message)
