"""Domain error taxonomy, mapped to HTTP responses in ``bookreview.api.errors``."""


class BookReviewError(Exception):
    """Base class for all domain errors."""


class NotFoundError(BookReviewError):
    """A referenced entity (user, book) does not exist."""


class AccessDeniedError(BookReviewError):
    """The caller is not authenticated."""


class CollaboratorError(BookReviewError):
    """A catalog, review or AI lookup failed. Fatal to the current call."""
