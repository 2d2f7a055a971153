"""
Error kinds and exceptions raised by book operations.
"""

from enum import Enum

from pydantic import BaseModel


class ErrorKind(str, Enum):
    """Kinds of failures reported to callers."""
    MISSING_FIELD = "MissingField"
    EMPTY_STRING = "EmptyString"
    INVALID_GENRE = "InvalidGenre"
    INVALID_YEAR = "InvalidYear"
    INVALID_RATING = "InvalidRating"
    INVALID_READ_STATUS = "InvalidReadStatus"
    DUPLICATE = "Duplicate"
    NOT_FOUND = "NotFound"


class ValidationIssue(BaseModel):
    """Result of a failed field check."""
    kind: ErrorKind
    message: str


class LibraryError(Exception):
    """Base class for errors reported back to the caller."""

    status_code: int = 500

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


class BookValidationError(LibraryError):
    """A payload failed field validation."""

    status_code = 400

    @classmethod
    def from_issue(cls, issue: ValidationIssue) -> "BookValidationError":
        return cls(issue.kind, issue.message)


class DuplicateBookError(LibraryError):
    """A book with the same title and author already exists."""

    status_code = 409

    def __init__(self, message: str = "Book with same title and author already exists"):
        super().__init__(ErrorKind.DUPLICATE, message)


class BookNotFoundError(LibraryError):
    """No book matches the requested id."""

    status_code = 404

    def __init__(self, book_id=None):
        super().__init__(ErrorKind.NOT_FOUND, "Book not found")
        self.book_id = book_id
