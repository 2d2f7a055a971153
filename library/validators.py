"""
Field validators for book payloads.

Each check returns ``None`` when the value is acceptable, or a
``ValidationIssue`` describing the first problem found. The coercion rules
clients rely on (falsy-as-missing, falsy-to-null, strict text-to-bool) are
named functions here so the service applies them explicitly.
"""

import math
from datetime import date
from typing import Any, Iterable, Mapping, Optional

from .errors import ErrorKind, ValidationIssue
from .models import Book, Genre

MIN_YEAR = 1000
MIN_RATING = 1
MAX_RATING = 5
REQUIRED_FIELDS = ("title", "author", "genre", "year")


def is_falsy(value: Any) -> bool:
    """
    Whether a JSON value counts as "not supplied".

    ``None``, ``False``, the empty string, zero and NaN are falsy. Containers
    are not, even when empty.
    """
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (int, float)):
        return value == 0 or (isinstance(value, float) and math.isnan(value))
    return False


def falsy_to_null(value: Any) -> Any:
    """Map any falsy value to ``None`` and leave everything else alone."""
    return None if is_falsy(value) else value


def parse_read_flag(text: str) -> bool:
    """Only the exact text ``"true"`` means read; anything else means unread."""
    return text == "true"


def as_integer(value: Any) -> Optional[int]:
    """
    Interpret a JSON number as an integer.

    Integral floats such as ``1999.0`` are accepted. Booleans, fractional
    numbers and non-numbers give ``None``.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def validate_required_fields(payload: Mapping[str, Any]) -> Optional[ValidationIssue]:
    """Title, author, genre and year must all be present before anything else is checked."""
    if any(is_falsy(payload.get(field)) for field in REQUIRED_FIELDS):
        return ValidationIssue(
            kind=ErrorKind.MISSING_FIELD,
            message="Title, author, genre, and year are required",
        )
    return None


def validate_required_text(value: Any, field: str) -> Optional[ValidationIssue]:
    if not isinstance(value, str) or not value.strip():
        return ValidationIssue(
            kind=ErrorKind.EMPTY_STRING,
            message=f"{field.capitalize()} must be a non-empty string",
        )
    return None


def validate_genre(value: Any) -> Optional[ValidationIssue]:
    """Genre must match one of the known names exactly, case included."""
    if not isinstance(value, str) or value not in Genre.names():
        return ValidationIssue(
            kind=ErrorKind.INVALID_GENRE,
            message=f"Genre must be one of: {', '.join(Genre.names())}",
        )
    return None


def validate_year(value: Any, today: date) -> Optional[ValidationIssue]:
    """
    Year must be an integer between 1000 and the current year.

    Args:
        value: Raw year from the payload
        today: Current date, read from the clock by the caller on every call
    """
    current_year = today.year
    year = as_integer(value)
    if year is None or year < MIN_YEAR or year > current_year:
        return ValidationIssue(
            kind=ErrorKind.INVALID_YEAR,
            message=f"Year must be between {MIN_YEAR} and {current_year}",
        )
    return None


def validate_rating(value: Any) -> Optional[ValidationIssue]:
    """Optional rating for replace: null/absent is fine, otherwise an integer 1-5."""
    if value is None:
        return None

    rating = as_integer(value)
    if rating is None or rating < MIN_RATING or rating > MAX_RATING:
        return ValidationIssue(
            kind=ErrorKind.INVALID_RATING,
            message="Rating must be between 1 and 5, or null",
        )
    return None


def validate_rate_value(value: Any) -> Optional[ValidationIssue]:
    """Rating for the rate operation: must be present and truthy, so zero is rejected."""
    rating = None if is_falsy(value) else as_integer(value)
    if rating is None or rating < MIN_RATING or rating > MAX_RATING:
        return ValidationIssue(
            kind=ErrorKind.INVALID_RATING,
            message="Rating must be a number between 1 and 5",
        )
    return None


def validate_read_flag(value: Any) -> Optional[ValidationIssue]:
    if value is not None and not isinstance(value, bool):
        return ValidationIssue(
            kind=ErrorKind.INVALID_READ_STATUS,
            message="isRead must be a boolean",
        )
    return None


def validate_no_duplicate(
    title: str,
    author: str,
    books: Iterable[Book],
    exclude_id: Optional[int] = None
) -> Optional[ValidationIssue]:
    """
    Reject a title/author pair that already exists, ignoring case.

    Args:
        title: Candidate title, already trimmed
        author: Candidate author, already trimmed
        books: Records to compare against
        exclude_id: Id of a record to skip, if any
    """
    title_key = title.lower()
    author_key = author.lower()
    for book in books:
        if exclude_id is not None and book.id == exclude_id:
            continue
        if book.title.lower() == title_key and book.author.lower() == author_key:
            return ValidationIssue(
                kind=ErrorKind.DUPLICATE,
                message="Book with same title and author already exists",
            )
    return None
