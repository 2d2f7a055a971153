"""
Book service: the operations behind the HTTP endpoints.
Runs validation and store writes under the store lock so checks and commits
happen together.
"""

from typing import Any, List, Mapping, Optional

import structlog

from .clock import Clock
from .errors import (
    BookNotFoundError, BookValidationError, DuplicateBookError, ValidationIssue
)
from .models import Book, BookFields, BookFilters, Genre, LibraryStats
from .query import query_books
from .stats import DEFAULT_RECENT_WINDOW_DAYS, summarize
from .store import BookStore
from .validators import (
    as_integer, falsy_to_null, validate_genre, validate_no_duplicate,
    validate_rate_value, validate_rating, validate_read_flag,
    validate_required_fields, validate_required_text, validate_year
)

logger = structlog.get_logger(__name__)


class BookService:
    """CRUD, rating and statistics operations over a ``BookStore``."""

    def __init__(
        self,
        store: BookStore,
        clock: Optional[Clock] = None,
        recent_window_days: int = DEFAULT_RECENT_WINDOW_DAYS
    ):
        """
        Initialize the service.

        Args:
            store: Record store to operate on
            clock: Source of "now"; defaults to the store's clock
            recent_window_days: Window used for the recently-added count
        """
        self.store = store
        self.clock = clock or store.clock
        self.recent_window_days = recent_window_days

    async def list_books(self, filters: BookFilters) -> List[Book]:
        return query_books(self.store.all(), filters)

    async def get_book(self, book_id: int) -> Book:
        book = self.store.find_by_id(book_id)
        if book is None:
            raise BookNotFoundError(book_id)
        return book

    async def get_stats(self) -> LibraryStats:
        return summarize(self.store.all(), self.clock().date(), self.recent_window_days)

    async def create_book(self, payload: Mapping[str, Any]) -> Book:
        """
        Validate and add a new book.

        Args:
            payload: Raw request body with title, author, genre and year

        Returns:
            The stored book with its new id

        Raises:
            BookValidationError: If a field is missing or malformed
            DuplicateBookError: If the title/author pair already exists
        """
        async with self.store.lock:
            self._check_required(payload)
            self._check_text(payload)
            self._check(validate_genre(payload["genre"]))
            self._check(validate_year(payload["year"], self.clock().date()))

            fields = BookFields(
                title=payload["title"].strip(),
                author=payload["author"].strip(),
                genre=Genre(payload["genre"]),
                year=as_integer(payload["year"]),
            )

            duplicate = validate_no_duplicate(fields.title, fields.author, self.store.all())
            if duplicate:
                logger.warning("Duplicate book rejected", title=fields.title, author=fields.author)
                raise DuplicateBookError(duplicate.message)

            book = self.store.insert(fields)

        logger.info("Book created", book_id=book.id, title=book.title)
        return book

    async def replace_book(self, book_id: int, payload: Mapping[str, Any]) -> Book:
        """
        Replace every editable field of an existing book.

        ``id`` and ``date_added`` are kept. Omitted ``isRead`` becomes false and
        a falsy ``rating`` becomes null. No duplicate check is made.

        Raises:
            BookNotFoundError: If the book does not exist
            BookValidationError: If a field is missing or malformed
        """
        async with self.store.lock:
            if self.store.find_by_id(book_id) is None:
                raise BookNotFoundError(book_id)

            self._check_required(payload)
            self._check_text(payload)
            self._check(validate_genre(payload["genre"]))
            self._check(validate_year(payload["year"], self.clock().date()))
            self._check(validate_rating(payload.get("rating")))
            self._check(validate_read_flag(payload.get("isRead")))

            rating = falsy_to_null(payload.get("rating"))
            fields = BookFields(
                title=payload["title"].strip(),
                author=payload["author"].strip(),
                genre=Genre(payload["genre"]),
                year=as_integer(payload["year"]),
                is_read=payload.get("isRead") or False,
                rating=as_integer(rating) if rating is not None else None,
            )
            book = self.store.replace(book_id, fields)

        logger.info("Book replaced", book_id=book_id)
        return book

    async def delete_book(self, book_id: int) -> Book:
        async with self.store.lock:
            book = self.store.remove(book_id)

        if book is None:
            raise BookNotFoundError(book_id)

        logger.info("Book deleted", book_id=book_id)
        return book

    async def mark_read(self, book_id: int) -> Book:
        async with self.store.lock:
            book = self.store.mark_read(book_id)

        if book is None:
            raise BookNotFoundError(book_id)

        logger.info("Book marked as read", book_id=book_id)
        return book

    async def rate_book(self, book_id: int, payload: Mapping[str, Any]) -> Book:
        """
        Set a book's rating.

        Raises:
            BookNotFoundError: If the book does not exist
            BookValidationError: If the rating is missing, zero or outside 1-5
        """
        async with self.store.lock:
            if self.store.find_by_id(book_id) is None:
                raise BookNotFoundError(book_id)

            rating = payload.get("rating")
            self._check(validate_rate_value(rating))
            book = self.store.set_rating(book_id, as_integer(rating))

        logger.info("Book rated", book_id=book_id, rating=book.rating)
        return book

    def _check_required(self, payload: Mapping[str, Any]) -> None:
        self._check(validate_required_fields(payload))

    def _check_text(self, payload: Mapping[str, Any]) -> None:
        self._check(validate_required_text(payload["title"], "title"))
        self._check(validate_required_text(payload["author"], "author"))

    def _check(self, issue: Optional[ValidationIssue]) -> None:
        if issue is not None:
            logger.warning("Book validation failed", kind=issue.kind.value, reason=issue.message)
            raise BookValidationError.from_issue(issue)
