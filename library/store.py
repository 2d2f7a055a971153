"""
In-memory record store for books.
Owns the collection and the id allocator; hands out copies so stored
records only change through the update methods below.
"""

import asyncio
from typing import Iterable, List, Optional

import structlog

from .clock import Clock
from .models import Book, BookFields

logger = structlog.get_logger(__name__)


class BookStore:
    """
    Ordered in-memory collection of books.

    Mutating methods never yield control, so a reader can't see a half-written
    record. Callers that validate before writing hold ``lock`` across both
    steps.
    """

    def __init__(self, clock: Clock):
        """
        Initialize an empty store.

        Args:
            clock: Source of the current time, used to stamp ``date_added``
        """
        self.clock = clock
        self.lock = asyncio.Lock()
        self._books: List[Book] = []
        self._next_id = 1

    def __len__(self) -> int:
        return len(self._books)

    @property
    def next_id(self) -> int:
        """Id the next inserted book will receive."""
        return self._next_id

    def load(self, books: Iterable[Book]) -> int:
        """
        Bulk-load existing records, e.g. seed data.

        Args:
            books: Records with ids already assigned

        Returns:
            Number of records loaded
        """
        count = 0
        for book in books:
            if self._index_of(book.id) is not None:
                raise ValueError(f"Duplicate book id {book.id}")
            self._books.append(book.model_copy())
            self._next_id = max(self._next_id, book.id + 1)
            count += 1

        logger.debug("Loaded books into store", count=count, next_id=self._next_id)
        return count

    def insert(self, fields: BookFields) -> Book:
        """Allocate an id, stamp today's date and store a new record."""
        book = Book(
            id=self._next_id,
            date_added=self.clock().date(),
            **fields.model_dump(),
        )
        self._next_id += 1
        self._books.append(book)
        return book.model_copy()

    def find_by_id(self, book_id: int) -> Optional[Book]:
        index = self._index_of(book_id)
        if index is None:
            return None
        return self._books[index].model_copy()

    def all(self) -> List[Book]:
        """Snapshot of every record in insertion order."""
        return [book.model_copy() for book in self._books]

    def replace(self, book_id: int, fields: BookFields) -> Optional[Book]:
        """Overwrite everything except ``id`` and ``date_added``."""
        index = self._index_of(book_id)
        if index is None:
            return None

        current = self._books[index]
        updated = Book(id=current.id, date_added=current.date_added, **fields.model_dump())
        self._books[index] = updated
        return updated.model_copy()

    def remove(self, book_id: int) -> Optional[Book]:
        index = self._index_of(book_id)
        if index is None:
            return None
        return self._books.pop(index)

    def mark_read(self, book_id: int) -> Optional[Book]:
        index = self._index_of(book_id)
        if index is None:
            return None

        book = self._books[index].model_copy(update={"is_read": True})
        self._books[index] = book
        return book.model_copy()

    def set_rating(self, book_id: int, rating: int) -> Optional[Book]:
        index = self._index_of(book_id)
        if index is None:
            return None

        book = self._books[index].model_copy(update={"rating": rating})
        self._books[index] = book
        return book.model_copy()

    def _index_of(self, book_id: int) -> Optional[int]:
        for index, book in enumerate(self._books):
            if book.id == book_id:
                return index
        return None
