"""
Tests for the book service operations.
"""

import asyncio
from datetime import date

import pytest

from library.errors import (
    BookNotFoundError, BookValidationError, DuplicateBookError, ErrorKind
)
from library.models import BookFilters, Genre
from library.service import BookService
from library.store import BookStore


class TestCreateBook:
    """Test cases for BookService.create_book."""

    @pytest.mark.asyncio
    async def test_create_success(self, service, new_book_payload):
        book = await service.create_book(new_book_payload)

        assert book.id == 4
        assert book.genre == Genre.SCI_FI
        assert book.is_read is False
        assert book.rating is None
        assert book.date_added == date(2024, 2, 1)
        assert len(service.store) == 4

    @pytest.mark.asyncio
    async def test_ids_strictly_increase(self, service):
        created = []
        for index in range(3):
            created.append(await service.create_book({
                "title": f"Volume {index}",
                "author": "Anon",
                "genre": "Mystery",
                "year": 2001,
            }))

        assert [book.id for book in created] == [4, 5, 6]

    @pytest.mark.asyncio
    async def test_title_and_author_are_trimmed(self, service):
        book = await service.create_book({
            "title": "  Dune  ",
            "author": " Frank Herbert ",
            "genre": "Sci-Fi",
            "year": 1965.0,
        })

        assert book.title == "Dune"
        assert book.author == "Frank Herbert"
        assert book.year == 1965

    @pytest.mark.asyncio
    async def test_duplicate_is_a_conflict(self, service):
        with pytest.raises(DuplicateBookError) as exc_info:
            await service.create_book({
                "title": "THE GREAT GATSBY",
                "author": "f. scott fitzgerald",
                "genre": "Fiction",
                "year": 1925,
            })

        assert exc_info.value.kind == ErrorKind.DUPLICATE
        assert exc_info.value.status_code == 409
        assert len(service.store) == 3

    @pytest.mark.asyncio
    async def test_padded_duplicate_is_detected(self, service):
        with pytest.raises(DuplicateBookError):
            await service.create_book({
                "title": " 1984 ",
                "author": "George Orwell",
                "genre": "Sci-Fi",
                "year": 1949,
            })

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload,kind", [
        ({"title": "Dune", "author": "Frank Herbert", "genre": "Sci-Fi"}, ErrorKind.MISSING_FIELD),
        ({"title": " ", "author": "Frank Herbert", "genre": "Sci-Fi", "year": 1965}, ErrorKind.EMPTY_STRING),
        ({"title": "Dune", "author": "Frank Herbert", "genre": "Space", "year": 1965}, ErrorKind.INVALID_GENRE),
        ({"title": "Dune", "author": "Frank Herbert", "genre": "Sci-Fi", "year": 2030}, ErrorKind.INVALID_YEAR),
    ])
    async def test_validation_failures(self, service, payload, kind):
        with pytest.raises(BookValidationError) as exc_info:
            await service.create_book(payload)

        assert exc_info.value.kind == kind
        assert exc_info.value.status_code == 400
        assert len(service.store) == 3

    @pytest.mark.asyncio
    async def test_concurrent_duplicates_only_one_wins(self, service, new_book_payload):
        results = await asyncio.gather(
            service.create_book(dict(new_book_payload)),
            service.create_book(dict(new_book_payload)),
            return_exceptions=True,
        )

        assert sum(isinstance(result, DuplicateBookError) for result in results) == 1
        assert len(service.store) == 4


class TestReplaceBook:
    """Test cases for BookService.replace_book."""

    @pytest.mark.asyncio
    async def test_replace_preserves_id_and_date(self, service):
        book = await service.replace_book(2, {
            "title": "Go Set a Watchman",
            "author": "Harper Lee",
            "genre": "Fiction",
            "year": 2015,
            "isRead": True,
            "rating": 3,
        })

        assert book.id == 2
        assert book.date_added == date(2024, 1, 10)
        assert book.is_read is True
        assert book.rating == 3

    @pytest.mark.asyncio
    async def test_omitted_fields_reset(self, service):
        book = await service.replace_book(2, {
            "title": "To Kill a Mockingbird",
            "author": "Harper Lee",
            "genre": "Fiction",
            "year": 1960,
        })

        assert book.is_read is False
        assert book.rating is None

    @pytest.mark.asyncio
    async def test_no_duplicate_check_on_replace(self, service):
        book = await service.replace_book(1, {
            "title": "1984",
            "author": "George Orwell",
            "genre": "Sci-Fi",
            "year": 1949,
        })
        assert book.title == "1984"

    @pytest.mark.asyncio
    async def test_missing_book(self, service, new_book_payload):
        with pytest.raises(BookNotFoundError):
            await service.replace_book(99, new_book_payload)

    @pytest.mark.asyncio
    async def test_not_found_checked_before_validation(self, service):
        with pytest.raises(BookNotFoundError):
            await service.replace_book(99, {})

    @pytest.mark.asyncio
    @pytest.mark.parametrize("extra,kind", [
        ({"rating": 0}, ErrorKind.INVALID_RATING),
        ({"rating": 9}, ErrorKind.INVALID_RATING),
        ({"isRead": "yes"}, ErrorKind.INVALID_READ_STATUS),
    ])
    async def test_invalid_optional_fields(self, service, new_book_payload, extra, kind):
        payload = dict(new_book_payload, **extra)
        with pytest.raises(BookValidationError) as exc_info:
            await service.replace_book(1, payload)

        assert exc_info.value.kind == kind
        assert (await service.get_book(1)).title == "The Great Gatsby"


class TestSingleFieldUpdates:
    """Test cases for delete, mark-read and rate."""

    @pytest.mark.asyncio
    async def test_delete(self, service):
        book = await service.delete_book(1)
        assert book.title == "The Great Gatsby"
        assert len(service.store) == 2

    @pytest.mark.asyncio
    async def test_delete_missing_leaves_store(self, service):
        with pytest.raises(BookNotFoundError):
            await service.delete_book(99)
        assert len(service.store) == 3

    @pytest.mark.asyncio
    async def test_mark_read(self, service):
        assert (await service.mark_read(1)).is_read is True
        assert (await service.mark_read(1)).is_read is True

    @pytest.mark.asyncio
    async def test_mark_read_missing(self, service):
        with pytest.raises(BookNotFoundError):
            await service.mark_read(99)

    @pytest.mark.asyncio
    async def test_rate(self, service):
        book = await service.rate_book(1, {"rating": 2})
        assert book.rating == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [0, 6, None, "4"])
    async def test_rate_rejects(self, service, rating):
        with pytest.raises(BookValidationError):
            await service.rate_book(1, {"rating": rating})
        assert (await service.get_book(1)).rating is None

    @pytest.mark.asyncio
    async def test_rate_missing_book(self, service):
        with pytest.raises(BookNotFoundError):
            await service.rate_book(99, {"rating": 0})


class TestReadPaths:
    """Test cases for listing, lookup and statistics."""

    @pytest.mark.asyncio
    async def test_list_books(self, service):
        books = await service.list_books(BookFilters(genre="fiction"))
        assert [book.id for book in books] == [1, 2]

    @pytest.mark.asyncio
    async def test_get_book_missing(self, service):
        with pytest.raises(BookNotFoundError) as exc_info:
            await service.get_book(42)
        assert exc_info.value.message == "Book not found"

    @pytest.mark.asyncio
    async def test_stats_reflect_mutations(self, service):
        await service.mark_read(1)
        await service.rate_book(1, {"rating": 3})

        stats = await service.get_stats()

        assert stats.summary.read_books == 3
        assert stats.summary.reading_progress == 100
        assert stats.ratings.average_rating == 4.0

    @pytest.mark.asyncio
    async def test_stats_on_empty_store(self, empty_store, clock):
        stats = await BookService(empty_store, clock).get_stats()
        assert stats.genres.most_popular == "None"
        assert stats.summary.total_books == 0
