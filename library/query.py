"""
Query engine for listing books.
"""

from typing import Iterable, List

from .models import Book, BookFilters
from .validators import parse_read_flag


def query_books(books: Iterable[Book], filters: BookFilters) -> List[Book]:
    """
    Filter books by genre, read status and author.

    All supplied filters must match. Genre and author filters are ignored when
    empty; the read-status filter applies whenever it is supplied, even empty.

    Args:
        books: Records in insertion order
        filters: Filters to apply

    Returns:
        Matching books in their original order, possibly empty
    """
    results = list(books)

    if filters.genre:
        genre_key = filters.genre.lower()
        results = [book for book in results if book.genre.value.lower() == genre_key]

    if filters.is_read is not None:
        read_status = parse_read_flag(filters.is_read)
        results = [book for book in results if book.is_read == read_status]

    if filters.author:
        author_key = filters.author.lower()
        results = [book for book in results if author_key in book.author.lower()]

    return results
