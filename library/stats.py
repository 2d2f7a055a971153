"""
Reading statistics computed over the whole collection.
Nothing is cached; every call recomputes from the records given.
"""

import math
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, Optional

from .models import (
    ActivityStats, Book, GenreStats, LibraryStats, RatingStats, StatsSummary
)

DEFAULT_RECENT_WINDOW_DAYS = 30
NO_GENRE = "None"


def reading_progress(read_books: int, total_books: int) -> int:
    """Percentage of books read, rounded half up; 0 for an empty collection."""
    if total_books == 0:
        return 0
    return math.floor(read_books / total_books * 100 + 0.5)


def average_rating(ratings: Iterable[int]) -> float:
    """Mean rating rounded half up to one decimal place; 0 when nothing is rated."""
    values = list(ratings)
    if not values:
        return 0.0
    mean = Decimal(sum(values) / len(values))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def genre_breakdown(books: Iterable[Book]) -> Dict[str, int]:
    """Count books per genre, keyed in order of first appearance."""
    counts: Dict[str, int] = {}
    for book in books:
        counts[book.genre.value] = counts.get(book.genre.value, 0) + 1
    return counts


def most_popular_genre(breakdown: Dict[str, int]) -> str:
    """
    Genre with the highest count.

    A later genre only takes the lead with a strictly greater count, so on a
    tie the one seen first wins.
    """
    leader: Optional[str] = None
    for genre, count in breakdown.items():
        if leader is None or count > breakdown[leader]:
            leader = genre
    return leader if leader is not None else NO_GENRE


def count_recent(books: Iterable[Book], today: date, window_days: int = DEFAULT_RECENT_WINDOW_DAYS) -> int:
    """Books added on or after the day ``window_days`` before ``today``."""
    cutoff = today - timedelta(days=window_days)
    return sum(1 for book in books if book.date_added >= cutoff)


def summarize(
    books: Iterable[Book],
    today: date,
    window_days: int = DEFAULT_RECENT_WINDOW_DAYS
) -> LibraryStats:
    """
    Build the statistics structure for a set of books.

    Args:
        books: Records to summarize
        today: Current date, read from the clock by the caller
        window_days: Length of the "recently added" window in days

    Returns:
        LibraryStats with summary, ratings, genres and activity sections
    """
    books = list(books)
    total_books = len(books)
    read_books = sum(1 for book in books if book.is_read)
    ratings = [book.rating for book in books if book.rating is not None]
    breakdown = genre_breakdown(books)

    return LibraryStats(
        summary=StatsSummary(
            total_books=total_books,
            read_books=read_books,
            unread_books=total_books - read_books,
            reading_progress=reading_progress(read_books, total_books),
        ),
        ratings=RatingStats(
            average_rating=average_rating(ratings),
            rated_books=len(ratings),
            unrated_books=total_books - len(ratings),
        ),
        genres=GenreStats(
            breakdown=breakdown,
            most_popular=most_popular_genre(breakdown),
        ),
        activity=ActivityStats(
            recently_added=count_recent(books, today, window_days),
        ),
    )
