"""
Initial records loaded when the service starts.
"""

from datetime import date
from typing import List

from .models import Book, Genre


def seed_books() -> List[Book]:
    """Fresh copies of the three starter books (ids 1-3)."""
    return [
        Book(
            id=1,
            title="The Great Gatsby",
            author="F. Scott Fitzgerald",
            genre=Genre.FICTION,
            year=1925,
            is_read=False,
            rating=None,
            date_added=date(2024, 1, 15),
        ),
        Book(
            id=2,
            title="To Kill a Mockingbird",
            author="Harper Lee",
            genre=Genre.FICTION,
            year=1960,
            is_read=True,
            rating=5,
            date_added=date(2024, 1, 10),
        ),
        Book(
            id=3,
            title="1984",
            author="George Orwell",
            genre=Genre.SCI_FI,
            year=1949,
            is_read=True,
            rating=4,
            date_added=date(2024, 1, 12),
        ),
    ]
