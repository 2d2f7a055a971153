"""
Pydantic models for book records and reading statistics.
Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import date
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic.types import PositiveInt


class Genre(str, Enum):
    """Closed set of genres a book may belong to."""
    FICTION = "Fiction"
    NON_FICTION = "Non-Fiction"
    MYSTERY = "Mystery"
    ROMANCE = "Romance"
    SCI_FI = "Sci-Fi"
    BIOGRAPHY = "Biography"

    @classmethod
    def names(cls) -> List[str]:
        """Genre names in declaration order."""
        return [genre.value for genre in cls]


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict:
        """Dump to a JSON-ready dict using wire field names."""
        return self.model_dump(by_alias=True, mode="json")


class Book(CamelModel):
    """A single book record in the reading list."""
    id: PositiveInt = Field(..., description="Unique book identifier")
    title: str = Field(..., min_length=1, description="Book title")
    author: str = Field(..., min_length=1, description="Book author")
    genre: Genre = Field(..., description="Book genre")
    year: int = Field(..., description="Publication year")
    is_read: bool = Field(False, description="Whether the book has been read")
    rating: Optional[int] = Field(None, ge=1, le=5, description="Rating (1-5) or null")
    date_added: date = Field(..., description="Date the book was added")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "The Great Gatsby",
                "author": "F. Scott Fitzgerald",
                "genre": "Fiction",
                "year": 1925,
                "isRead": False,
                "rating": None,
                "dateAdded": "2024-01-15",
            }
        },
    )


class BookFields(BaseModel):
    """Validated, normalized fields written by create and replace."""
    title: str
    author: str
    genre: Genre
    year: int
    is_read: bool = False
    rating: Optional[int] = None


class BookFilters(BaseModel):
    """Optional filters for listing books. Unset filters impose no constraint."""
    genre: Optional[str] = Field(None, description="Case-insensitive genre match")
    is_read: Optional[str] = Field(None, description="Read status as text ('true' or anything else)")
    author: Optional[str] = Field(None, description="Case-insensitive author substring")


class StatsSummary(CamelModel):
    total_books: int
    read_books: int
    unread_books: int
    reading_progress: int


class RatingStats(CamelModel):
    average_rating: float
    rated_books: int
    unrated_books: int


class GenreStats(CamelModel):
    breakdown: Dict[str, int] = Field(default_factory=dict)
    most_popular: str = "None"


class ActivityStats(CamelModel):
    recently_added: int


class LibraryStats(CamelModel):
    """Aggregated statistics over the whole collection."""
    summary: StatsSummary
    ratings: RatingStats
    genres: GenreStats
    activity: ActivityStats
