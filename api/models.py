"""
API request and response schemas for the FastAPI application.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from library.models import Book, CamelModel


class BookListResponse(CamelModel):
    """Response model for a non-empty book listing."""
    count: int = Field(..., description="Number of books returned")
    books: List[Book] = Field(..., description="Matching books")


class EmptyBookListResponse(CamelModel):
    """Response model when no book matches the filters."""
    message: str = Field("No books found", description="Explanation")
    books: List[Book] = Field(default_factory=list, description="Always empty")


class BookMessageResponse(CamelModel):
    """Response model for operations returning a single book."""
    message: str = Field(..., description="Outcome of the operation")
    book: Book = Field(..., description="The affected book")


class MessageResponse(CamelModel):
    """Error response model."""
    message: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")


class HealthResponse(CamelModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    total_books: int = Field(..., description="Books currently stored")
