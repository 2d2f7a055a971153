"""
FastAPI main application for the Reading List API.
"""

import re
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import structlog
from fastapi import Body, Depends, FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.config import config as api_config
from api.models import (
    BookListResponse, BookMessageResponse, EmptyBookListResponse,
    HealthResponse, MessageResponse
)
from library.clock import system_clock
from library.errors import BookNotFoundError, LibraryError
from library.models import BookFilters
from library.seed import seed_books
from library.service import BookService
from library.store import BookStore
from utilities.config import config
from utilities.logger import setup_logging

logger = structlog.get_logger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def build_service() -> BookService:
    """Create a store, seed it if configured, and wrap it in a service."""
    clock = system_clock(config.timezone)
    store = BookStore(clock)
    if config.seed_on_startup:
        store.load(seed_books())
    return BookService(store, clock, recent_window_days=config.recent_window_days)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging(
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.get_log_file_path(),
        debug=config.debug
    )
    logger.info("Starting Reading List API")

    app.state.book_service = build_service()
    logger.info(
        "Book store initialized",
        books=len(app.state.book_service.store),
        next_id=app.state.book_service.store.next_id
    )

    yield

    logger.info("Shutting down Reading List API")
    app.state.book_service = None


def get_book_service(request: Request) -> BookService:
    """Dependency returning the service created at startup."""
    return request.app.state.book_service


def parse_book_id(raw: str) -> int:
    """
    Read the leading integer of a path id.

    Raises:
        BookNotFoundError: If the id has no leading integer
    """
    match = _LEADING_INT.match(raw)
    if not match:
        raise BookNotFoundError(raw)
    return int(match.group(1))


def _payload(body: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return body if body is not None else {}


def _message(message: str, status_code: int, detail: Optional[str] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=MessageResponse(message=message, detail=detail).model_dump(exclude_none=True)
    )


app = FastAPI(
    title=api_config.api_title,
    description="""
    A REST API for keeping a personal reading list.

    ## Features

    * **Books**: Add, replace, delete and look up books
    * **Filtering**: Filter by genre, read status and author
    * **Progress**: Mark books as read and rate them
    * **Statistics**: Reading progress, ratings, genres and recent activity
    """,
    version=api_config.api_version,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=api_config.cors_origins,
    allow_credentials=api_config.cors_allow_credentials,
    allow_methods=api_config.cors_allow_methods,
    allow_headers=api_config.cors_allow_headers,
)


# Exception handlers
@app.exception_handler(LibraryError)
async def library_error_handler(request: Request, exc: LibraryError):
    """Render validation, duplicate and not-found errors."""
    return _message(exc.message, exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies are client errors, reported like other validation failures."""
    logger.warning("Malformed request body", path=request.url.path, errors=len(exc.errors()))
    return _message("Request body must be a JSON object", status.HTTP_400_BAD_REQUEST)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions."""
    logger.error("Unhandled exception", error=str(exc), path=request.url.path)
    return _message(
        "Internal server error",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(exc) if api_config.debug else None
    )


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(service: BookService = Depends(get_book_service)):
    """Health check endpoint."""
    health = HealthResponse(
        status="healthy",
        timestamp=service.clock(),
        version=api_config.api_version,
        total_books=len(service.store)
    )
    return JSONResponse(content=health.to_json())


# Books endpoints
@app.get("/books", tags=["Books"])
async def list_books(
    genre: Optional[str] = None,
    is_read: Optional[str] = Query(None, alias="isRead"),
    author: Optional[str] = None,
    service: BookService = Depends(get_book_service)
):
    """
    List books, optionally filtered.

    - **genre**: Case-insensitive genre match
    - **isRead**: `true` for read books; any other value for unread books
    - **author**: Case-insensitive author substring
    """
    books = await service.list_books(BookFilters(genre=genre, is_read=is_read, author=author))

    if not books:
        return JSONResponse(content=EmptyBookListResponse().to_json())

    return JSONResponse(content=BookListResponse(count=len(books), books=books).to_json())


@app.get("/books/{book_id}", tags=["Books"])
async def get_book(book_id: str, service: BookService = Depends(get_book_service)):
    """Get a single book by id."""
    book = await service.get_book(parse_book_id(book_id))
    return JSONResponse(content=book.to_json())


@app.post("/books", status_code=status.HTTP_201_CREATED, tags=["Books"])
async def create_book(
    body: Optional[Dict[str, Any]] = Body(None),
    service: BookService = Depends(get_book_service)
):
    """Add a book. Requires title, author, genre and year."""
    book = await service.create_book(_payload(body))
    response = BookMessageResponse(message="Book added successfully", book=book)
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=response.to_json())


@app.put("/books/{book_id}", tags=["Books"])
async def replace_book(
    book_id: str,
    body: Optional[Dict[str, Any]] = Body(None),
    service: BookService = Depends(get_book_service)
):
    """Replace a book's title, author, genre, year, read status and rating."""
    book = await service.replace_book(parse_book_id(book_id), _payload(body))
    response = BookMessageResponse(message="Book updated successfully", book=book)
    return JSONResponse(content=response.to_json())


@app.delete("/books/{book_id}", tags=["Books"])
async def delete_book(book_id: str, service: BookService = Depends(get_book_service)):
    """Delete a book and return it."""
    book = await service.delete_book(parse_book_id(book_id))
    response = BookMessageResponse(message="Book deleted successfully", book=book)
    return JSONResponse(content=response.to_json())


@app.patch("/books/{book_id}/read", tags=["Books"])
async def mark_book_read(book_id: str, service: BookService = Depends(get_book_service)):
    """Mark a book as read."""
    book = await service.mark_read(parse_book_id(book_id))
    response = BookMessageResponse(message="Book marked as read", book=book)
    return JSONResponse(content=response.to_json())


@app.patch("/books/{book_id}/rate", tags=["Books"])
async def rate_book(
    book_id: str,
    body: Optional[Dict[str, Any]] = Body(None),
    service: BookService = Depends(get_book_service)
):
    """Rate a book from 1 to 5."""
    book = await service.rate_book(parse_book_id(book_id), _payload(body))
    response = BookMessageResponse(message="Book rated successfully", book=book)
    return JSONResponse(content=response.to_json())


# Statistics endpoint
@app.get("/stats", tags=["Statistics"])
async def get_stats(service: BookService = Depends(get_book_service)):
    """Get reading statistics."""
    stats = await service.get_stats()
    return JSONResponse(content=stats.to_json())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=api_config.host,
        port=api_config.port,
        reload=True,
        log_level="info"
    )
