"""
Pytest configuration and shared fixtures.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from api.main import app, get_book_service
from library.clock import fixed_clock
from library.seed import seed_books
from library.service import BookService
from library.store import BookStore

FIXED_NOW = datetime(2024, 2, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    """Clock frozen at 2024-02-01 12:00 UTC."""
    return fixed_clock(FIXED_NOW)


@pytest.fixture
def empty_store(clock):
    """Store with no books."""
    return BookStore(clock)


@pytest.fixture
def store(clock):
    """Store loaded with the three starter books."""
    book_store = BookStore(clock)
    book_store.load(seed_books())
    return book_store


@pytest.fixture
def service(store, clock):
    """Book service over the seeded store."""
    return BookService(store, clock)


@pytest.fixture
def client(service):
    """Test client wired to the seeded service."""
    app.dependency_overrides[get_book_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def new_book_payload():
    """Valid body for creating a book."""
    return {
        "title": "Dune",
        "author": "Frank Herbert",
        "genre": "Sci-Fi",
        "year": 1965,
    }
