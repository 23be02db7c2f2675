"""Root conftest — shared test configuration."""

import os

import pytest

# Never point tests at a real database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("STATIC_DIR", "__no_static_dir__")


@pytest.fixture
def valid_payload() -> dict:
    """Smallest payload that passes validation (fresh copy per test)."""
    return {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "ada@example.com",
        "interests": ["math", "engines"],
        "subscription": "newsletter",
    }
