"""Pytest configuration and fixtures for AppleVerse tests.

Database tests run against mongomock-motor's in-memory client by default.
Set TEST_MONGODB_URL to run them against a real MongoDB server.
"""

import asyncio
import os
import uuid
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import pytest
import pytest_asyncio
from beanie import init_beanie
from httpx import ASGITransport, AsyncClient
from motor.motor_asyncio import AsyncIOMotorClient
from mongomock_motor import AsyncMongoMockClient

from appleverse.database import get_document_models


# Real MongoDB server for tests (in-memory mock when unset)
TEST_MONGODB_URL = os.environ.get("TEST_MONGODB_URL")


# Create a test-specific app to avoid lifespan conflicts
def create_test_app():
    """Create a FastAPI app configured for testing (no database lifespan)."""
    from fastapi import FastAPI

    from appleverse import __version__

    # Empty lifespan for testing - we manage the database ourselves
    @asynccontextmanager
    async def test_lifespan(app: FastAPI):
        yield

    test_app = FastAPI(
        title="AppleVerse Test",
        version=__version__,
        lifespan=test_lifespan,
    )

    # Copy routes from the main app
    from appleverse.main import app as main_app

    for route in main_app.routes:
        test_app.routes.append(route)

    return test_app


_test_app = None


def get_test_app():
    """Get the test app singleton."""
    global _test_app
    if _test_app is None:
        _test_app = create_test_app()
    return _test_app


@pytest.fixture(scope="session")
def event_loop_policy():
    """Use the default event loop policy."""
    return asyncio.DefaultEventLoopPolicy()


@pytest_asyncio.fixture(scope="function")
async def mongo_client():
    """Create a MongoDB client for testing."""
    if TEST_MONGODB_URL:
        client = AsyncIOMotorClient(TEST_MONGODB_URL, maxPoolSize=10, minPoolSize=1)
        yield client
        client.close()
    else:
        yield AsyncMongoMockClient()


@pytest_asyncio.fixture(scope="function")
async def init_test_db(mongo_client):
    """Initialize Beanie with a unique test database.

    Creates a unique database for each test function and drops it after the test.
    """
    db_name = f"test_appleverse_{uuid.uuid4().hex[:8]}"
    db = mongo_client[db_name]

    await init_beanie(
        database=db,
        document_models=get_document_models(),
    )
    yield db

    await mongo_client.drop_database(db_name)


@pytest_asyncio.fixture(scope="function")
async def client(init_test_db) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client over the test app."""
    app = get_test_app()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """An empty data directory."""
    directory = tmp_path / "data"
    directory.mkdir()
    return directory


@pytest.fixture
def images_dir(tmp_path: Path) -> Path:
    """An empty images directory."""
    directory = tmp_path / "images"
    directory.mkdir()
    return directory


@pytest.fixture
def sample_image_bytes() -> bytes:
    """Bytes standing in for an image file; matching only looks at file names."""
    return b"\x89PNG\r\n\x1a\n"
