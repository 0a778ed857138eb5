"""Test configuration and fixtures for RowQL."""

from dotenv import load_dotenv
import pytest
import os
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from tests.models import Base

# Try to load environment variables from .env file
load_dotenv()


@pytest.fixture(scope="function")
async def engine():
    """Create a test database engine for each test function."""
    test_db_url = os.getenv('ROWQL_TEST_DATABASE_URL')

    if test_db_url:
        engine = create_async_engine(test_db_url, echo=False, future=True, pool_size=1, max_overflow=0)
        # Ensure a clean slate before tests: drop then create all tables
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
        is_external_db = True
    else:
        # Use in-memory SQLite for tests (RETURNING needs SQLite 3.35+)
        engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False, future=True)
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        is_external_db = False

    yield engine

    if is_external_db:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture(scope="function")
def dialect_name(engine):
    return engine.dialect.name


@pytest.fixture(scope="function")
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new database session for each test function."""
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with async_session() as session:
        yield session


# Import fixtures from fixtures module
from tests.fixtures import row_schema, strawberry_schema  # noqa: E402,F401
