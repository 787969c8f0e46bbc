"""
Shared fixtures: an in-memory SQLite database per test and small builders
for the collaborators every pipeline test needs.
"""
import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from jobradar.database import Base
from jobradar.models import Company, Job, SavedJob  # noqa: F401  (registers tables)
from jobradar.schemas import ParsedJobDescription


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def mock_llm():
    """LLMClient stand-in; set complete.return_value / embed.return_value per test."""
    llm = MagicMock()
    llm.complete = AsyncMock()
    llm.embed = AsyncMock()
    return llm


@pytest.fixture
def jd_parser():
    """JD parser that takes the first line of the text as the role."""

    def parse(text):
        return ParsedJobDescription(
            role=text.split("\n")[0],
            minExperience=2,
            maxExperience=5,
            skills=["Python", "SQL"],
            location="Remote",
            employmentType="Full-time",
        )

    parser = MagicMock()
    parser.parse = AsyncMock(side_effect=parse)
    return parser
