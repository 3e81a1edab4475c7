"""
Test Configuration

Pytest configuration and shared fixtures for all tests.
"""

import json
import os

# Must be set before the application modules read settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "development"
os.environ.pop("REDIS_URL", None)
os.environ.pop("GOOGLE_API_KEY", None)

import pytest
from typing import AsyncGenerator
from httpx import AsyncClient, ASGITransport
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Use an in-memory database shared by every session of a test
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
async def test_engine():
    """Create test database engine with fresh tables."""
    from core.models import Base

    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Get test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def quota():
    """Fresh in-memory quota tracker per test."""
    from services.security.rate_limiter import InMemoryQuotaTracker
    return InMemoryQuotaTracker()


# =============================================================================
# AI Replies
# =============================================================================

def word_payload(**overrides) -> dict:
    """A complete, valid analysis for "câine" unless overridden."""
    payload = {
        "lemma": "câine",
        "partOfSpeech": "substantiv",
        "definitions": [
            {"shortDef": "Mamifer carnivor domestic", "register": "curent"},
        ],
        "examples": ["Câinele latră la poartă."],
        "synonyms": ["cuțu"],
        "antonyms": [],
        "relatedWords": ["cățel", "câinos"],
        "etymology": "Din latina canis.",
        "pronunciation": "câ-i-ne",
        "syllables": ["câi", "ne"],
        "tags": ["animale"],
        "nounForms": {
            "singularIndefinit": "câine",
            "singularDefinit": "câinele",
            "pluralIndefinit": "câini",
            "pluralDefinit": "câinii",
        },
        "translations": [{"language": "en", "word": "dog"}],
        "frequencyLevel": "very_common",
        "difficultyLevel": "A1",
        "isValid": True,
        "confidence": 0.9,
    }
    payload.update(overrides)
    return payload


def word_reply(**overrides) -> str:
    """The payload as the model would send it: JSON inside a markdown fence."""
    return "```json\n" + json.dumps(word_payload(**overrides), ensure_ascii=False) + "\n```"


@pytest.fixture
def ai_reply():
    return word_reply


@pytest.fixture
def make_gateway():
    """Build a WordAnalysisGateway answering with the given raw replies."""
    from services.ai.word_analysis import WordAnalysisGateway

    def _make(*replies: str, timeout: float = 5.0) -> WordAnalysisGateway:
        llm = FakeListChatModel(responses=list(replies) or [word_reply()])
        return WordAnalysisGateway(llm=llm, timeout=timeout)

    return _make


# =============================================================================
# Data Builders
# =============================================================================

@pytest.fixture
def make_user(test_db):
    """Insert a user and return it."""
    from auth import get_password_hash
    from core.models import User

    counter = {"n": 0}

    async def _make(email: str = None, display_name: str = None, **fields) -> User:
        counter["n"] += 1
        user = User(
            email=email or f"user{counter['n']}@example.com",
            password_hash=get_password_hash("TestPassword123!"),
            display_name=display_name or f"Utilizator {counter['n']}",
            **fields,
        )
        test_db.add(user)
        await test_db.commit()
        await test_db.refresh(user)
        return user

    return _make


@pytest.fixture
def make_word(test_db):
    """Insert a dictionary entry and return it."""
    from core.models import Word

    async def _make(word_id: str = "mere", display: str = None, **fields) -> Word:
        word = Word(
            id=word_id,
            lemma=fields.pop("lemma", display or word_id),
            display=display or word_id,
            part_of_speech=fields.pop("part_of_speech", "substantiv"),
            definitions=fields.pop("definitions", [{"id": "def-0", "shortDef": "Fructe ale mărului"}]),
            **fields,
        )
        test_db.add(word)
        await test_db.commit()
        await test_db.refresh(word)
        return word

    return _make


# =============================================================================
# API Client
# =============================================================================

@pytest.fixture
def gateway(make_gateway):
    """Gateway used by the API client; tests may replace its llm."""
    return make_gateway()


@pytest.fixture
async def client(session_factory, gateway, quota) -> AsyncGenerator[AsyncClient, None]:
    """Get async test client for API testing."""
    from main import app
    from core.database import get_db
    from core.dependencies import get_gateway, get_quota

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_gateway] = lambda: gateway
    app.dependency_overrides[get_quota] = lambda: quota

    # Create test transport
    transport = ASGITransport(app=app)

    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Bearer header for a user."""
    from auth import create_access_token

    def _headers(user) -> dict:
        return {"Authorization": f"Bearer {create_access_token({'sub': user.email})}"}

    return _headers


@pytest.fixture
def sample_user_data():
    """Sample user data for tests."""
    return {
        "email": "test@example.com",
        "password": "TestPassword123!",
        "display_name": "Test User",
    }
