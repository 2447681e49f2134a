"""
Pytest configuration and shared fixtures.

Every test gets its own SQLite database (aiosqlite) and a Gemini client
backed by an in-process fake, so nothing leaves the machine.
"""

import os

# Settings are read at import time; point them at test values first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./.pytest-jobmete.db"
os.environ["GEMINI_API_KEY"] = "test-gemini-key"
os.environ["SECRET_KEY"] = "test-secret-key-with-at-least-32-characters"

import asyncio
import json
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from jobmete.db.base import Base
from jobmete.db.session import get_db
from jobmete.main import app
from jobmete.repositories.user_repository import UserRepository
from jobmete.services.ai_analysis_service import GeminiAnalysisClient, get_analysis_client


TEST_PASSWORD = "password123"

COMPANY_ANALYSIS = {
    "corporateProfile": {
        "businessSummary": "保育・教育施設向けのICTサービスを提供",
        "founded": "2015年",
        "headquarters": "東京都港区",
        "employeeCount": "約300名",
        "mainProducts": ["コドモン"],
    },
    "marketAnalysis": {
        "industry": "IT・ソフトウェア",
        "industryPosition": "保育ICT業界、国内大手",
        "strengths": ["導入実績", "現場理解"],
        "competitors": ["競合A"],
    },
    "futureDirection": {
        "recentNews": "新機能をリリース",
        "vision": "子どもを取り巻く環境をテクノロジーで豊かに",
        "growthAreas": ["小学校向けサービス"],
    },
    "workEnvironment": {
        "culture": "フラットな組織",
        "recruitmentInsights": "エンジニアを積極採用",
        "desiredTalent": ["主体性"],
    },
}

TREND_SUMMARY = {
    "overallTrend": "IT業界への関心が高い",
    "topIndustries": [
        {"name": "IT・ソフトウェア", "count": 3, "percentage": 100.0},
    ],
    "commonKeywords": [{"word": "DX", "count": 2}],
    "recommendedSkills": ["プログラミング"],
    "matchInsights": None,
}


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no database or HTTP")
    config.addinivalue_line("markers", "api: exercises the HTTP surface through TestClient")


class FakeModels:
    """Stands in for ``genai.Client().aio.models``."""

    def __init__(self, responder):
        self.responder = responder
        self.calls = []

    async def generate_content(self, *, model, contents, config=None):
        self.calls.append({"model": model, "contents": contents, "config": config})
        outcome = self.responder(contents)
        if isinstance(outcome, Exception):
            raise outcome
        return SimpleNamespace(text=outcome)


class FakeGenAIClient:
    """
    Minimal fake of ``genai.Client``.

    ``responder`` receives the prompt and returns the response text, or an
    exception instance to raise.
    """

    def __init__(self, responder):
        self.models = FakeModels(responder)
        self.aio = SimpleNamespace(models=self.models)

    @property
    def calls(self):
        return self.models.calls


def default_responder(prompt):
    if "志望傾向" in prompt:
        return json.dumps(TREND_SUMMARY, ensure_ascii=False)
    return json.dumps(COMPANY_ANALYSIS, ensure_ascii=False)


async def no_sleep(_delay):
    return None


def make_analysis_client(fake_client, max_retries=3):
    return GeminiAnalysisClient(
        api_key="test-gemini-key",
        model_name="gemini-test",
        max_retries=max_retries,
        initial_delay=1.0,
        client=fake_client,
        sleeper=no_sleep,
    )


@pytest.fixture
def fake_genai():
    return FakeGenAIClient(default_responder)


@pytest.fixture
def analysis_client(fake_genai):
    return make_analysis_client(fake_genai)


@pytest.fixture
def session_maker(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'jobmete-test.db'}",
        poolclass=NullPool,
    )

    async def create_schema():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(create_schema())
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    asyncio.run(engine.dispose())


@pytest.fixture
def make_user(session_maker):
    """Create a user directly in the database and return its id."""

    def _make_user(email="student@example.com", display_name="Student"):
        async def create():
            async with session_maker() as session:
                user = await UserRepository(session).create(email, display_name, TEST_PASSWORD)
                await session.commit()
                return user.id

        return asyncio.run(create())

    return _make_user


@pytest.fixture
def client(session_maker, analysis_client):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_analysis_client] = lambda: analysis_client
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    """Register an account through the API and return bearer headers."""

    def _auth_headers(email="student@example.com"):
        response = client.post(
            "/auth/register",
            json={"email": email, "password": TEST_PASSWORD, "displayName": "Student"},
        )
        assert response.status_code == 201, response.text
        response = client.post("/auth/login", json={"email": email, "password": TEST_PASSWORD})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['accessToken']}"}

    return _auth_headers
