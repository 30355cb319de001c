"""
Shared test fixtures.

Environment overrides are applied before the application is imported so
rate limiting, Redis caching and file logging stay off during tests.
"""

import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["CACHE_ENABLED"] = "false"
os.environ["LOG_TO_FILE"] = "false"
os.environ["OPENWEATHER_API_KEY"] = ""
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import asyncio
import random
from datetime import datetime

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, func, select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from fishlog.main import app
from fishlog.models.user import User
from fishlog.database import Base, get_db
from fishlog.dependencies.services import get_flow_resolver, get_weather_client
from fishlog.services.flow import FlowResolver
from fishlog.services.usgs import UsgsClient
from fishlog.services.weather import WeatherClient
from fishlog.utils.cache import RedisCache

import fishlog.models  # noqa: F401


def usgs_payload(points):
    """Wrap ``[(dateTime, value), ...]`` in a water services JSON envelope."""
    if points is None:
        return {"value": {"timeSeries": []}}
    return {
        "value": {
            "timeSeries": [{
                "values": [{
                    "value": [{"dateTime": t, "value": v, "qualifiers": ["P"]} for t, v in points]
                }]
            }]
        }
    }


class FakeUsgs:
    """
    Stand-in for the USGS water services behind ``httpx.MockTransport``.

    ``iv`` / ``dv`` hold the points returned for instantaneous and daily
    requests (None means an empty timeSeries). ``status`` other than 200
    answers every request with that status; ``fail`` raises a connect error.
    """

    def __init__(self):
        self.iv = None
        self.dv = None
        self.status = 200
        self.fail = False
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail:
            raise httpx.ConnectError("connection refused", request=request)
        if self.status != 200:
            return httpx.Response(self.status, text="Service Unavailable")
        points = self.dv if "/dv/" in request.url.path else self.iv
        return httpx.Response(200, json=usgs_payload(points))

    def client(self) -> UsgsClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        return UsgsClient(http, cache=RedisCache(enabled=False))

    def resolver(self, now: datetime = None, seed: int = 7) -> FlowResolver:
        clock = (lambda: now) if now else datetime.now
        return FlowResolver(self.client(), clock=clock, rng=random.Random(seed))


@pytest.fixture
def fake_usgs():
    return FakeUsgs()


@pytest.fixture
def db_sessionmaker(tmp_path):
    """A fresh SQLite database file with every table created."""
    db_file = tmp_path / "test_fishlog.db"

    sync_engine = create_engine(f"sqlite:///{db_file}")
    Base.metadata.create_all(sync_engine)
    sync_engine.dispose()

    engine = create_async_engine(f"sqlite+aiosqlite:///{db_file}", poolclass=NullPool)
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def client(db_sessionmaker, fake_usgs):
    """Test client with a temporary database and a fake USGS service."""

    async def override_get_db():
        async with db_sessionmaker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_flow_resolver] = lambda: fake_usgs.resolver()
    app.dependency_overrides[get_weather_client] = lambda: WeatherClient(api_key=None, rng=random.Random(3))

    yield TestClient(app)

    app.dependency_overrides.clear()


def register(client, email="angler@example.com", password="tightlines123"):
    response = client.post(
        "/api/v1/auth/register",
        json={"email": email, "password": password, "full_name": "Test Angler"},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def auth_headers(client):
    """API key headers for a freshly registered user."""
    data = register(client)
    return {"X-API-Key": data["api_key"]}


def count_rows(db_sessionmaker, model) -> int:
    """Rows of ``model`` in the test database, across all users."""

    async def count():
        async with db_sessionmaker() as session:
            return await session.scalar(select(func.count()).select_from(model))

    return asyncio.run(count())


def make_superuser(db_sessionmaker, email):
    async def promote():
        async with db_sessionmaker() as session:
            result = await session.execute(select(User).where(User.email == email))
            result.scalars().one().is_superuser = True
            await session.commit()

    asyncio.run(promote())


@pytest.fixture
def admin_headers(client, db_sessionmaker):
    """API key headers for a registered superuser."""
    data = register(client, email="admin@example.com")
    make_superuser(db_sessionmaker, "admin@example.com")
    return {"X-API-Key": data["api_key"]}
