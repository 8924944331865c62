"""Pytest configuration and fixtures for project_cache.

Unit tests run against tests.fakes.FakeRedis; tests marked requires_redis
talk to a real server at REDIS_URL and are skipped when none answers.
"""

import pytest
from httpx import ASGITransport, AsyncClient

from project_cache.core.config import Settings, get_settings
from project_cache.infrastructure.cache.redis_cache import CacheService
from project_cache.main import create_app
from tests.fakes import FakeClock, FakeRedis


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Make each test read settings from the current environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults only (no .env)."""
    return Settings(_env_file=None, cache_scan_batch_size=3)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_redis(clock: FakeClock) -> FakeRedis:
    return FakeRedis(clock=clock)


@pytest.fixture
async def cache(settings: Settings, fake_redis: FakeRedis) -> CacheService:
    """Connected CacheService over the in-memory fake."""
    service = CacheService(settings=settings, redis_client=fake_redis)
    await service.connect()
    yield service
    await service.disconnect()


@pytest.fixture
def app():
    """Fresh FastAPI app; ASGITransport does not run lifespan, tests set app.state."""
    application = create_app()
    application.state.cache = None
    return application


@pytest.fixture
async def client(app) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
