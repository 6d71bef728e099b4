import httpx
import pytest
from httpx import ASGITransport


@pytest.fixture
def mock_env(monkeypatch):
    monkeypatch.setenv("SERPAPI_API_KEY", "test-serp-key")
    monkeypatch.setenv("AMADEUS_API_KEY", "test-amadeus-key")
    monkeypatch.setenv("AMADEUS_API_SECRET", "test-amadeus-secret")
    monkeypatch.setenv("VOCABULARY_FILE", "")


@pytest.fixture
async def client(mock_env):
    from savings_engine.main import app, lifespan

    async with lifespan(app):
        async with httpx.AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as c:
            yield c


@pytest.fixture
async def client_without_amadeus(mock_env, monkeypatch):
    monkeypatch.setenv("AMADEUS_API_KEY", "")
    monkeypatch.setenv("AMADEUS_API_SECRET", "")
    from savings_engine.main import app, lifespan

    async with lifespan(app):
        async with httpx.AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test",
        ) as c:
            yield c
