"""
tests/conftest.py — Banco SQLite em memória e client HTTP sobre o app.

As variáveis de ambiente precisam existir ANTES de importar trust_broker:
config.py instancia Settings no import.
"""
import os

os.environ.setdefault("SECRET_SALT", "test-salt-0123456789abcdef")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from trust_broker import models  # noqa: F401
from trust_broker.config import settings
from trust_broker.controllers.service_controller import ServiceController
from trust_broker.controllers.token_controller import IssueRequest, TokenController
from trust_broker.controllers.validation_controller import ValidateRequest, ValidationController
from trust_broker.database import Base, get_db
from trust_broker.main import app


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
def register(session_factory):
    async def _register(project: str, url: str) -> str:
        async with session_factory() as db:
            return await ServiceController.register(db, project, url, settings.SECRET_SALT)
    return _register


@pytest.fixture
def issue(session_factory):
    async def _issue(**fields):
        async with session_factory() as db:
            return await TokenController.issue(db, IssueRequest(**fields), ttl_hours=24)
    return _issue


@pytest.fixture
def validate(session_factory):
    async def _validate(**fields):
        async with session_factory() as db:
            return await ValidationController.validate(db, ValidateRequest(**fields))
    return _validate


@pytest_asyncio.fixture
async def http(session_factory):
    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://broker") as client:
        yield client
    app.dependency_overrides.clear()
