"""
trust_broker/database.py — Conexão assíncrona via SQLAlchemy.

Cada request abre uma sessão (get_db) e roda dentro de uma unidade de
trabalho (unit_of_work): commit se tudo deu certo, rollback em qualquer erro.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator

from loguru import logger
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from trust_broker.config import settings
from trust_broker.errors import InfrastructureError

engine = create_async_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)
AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


class Base(DeclarativeBase):
    pass


async def init_db():
    """Cria todas as tabelas se não existirem."""
    from trust_broker.models import api_token, backend_service  # noqa: F401
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def check_connection() -> bool:
    """SELECT 1 no startup: só loga, não derruba o processo."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"❌ Banco inacessível: {e}")
        return False
    logger.info("✅ Conexão com o banco OK")
    return True


async def get_db():
    """Dependency FastAPI para injetar sessão DB."""
    async with AsyncSessionLocal() as session:
        yield session


@asynccontextmanager
async def unit_of_work(db: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Transação atômica sobre a sessão.

    Sai normalmente → commit. Qualquer exceção → rollback e re-raise.
    Erros do SQLAlchemy viram InfrastructureError (sem detalhe do driver).
    """
    try:
        async with db.begin():
            yield db
    except SQLAlchemyError as e:
        logger.exception(f"💥 Falha na transação, rollback executado: {e}")
        raise InfrastructureError() from e
