from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .safe_migrations import ensure_indexes

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """
    Хэндл БД: engine + фабрика сессий.

    Создаётся явно (в lifespan приложения) и передаётся дальше через
    app.state.database. Жизненный цикл: init() на старте, close() на выходе.
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        self.engine = create_async_engine(
            url,
            echo=echo,
            future=True,
        )
        self.session_factory = sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
            autocommit=False,
        )

    async def init(self) -> None:
        """
        1) create_all(): создаёт таблицы, если их нет
        2) ensure_indexes: индексы для выборок по type и координатам (идемпотентно)
        """
        # важно импортнуть модели, чтобы Base.metadata знала про все таблицы
        from .. import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        await ensure_indexes(self.engine)

        logger.info("Database initialized (%s)", self.dialect)

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("Database connections closed")

    @property
    def dialect(self) -> str:
        return self.engine.dialect.name


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        yield session
