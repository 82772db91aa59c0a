import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

logger = logging.getLogger(__name__)

# CREATE INDEX IF NOT EXISTS понимают и postgres, и sqlite
_INDEX_STMTS: list[str] = [
    "CREATE INDEX IF NOT EXISTS ix_vehicles_type ON vehicles (type);",
    "CREATE INDEX IF NOT EXISTS ix_vehicles_location ON vehicles (latitude, longitude);",
]


async def ensure_indexes(engine: AsyncEngine) -> None:
    """
    Индексы для выборок по типу и по координатам.

    Безопасно и идемпотентно: каждый стейтмент в своей транзакции, если
    индекс не создался, пишем в лог и продолжаем старт приложения.
    """
    for stmt in _INDEX_STMTS:
        try:
            async with engine.begin() as conn:
                await conn.execute(text(stmt))
        except Exception as e:
            # safe-migration: не валим приложение
            logger.warning("safe_migrations %s skipped/failed: %s (%s)", engine.dialect.name, stmt, e)
