from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.db import get_db
from ..repositories.vehicles_repository import SQLAlchemyVehicleRepository
from ..services.vehicles_service import VehiclesService


def get_vehicles_service(db: AsyncSession = Depends(get_db)) -> VehiclesService:
    """
    FastAPI dependency: сессия запроса -> репозиторий -> сервис.
    """
    return VehiclesService(SQLAlchemyVehicleRepository(db))
