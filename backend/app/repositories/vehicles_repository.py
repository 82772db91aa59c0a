from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.errors import FleetError, StorageError
from ..domain.factory import VehicleFactory
from ..domain.vehicle import Vehicle
from ..models.vehicle import VehicleRecord

logger = logging.getLogger(__name__)


class VehicleRepository(ABC):
    """
    Контракт хранилища, который использует VehiclesService.

    Любой метод может упасть со StorageError. «Не найдено» выражается
    только через None / False там, где это записано в сигнатуре.
    """

    @abstractmethod
    async def save(self, vehicle: Vehicle) -> Vehicle:
        """Сохранить новый ТС, вернуть его уже с id."""

    @abstractmethod
    async def find_by_id(self, vehicle_id: str) -> Optional[Vehicle]:
        ...

    @abstractmethod
    async def find_all(self) -> list[Vehicle]:
        ...

    @abstractmethod
    async def find_by_type(self, vehicle_type: str) -> list[Vehicle]:
        ...

    @abstractmethod
    async def update(self, vehicle_id: str, vehicle: Vehicle) -> Optional[Vehicle]:
        """Полная замена документа (все поля, кроме id)."""

    @abstractmethod
    async def update_location(
        self,
        vehicle_id: str,
        latitude: float,
        longitude: float,
    ) -> Optional[Vehicle]:
        ...

    @abstractmethod
    async def delete(self, vehicle_id: str) -> bool:
        ...

    @abstractmethod
    async def count(self) -> int:
        ...

    @abstractmethod
    async def exists(self, vehicle_id: str) -> bool:
        ...


class SQLAlchemyVehicleRepository(VehicleRepository):
    """
    Документное хранение ТС в таблице vehicles (core/db.py).

    Каждое чтение собирает типизированный Vehicle через VehicleFactory.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    @asynccontextmanager
    async def _storage_errors(self, message: str) -> AsyncIterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.exception("%s", message)
            raise StorageError(message) from exc

    @staticmethod
    def _to_vehicle(record: VehicleRecord) -> Vehicle:
        try:
            return VehicleFactory.create(record.to_document())
        except FleetError as exc:
            logger.error("Stored vehicle %s is malformed: %s", record.id, exc)
            raise StorageError(f"Stored vehicle {record.id} is malformed") from exc

    # ------------------------------------------------------------------
    # Запись
    # ------------------------------------------------------------------
    async def save(self, vehicle: Vehicle) -> Vehicle:
        async with self._storage_errors("Failed to save vehicle"):
            record = VehicleRecord()
            record.apply_representation(vehicle.to_representation())
            self.db.add(record)
            await self.db.commit()
        return self._to_vehicle(record)

    async def update(self, vehicle_id: str, vehicle: Vehicle) -> Optional[Vehicle]:
        async with self._storage_errors("Failed to update vehicle"):
            record = await self.db.get(VehicleRecord, vehicle_id)
            if record is None:
                return None
            record.apply_representation(vehicle.to_representation())
            await self.db.commit()
        return self._to_vehicle(record)

    async def update_location(
        self,
        vehicle_id: str,
        latitude: float,
        longitude: float,
    ) -> Optional[Vehicle]:
        async with self._storage_errors("Failed to update vehicle location"):
            record = await self.db.get(VehicleRecord, vehicle_id)
            if record is None:
                return None
            record.latitude = latitude
            record.longitude = longitude
            await self.db.commit()
        return self._to_vehicle(record)

    async def delete(self, vehicle_id: str) -> bool:
        async with self._storage_errors("Failed to delete vehicle"):
            result = await self.db.execute(
                delete(VehicleRecord).where(VehicleRecord.id == vehicle_id)
            )
            await self.db.commit()
        return (result.rowcount or 0) > 0

    # ------------------------------------------------------------------
    # Чтение
    # ------------------------------------------------------------------
    async def find_by_id(self, vehicle_id: str) -> Optional[Vehicle]:
        async with self._storage_errors("Failed to find vehicle"):
            record = await self.db.get(VehicleRecord, vehicle_id)
        if record is None:
            return None
        return self._to_vehicle(record)

    async def find_all(self) -> list[Vehicle]:
        async with self._storage_errors("Failed to fetch vehicles"):
            res = await self.db.execute(
                select(VehicleRecord).order_by(VehicleRecord.created_at, VehicleRecord.id)
            )
            records = list(res.scalars().all())
        return [self._to_vehicle(r) for r in records]

    async def find_by_type(self, vehicle_type: str) -> list[Vehicle]:
        async with self._storage_errors("Failed to fetch vehicles by type"):
            res = await self.db.execute(
                select(VehicleRecord)
                .where(VehicleRecord.type == vehicle_type)
                .order_by(VehicleRecord.created_at, VehicleRecord.id)
            )
            records = list(res.scalars().all())
        return [self._to_vehicle(r) for r in records]

    async def count(self) -> int:
        async with self._storage_errors("Failed to count vehicles"):
            res = await self.db.execute(select(func.count()).select_from(VehicleRecord))
            total = res.scalar_one()
        return int(total)

    async def exists(self, vehicle_id: str) -> bool:
        async with self._storage_errors("Failed to check vehicle existence"):
            res = await self.db.execute(
                select(VehicleRecord.id).where(VehicleRecord.id == vehicle_id)
            )
            found = res.scalar_one_or_none()
        return found is not None
