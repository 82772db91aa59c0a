import logging
from typing import Any, List

from ..core.errors import InvalidDataError, InvalidTypeError, NotFoundError
from ..domain.factory import VehicleFactory
from ..domain.values import VEHICLE_TYPES, check_coordinates
from ..domain.vehicle import Vehicle
from ..repositories.vehicles_repository import VehicleRepository
from ..schemas.vehicle import VehicleStatistics

logger = logging.getLogger(__name__)


class VehiclesService:
    """
    Сервисный слой парка ТС: фабрика + репозиторий + бизнес-правила.

    Репозиторий передаётся снаружи (см. api/dependencies.py), поэтому в
    тестах его легко заменить фейком.
    """

    def __init__(self, repository: VehicleRepository) -> None:
        self.repository = repository

    # ------------------------------------------------------------------
    # Создание
    # ------------------------------------------------------------------
    async def create_vehicle(self, data: Any) -> Vehicle:
        if not VehicleFactory.validate(data):
            raise InvalidDataError("Invalid vehicle data")

        vehicle = VehicleFactory.create(data)
        saved = await self.repository.save(vehicle)

        logger.info("Vehicle created: id=%s type=%s", saved.id, saved.vehicle_type.value)
        return saved

    # ------------------------------------------------------------------
    # Получение
    # ------------------------------------------------------------------
    async def get_vehicle_by_id(self, vehicle_id: str) -> Vehicle:
        vehicle = await self.repository.find_by_id(vehicle_id)
        if vehicle is None:
            raise NotFoundError(f"Vehicle with id {vehicle_id} not found")
        return vehicle

    async def get_all_vehicles(self) -> List[Vehicle]:
        return await self.repository.find_all()

    async def get_vehicles_by_type(self, vehicle_type: str) -> List[Vehicle]:
        if vehicle_type not in VEHICLE_TYPES:
            raise InvalidTypeError(f"Invalid vehicle type: {vehicle_type}")
        return await self.repository.find_by_type(vehicle_type)

    async def get_vehicle_count(self) -> int:
        return await self.repository.count()

    # ------------------------------------------------------------------
    # Изменение
    # ------------------------------------------------------------------
    async def update_vehicle(self, vehicle_id: str, data: Any) -> Vehicle:
        """
        Полная замена записи: поля, которых нет в data, не сохраняются
        (частичного слияния нет).
        """
        if not await self.repository.exists(vehicle_id):
            raise NotFoundError(f"Vehicle with id {vehicle_id} not found")

        if not VehicleFactory.validate(data):
            raise InvalidDataError("Invalid vehicle data")

        vehicle = VehicleFactory.create({**data, "id": vehicle_id})

        updated = await self.repository.update(vehicle_id, vehicle)
        if updated is None:
            # удалили между exists() и update()
            raise NotFoundError(f"Vehicle with id {vehicle_id} not found")

        logger.info("Vehicle updated: id=%s type=%s", vehicle_id, updated.vehicle_type.value)
        return updated

    async def update_vehicle_location(
        self,
        vehicle_id: str,
        latitude: float,
        longitude: float,
    ) -> Vehicle:
        # сначала границы, потом существование
        check_coordinates(latitude, longitude)

        updated = await self.repository.update_location(vehicle_id, latitude, longitude)
        if updated is None:
            raise NotFoundError(f"Vehicle with id {vehicle_id} not found")

        logger.info("Vehicle %s moved to (%s, %s)", vehicle_id, latitude, longitude)
        return updated

    async def delete_vehicle(self, vehicle_id: str) -> None:
        deleted = await self.repository.delete(vehicle_id)
        if not deleted:
            raise NotFoundError(f"Vehicle with id {vehicle_id} not found")
        logger.info("Vehicle deleted: id=%s", vehicle_id)

    # ------------------------------------------------------------------
    # Выборки и агрегаты
    # ------------------------------------------------------------------
    async def get_vehicles_in_area(
        self,
        min_lat: float,
        max_lat: float,
        min_lng: float,
        max_lng: float,
    ) -> List[Vehicle]:
        """
        Простой bounding box, границы включительно. Полный проход по всем ТС,
        пространственного индекса нет.
        """
        vehicles = await self.repository.find_all()

        result: List[Vehicle] = []
        for vehicle in vehicles:
            loc = vehicle.location
            if min_lat <= loc.latitude <= max_lat and min_lng <= loc.longitude <= max_lng:
                result.append(vehicle)
        return result

    async def get_statistics(self) -> VehicleStatistics:
        vehicles = await self.repository.find_all()

        by_type: dict[str, int] = {}
        total_bhp = 0.0
        total_torque = 0.0

        for vehicle in vehicles:
            key = vehicle.vehicle_type.value
            by_type[key] = by_type.get(key, 0) + 1
            total_bhp += vehicle.details.bhp
            total_torque += vehicle.details.torque

        total = len(vehicles)
        if total == 0:
            return VehicleStatistics()

        return VehicleStatistics(
            total=total,
            by_type=by_type,
            average_bhp=total_bhp / total,
            average_torque=total_torque / total,
        )
