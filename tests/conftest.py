import copy
import uuid
from typing import Any, Optional

import pytest

from backend.app.domain.factory import VehicleFactory
from backend.app.domain.vehicle import Vehicle
from backend.app.repositories.vehicles_repository import VehicleRepository

ELECTRIC_PAYLOAD: dict[str, Any] = {
    "type": "Electric",
    "location": {"latitude": 19.8762, "longitude": 75.3433},
    "details": {
        "manufacturedDate": "2024-01-15",
        "model": "Tesla Model 3",
        "fuelType": "EV",
        "bhp": 283,
        "torque": 420,
    },
    "uniqueParts": [],
    "engineDetails": {
        "motorType": "Permanent Magnet",
        "voltage": 400,
        "batteryCapacity": 75,
        "range": 500,
    },
}

PETROL_PAYLOAD: dict[str, Any] = {
    "type": "Petrol",
    "location": {"latitude": 20.0, "longitude": 76.0},
    "details": {
        "manufacturedDate": "2021-06-01",
        "model": "Honda Civic",
        "fuelType": "Petrol",
        "bhp": 158,
        "torque": 187,
    },
    "uniqueParts": [],
    "engineDetails": {
        "displacement": 2000,
        "cylinders": 4,
        "configuration": "Inline",
        "fuelInjection": "Direct",
        "compressionRatio": 10.8,
    },
}

DIESEL_PAYLOAD: dict[str, Any] = {
    "type": "Diesel",
    "location": {"latitude": 30.0, "longitude": 80.0},
    "details": {
        "manufacturedDate": "2019-03-10",
        "model": "Toyota Fortuner",
        "fuelType": "Diesel",
        "bhp": 201,
        "torque": 500,
    },
    "uniqueParts": [],
    "engineDetails": {
        "displacement": 2800,
        "cylinders": 4,
        "configuration": "Inline",
        "turboCharged": True,
        "compressionRatio": 15.6,
        "fuelSystemType": "Common Rail",
    },
}

HYBRID_PAYLOAD: dict[str, Any] = {
    "type": "Hybrid",
    "location": {"latitude": -33.8688, "longitude": 151.2093},
    "details": {
        "manufacturedDate": "2023-09-20",
        "model": "Toyota Prius",
        "fuelType": "Hybrid",
        "bhp": 121,
        "torque": 142,
    },
    "uniqueParts": [],
    "engineDetails": {
        "iceDisplacement": 1800,
        "iceCylinders": 4,
        "electricMotorPower": 53,
        "batteryCapacity": 8.8,
        "hybridType": "Series-Parallel",
        "electricRange": 25,
    },
}

PAYLOADS = {
    "Electric": ELECTRIC_PAYLOAD,
    "Petrol": PETROL_PAYLOAD,
    "Diesel": DIESEL_PAYLOAD,
    "Hybrid": HYBRID_PAYLOAD,
}


def make_payload(vehicle_type: str = "Electric", **overrides: Any) -> dict[str, Any]:
    """Глубокая копия эталонного payload, верхнеуровневые ключи можно заменить."""
    payload = copy.deepcopy(PAYLOADS[vehicle_type])
    payload.update(overrides)
    return payload


class FakeVehicleRepository(VehicleRepository):
    """
    In-memory хранилище: держит представления (как документная БД) и
    пересобирает Vehicle через фабрику на каждое чтение.
    """

    def __init__(self) -> None:
        self.documents: dict[str, dict[str, Any]] = {}
        self.calls: list[str] = []

    def _load(self, vehicle_id: str) -> Vehicle:
        return VehicleFactory.create(copy.deepcopy(self.documents[vehicle_id]))

    async def save(self, vehicle: Vehicle) -> Vehicle:
        self.calls.append("save")
        vehicle_id = uuid.uuid4().hex
        doc = vehicle.to_representation()
        doc["id"] = vehicle_id
        self.documents[vehicle_id] = doc
        return self._load(vehicle_id)

    async def find_by_id(self, vehicle_id: str) -> Optional[Vehicle]:
        self.calls.append("find_by_id")
        if vehicle_id not in self.documents:
            return None
        return self._load(vehicle_id)

    async def find_all(self) -> list[Vehicle]:
        self.calls.append("find_all")
        return [self._load(vid) for vid in self.documents]

    async def find_by_type(self, vehicle_type: str) -> list[Vehicle]:
        self.calls.append("find_by_type")
        return [self._load(vid) for vid, doc in self.documents.items() if doc["type"] == vehicle_type]

    async def update(self, vehicle_id: str, vehicle: Vehicle) -> Optional[Vehicle]:
        self.calls.append("update")
        if vehicle_id not in self.documents:
            return None
        doc = vehicle.to_representation()
        doc["id"] = vehicle_id
        self.documents[vehicle_id] = doc
        return self._load(vehicle_id)

    async def update_location(self, vehicle_id: str, latitude: float, longitude: float) -> Optional[Vehicle]:
        self.calls.append("update_location")
        if vehicle_id not in self.documents:
            return None
        self.documents[vehicle_id]["location"] = {"latitude": latitude, "longitude": longitude}
        return self._load(vehicle_id)

    async def delete(self, vehicle_id: str) -> bool:
        self.calls.append("delete")
        return self.documents.pop(vehicle_id, None) is not None

    async def count(self) -> int:
        self.calls.append("count")
        return len(self.documents)

    async def exists(self, vehicle_id: str) -> bool:
        self.calls.append("exists")
        return vehicle_id in self.documents


@pytest.fixture
def repository() -> FakeVehicleRepository:
    return FakeVehicleRepository()


@pytest.fixture
def electric_payload() -> dict[str, Any]:
    return make_payload("Electric")


@pytest.fixture
def sqlite_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'fleet.db'}"
