from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Union

from ..core.errors import ValidationError
from .engines import ENGINE_DETAILS_MODELS, ElectricMotorDetails, EngineDetails, default_parts
from .values import Location, VehicleDetails, VehiclePart, VehicleType, check_coordinates


class Vehicle:
    """
    Транспортное средство парка.

    Одна запись с общими полями + тег type, который выбирает схему
    engineDetails (см. ENGINE_DETAILS_MODELS). Всё, что зависит от варианта
    (детали по умолчанию, расчёты из domain/metrics.py), выбирается по тегу.

    id появляется только после сохранения в репозитории.
    """

    def __init__(
        self,
        vehicle_type: Union[VehicleType, str],
        location: Location,
        details: VehicleDetails,
        engine: EngineDetails,
        unique_parts: Optional[Iterable[VehiclePart]] = None,
        id: Optional[str] = None,
    ) -> None:
        self._type = VehicleType(vehicle_type)

        expected = ENGINE_DETAILS_MODELS[self._type]
        if not isinstance(engine, expected):
            raise ValidationError(
                f"Engine details {type(engine).__name__} do not match vehicle type {self._type.value}"
            )

        self._id = id
        self._location = location
        self._details = details
        self._engine = engine

        parts = list(unique_parts or [])
        self._unique_parts: list[VehiclePart] = parts or default_parts(self._type, engine)

    def __repr__(self) -> str:
        return f"<Vehicle id={self._id!r} type={self._type.value} model={self._details.model!r}>"

    # ------------------------------------------------------------------
    # Доступ к состоянию
    # ------------------------------------------------------------------
    @property
    def id(self) -> Optional[str]:
        return self._id

    @property
    def vehicle_type(self) -> VehicleType:
        return self._type

    @property
    def location(self) -> Location:
        return self._location

    @property
    def details(self) -> VehicleDetails:
        return self._details

    @property
    def engine(self) -> EngineDetails:
        return self._engine

    @property
    def unique_parts(self) -> list[VehiclePart]:
        # новый список: append снаружи не затронет self._unique_parts
        return list(self._unique_parts)

    def get_engine_details(self) -> dict[str, Any]:
        return self._engine.to_mapping()

    # ------------------------------------------------------------------
    # Мутации
    # ------------------------------------------------------------------
    def set_location(self, location: Union[Location, Mapping[str, float]]) -> None:
        if isinstance(location, Location):
            latitude, longitude = location.latitude, location.longitude
        else:
            try:
                latitude = float(location["latitude"])
                longitude = float(location["longitude"])
            except (KeyError, TypeError, ValueError) as exc:
                raise ValidationError("Location must have numeric latitude and longitude") from exc

        check_coordinates(latitude, longitude)
        self._location = Location(latitude=latitude, longitude=longitude)

    def add_part(self, part: VehiclePart) -> None:
        self._unique_parts.append(part)

    def update_battery_capacity(self, capacity: float) -> None:
        """Только для Electric: заменяет batteryCapacity в записи мотора."""
        if not isinstance(self._engine, ElectricMotorDetails):
            raise ValidationError(
                f"Battery capacity can only be updated on Electric vehicles, not {self._type.value}"
            )
        if capacity <= 0:
            raise ValidationError("Battery capacity must be positive")
        self._engine = self._engine.model_copy(update={"battery_capacity": capacity})

    # ------------------------------------------------------------------
    # Сериализация
    # ------------------------------------------------------------------
    def to_representation(self) -> dict[str, Any]:
        """
        Каноничная форма для хранения и для API:
        { id, type, location, details, uniqueParts, engineDetails }
        """
        return {
            "id": self._id,
            "type": self._type.value,
            "location": self._location.model_dump(mode="json"),
            "details": self._details.model_dump(by_alias=True, mode="json"),
            "uniqueParts": [
                part.model_dump(mode="json", exclude_none=True) for part in self._unique_parts
            ],
            "engineDetails": self.get_engine_details(),
        }
