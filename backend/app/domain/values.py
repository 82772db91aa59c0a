from __future__ import annotations

import math
from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..core.errors import ValidationError

MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0


class VehicleType(str, Enum):
    ELECTRIC = "Electric"
    PETROL = "Petrol"
    DIESEL = "Diesel"
    HYBRID = "Hybrid"


VEHICLE_TYPES: tuple[str, ...] = tuple(t.value for t in VehicleType)


class FuelType(str, Enum):
    EV = "EV"
    PETROL = "Petrol"
    DIESEL = "Diesel"
    HYBRID = "Hybrid"


class PartCondition(str, Enum):
    NEW = "New"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"


def check_coordinates(latitude: float, longitude: float) -> None:
    """
    Общая проверка границ координат: и для Vehicle.set_location,
    и для VehiclesService.update_vehicle_location.
    """
    if not math.isfinite(latitude) or latitude < MIN_LATITUDE or latitude > MAX_LATITUDE:
        raise ValidationError("Invalid latitude: must be between -90 and 90")
    if not math.isfinite(longitude) or longitude < MIN_LONGITUDE or longitude > MAX_LONGITUDE:
        raise ValidationError("Invalid longitude: must be between -180 and 180")


# ----------------------------------------------------------------------
# Value objects. Все frozen: геттеры Vehicle отдают их без копирования,
# изменить внутреннее состояние через них нельзя.
# ----------------------------------------------------------------------


class Location(BaseModel):
    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=MIN_LATITUDE, le=MAX_LATITUDE)
    longitude: float = Field(..., ge=MIN_LONGITUDE, le=MAX_LONGITUDE)


class VehicleDetails(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    manufactured_date: date = Field(..., alias="manufacturedDate")
    model: str = Field(..., min_length=1)
    fuel_type: FuelType = Field(..., alias="fuelType")
    bhp: float = Field(..., gt=0)
    torque: float = Field(..., gt=0)  # Nm


class VehiclePart(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    condition: PartCondition
    manufacturer: Optional[str] = None
