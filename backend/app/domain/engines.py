from __future__ import annotations

from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field

from .values import PartCondition, VehiclePart, VehicleType


class MotorType(str, Enum):
    AC = "AC"
    DC = "DC"
    PERMANENT_MAGNET = "Permanent Magnet"


class EngineConfiguration(str, Enum):
    INLINE = "Inline"
    V_TYPE = "V-Type"
    FLAT = "Flat"


class FuelInjection(str, Enum):
    PORT = "Port"
    DIRECT = "Direct"


class FuelSystemType(str, Enum):
    COMMON_RAIL = "Common Rail"
    DIRECT_INJECTION = "Direct Injection"
    INDIRECT_INJECTION = "Indirect Injection"


class HybridType(str, Enum):
    PARALLEL = "Parallel"
    SERIES = "Series"
    SERIES_PARALLEL = "Series-Parallel"


class _EngineDetailsBase(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_mapping(self) -> dict[str, Any]:
        """Плоский dict в wire-формате (camelCase, enum -> строка)."""
        return self.model_dump(by_alias=True, mode="json")


class ElectricMotorDetails(_EngineDetailsBase):
    motor_type: MotorType = Field(..., alias="motorType")
    voltage: float = Field(..., gt=0)
    battery_capacity: float = Field(..., gt=0, alias="batteryCapacity")  # kWh
    range: float = Field(..., ge=0)  # km


class PetrolEngineDetails(_EngineDetailsBase):
    displacement: float = Field(..., gt=0)  # cc
    cylinders: int = Field(..., ge=1)
    configuration: EngineConfiguration
    fuel_injection: FuelInjection = Field(..., alias="fuelInjection")
    compression_ratio: float = Field(..., gt=0, alias="compressionRatio")


class DieselEngineDetails(_EngineDetailsBase):
    displacement: float = Field(..., gt=0)  # cc
    cylinders: int = Field(..., ge=1)
    configuration: EngineConfiguration
    turbo_charged: bool = Field(..., alias="turboCharged")
    compression_ratio: float = Field(..., gt=0, alias="compressionRatio")
    fuel_system_type: FuelSystemType = Field(..., alias="fuelSystemType")


class HybridSystemDetails(_EngineDetailsBase):
    ice_displacement: float = Field(..., gt=0, alias="iceDisplacement")  # cc
    ice_cylinders: int = Field(..., ge=1, alias="iceCylinders")
    electric_motor_power: float = Field(..., ge=0, alias="electricMotorPower")  # kW
    battery_capacity: float = Field(..., gt=0, alias="batteryCapacity")  # kWh
    hybrid_type: HybridType = Field(..., alias="hybridType")
    electric_range: float = Field(..., ge=0, alias="electricRange")  # km


EngineDetails = Union[
    ElectricMotorDetails,
    PetrolEngineDetails,
    DieselEngineDetails,
    HybridSystemDetails,
]

# тег варианта -> схема engineDetails
ENGINE_DETAILS_MODELS: dict[VehicleType, type[_EngineDetailsBase]] = {
    VehicleType.ELECTRIC: ElectricMotorDetails,
    VehicleType.PETROL: PetrolEngineDetails,
    VehicleType.DIESEL: DieselEngineDetails,
    VehicleType.HYBRID: HybridSystemDetails,
}


# ----------------------------------------------------------------------
# Комплект деталей по умолчанию (если при создании список пустой)
# ----------------------------------------------------------------------

_DEFAULT_PART_NAMES: dict[VehicleType, tuple[str, ...]] = {
    VehicleType.ELECTRIC: (
        "Electric Motor",
        "Battery Pack",
        "Inverter",
        "Charging Port",
    ),
    VehicleType.PETROL: (
        "ICE (Internal Combustion Engine)",
        "Spark Plugs",
        "Fuel Injectors",
        "Air Filter",
        "Catalytic Converter",
    ),
    VehicleType.DIESEL: (
        "Diesel ICE",
        "Glow Plugs",
        "Fuel Injectors",
        "Turbocharger",
        "DPF (Diesel Particulate Filter)",
        "EGR Valve",
    ),
    VehicleType.HYBRID: (
        "ICE (Internal Combustion Engine)",
        "Electric Motor",
        "Battery Pack",
        "Power Control Unit",
        "Regenerative Braking System",
        "Spark Plugs",
        "Inverter",
    ),
}


def default_parts(vehicle_type: VehicleType, engine: EngineDetails) -> list[VehiclePart]:
    parts: list[VehiclePart] = []
    for name in _DEFAULT_PART_NAMES[vehicle_type]:
        condition = PartCondition.NEW
        # без турбины деталь числится, но в состоянии Poor
        if name == "Turbocharger" and isinstance(engine, DieselEngineDetails):
            condition = PartCondition.NEW if engine.turbo_charged else PartCondition.POOR
        parts.append(VehiclePart(name=name, condition=condition))
    return parts
