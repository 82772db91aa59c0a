"""
Справочные расчёты по вариантам ТС.

Не влияют на хранение и API, но живут рядом с моделью: каждая функция
работает только со своим вариантом и бросает InvalidTypeError на чужом.
"""
from __future__ import annotations

from typing import TypeVar

from ..core.errors import InvalidTypeError
from .engines import (
    DieselEngineDetails,
    ElectricMotorDetails,
    HybridSystemDetails,
    HybridType,
    PetrolEngineDetails,
)
from .vehicle import Vehicle

BHP_TO_KW = 0.746

SPARK_PLUG_SERVICE_MILEAGE = 30_000
GLOW_PLUG_SERVICE_MILEAGE = 100_000
PLUG_IN_MIN_ELECTRIC_RANGE_KM = 20

FUEL_EFFICIENCY_BOOST: dict[HybridType, str] = {
    HybridType.PARALLEL: "20-30%",
    HybridType.SERIES: "30-40%",
    HybridType.SERIES_PARALLEL: "40-50%",
}

_E = TypeVar("_E")


def _engine_of(vehicle: Vehicle, engine_cls: type[_E]) -> _E:
    engine = vehicle.engine
    if not isinstance(engine, engine_cls):
        raise InvalidTypeError(
            f"Operation is not supported for {vehicle.vehicle_type.value} vehicles"
        )
    return engine


# ---------------------------- Electric ----------------------------

def calculate_range_percentage(vehicle: Vehicle) -> float:
    motor = _engine_of(vehicle, ElectricMotorDetails)
    return (motor.range / motor.battery_capacity) * 100


# ---------------------------- Petrol ----------------------------

def calculate_power_per_liter(vehicle: Vehicle) -> float:
    ice = _engine_of(vehicle, PetrolEngineDetails)
    return vehicle.details.bhp / (ice.displacement / 1000)


def needs_spark_plug_replacement(vehicle: Vehicle, mileage: float) -> bool:
    _engine_of(vehicle, PetrolEngineDetails)
    return mileage > SPARK_PLUG_SERVICE_MILEAGE


# ---------------------------- Diesel ----------------------------

def calculate_torque_per_liter(vehicle: Vehicle) -> float:
    engine = _engine_of(vehicle, DieselEngineDetails)
    return vehicle.details.torque / (engine.displacement / 1000)


def needs_glow_plug_replacement(vehicle: Vehicle, mileage: float) -> bool:
    _engine_of(vehicle, DieselEngineDetails)
    return mileage > GLOW_PLUG_SERVICE_MILEAGE


def is_turbo_charged(vehicle: Vehicle) -> bool:
    return _engine_of(vehicle, DieselEngineDetails).turbo_charged


# ---------------------------- Hybrid ----------------------------

def get_total_power(vehicle: Vehicle) -> float:
    """ДВС (bhp -> kW) + электромотор, в kW."""
    system = _engine_of(vehicle, HybridSystemDetails)
    return vehicle.details.bhp * BHP_TO_KW + system.electric_motor_power


def is_plug_in_hybrid(vehicle: Vehicle) -> bool:
    return _engine_of(vehicle, HybridSystemDetails).electric_range > PLUG_IN_MIN_ELECTRIC_RANGE_KM


def calculate_fuel_efficiency_boost(vehicle: Vehicle) -> str:
    system = _engine_of(vehicle, HybridSystemDetails)
    return FUEL_EFFICIENCY_BOOST[system.hybrid_type]
