from datetime import date

import pytest

from backend.app.core.errors import ValidationError
from backend.app.domain.engines import (
    DieselEngineDetails,
    ElectricMotorDetails,
    MotorType,
    PetrolEngineDetails,
)
from backend.app.domain.values import (
    FuelType,
    Location,
    PartCondition,
    VehicleDetails,
    VehiclePart,
    VehicleType,
)
from backend.app.domain.vehicle import Vehicle


def _electric_vehicle(**kwargs) -> Vehicle:
    return Vehicle(
        vehicle_type=VehicleType.ELECTRIC,
        location=Location(latitude=19.8762, longitude=75.3433),
        details=VehicleDetails(
            manufactured_date=date(2024, 1, 15),
            model="Tesla Model 3",
            fuel_type=FuelType.EV,
            bhp=283,
            torque=420,
        ),
        engine=ElectricMotorDetails(
            motor_type=MotorType.PERMANENT_MAGNET,
            voltage=400,
            battery_capacity=75,
            range=500,
        ),
        **kwargs,
    )


def _diesel_vehicle(turbo_charged: bool) -> Vehicle:
    return Vehicle(
        vehicle_type="Diesel",
        location=Location(latitude=30.0, longitude=80.0),
        details=VehicleDetails(
            manufactured_date=date(2019, 3, 10),
            model="Toyota Fortuner",
            fuel_type=FuelType.DIESEL,
            bhp=201,
            torque=500,
        ),
        engine=DieselEngineDetails(
            displacement=2800,
            cylinders=4,
            configuration="Inline",
            turbo_charged=turbo_charged,
            compression_ratio=15.6,
            fuel_system_type="Common Rail",
        ),
    )


def test_new_vehicle_has_no_id_and_default_parts():
    vehicle = _electric_vehicle()

    assert vehicle.id is None
    assert [p.name for p in vehicle.unique_parts] == [
        "Electric Motor",
        "Battery Pack",
        "Inverter",
        "Charging Port",
    ]
    assert all(p.condition == PartCondition.NEW for p in vehicle.unique_parts)


def test_explicit_parts_replace_defaults():
    part = VehiclePart(name="Heat Pump", condition=PartCondition.GOOD, manufacturer="Valeo")
    vehicle = _electric_vehicle(unique_parts=[part])

    assert vehicle.unique_parts == [part]


@pytest.mark.parametrize("turbo, expected", [(True, PartCondition.NEW), (False, PartCondition.POOR)])
def test_diesel_turbocharger_condition_follows_turbo_flag(turbo, expected):
    vehicle = _diesel_vehicle(turbo_charged=turbo)

    parts = {p.name: p.condition for p in vehicle.unique_parts}
    assert parts["Turbocharger"] == expected
    assert parts["Glow Plugs"] == PartCondition.NEW
    assert len(parts) == 6


def test_engine_must_match_vehicle_type():
    with pytest.raises(ValidationError):
        Vehicle(
            vehicle_type=VehicleType.ELECTRIC,
            location=Location(latitude=0, longitude=0),
            details=VehicleDetails(
                manufactured_date=date(2020, 1, 1),
                model="Mismatch",
                fuel_type=FuelType.PETROL,
                bhp=100,
                torque=100,
            ),
            engine=PetrolEngineDetails(
                displacement=1600,
                cylinders=4,
                configuration="Inline",
                fuel_injection="Port",
                compression_ratio=10,
            ),
        )


def test_unique_parts_getter_returns_copy():
    vehicle = _electric_vehicle()

    parts = vehicle.unique_parts
    parts.append(VehiclePart(name="Extra", condition=PartCondition.FAIR))

    assert len(vehicle.unique_parts) == 4


def test_add_part_appends():
    vehicle = _electric_vehicle()
    vehicle.add_part(VehiclePart(name="Roof Rack", condition=PartCondition.GOOD))

    assert vehicle.unique_parts[-1].name == "Roof Rack"
    assert len(vehicle.unique_parts) == 5


def test_set_location_accepts_mapping_and_location():
    vehicle = _electric_vehicle()

    vehicle.set_location({"latitude": 10.5, "longitude": -20.25})
    assert vehicle.location == Location(latitude=10.5, longitude=-20.25)

    vehicle.set_location(Location(latitude=90, longitude=180))
    assert vehicle.location.latitude == 90
    assert vehicle.location.longitude == 180


@pytest.mark.parametrize(
    "location, message",
    [
        ({"latitude": 91, "longitude": 0}, "Invalid latitude: must be between -90 and 90"),
        ({"latitude": -90.5, "longitude": 0}, "Invalid latitude: must be between -90 and 90"),
        ({"latitude": 0, "longitude": 180.1}, "Invalid longitude: must be between -180 and 180"),
        ({"latitude": 0, "longitude": float("nan")}, "Invalid longitude: must be between -180 and 180"),
    ],
)
def test_set_location_out_of_range_keeps_previous(location, message):
    vehicle = _electric_vehicle()
    before = vehicle.location

    with pytest.raises(ValidationError) as exc_info:
        vehicle.set_location(location)

    assert exc_info.value.message == message
    assert vehicle.location == before


def test_set_location_rejects_non_numeric():
    vehicle = _electric_vehicle()

    with pytest.raises(ValidationError):
        vehicle.set_location({"latitude": "north", "longitude": 0})


def test_get_engine_details_uses_wire_names():
    vehicle = _electric_vehicle()

    assert vehicle.get_engine_details() == {
        "motorType": "Permanent Magnet",
        "voltage": 400.0,
        "batteryCapacity": 75.0,
        "range": 500.0,
    }


def test_update_battery_capacity():
    vehicle = _electric_vehicle()
    vehicle.update_battery_capacity(82)

    assert vehicle.engine.battery_capacity == 82
    assert vehicle.get_engine_details()["batteryCapacity"] == 82


def test_update_battery_capacity_rejects_non_positive():
    vehicle = _electric_vehicle()

    with pytest.raises(ValidationError):
        vehicle.update_battery_capacity(0)
    assert vehicle.engine.battery_capacity == 75


def test_update_battery_capacity_only_for_electric():
    vehicle = _diesel_vehicle(turbo_charged=True)

    with pytest.raises(ValidationError):
        vehicle.update_battery_capacity(50)


def test_to_representation_shape():
    vehicle = _electric_vehicle(id="abc123")

    rep = vehicle.to_representation()

    assert set(rep) == {"id", "type", "location", "details", "uniqueParts", "engineDetails"}
    assert rep["id"] == "abc123"
    assert rep["type"] == "Electric"
    assert rep["location"] == {"latitude": 19.8762, "longitude": 75.3433}
    assert rep["details"]["manufacturedDate"] == "2024-01-15"
    assert rep["details"]["fuelType"] == "EV"
    assert rep["details"]["model"] == "Tesla Model 3"
    assert rep["uniqueParts"][0] == {"name": "Electric Motor", "condition": "New"}
    assert rep["engineDetails"]["motorType"] == "Permanent Magnet"
