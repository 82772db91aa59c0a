from .vehicle import VehicleRecord

__all__ = [
    "VehicleRecord",
]
