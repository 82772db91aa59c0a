from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, Query, status

from backend.app.api.dependencies import get_vehicles_service
from backend.app.schemas.vehicle import (
    LocationUpdate,
    MessageResponse,
    StatisticsResponse,
    VehicleCountResponse,
    VehicleListResponse,
    VehicleResponse,
)
from backend.app.services.vehicles_service import VehiclesService

router = APIRouter(
    prefix="/vehicles",
    tags=["vehicles"],
)

# Ошибки сервиса (FleetError) превращаются в {success: false, error}
# обработчиком в backend/main.py, здесь только happy path.


def _list_payload(vehicles) -> Dict[str, Any]:
    return {
        "success": True,
        "count": len(vehicles),
        "data": [v.to_representation() for v in vehicles],
    }


@router.post(
    "/",
    response_model=VehicleResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_vehicle(
    data_in: Any = Body(...),
    service: VehiclesService = Depends(get_vehicles_service),
):
    """
    Создать ТС. Тело принимается как есть и проверяется VehicleFactory.validate.
    """
    vehicle = await service.create_vehicle(data_in)
    return {"success": True, "data": vehicle.to_representation()}


@router.get(
    "/",
    response_model=VehicleListResponse,
)
async def list_vehicles(
    service: VehiclesService = Depends(get_vehicles_service),
):
    vehicles = await service.get_all_vehicles()
    return _list_payload(vehicles)


@router.get(
    "/statistics",
    response_model=StatisticsResponse,
)
async def get_statistics(
    service: VehiclesService = Depends(get_vehicles_service),
):
    stats = await service.get_statistics()
    return {"success": True, "data": stats}


@router.get(
    "/count",
    response_model=VehicleCountResponse,
)
async def count_vehicles(
    service: VehiclesService = Depends(get_vehicles_service),
):
    total = await service.get_vehicle_count()
    return {"success": True, "count": total}


@router.get(
    "/area",
    response_model=VehicleListResponse,
)
async def list_vehicles_in_area(
    min_lat: float = Query(..., alias="minLat"),
    max_lat: float = Query(..., alias="maxLat"),
    min_lng: float = Query(..., alias="minLng"),
    max_lng: float = Query(..., alias="maxLng"),
    service: VehiclesService = Depends(get_vehicles_service),
):
    """
    ТС внутри прямоугольника (границы включительно).
    """
    vehicles = await service.get_vehicles_in_area(min_lat, max_lat, min_lng, max_lng)
    return _list_payload(vehicles)


@router.get(
    "/type/{vehicle_type}",
    response_model=VehicleListResponse,
)
async def list_vehicles_by_type(
    vehicle_type: str,
    service: VehiclesService = Depends(get_vehicles_service),
):
    vehicles = await service.get_vehicles_by_type(vehicle_type)
    return _list_payload(vehicles)


@router.get(
    "/{vehicle_id}",
    response_model=VehicleResponse,
)
async def get_vehicle(
    vehicle_id: str,
    service: VehiclesService = Depends(get_vehicles_service),
):
    vehicle = await service.get_vehicle_by_id(vehicle_id)
    return {"success": True, "data": vehicle.to_representation()}


@router.put(
    "/{vehicle_id}",
    response_model=VehicleResponse,
)
async def update_vehicle(
    vehicle_id: str,
    data_in: Any = Body(...),
    service: VehiclesService = Depends(get_vehicles_service),
):
    """
    Полная замена записи ТС (не частичное обновление).
    """
    vehicle = await service.update_vehicle(vehicle_id, data_in)
    return {"success": True, "data": vehicle.to_representation()}


@router.patch(
    "/{vehicle_id}/location",
    response_model=VehicleResponse,
)
async def update_vehicle_location(
    vehicle_id: str,
    data_in: LocationUpdate,
    service: VehiclesService = Depends(get_vehicles_service),
):
    vehicle = await service.update_vehicle_location(
        vehicle_id,
        data_in.latitude,
        data_in.longitude,
    )
    return {"success": True, "data": vehicle.to_representation()}


@router.delete(
    "/{vehicle_id}",
    response_model=MessageResponse,
)
async def delete_vehicle(
    vehicle_id: str,
    service: VehiclesService = Depends(get_vehicles_service),
):
    await service.delete_vehicle(vehicle_id)
    return {"success": True, "message": "Vehicle deleted successfully"}
