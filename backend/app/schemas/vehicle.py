from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain.values import Location, VehicleDetails, VehiclePart


class VehicleRead(BaseModel):
    """Представление ТС в ответах API (Vehicle.to_representation())."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    type: str
    location: Location
    details: VehicleDetails
    unique_parts: List[VehiclePart] = Field(default_factory=list, alias="uniqueParts")
    engine_details: Dict[str, Any] = Field(default_factory=dict, alias="engineDetails")


class LocationUpdate(BaseModel):
    # границы проверяет сервис, здесь только тип
    latitude: float
    longitude: float


class VehicleStatistics(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total: int = 0
    by_type: Dict[str, int] = Field(default_factory=dict, alias="byType")
    average_bhp: float = Field(0.0, alias="averageBHP")
    average_torque: float = Field(0.0, alias="averageTorque")


# ----------------------------------------------------------------------
# Конверты ответов: {success: true, data|count} / {success: false, error}
# ----------------------------------------------------------------------


class VehicleResponse(BaseModel):
    success: bool = True
    data: VehicleRead


class VehicleListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[VehicleRead]


class VehicleCountResponse(BaseModel):
    success: bool = True
    count: int


class StatisticsResponse(BaseModel):
    success: bool = True
    data: VehicleStatistics


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
