from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Float,
    String,
    func,
)

from ..core.db import Base


def _new_vehicle_id() -> str:
    return uuid.uuid4().hex


class VehicleRecord(Base):
    """
    Документ ТС. Вариантные части (details / uniqueParts / engineDetails)
    лежат как JSON, type и координаты вынесены в колонки под индексы
    (см. core/safe_migrations.py).
    """

    __tablename__ = "vehicles"

    id = Column(String(32), primary_key=True, default=_new_vehicle_id)

    # Electric | Petrol | Diesel | Hybrid
    type = Column(String(20), nullable=False)

    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)

    details = Column(JSON, nullable=False)
    unique_parts = Column(JSON, nullable=False, default=list)
    engine_details = Column(JSON, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def apply_representation(self, data: dict[str, Any]) -> None:
        """Перезаписать все поля документа, кроме id."""
        self.type = data["type"]
        self.latitude = data["location"]["latitude"]
        self.longitude = data["location"]["longitude"]
        self.details = data["details"]
        self.unique_parts = data["uniqueParts"]
        self.engine_details = data["engineDetails"]

    def to_document(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "location": {
                "latitude": self.latitude,
                "longitude": self.longitude,
            },
            "details": self.details,
            "uniqueParts": self.unique_parts or [],
            "engineDetails": self.engine_details,
        }
