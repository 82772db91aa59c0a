from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from ..core.errors import UnknownTypeError, ValidationError
from .engines import ENGINE_DETAILS_MODELS
from .values import VEHICLE_TYPES, Location, VehicleDetails, VehiclePart, VehicleType
from .vehicle import Vehicle

_REQUIRED_KEYS = ("type", "location", "details", "engineDetails")

_PARTS_ADAPTER = TypeAdapter(list[VehiclePart])


def _is_number(value: Any) -> bool:
    # bool является подклассом int, но координатой не считается
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_manufactured_date(value: Any) -> date:
    """
    manufacturedDate приходит строкой: "2024-01-15" или полный ISO timestamp
    ("2024-01-15T00:00:00.000Z"), от него берём только дату.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        raw = value.strip()
        try:
            return datetime.fromisoformat(raw.replace("Z", "+00:00")).date()
        except ValueError:
            pass
    raise ValidationError(f"Invalid manufacturedDate: {value!r}")


def _format_pydantic_error(exc: PydanticValidationError) -> str:
    items = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        items.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(items)


class VehicleFactory:
    """
    Граница между «сырыми» данными (JSON из запроса / документ из БД)
    и типизированным Vehicle.
    """

    @staticmethod
    def validate(data: Any) -> bool:
        """
        Быстрая проверка формы. Никогда не бросает исключений.

        Не проверяет диапазоны координат и схему engineDetails,
        это делает create() / инварианты Vehicle.
        """
        if not isinstance(data, Mapping):
            return False

        for key in _REQUIRED_KEYS:
            if data.get(key) is None:
                return False

        if data["type"] not in VEHICLE_TYPES:
            return False

        location = data["location"]
        if not isinstance(location, Mapping):
            return False
        if not _is_number(location.get("latitude")) or not _is_number(location.get("longitude")):
            return False

        return True

    @staticmethod
    def create(data: Mapping[str, Any]) -> Vehicle:
        """
        Собрать Vehicle нужного варианта.

        Непроверенный путь: для недоверенного ввода сначала validate().
        id берётся из "id" либо из старого ключа "_id".
        """
        raw_type = data.get("type")
        try:
            vehicle_type = VehicleType(raw_type)
        except ValueError:
            raise UnknownTypeError(f"Unknown vehicle type: {raw_type}") from None

        raw_details = data.get("details")
        if not isinstance(raw_details, Mapping):
            raise ValidationError("Vehicle details must be an object")

        details_in = dict(raw_details)
        details_in["manufacturedDate"] = _parse_manufactured_date(raw_details.get("manufacturedDate"))

        raw_id = data.get("id")
        if raw_id is None:
            raw_id = data.get("_id")

        raw_parts = data.get("uniqueParts")
        if raw_parts is None:
            raw_parts = []

        engine_model = ENGINE_DETAILS_MODELS[vehicle_type]

        try:
            location = Location.model_validate(data.get("location"))
            details = VehicleDetails.model_validate(details_in)
            engine = engine_model.model_validate(data.get("engineDetails"))
            parts = _PARTS_ADAPTER.validate_python(raw_parts)
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Invalid {vehicle_type.value} vehicle data: {_format_pydantic_error(exc)}"
            ) from exc

        return Vehicle(
            vehicle_type=vehicle_type,
            location=location,
            details=details,
            engine=engine,
            unique_parts=parts,
            id=str(raw_id) if raw_id is not None else None,
        )
