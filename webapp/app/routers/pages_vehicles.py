from typing import Any, Mapping
import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from ..api_client import FleetAPIClient, FleetAPIError, get_backend_client
from ..dependencies import get_templates

logger = logging.getLogger(__name__)

router = APIRouter(
    tags=["vehicles"],
)

templates = get_templates()

VEHICLE_TYPES = ("Electric", "Petrol", "Diesel", "Hybrid")

# выпадающие списки формы (значения = wire-формат backend'а)
FORM_CHOICES: dict[str, tuple[str, ...]] = {
    "motorType": ("AC", "DC", "Permanent Magnet"),
    "configuration": ("Inline", "V-Type", "Flat"),
    "fuelInjection": ("Port", "Direct"),
    "fuelSystemType": ("Common Rail", "Direct Injection", "Indirect Injection"),
    "hybridType": ("Parallel", "Series", "Series-Parallel"),
}


class FormError(ValueError):
    pass


# --------------------------------------------------------------------
# Разбор формы -> payload для POST /api/v1/vehicles/
# --------------------------------------------------------------------


def _float(form: Mapping[str, Any], name: str, label: str) -> float:
    raw = str(form.get(name) or "").replace(",", ".").strip()
    if not raw:
        raise FormError(f"Поле «{label}» обязательно.")
    try:
        return float(raw)
    except ValueError:
        raise FormError(f"Поле «{label}» должно быть числом.") from None


def _int(form: Mapping[str, Any], name: str, label: str) -> int:
    raw = str(form.get(name) or "").strip()
    if not raw:
        raise FormError(f"Поле «{label}» обязательно.")
    try:
        return int(raw)
    except ValueError:
        raise FormError(f"Поле «{label}» должно быть целым числом.") from None


def _choice(form: Mapping[str, Any], name: str) -> str:
    value = str(form.get(name) or "").strip()
    options = FORM_CHOICES[name]
    return value if value in options else options[0]


def build_vehicle_payload(form: Mapping[str, Any]) -> dict[str, Any]:
    """
    Собирает тело запроса из полей формы. Электромобиль -> fuelType "EV",
    остальные типы -> fuelType совпадает с типом.
    """
    vehicle_type = str(form.get("type") or "").strip()
    if vehicle_type not in VEHICLE_TYPES:
        raise FormError("Выберите тип транспортного средства.")

    model = str(form.get("model") or "").strip()
    if not model:
        raise FormError("Укажите модель.")

    manufactured_date = str(form.get("manufacturedDate") or "").strip()
    if not manufactured_date:
        raise FormError("Укажите дату выпуска.")

    payload: dict[str, Any] = {
        "type": vehicle_type,
        "location": {
            "latitude": _float(form, "latitude", "Широта"),
            "longitude": _float(form, "longitude", "Долгота"),
        },
        "details": {
            "manufacturedDate": manufactured_date,
            "model": model,
            "fuelType": "EV" if vehicle_type == "Electric" else vehicle_type,
            "bhp": _float(form, "bhp", "Мощность (л.с.)"),
            "torque": _float(form, "torque", "Крутящий момент"),
        },
        # пустой список: backend подставит комплект деталей по умолчанию
        "uniqueParts": [],
    }

    if vehicle_type == "Electric":
        payload["engineDetails"] = {
            "motorType": _choice(form, "motorType"),
            "voltage": _float(form, "voltage", "Напряжение"),
            "batteryCapacity": _float(form, "batteryCapacity", "Ёмкость батареи"),
            "range": _float(form, "range", "Запас хода"),
        }
    elif vehicle_type == "Petrol":
        payload["engineDetails"] = {
            "displacement": _float(form, "displacement", "Объём двигателя"),
            "cylinders": _int(form, "cylinders", "Цилиндры"),
            "configuration": _choice(form, "configuration"),
            "fuelInjection": _choice(form, "fuelInjection"),
            "compressionRatio": _float(form, "compressionRatio", "Степень сжатия"),
        }
    elif vehicle_type == "Diesel":
        payload["engineDetails"] = {
            "displacement": _float(form, "displacement", "Объём двигателя"),
            "cylinders": _int(form, "cylinders", "Цилиндры"),
            "configuration": _choice(form, "configuration"),
            "turboCharged": str(form.get("turboCharged") or "").lower() in ("1", "true", "on", "yes"),
            "compressionRatio": _float(form, "compressionRatio", "Степень сжатия"),
            "fuelSystemType": _choice(form, "fuelSystemType"),
        }
    else:
        payload["engineDetails"] = {
            "iceDisplacement": _float(form, "iceDisplacement", "Объём ДВС"),
            "iceCylinders": _int(form, "iceCylinders", "Цилиндры ДВС"),
            "electricMotorPower": _float(form, "electricMotorPower", "Мощность электромотора"),
            "batteryCapacity": _float(form, "hybridBatteryCapacity", "Ёмкость батареи"),
            "hybridType": _choice(form, "hybridType"),
            "electricRange": _float(form, "electricRange", "Запас хода на электричестве"),
        }

    return payload


# --------------------------------------------------------------------
# Дашборд: список + статистика + фильтр по типу
# --------------------------------------------------------------------


@router.get("/", response_class=HTMLResponse)
async def vehicles_dashboard(
    request: Request,
    vehicle_type: str = Query("all", alias="type"),
    client: FleetAPIClient = Depends(get_backend_client),
) -> HTMLResponse:
    vehicles: list[dict[str, Any]] = []
    stats: dict[str, Any] | None = None
    error_message: str | None = None

    if vehicle_type != "all" and vehicle_type not in VEHICLE_TYPES:
        vehicle_type = "all"

    try:
        if vehicle_type == "all":
            vehicles = await client.get_all_vehicles()
        else:
            vehicles = await client.get_vehicles_by_type(vehicle_type)
    except Exception as e:
        logger.warning("Failed to load vehicles: %r", e)
        error_message = "Не удалось загрузить список ТС. Попробуйте позже."
        vehicles = []

    # статистика не критична: без неё страница всё равно рисуется
    try:
        stats = await client.get_statistics()
    except Exception as e:
        logger.warning("Failed to load statistics: %r", e)
        stats = None

    return templates.TemplateResponse(
        request,
        "vehicles/list.html",
        {
            "vehicles": vehicles,
            "stats": stats,
            "filter_type": vehicle_type,
            "vehicle_types": VEHICLE_TYPES,
            "error_message": error_message,
        },
    )


# --------------------------------------------------------------------
# Добавление ТС
# --------------------------------------------------------------------


def _render_form(request: Request, form: Mapping[str, Any], error: str | None) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "vehicles/form.html",
        {
            "form": form,
            "vehicle_types": VEHICLE_TYPES,
            "choices": FORM_CHOICES,
            "error": error,
        },
        status_code=status.HTTP_400_BAD_REQUEST if error else status.HTTP_200_OK,
    )


@router.get("/vehicles/create", response_class=HTMLResponse)
async def vehicle_create_get(request: Request) -> HTMLResponse:
    return _render_form(request, {"type": "Electric"}, None)


@router.post("/vehicles/create", response_class=HTMLResponse)
async def vehicle_create_post(
    request: Request,
    client: FleetAPIClient = Depends(get_backend_client),
) -> HTMLResponse:
    form = dict(await request.form())

    try:
        payload = build_vehicle_payload(form)
    except FormError as e:
        return _render_form(request, form, str(e))

    try:
        created = await client.create_vehicle(payload)
    except FleetAPIError as e:
        return _render_form(request, form, f"Не удалось добавить ТС: {e.message}")
    except Exception as e:
        logger.warning("Failed to create vehicle: %r", e)
        return _render_form(request, form, "Не удалось добавить ТС. Попробуйте позже.")

    return RedirectResponse(url=f"/vehicles/{created['id']}", status_code=status.HTTP_303_SEE_OTHER)


# --------------------------------------------------------------------
# Карточка ТС
# --------------------------------------------------------------------


@router.get("/vehicles/{vehicle_id}", response_class=HTMLResponse)
async def vehicle_detail(
    vehicle_id: str,
    request: Request,
    client: FleetAPIClient = Depends(get_backend_client),
) -> HTMLResponse:
    try:
        vehicle = await client.get_vehicle_by_id(vehicle_id)
    except FleetAPIError as e:
        if e.status_code == status.HTTP_404_NOT_FOUND:
            raise HTTPException(status_code=404, detail="ТС не найдено")
        raise HTTPException(status_code=502, detail="Ошибка backend'а")
    except httpx.HTTPError as e:
        logger.warning("Backend unreachable while loading vehicle %s: %r", vehicle_id, e)
        raise HTTPException(status_code=502, detail="Backend недоступен")

    return templates.TemplateResponse(
        request,
        "vehicles/detail.html",
        {"vehicle": vehicle},
    )


# --------------------------------------------------------------------
# Удаление ТС
# --------------------------------------------------------------------


@router.post("/vehicles/{vehicle_id}/delete", response_class=HTMLResponse)
async def vehicle_delete_post(
    vehicle_id: str,
    client: FleetAPIClient = Depends(get_backend_client),
) -> HTMLResponse:
    try:
        await client.delete_vehicle(vehicle_id)
    except FleetAPIError as e:
        # 404: уже удалено, для оператора это не ошибка
        if e.status_code != status.HTTP_404_NOT_FOUND:
            logger.warning("Failed to delete vehicle %s: %s", vehicle_id, e.message)
    except httpx.HTTPError as e:
        logger.warning("Backend unreachable while deleting vehicle %s: %r", vehicle_id, e)

    return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
