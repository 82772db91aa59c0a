from collections.abc import AsyncGenerator
from typing import Any, Dict, List, Optional
import logging

import httpx

from .config import settings

logger = logging.getLogger(__name__)

VEHICLES_ENDPOINT = "/api/v1/vehicles"


class FleetAPIError(Exception):
    """
    Backend ответил {success: false, error} или вообще не JSON.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class FleetAPIClient:
    """
    Тонкий клиент для REST API парка (/api/v1/vehicles).

    Все методы возвращают уже распакованное поле data из конверта
    {success, data|count}, при success=false бросают FleetAPIError.
    """

    def __init__(
        self,
        base_url: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url or str(settings.BACKEND_API_URL)
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=settings.BACKEND_TIMEOUT,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        endpoint: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        fallback_error: str,
    ) -> Dict[str, Any]:
        resp = await self._client.request(method, endpoint, json=json, params=params)

        try:
            payload = resp.json()
        except ValueError:
            logger.warning("Backend returned non-JSON response %s on %s %s", resp.status_code, method, endpoint)
            raise FleetAPIError(fallback_error, status_code=resp.status_code) from None

        if not isinstance(payload, dict) or not payload.get("success"):
            error = payload.get("error") if isinstance(payload, dict) else None
            raise FleetAPIError(error or fallback_error, status_code=resp.status_code)

        return payload

    # ------------------------------------------------------------------
    # VEHICLES
    # ------------------------------------------------------------------

    async def get_all_vehicles(self) -> List[Dict[str, Any]]:
        payload = await self._request(
            "GET",
            f"{VEHICLES_ENDPOINT}/",
            fallback_error="Failed to fetch vehicles",
        )
        return payload.get("data") or []

    async def get_vehicle_by_id(self, vehicle_id: str) -> Dict[str, Any]:
        payload = await self._request(
            "GET",
            f"{VEHICLES_ENDPOINT}/{vehicle_id}",
            fallback_error="Failed to fetch vehicle",
        )
        return payload["data"]

    async def get_vehicles_by_type(self, vehicle_type: str) -> List[Dict[str, Any]]:
        payload = await self._request(
            "GET",
            f"{VEHICLES_ENDPOINT}/type/{vehicle_type}",
            fallback_error="Failed to fetch vehicles",
        )
        return payload.get("data") or []

    async def get_vehicles_in_area(
        self,
        min_lat: float,
        max_lat: float,
        min_lng: float,
        max_lng: float,
    ) -> List[Dict[str, Any]]:
        payload = await self._request(
            "GET",
            f"{VEHICLES_ENDPOINT}/area",
            params={"minLat": min_lat, "maxLat": max_lat, "minLng": min_lng, "maxLng": max_lng},
            fallback_error="Failed to fetch vehicles",
        )
        return payload.get("data") or []

    async def create_vehicle(self, vehicle: Dict[str, Any]) -> Dict[str, Any]:
        payload = await self._request(
            "POST",
            f"{VEHICLES_ENDPOINT}/",
            json=vehicle,
            fallback_error="Failed to create vehicle",
        )
        return payload["data"]

    async def update_vehicle(self, vehicle_id: str, vehicle: Dict[str, Any]) -> Dict[str, Any]:
        payload = await self._request(
            "PUT",
            f"{VEHICLES_ENDPOINT}/{vehicle_id}",
            json=vehicle,
            fallback_error="Failed to update vehicle",
        )
        return payload["data"]

    async def update_vehicle_location(
        self,
        vehicle_id: str,
        latitude: float,
        longitude: float,
    ) -> Dict[str, Any]:
        payload = await self._request(
            "PATCH",
            f"{VEHICLES_ENDPOINT}/{vehicle_id}/location",
            json={"latitude": latitude, "longitude": longitude},
            fallback_error="Failed to update location",
        )
        return payload["data"]

    async def delete_vehicle(self, vehicle_id: str) -> None:
        await self._request(
            "DELETE",
            f"{VEHICLES_ENDPOINT}/{vehicle_id}",
            fallback_error="Failed to delete vehicle",
        )

    async def get_statistics(self) -> Dict[str, Any]:
        payload = await self._request(
            "GET",
            f"{VEHICLES_ENDPOINT}/statistics",
            fallback_error="Failed to fetch statistics",
        )
        return payload.get("data") or {}


async def get_backend_client() -> AsyncGenerator[FleetAPIClient, None]:
    """
    FastAPI dependency: даёт FleetAPIClient с base_url backend'а.
    """
    client = FleetAPIClient()
    try:
        yield client
    finally:
        await client.aclose()
