"""Async client for the operations REST backend.

Every dashboard view reads and writes through this client. It forwards the
caller's bearer token, turns non-2xx answers into BackendAPIError (401 into
BackendUnauthorizedError) and never retries.
"""
import logging
from typing import Any, AsyncGenerator, Dict, List, Optional

import httpx
from fastapi import Depends

from app.core.config import settings
from app.core.exceptions import BackendAPIError, BackendUnauthorizedError
from app.core.security import get_backend_token

logger = logging.getLogger(__name__)

DEFAULT_PAGE_LIMIT = 1000000


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        message = body["message"]
        # validation pipes on the backend answer with a list of messages
        return "; ".join(str(m) for m in message) if isinstance(message, list) else str(message)
    return response.text or response.reason_phrase or "Backend request failed"


def _query(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    return {k: v for k, v in (params or {}).items() if v is not None and v != ""}


def _empty_page(page: int, limit: int) -> Dict[str, Any]:
    return {"data": [], "total": 0, "page": page, "limit": limit}


class BackendClient:
    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=timeout or settings.BACKEND_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("Backend unreachable: %s %s (%s)", method, path, exc)
            raise BackendAPIError(502, "Backend service unavailable") from exc

        logger.info("Backend %s %s -> %s", method, path, response.status_code)
        if response.status_code == 401:
            raise BackendUnauthorizedError()
        if response.is_error:
            # upstream crashes are a bad gateway from the dashboard's point of view
            status_code = 502 if response.status_code >= 500 else response.status_code
            raise BackendAPIError(status_code, _error_message(response))
        if not response.content:
            return None
        return response.json()

    async def _list_page(self, path: str, page: int, limit: int) -> Dict[str, Any]:
        # list views degrade to an empty page instead of failing the whole screen
        try:
            return await self._request("GET", path, params={"page": page, "limit": limit})
        except BackendUnauthorizedError:
            raise
        except BackendAPIError as exc:
            logger.warning("Listing %s failed, showing an empty page: %s", path, exc.message)
            return _empty_page(page, limit)

    #----Projects----#

    async def list_projects(self, page: int = 1, limit: int = DEFAULT_PAGE_LIMIT) -> Dict[str, Any]:
        return await self._list_page("/projects", page, limit)

    async def get_project(self, project_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/projects/{project_id}")

    async def create_project(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/projects", json=payload)

    async def update_project(self, project_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PATCH", f"/projects/{project_id}", json=payload)

    async def delete_project(self, project_id: str) -> bool:
        await self._request("DELETE", f"/projects/{project_id}")
        return True

    #----Locations----#

    async def list_locations(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/locations")

    async def get_locations_basic_info(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/locations/get/basic-info")

    async def create_location(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/locations", json=payload)

    async def update_location(self, location_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PATCH", f"/locations/{location_id}", json=payload)

    async def delete_location(self, location_id: str) -> Any:
        return await self._request("DELETE", f"/locations/{location_id}")

    #----Service orders----#

    async def list_service_orders(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/service-orders")

    async def create_service_order(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/service-orders", json=payload)

    async def update_service_order(self, order_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PATCH", f"/service-orders/{order_id}", json=payload)

    async def delete_service_order(self, order_id: str) -> Any:
        return await self._request("DELETE", f"/service-orders/{order_id}")

    async def approve_service_order(self, order_id: str) -> Dict[str, Any]:
        return await self._request("PATCH", f"/service-orders/{order_id}/approve")

    #----Subcontractors----#

    async def list_subcontractors(self, page: int = 1, limit: int = DEFAULT_PAGE_LIMIT) -> Dict[str, Any]:
        return await self._list_page("/subcontractors", page, limit)

    async def get_subcontractor(self, subcontractor_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/subcontractors/{subcontractor_id}")

    async def get_subcontractors_basic_info(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/subcontractors/get/basic-info")

    async def create_subcontractor(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/subcontractors", json=payload)

    async def update_subcontractor(self, subcontractor_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PATCH", f"/subcontractors/{subcontractor_id}", json=payload)

    async def delete_subcontractor(self, subcontractor_id: str) -> bool:
        await self._request("DELETE", f"/subcontractors/{subcontractor_id}")
        return True

    async def add_subcontractor_to_project(self, project_id: str, subcontractor_id: str) -> bool:
        await self._request("POST", f"/subcontractors/projects/{project_id}/subcontractors/{subcontractor_id}", json={})
        return True

    async def remove_subcontractor_from_project(self, project_id: str, subcontractor_id: str) -> bool:
        await self._request("DELETE", f"/subcontractors/projects/{project_id}/subcontractors/{subcontractor_id}")
        return True

    #----Employees----#

    async def list_employees(self, page: int = 1, limit: int = DEFAULT_PAGE_LIMIT) -> Dict[str, Any]:
        return await self._list_page("/users", page, limit)

    async def get_employees_basic_info(self) -> List[Dict[str, Any]]:
        data = await self._request("GET", "/users/basic-info")
        return (data or {}).get("users") or []

    async def get_employee(self, employee_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/user/{employee_id}")

    async def register_employee(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/auth/register", json=payload)

    async def update_employee(self, employee_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PATCH", f"/user/{employee_id}", json=payload)

    async def delete_employee(self, employee_id: str) -> bool:
        await self._request("DELETE", f"/user/{employee_id}")
        return True

    #----Inventory----#

    async def list_inventory_items(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        data = await self._request("GET", "/inventory/items", params=_query(params))
        return (data or {}).get("data") or []

    async def get_inventory_item(self, item_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/inventory/items/{item_id}")

    async def create_inventory_item(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/inventory/items", json=payload)

    async def update_inventory_item(self, item_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PATCH", f"/inventory/items/{item_id}", json=payload)

    async def delete_inventory_item(self, item_id: str) -> Any:
        return await self._request("DELETE", f"/inventory/items/{item_id}")

    async def list_warehouses(self) -> List[Dict[str, Any]]:
        data = await self._request("GET", "/inventory/warehouses")
        return (data or {}).get("data") or []

    async def list_suppliers(self, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        data = await self._request("GET", "/inventory/suppliers", params=_query(params))
        return (data or {}).get("data") or []

    async def get_inventory_dashboard_stats(self) -> Dict[str, Any]:
        data = await self._request("GET", "/dashboard/inventory-stats")
        return (data or {}).get("data") or {}


async def get_backend_client(token: Optional[str] = Depends(get_backend_token)) -> AsyncGenerator[BackendClient, None]:
    """Dependency that yields a BackendClient acting with the caller's token."""
    async with BackendClient(settings.BACKEND_API_URL, token=token) as client:
        yield client
