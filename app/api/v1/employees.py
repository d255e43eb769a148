from typing import Any, Dict
from fastapi import APIRouter, Body, Depends, status

from app.schemas.domain import PaginatedRead
from app.services.backend_client import BackendClient, get_backend_client, DEFAULT_PAGE_LIMIT

router = APIRouter(prefix="/employees", tags=["employees"])


@router.get("", response_model=PaginatedRead)
async def get_employees(page: int = 1, limit: int = DEFAULT_PAGE_LIMIT, client: BackendClient = Depends(get_backend_client)):
    return await client.list_employees(page=page, limit=limit)


@router.get("/basic-info")
async def get_employees_basic_info(client: BackendClient = Depends(get_backend_client)):
    # project leader options
    return await client.get_employees_basic_info()


@router.get("/{employee_id}")
async def get_employee(employee_id: str, client: BackendClient = Depends(get_backend_client)):
    return await client.get_employee(employee_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def register_employee(payload: Dict[str, Any] = Body(...), client: BackendClient = Depends(get_backend_client)):
    return await client.register_employee(payload)


@router.patch("/{employee_id}")
async def update_employee(employee_id: str, payload: Dict[str, Any] = Body(...), client: BackendClient = Depends(get_backend_client)):
    return await client.update_employee(employee_id, payload)


@router.delete("/{employee_id}")
async def delete_employee(employee_id: str, client: BackendClient = Depends(get_backend_client)):
    await client.delete_employee(employee_id)
    return {"ok": True}
