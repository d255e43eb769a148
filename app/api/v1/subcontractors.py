from typing import Any, Dict
from fastapi import APIRouter, Body, Depends, status

from app.schemas.domain import PaginatedRead
from app.services.backend_client import BackendClient, get_backend_client, DEFAULT_PAGE_LIMIT

router = APIRouter(prefix="/subcontractors", tags=["subcontractors"])


@router.get("", response_model=PaginatedRead)
async def get_subcontractors(page: int = 1, limit: int = DEFAULT_PAGE_LIMIT, client: BackendClient = Depends(get_backend_client)):
    return await client.list_subcontractors(page=page, limit=limit)


@router.get("/basic-info")
async def get_subcontractors_basic_info(client: BackendClient = Depends(get_backend_client)):
    """Picker options for the project form (team step)."""
    return await client.get_subcontractors_basic_info()


@router.get("/{subcontractor_id}")
async def get_subcontractor(subcontractor_id: str, client: BackendClient = Depends(get_backend_client)):
    return await client.get_subcontractor(subcontractor_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_subcontractor(payload: Dict[str, Any] = Body(...), client: BackendClient = Depends(get_backend_client)):
    return await client.create_subcontractor(payload)


@router.patch("/{subcontractor_id}")
async def update_subcontractor(subcontractor_id: str, payload: Dict[str, Any] = Body(...), client: BackendClient = Depends(get_backend_client)):
    return await client.update_subcontractor(subcontractor_id, payload)


@router.delete("/{subcontractor_id}")
async def delete_subcontractor(subcontractor_id: str, client: BackendClient = Depends(get_backend_client)):
    await client.delete_subcontractor(subcontractor_id)
    return {"ok": True}


@router.post("/{subcontractor_id}/projects/{project_id}")
async def assign_to_project(subcontractor_id: str, project_id: str, client: BackendClient = Depends(get_backend_client)):
    await client.add_subcontractor_to_project(project_id, subcontractor_id)
    return {"ok": True}


@router.delete("/{subcontractor_id}/projects/{project_id}")
async def unassign_from_project(subcontractor_id: str, project_id: str, client: BackendClient = Depends(get_backend_client)):
    await client.remove_subcontractor_from_project(project_id, subcontractor_id)
    return {"ok": True}
