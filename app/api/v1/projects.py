from typing import Any, Dict
from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.schemas.domain import DraftRead, PaginatedRead
from app.schemas.project_read import ProjectPortfolioStatsRead
from app.services import draft_service
from app.services.backend_client import BackendClient, get_backend_client, DEFAULT_PAGE_LIMIT
from app.services.project_stats import compute_stats

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=PaginatedRead)
async def get_projects(page: int = 1, limit: int = DEFAULT_PAGE_LIMIT, client: BackendClient = Depends(get_backend_client)):
    return await client.list_projects(page=page, limit=limit)


@router.get("/stats", response_model=ProjectPortfolioStatsRead)
async def get_project_stats(client: BackendClient = Depends(get_backend_client)):
    """Figures for the portfolio cards on the projects page."""
    page = await client.list_projects()
    projects = page.get("data") if isinstance(page, dict) else page
    return ProjectPortfolioStatsRead(**compute_stats(projects or []))


@router.get("/{project_id}")
async def get_project(project_id: str, client: BackendClient = Depends(get_backend_client)):
    # view mode: the server record as-is
    return await client.get_project(project_id)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(payload: Dict[str, Any] = Body(...), client: BackendClient = Depends(get_backend_client)):
    return await client.create_project(payload)


@router.delete("/{project_id}")
async def delete_project(project_id: str, client: BackendClient = Depends(get_backend_client)):
    await client.delete_project(project_id)
    return {"ok": True}


@router.post("/{project_id}/drafts", response_model=DraftRead, status_code=status.HTTP_201_CREATED)
async def begin_project_edit(
    project_id: str,
    session: AsyncSession = Depends(get_session),
    client: BackendClient = Depends(get_backend_client),
):
    """Switch the project form to edit mode: a new draft cloned from the current record."""
    record = await draft_service.begin_edit(session, client, project_id)
    return DraftRead.from_record(record)
