from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_session
from app.schemas.domain import DeliverableCreate, DraftRead
from app.schemas.project import ProjectDraftFieldUpdate
from app.services import draft_service
from app.services.backend_client import BackendClient, get_backend_client

router = APIRouter(prefix="/project-drafts", tags=["project-editor"])


def _position(index: Optional[int]) -> int:
    # unknown keys map to a position no operation matches, i.e. a no-op
    return -1 if index is None else index


@router.get("/{draft_id}", response_model=DraftRead)
async def get_draft(draft_id: str, session: AsyncSession = Depends(get_session)):
    record = await draft_service.get_draft(session, draft_id)
    return DraftRead.from_record(record)


@router.patch("/{draft_id}", response_model=DraftRead)
async def update_draft_fields(draft_id: str, payload: ProjectDraftFieldUpdate, session: AsyncSession = Depends(get_session)):
    record = await draft_service.apply_edit(session, draft_id, lambda form: form.update_fields(payload))
    return DraftRead.from_record(record)


# Milestones
@router.post("/{draft_id}/milestones", response_model=DraftRead, status_code=status.HTTP_201_CREATED)
async def add_milestone(draft_id: str, session: AsyncSession = Depends(get_session)):
    record = await draft_service.apply_edit(session, draft_id, lambda form: form.add_milestone())
    return DraftRead.from_record(record)


@router.delete("/{draft_id}/milestones/{milestone_key}", response_model=DraftRead)
async def remove_milestone(draft_id: str, milestone_key: str, session: AsyncSession = Depends(get_session)):
    def operation(form):
        form.remove_milestone(_position(form.milestone_index(milestone_key)))

    record = await draft_service.apply_edit(session, draft_id, operation)
    return DraftRead.from_record(record)


# Tasks
@router.post("/{draft_id}/milestones/{milestone_key}/tasks", response_model=DraftRead, status_code=status.HTTP_201_CREATED)
async def add_task(draft_id: str, milestone_key: str, session: AsyncSession = Depends(get_session)):
    def operation(form):
        form.add_task(_position(form.milestone_index(milestone_key)))

    record = await draft_service.apply_edit(session, draft_id, operation)
    return DraftRead.from_record(record)


@router.delete("/{draft_id}/milestones/{milestone_key}/tasks/{task_key}", response_model=DraftRead)
async def remove_task(draft_id: str, milestone_key: str, task_key: str, session: AsyncSession = Depends(get_session)):
    def operation(form):
        milestone_index = _position(form.milestone_index(milestone_key))
        form.remove_task(milestone_index, _position(form.task_index(milestone_index, task_key)))

    record = await draft_service.apply_edit(session, draft_id, operation)
    return DraftRead.from_record(record)


# Deliverables
@router.post("/{draft_id}/milestones/{milestone_key}/deliverables", response_model=DraftRead, status_code=status.HTTP_201_CREATED)
async def add_deliverable(
    draft_id: str,
    milestone_key: str,
    payload: DeliverableCreate,
    session: AsyncSession = Depends(get_session),
):
    def operation(form):
        form.add_deliverable(_position(form.milestone_index(milestone_key)), payload.text)

    record = await draft_service.apply_edit(session, draft_id, operation)
    return DraftRead.from_record(record)


@router.delete("/{draft_id}/milestones/{milestone_key}/deliverables/{deliverable_index}", response_model=DraftRead)
async def remove_deliverable(
    draft_id: str,
    milestone_key: str,
    deliverable_index: int,
    session: AsyncSession = Depends(get_session),
):
    def operation(form):
        form.remove_deliverable(_position(form.milestone_index(milestone_key)), deliverable_index)

    record = await draft_service.apply_edit(session, draft_id, operation)
    return DraftRead.from_record(record)


# Risks
@router.post("/{draft_id}/risks", response_model=DraftRead, status_code=status.HTTP_201_CREATED)
async def add_risk(draft_id: str, session: AsyncSession = Depends(get_session)):
    record = await draft_service.apply_edit(session, draft_id, lambda form: form.add_risk())
    return DraftRead.from_record(record)


@router.delete("/{draft_id}/risks/{risk_key}", response_model=DraftRead)
async def remove_risk(draft_id: str, risk_key: str, session: AsyncSession = Depends(get_session)):
    def operation(form):
        form.remove_risk(_position(form.risk_index(risk_key)))

    record = await draft_service.apply_edit(session, draft_id, operation)
    return DraftRead.from_record(record)


# Save / cancel
@router.post("/{draft_id}/submit")
async def submit_draft(
    draft_id: str,
    session: AsyncSession = Depends(get_session),
    client: BackendClient = Depends(get_backend_client),
):
    """Save the whole draft upstream; answers with the re-fetched project (view mode)."""
    return await draft_service.submit_draft(session, client, draft_id)


@router.post("/{draft_id}/cancel")
async def cancel_draft(
    draft_id: str,
    session: AsyncSession = Depends(get_session),
    client: BackendClient = Depends(get_backend_client),
):
    return await draft_service.cancel_draft(session, client, draft_id)
