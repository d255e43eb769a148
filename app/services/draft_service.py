"""Project editor sessions: stored drafts plus the save/cancel round trips upstream."""
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Tuple

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BackendAPIError, DraftNotFoundError, SubmissionInProgressError
from app.models.project_draft import ProjectDraftRecord
from app.schemas.project import ProjectDraft, validate_submission
from app.services.backend_client import BackendClient
from app.services.form_state import ProjectFormController
from app.services.normalizer import normalize_project

logger = logging.getLogger(__name__)


def dump_draft(draft: ProjectDraft) -> Dict[str, Any]:
    return draft.model_dump(mode="json", by_alias=True)


def load_draft(record: ProjectDraftRecord) -> ProjectDraft:
    return ProjectDraft.model_validate(record.draft)


async def get_draft(session: AsyncSession, draft_id: str) -> ProjectDraftRecord:
    record = await session.get(ProjectDraftRecord, draft_id)
    if not record:
        raise DraftNotFoundError(draft_id)
    return record


async def save_draft(session: AsyncSession, record: ProjectDraftRecord, draft: ProjectDraft) -> ProjectDraftRecord:
    # a fresh dict each time so the JSON column is seen as changed
    record.draft = dump_draft(draft)
    record.updated_at = datetime.now(timezone.utc)
    session.add(record)
    await session.commit()
    await session.refresh(record)
    return record


async def delete_draft(session: AsyncSession, record: ProjectDraftRecord) -> None:
    await session.delete(record)
    await session.commit()


async def _claim_submission(session: AsyncSession, draft_id: str) -> None:
    result = await session.execute(
        update(ProjectDraftRecord)
        .where(ProjectDraftRecord.id == draft_id, ProjectDraftRecord.is_submitting == False)  # noqa: E712
        .values(is_submitting=True)
    )
    await session.commit()
    if result.rowcount == 0:
        raise SubmissionInProgressError(draft_id)


async def _release_submission(session: AsyncSession, draft_id: str) -> None:
    await session.execute(
        update(ProjectDraftRecord).where(ProjectDraftRecord.id == draft_id).values(is_submitting=False)
    )
    await session.commit()


async def begin_edit(session: AsyncSession, client: BackendClient, project_id: str) -> ProjectDraftRecord:
    """Fetch the project and open a new editor session on a copy of it."""
    project = await client.get_project(project_id)
    controller = ProjectFormController(record=project)
    draft = controller.begin_edit()

    record = ProjectDraftRecord(project_id=project_id, draft=dump_draft(draft))
    session.add(record)
    await session.commit()
    await session.refresh(record)
    logger.info("Opened draft %s for project %s", record.id, project_id)
    return record


async def apply_edit(
    session: AsyncSession,
    draft_id: str,
    operation: Callable[[ProjectFormController], Any],
) -> ProjectDraftRecord:
    """Run one structural or field edit against a stored draft and persist the result."""
    record = await get_draft(session, draft_id)
    if record.is_submitting:
        # the in-flight save deletes this draft; a later edit would be lost
        raise SubmissionInProgressError(draft_id)
    controller = ProjectFormController(draft=load_draft(record))
    operation(controller)
    return await save_draft(session, record, controller.draft)


async def load_controller(session: AsyncSession, draft_id: str) -> Tuple[ProjectDraftRecord, ProjectFormController]:
    record = await get_draft(session, draft_id)
    return record, ProjectFormController(draft=load_draft(record))


async def submit_draft(session: AsyncSession, client: BackendClient, draft_id: str) -> Dict[str, Any]:
    """Validate, normalize and send the whole draft, then return the re-fetched project.

    On any upstream failure the draft stays stored and editable.
    """
    record, controller = await load_controller(session, draft_id)
    validate_submission(controller.draft)

    await _claim_submission(session, draft_id)
    payload = normalize_project(controller.draft)
    try:
        updated = await client.update_project(record.project_id, payload)
    except Exception as exc:
        logger.warning("Saving draft %s failed: %s", draft_id, exc)
        await _release_submission(session, draft_id)
        raise

    project_id = record.project_id
    await session.refresh(record)
    await delete_draft(session, record)
    logger.info("Draft %s saved to project %s", draft_id, project_id)

    try:
        fresh = await client.get_project(project_id)
    except BackendAPIError as exc:
        # the save itself went through; fall back to what the update answered
        logger.warning("Re-fetching project %s after save failed: %s", project_id, exc.message)
        fresh = updated if updated is not None else {"_id": project_id, **payload}
    controller.complete_save(fresh)
    return controller.record


async def cancel_draft(session: AsyncSession, client: BackendClient, draft_id: str) -> Dict[str, Any]:
    record, controller = await load_controller(session, draft_id)
    project_id = record.project_id
    await delete_draft(session, record)
    logger.info("Draft %s discarded", draft_id)

    fresh = await client.get_project(project_id)
    controller.cancel(fresh)
    return controller.record
