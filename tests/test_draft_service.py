import asyncio

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from app.core.exceptions import BackendAPIError, SubmissionInProgressError
from app.models import ProjectDraftRecord
from app.services import draft_service
from app.services.backend_client import BackendClient


def run_with_session(tmp_path, backend, steps):
    """Run `steps(session, client)` against a fresh draft store and the fake backend."""

    async def main():
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'drafts.db'}")
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        sessions = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        try:
            async with sessions() as session, BackendClient(
                "http://backend.test/api", transport=httpx.MockTransport(backend.handler)
            ) as client:
                return await steps(session, client)
        finally:
            await engine.dispose()

    return asyncio.run(main())


def test_edits_are_persisted(tmp_path, backend):
    async def steps(session, client):
        record = await draft_service.begin_edit(session, client, "p1")
        await draft_service.apply_edit(session, record.id, lambda form: form.add_milestone())
        stored = await draft_service.get_draft(session, record.id)
        return draft_service.load_draft(stored)

    draft = run_with_session(tmp_path, backend, steps)
    assert [m.name for m in draft.milestones] == ["Site survey", ""]


def test_concurrent_submit_is_rejected(tmp_path, backend):
    async def steps(session, client):
        record = await draft_service.begin_edit(session, client, "p1")
        await draft_service._claim_submission(session, record.id)
        with pytest.raises(SubmissionInProgressError):
            await draft_service.submit_draft(session, client, record.id)

    run_with_session(tmp_path, backend, steps)
    assert backend.updates == []


def test_failed_submit_releases_the_draft(tmp_path, backend):
    async def steps(session, client):
        record = await draft_service.begin_edit(session, client, "p1")
        backend.fail_with = httpx.Response(422, json={"message": "Invalid service order"})
        with pytest.raises(BackendAPIError):
            await draft_service.submit_draft(session, client, record.id)
        await session.refresh(record)
        return record.is_submitting

    assert run_with_session(tmp_path, backend, steps) is False


def test_draft_timestamps_are_timezone_aware(tmp_path, backend):
    async def steps(session, client):
        record = await draft_service.begin_edit(session, client, "p1")
        created = record.created_at
        record = await draft_service.apply_edit(session, record.id, lambda form: form.add_risk())
        return created, record.updated_at

    created, updated = run_with_session(tmp_path, backend, steps)
    assert ProjectDraftRecord(project_id="p1").created_at.tzinfo is not None
    assert created is not None
    assert updated is not None


def test_edits_are_refused_while_saving(tmp_path, backend):
    async def steps(session, client):
        record = await draft_service.begin_edit(session, client, "p1")
        await draft_service._claim_submission(session, record.id)
        with pytest.raises(SubmissionInProgressError):
            await draft_service.apply_edit(session, record.id, lambda form: form.add_milestone())
        stored = await draft_service.get_draft(session, record.id)
        return draft_service.load_draft(stored)

    draft = run_with_session(tmp_path, backend, steps)
    assert len(draft.milestones) == 1


def test_refetch_failure_after_save_returns_update_answer(tmp_path, backend):
    async def steps(session, client):
        record = await draft_service.begin_edit(session, client, "p1")
        backend.fail_reads = httpx.Response(502, json={"message": "Bad gateway"})
        project = await draft_service.submit_draft(session, client, record.id)
        remaining = await session.get(ProjectDraftRecord, record.id)
        return project, remaining

    project, remaining = run_with_session(tmp_path, backend, steps)
    assert project["_id"] == "p1"
    assert backend.updates
    assert remaining is None
