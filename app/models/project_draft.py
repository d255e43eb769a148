from typing import Optional, Dict, Any
from uuid import uuid4
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, JSON
from datetime import datetime, timezone


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_draft_id() -> str:
    return uuid4().hex


class ProjectDraftRecord(SQLModel, table=True):
    """One project editor session: the draft being edited for a backend project."""

    __tablename__ = "project_draft"

    id: str = Field(default_factory=_new_draft_id, primary_key=True)
    project_id: str = Field(index=True)
    draft: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    is_submitting: bool = Field(default=False)

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: Optional[datetime] = Field(default=None)
