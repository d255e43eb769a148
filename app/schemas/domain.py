from typing import Optional, List, Dict, Any
from datetime import datetime
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.models.project_draft import ProjectDraftRecord
from app.schemas.project import ProjectDraft


class DraftRead(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    project_id: str
    mode: str = "edit"
    is_submitting: bool
    draft: ProjectDraft
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: ProjectDraftRecord) -> "DraftRead":
        return cls(
            id=record.id,
            project_id=record.project_id,
            is_submitting=record.is_submitting,
            draft=ProjectDraft.model_validate(record.draft),
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class DeliverableCreate(BaseModel):
    text: str


class PaginatedRead(BaseModel):
    data: List[Dict[str, Any]]
    total: int
    page: int
    limit: int
