from typing import Optional, List, Union, Dict, Any
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from app.core.exceptions import DraftValidationError


class ProjectStatus(str, Enum):
    DRAFT = "Draft"
    PLANNED = "Planned"
    IN_PROGRESS = "In Progress"
    ON_HOLD = "On Hold"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class TaskStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    BLOCKED = "Blocked"
    CANCELLED = "Cancelled"


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class RiskSeverity(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


def new_entry_key() -> str:
    return uuid4().hex


class CamelModel(BaseModel):
    """Python names in code, the backend's camelCase names on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class ReferenceObject(BaseModel):
    """A populated document sitting where the backend expects its id."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str] = Field(default=None, alias="_id")


# Either a bare id or the populated document it points at
Reference = Union[ReferenceObject, str]


# ---------------------------------------------------------------------------
# Draft models: permissive, they hold whatever the form currently contains.
# ---------------------------------------------------------------------------

class TaskDraft(CamelModel):
    key: str = Field(default_factory=new_entry_key)
    name: Optional[str] = ""
    description: Optional[str] = ""
    assigned_subcontractor: Optional[Reference] = None
    status: Optional[str] = TaskStatus.PENDING.value
    priority: Optional[str] = Priority.MEDIUM.value
    planned_start_date: Optional[datetime] = None
    planned_end_date: Optional[datetime] = None
    actual_start_date: Optional[datetime] = None
    actual_end_date: Optional[datetime] = None
    progress: float = 0
    notes: Optional[str] = ""

    @field_validator("progress", mode="before")
    @classmethod
    def _null_progress(cls, value):
        return 0 if value is None else value


class MilestoneDraft(CamelModel):
    key: str = Field(default_factory=new_entry_key)
    name: Optional[str] = ""
    description: Optional[str] = ""
    due_date: Optional[datetime] = None
    completed_date: Optional[datetime] = None
    progress: float = 0
    tasks: List[TaskDraft] = Field(default_factory=list)
    deliverables: List[str] = Field(default_factory=list)

    @field_validator("tasks", "deliverables", mode="before")
    @classmethod
    def _null_list(cls, value):
        return [] if value is None else value

    @field_validator("progress", mode="before")
    @classmethod
    def _null_progress(cls, value):
        return 0 if value is None else value


class RiskDraft(CamelModel):
    key: str = Field(default_factory=new_entry_key)
    title: Optional[str] = ""
    description: Optional[str] = ""
    severity: Optional[str] = RiskSeverity.MEDIUM.value
    probability: Optional[float] = None
    impact: Optional[float] = None
    mitigation_plan: Optional[str] = None
    owner: Optional[str] = None
    status: Optional[str] = "Open"
    identified_date: Optional[datetime] = None
    target_resolution_date: Optional[datetime] = None
    notes: Optional[str] = ""


class ProjectDraft(CamelModel):
    name: Optional[str] = ""
    description: Optional[str] = ""
    project_type: Optional[str] = ""
    capacity: Optional[str] = ""
    contract_value: Optional[float] = 0
    priority: Optional[str] = Priority.MEDIUM.value
    status: Optional[str] = ProjectStatus.DRAFT.value

    service_order: Optional[Reference] = None
    location: Optional[Reference] = None
    project_leader: Optional[Reference] = None
    subcontractors: List[Optional[Reference]] = Field(default_factory=list)

    planned_start_date: Optional[datetime] = None
    target_completion_date: Optional[datetime] = None
    actual_start_date: Optional[datetime] = None
    actual_completion_date: Optional[datetime] = None

    progress: float = 0
    milestones: List[MilestoneDraft] = Field(default_factory=list)
    risks: List[RiskDraft] = Field(default_factory=list)
    notes: Optional[str] = ""
    is_active: bool = True

    @field_validator("subcontractors", "milestones", "risks", mode="before")
    @classmethod
    def _null_list(cls, value):
        return [] if value is None else value

    # backend records may carry null for these
    @field_validator("progress", mode="before")
    @classmethod
    def _null_progress(cls, value):
        return 0 if value is None else value

    @field_validator("is_active", mode="before")
    @classmethod
    def _null_is_active(cls, value):
        return True if value is None else value


# Scalar and reference fields the form edits directly; collections have their own operations.
class ProjectDraftFieldUpdate(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    name: Optional[str] = None
    description: Optional[str] = None
    project_type: Optional[str] = None
    capacity: Optional[str] = None
    contract_value: Optional[float] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    service_order: Optional[Reference] = None
    location: Optional[Reference] = None
    project_leader: Optional[Reference] = None
    subcontractors: Optional[List[Reference]] = None
    planned_start_date: Optional[datetime] = None
    target_completion_date: Optional[datetime] = None
    actual_start_date: Optional[datetime] = None
    actual_completion_date: Optional[datetime] = None
    progress: Optional[float] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None

    # omitted means unchanged; these two cannot be cleared
    @field_validator("progress", "is_active")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("Field cannot be null")
        return value


# ---------------------------------------------------------------------------
# Submission models: what a draft must satisfy before it is sent upstream.
# ---------------------------------------------------------------------------

class TaskSubmission(CamelModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    assigned_subcontractor: Optional[Reference] = None
    status: TaskStatus = TaskStatus.PENDING
    priority: Priority = Priority.MEDIUM
    planned_start_date: Optional[datetime] = None
    planned_end_date: Optional[datetime] = None
    actual_start_date: Optional[datetime] = None
    actual_end_date: Optional[datetime] = None
    progress: float = Field(default=0, ge=0, le=100)
    notes: Optional[str] = None


class MilestoneSubmission(CamelModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    due_date: datetime
    completed_date: Optional[datetime] = None
    progress: float = Field(default=0, ge=0, le=100)
    tasks: List[TaskSubmission] = Field(default_factory=list)
    deliverables: List[str] = Field(default_factory=list)


class RiskSubmission(CamelModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    severity: RiskSeverity
    probability: Optional[float] = Field(default=None, ge=0, le=1)
    impact: Optional[float] = Field(default=None, ge=1, le=10)
    mitigation_plan: Optional[str] = None
    owner: Optional[str] = None
    status: str = "Open"
    identified_date: Optional[datetime] = None
    target_resolution_date: Optional[datetime] = None
    notes: Optional[str] = None


class ProjectSubmission(CamelModel):
    name: str = Field(min_length=1)
    description: str = Field(min_length=10)
    project_type: str = Field(min_length=1)
    capacity: str = Field(min_length=1)
    contract_value: float = Field(ge=1)
    priority: Priority

    service_order: Optional[Reference] = None
    location: Optional[Reference] = None
    project_leader: Optional[Reference] = None
    subcontractors: List[Optional[Reference]] = Field(default_factory=list)
    status: ProjectStatus = ProjectStatus.DRAFT

    planned_start_date: datetime
    target_completion_date: datetime
    actual_start_date: Optional[datetime] = None
    actual_completion_date: Optional[datetime] = None

    progress: float = Field(default=0, ge=0, le=100)
    milestones: List[MilestoneSubmission] = Field(default_factory=list)
    risks: List[RiskSubmission] = Field(default_factory=list)
    notes: Optional[str] = None
    is_active: bool = True


def validate_submission(draft: ProjectDraft) -> ProjectSubmission:
    """Check a draft the way the form does before saving.

    Raises DraftValidationError listing every offending field (camelCase
    path) so the caller can show the messages next to the inputs.
    """
    data = draft.model_dump(by_alias=True)
    errors: List[Dict[str, Any]] = []
    submission = None
    try:
        submission = ProjectSubmission.model_validate(data)
    except ValidationError as exc:
        errors.extend({"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors())

    planned = draft.planned_start_date
    target = draft.target_completion_date
    if planned and target and _comparable(target) <= _comparable(planned):
        errors.append({
            "loc": ["targetCompletionDate"],
            "msg": "Target completion date must be after planned start date",
        })

    if errors:
        raise DraftValidationError(errors)
    return submission


def _comparable(value: datetime) -> datetime:
    # naive values are taken as UTC so they compare with aware ones
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
