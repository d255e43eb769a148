"""Server-side state of the project editor.

A form is either in view mode (the server record is shown read-only) or in
edit mode (a ProjectDraft cloned from the record is being changed). Nested
collections are changed only through the add/remove operations below; they
address entries by position and treat unknown positions as no-ops.
"""
import copy
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from app.core.exceptions import FormModeError
from app.schemas.project import (
    MilestoneDraft,
    Priority,
    ProjectDraft,
    ProjectDraftFieldUpdate,
    RiskDraft,
    RiskSeverity,
    TaskDraft,
    TaskStatus,
)

logger = logging.getLogger(__name__)


class FormMode(str, Enum):
    VIEW = "view"
    EDIT = "edit"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _without(items: List[Any], index: int) -> List[Any]:
    return [item for i, item in enumerate(items) if i != index]


def _position_of(items: List[Any], key: str) -> Optional[int]:
    for i, item in enumerate(items):
        if item.key == key:
            return i
    return None


class ProjectFormController:
    def __init__(
        self,
        record: Optional[Dict[str, Any]] = None,
        draft: Optional[ProjectDraft] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.record: Dict[str, Any] = record or {}
        self.draft: Optional[ProjectDraft] = draft
        self._clock = clock or utcnow

    @property
    def mode(self) -> FormMode:
        return FormMode.VIEW if self.draft is None else FormMode.EDIT

    # -- mode transitions ---------------------------------------------------

    def begin_edit(self) -> ProjectDraft:
        if self.draft is None:
            self.draft = ProjectDraft.model_validate(copy.deepcopy(self.record))
            logger.info("Editing project %s", self.record.get("_id"))
        return self.draft

    def cancel(self, fresh_record: Dict[str, Any]) -> None:
        self.draft = None
        self.record = fresh_record

    def complete_save(self, fresh_record: Dict[str, Any]) -> None:
        # the re-fetched record replaces the draft; nothing of the draft survives
        self.draft = None
        self.record = fresh_record

    def _editable(self) -> ProjectDraft:
        if self.draft is None:
            raise FormModeError("Project form is in view mode")
        return self.draft

    def _milestone(self, index: int) -> Optional[MilestoneDraft]:
        milestones = self._editable().milestones
        if 0 <= index < len(milestones):
            return milestones[index]
        return None

    # -- scalar fields ------------------------------------------------------

    def update_fields(self, update: ProjectDraftFieldUpdate) -> ProjectDraft:
        draft = self._editable()
        for name in update.model_fields_set:
            setattr(draft, name, getattr(update, name))
        return draft

    # -- milestones ---------------------------------------------------------

    def add_milestone(self) -> MilestoneDraft:
        draft = self._editable()
        milestone = MilestoneDraft(
            name="",
            description="",
            due_date=self._clock(),
            progress=0,
            tasks=[],
            deliverables=[],
        )
        draft.milestones = [*draft.milestones, milestone]
        return milestone

    def remove_milestone(self, index: int) -> None:
        draft = self._editable()
        draft.milestones = _without(draft.milestones, index)

    def milestone_index(self, key: str) -> Optional[int]:
        return _position_of(self._editable().milestones, key)

    # -- tasks --------------------------------------------------------------

    def add_task(self, milestone_index: int) -> Optional[TaskDraft]:
        milestone = self._milestone(milestone_index)
        if milestone is None:
            return None
        task = TaskDraft(
            name="",
            description="",
            status=TaskStatus.PENDING.value,
            priority=Priority.MEDIUM.value,
            progress=0,
            notes="",
        )
        milestone.tasks = [*milestone.tasks, task]
        return task

    def remove_task(self, milestone_index: int, task_index: int) -> None:
        milestone = self._milestone(milestone_index)
        if milestone is not None:
            milestone.tasks = _without(milestone.tasks, task_index)

    def task_index(self, milestone_index: int, key: str) -> Optional[int]:
        milestone = self._milestone(milestone_index)
        if milestone is None:
            return None
        return _position_of(milestone.tasks, key)

    # -- deliverables -------------------------------------------------------

    def add_deliverable(self, milestone_index: int, text: str) -> None:
        if not text or not text.strip():
            return
        milestone = self._milestone(milestone_index)
        if milestone is not None:
            milestone.deliverables = [*milestone.deliverables, text]

    def remove_deliverable(self, milestone_index: int, deliverable_index: int) -> None:
        milestone = self._milestone(milestone_index)
        if milestone is not None:
            milestone.deliverables = _without(milestone.deliverables, deliverable_index)

    # -- risks --------------------------------------------------------------

    def add_risk(self) -> RiskDraft:
        draft = self._editable()
        risk = RiskDraft(
            title="",
            description="",
            severity=RiskSeverity.MEDIUM.value,
            status="Open",
            identified_date=self._clock(),
            notes="",
        )
        draft.risks = [*draft.risks, risk]
        return risk

    def remove_risk(self, index: int) -> None:
        draft = self._editable()
        draft.risks = _without(draft.risks, index)

    def risk_index(self, key: str) -> Optional[int]:
        return _position_of(self._editable().risks, key)
