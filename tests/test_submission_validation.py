from datetime import datetime, timezone

import pytest

from app.core.exceptions import DraftValidationError
from app.schemas.project import ProjectDraft, validate_submission
from app.services.form_state import ProjectFormController


def _locs(exc_info):
    return [e["loc"] for e in exc_info.value.errors]


def test_complete_draft_passes(project_record):
    submission = validate_submission(ProjectDraft.model_validate(project_record))
    assert submission.name == "Kitengela Solar Farm"
    assert submission.milestones[0].tasks[0].name == "Survey"


def test_new_milestone_needs_a_name(project_record):
    controller = ProjectFormController(record=project_record)
    controller.begin_edit()
    controller.add_milestone()

    with pytest.raises(DraftValidationError) as exc_info:
        validate_submission(controller.draft)

    assert ["milestones", 1, "name"] in _locs(exc_info)


def test_target_date_must_follow_start(project_record):
    draft = ProjectDraft.model_validate(project_record)
    draft.target_completion_date = datetime(2025, 1, 1, tzinfo=timezone.utc)

    with pytest.raises(DraftValidationError) as exc_info:
        validate_submission(draft)

    assert exc_info.value.errors == [{
        "loc": ["targetCompletionDate"],
        "msg": "Target completion date must be after planned start date",
    }]


def test_every_offending_field_is_reported(project_record):
    draft = ProjectDraft.model_validate(project_record)
    draft.description = "short"
    draft.contract_value = 0
    draft.risks[0].probability = 1.5

    with pytest.raises(DraftValidationError) as exc_info:
        validate_submission(draft)

    locs = _locs(exc_info)
    assert ["description"] in locs
    assert ["contractValue"] in locs
    assert ["risks", 0, "probability"] in locs
