"""Turn a project draft into the payload the backend's update endpoint accepts.

Reference fields become bare ids, dates become ISO-8601 UTC strings, local
entry keys are dropped and empty values are pruned so they never overwrite
server-side defaults. Already normalized input comes back unchanged.
"""
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List

from pydantic import BaseModel

REFERENCE_FIELDS = ("serviceOrder", "location", "projectLeader")
PROJECT_DATE_FIELDS = ("plannedStartDate", "targetCompletionDate", "actualStartDate", "actualCompletionDate")
MILESTONE_DATE_FIELDS = ("dueDate", "completedDate")
TASK_DATE_FIELDS = ("plannedStartDate", "plannedEndDate", "actualStartDate", "actualEndDate")
RISK_DATE_FIELDS = ("identifiedDate", "targetResolutionDate")

# entry keys only identify milestones/tasks/risks inside the editor
LOCAL_KEY = "key"


def _as_dict(value: Any) -> Dict[str, Any]:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True)
    return dict(value)


def _items(value: Any) -> List[Any]:
    return [item for item in value if item] if isinstance(value, list) else []


def to_reference_id(value: Any) -> Any:
    """Project a populated document onto its `_id`; anything else passes through."""
    if isinstance(value, BaseModel):
        value = value.model_dump(by_alias=True)
    if isinstance(value, dict) and value.get("_id"):
        return value["_id"]
    return value


def to_iso(value: Any) -> Any:
    if not value:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    if isinstance(value, date):
        return to_iso(datetime(value.year, value.month, value.day, tzinfo=timezone.utc))
    # strings are assumed to be serialized already
    return value


def _convert_dates(doc: Dict[str, Any], fields: Iterable[str]) -> None:
    for field in fields:
        doc[field] = to_iso(doc.get(field))


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, (list, dict)) and len(value) == 0)


def prune_empty(value: Any) -> Any:
    """Drop None leaves, empty lists and empty dicts, in dicts and lists alike.

    Emptiness is judged after recursion, so a list item that prunes down to
    `{}` is dropped too.
    """
    if isinstance(value, dict):
        result = {}
        for k, v in value.items():
            cleaned = prune_empty(v)
            if not _is_empty(cleaned):
                result[k] = cleaned
        return result
    if isinstance(value, list):
        items = (prune_empty(item) for item in value)
        return [item for item in items if not _is_empty(item)]
    return value


def _normalize_task(task: Any) -> Dict[str, Any]:
    doc = _as_dict(task)
    doc.pop(LOCAL_KEY, None)
    doc["assignedSubcontractor"] = to_reference_id(doc.get("assignedSubcontractor"))
    _convert_dates(doc, TASK_DATE_FIELDS)
    return doc


def _normalize_milestone(milestone: Any) -> Dict[str, Any]:
    doc = _as_dict(milestone)
    doc.pop(LOCAL_KEY, None)
    _convert_dates(doc, MILESTONE_DATE_FIELDS)
    doc["tasks"] = [_normalize_task(t) for t in _items(doc.get("tasks"))]
    return doc


def _normalize_risk(risk: Any) -> Dict[str, Any]:
    doc = _as_dict(risk)
    doc.pop(LOCAL_KEY, None)
    _convert_dates(doc, RISK_DATE_FIELDS)
    return doc


def normalize_project(draft: Any) -> Dict[str, Any]:
    """Normalize a ProjectDraft (or its camelCase dict) into a JSON-ready payload."""
    payload = _as_dict(draft)

    for field in REFERENCE_FIELDS:
        payload[field] = to_reference_id(payload.get(field))
    payload["subcontractors"] = [to_reference_id(s) for s in _items(payload.get("subcontractors"))]

    _convert_dates(payload, PROJECT_DATE_FIELDS)

    payload["milestones"] = [_normalize_milestone(m) for m in _items(payload.get("milestones"))]
    payload["risks"] = [_normalize_risk(r) for r in _items(payload.get("risks"))]

    return prune_empty(payload)
