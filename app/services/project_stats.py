import re
from typing import Any, Dict, List

CAPACITY_NUMBER = re.compile(r"(\d+(\.\d+)?)")


def _number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _is_high_risk(risk: Dict[str, Any]) -> bool:
    severity = (risk.get("severity") or "").lower()
    exposure = _number(risk.get("probability")) * _number(risk.get("impact"))
    return severity == "high" or exposure > 6


def compute_stats(projects: List[Dict[str, Any]]) -> dict:
    projects = [p for p in projects if p]
    total = len(projects)

    budget = 0.0
    progress = 0.0
    completed = in_progress = planned = 0
    high_risk = total_risks = 0
    capacity_kw = 0.0
    project_types: Dict[str, int] = {}
    counties = set()

    for project in projects:
        service_order = project.get("serviceOrder") if isinstance(project.get("serviceOrder"), dict) else {}
        contract_value = project.get("contractValue")
        budget += _number(contract_value if contract_value is not None else service_order.get("totalValue"))
        progress += _number(project.get("progress"))

        status = (project.get("status") or "").lower()
        if status == "completed":
            completed += 1
        elif status == "in progress":
            in_progress += 1
        else:
            planned += 1

        risks = project.get("risks")
        if isinstance(risks, list):
            total_risks += len(risks)
            if any(_is_high_risk(r) for r in risks if r):
                high_risk += 1

        # capacity is free text such as "250 kW"; the first number counts
        match = CAPACITY_NUMBER.search(str(project.get("capacity") or ""))
        if match:
            capacity_kw += float(match.group(1))

        if project.get("projectType"):
            project_types[project["projectType"]] = project_types.get(project["projectType"], 0) + 1

        location = project.get("location")
        if isinstance(location, dict) and location.get("county"):
            counties.add(location["county"])

    return {
        "totalProjects": total,
        "totalBudget": budget,
        "avgProgress": round(progress / total, 2) if total > 0 else 0.0,
        "completedProjects": completed,
        "inProgressProjects": in_progress,
        "plannedProjects": planned,
        "highRiskProjects": high_risk,
        "totalRisks": total_risks,
        "totalCapacityKw": capacity_kw,
        "totalCapacityLabel": format_capacity(capacity_kw),
        "projectTypes": project_types,
        "counties": len(counties),
        "avgProjectValue": round(budget / total, 2) if total > 0 else 0.0,
    }


def format_capacity(capacity_kw: float) -> str:
    if capacity_kw >= 1000:
        return f"{capacity_kw / 1000:.1f} MW"
    return f"{capacity_kw:.1f} kW"
