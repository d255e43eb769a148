from typing import Any, Callable, Dict, List, Optional
from datetime import datetime, timezone

from app.schemas.location import LocationAggregateStats

INDOOR_SITE_TYPES = ("indoor", "rooftop", "ground")
NO_TREND = "N/A"
FLAT_TREND = "0% from last month"


def month_key(moment: datetime) -> str:
    return f"{moment.year:04d}-{moment.month:02d}"


def previous_month_key(moment: datetime) -> str:
    if moment.month == 1:
        return f"{moment.year - 1:04d}-12"
    return f"{moment.year:04d}-{moment.month - 1:02d}"


def created_month(location: Dict[str, Any]) -> Optional[str]:
    """YYYY-MM of a location's createdAt (UTC), or None when it is missing or unreadable."""
    raw = location.get("createdAt")
    if not raw:
        return None
    if isinstance(raw, datetime):
        created = raw
    else:
        try:
            created = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
        except ValueError:
            return None
    if created.tzinfo is not None:
        created = created.astimezone(timezone.utc)
    return month_key(created)


def _percent_trend(now_count: int, last_count: int) -> str:
    if last_count == 0:
        return FLAT_TREND
    return f"{(now_count - last_count) / last_count * 100:.1f}% from last month"


def _additive_trend(now_count: int, last_count: int) -> str:
    if last_count == 0:
        return f"+{now_count}" if now_count > 0 else FLAT_TREND
    delta = now_count - last_count
    return f"{'+' if delta > 0 else ''}{delta} from last month"


def calculate_trends(locations: List[Dict[str, Any]], now: datetime) -> Dict[str, str]:
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    last_month = previous_month_key(now)

    # zero padded fixed width keys, so string order is calendar order
    existed_last_month = []
    for loc in locations:
        created = created_month(loc)
        if created is not None and created <= last_month:
            existed_last_month.append(loc)

    def counts(predicate: Callable[[Dict[str, Any]], bool]):
        return (
            sum(1 for loc in locations if predicate(loc)),
            sum(1 for loc in existed_last_month if predicate(loc)),
        )

    total_now, total_last = len(locations), len(existed_last_month)
    active_now, active_last = counts(lambda loc: loc.get("status") == "active")
    outdoor_now, outdoor_last = counts(lambda loc: loc.get("siteType") == "outdoor")
    maint_now, maint_last = counts(lambda loc: loc.get("status") == "maintenance")

    return {
        "total_trend": _percent_trend(total_now, total_last),
        "active_trend": _percent_trend(active_now, active_last),
        "outdoor_trend": _percent_trend(outdoor_now, outdoor_last),
        "maintenance_trend": _additive_trend(maint_now, maint_last),
    }


def calculate_stats(locations: List[Dict[str, Any]]) -> Dict[str, int]:
    status_counts: Dict[str, int] = {}
    type_counts: Dict[str, int] = {}
    for loc in locations:
        status = loc.get("status")
        site_type = loc.get("siteType")
        status_counts[status] = status_counts.get(status, 0) + 1
        type_counts[site_type] = type_counts.get(site_type, 0) + 1

    return {
        "total": len(locations),
        "active": status_counts.get("active", 0),
        "inactive": status_counts.get("inactive", 0),
        "maintenance": status_counts.get("maintenance", 0),
        "counties": len({loc.get("county") for loc in locations if loc.get("county")}),
        "outdoor_sites": type_counts.get("outdoor", 0),
        "indoor_sites": sum(type_counts.get(t, 0) for t in INDOOR_SITE_TYPES),
    }


def build_location_stats(
    locations: Optional[List[Dict[str, Any]]],
    counts: Optional[Dict[str, int]] = None,
    now: Optional[datetime] = None,
) -> LocationAggregateStats:
    """Aggregate counts plus month-over-month trends.

    Without the raw location list only pre-aggregated `counts` can be shown
    and every trend is "N/A".
    """
    if locations is None:
        trends = dict.fromkeys(("total_trend", "active_trend", "outdoor_trend", "maintenance_trend"), NO_TREND)
        return LocationAggregateStats(**(counts or {}), **trends)

    now = now or datetime.now(timezone.utc)
    return LocationAggregateStats(**calculate_stats(locations), **calculate_trends(locations, now))
