"""CSV exports of dashboard tables."""
import csv
import io
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

MISSING = "N/A"

LOCATION_EXPORT_FIELDS = [
    "Name",
    "County",
    "Address",
    "Latitude",
    "Longitude",
    "Site Type",
    "Site ID",
    "System Site ID",
    "Status",
]


def _text(value: Any) -> Any:
    return value if value else MISSING


def _coordinate(coordinates: Optional[Dict[str, Any]], axis: str) -> Any:
    value = (coordinates or {}).get(axis)
    return MISSING if value is None else value


def location_export_row(location: Dict[str, Any]) -> Dict[str, Any]:
    status = location.get("status")
    coordinates = location.get("coordinates")
    return {
        "Name": _text(location.get("name")),
        "County": _text(location.get("county")),
        "Address": _text(location.get("address")),
        "Latitude": _coordinate(coordinates, "lat"),
        "Longitude": _coordinate(coordinates, "lng"),
        "Site Type": _text(location.get("siteType")),
        "Site ID": _text(location.get("siteId")),
        "System Site ID": _text(location.get("systemSiteId")),
        "Status": status[:1].upper() + status[1:] if status else MISSING,
    }


def export_locations_to_csv(locations: Iterable[Dict[str, Any]]) -> bytes:
    rows: List[Dict[str, Any]] = [location_export_row(loc) for loc in locations if loc]

    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=LOCATION_EXPORT_FIELDS, quoting=csv.QUOTE_NONNUMERIC)
    writer.writeheader()
    writer.writerows(rows)
    return buf.getvalue().encode("utf-8")


def locations_export_filename(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"locations_export_{now.strftime('%d-%m-%Y_%H-%M')}.csv"
