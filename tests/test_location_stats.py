from datetime import datetime, timezone

import pytest

from app.services.location_stats import (
    build_location_stats,
    calculate_stats,
    calculate_trends,
    created_month,
    previous_month_key,
)

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)
THIS_MONTH = "2025-03-02T08:00:00.000Z"
LAST_MONTH = "2025-02-11T08:00:00.000Z"
LAST_YEAR = "2024-06-01T08:00:00.000Z"


def location(created_at, status="active", site_type="outdoor", county="Nairobi"):
    return {"createdAt": created_at, "status": status, "siteType": site_type, "county": county}


def test_previous_month_rolls_over_january():
    assert previous_month_key(datetime(2025, 1, 15)) == "2024-12"
    assert previous_month_key(datetime(2025, 11, 2)) == "2025-10"


def test_created_month():
    assert created_month({"createdAt": "2024-12-31T23:30:00.000Z"}) == "2024-12"
    assert created_month({"createdAt": "2025-01-01T02:30:00+03:00"}) == "2024-12"
    assert created_month({"createdAt": "not a date"}) is None
    assert created_month({}) is None


def test_flat_trend_when_nothing_existed_last_month():
    locations = [location(THIS_MONTH, status="active" if i < 3 else "inactive") for i in range(10)]

    trends = calculate_trends(locations, NOW)

    assert trends["active_trend"] == "0% from last month"
    assert trends["total_trend"] == "0% from last month"
    assert calculate_stats(locations)["active"] == 3


def test_percent_trend_against_last_month():
    locations = [location(LAST_MONTH) for _ in range(3)] + [location(LAST_YEAR), location(THIS_MONTH)]

    trends = calculate_trends(locations, NOW)

    assert trends["active_trend"] == "25.0% from last month"
    assert trends["total_trend"] == "25.0% from last month"
    assert trends["outdoor_trend"] == "25.0% from last month"


def test_trend_in_january_compares_with_december():
    january = datetime(2025, 1, 20, tzinfo=timezone.utc)
    locations = [location("2024-12-05T00:00:00.000Z"), location("2025-01-04T00:00:00.000Z")]

    assert calculate_trends(locations, january)["total_trend"] == "100.0% from last month"


def test_records_without_created_at_are_not_in_the_baseline():
    locations = [location(LAST_MONTH), location(None), location("garbage")]
    assert calculate_trends(locations, NOW)["total_trend"] == "200.0% from last month"


@pytest.mark.parametrize(
    "last, now, expected",
    [
        (0, 2, "+2"),
        (0, 0, "0% from last month"),
        (1, 3, "+2 from last month"),
        (2, 2, "0 from last month"),
    ],
)
def test_maintenance_trend_is_additive(last, now, expected):
    locations = [location(LAST_MONTH, status="maintenance") for _ in range(last)]
    locations += [location(THIS_MONTH, status="maintenance") for _ in range(now - last)]
    locations += [location(LAST_MONTH)]

    assert calculate_trends(locations, NOW)["maintenance_trend"] == expected


def test_calculate_stats():
    locations = [
        location(THIS_MONTH, status="active", site_type="outdoor", county="Nairobi"),
        location(THIS_MONTH, status="inactive", site_type="rooftop", county="Kiambu"),
        location(THIS_MONTH, status="maintenance", site_type="indoor", county="Nairobi"),
        location(THIS_MONTH, status="active", site_type="ground", county=None),
    ]

    assert calculate_stats(locations) == {
        "total": 4,
        "active": 2,
        "inactive": 1,
        "maintenance": 1,
        "counties": 2,
        "outdoor_sites": 1,
        "indoor_sites": 3,
    }


def test_trends_unavailable_without_raw_locations():
    stats = build_location_stats(None, counts={"total": 12, "active": 9})

    assert stats.total == 12
    assert stats.active == 9
    assert stats.total_trend == "N/A"
    assert stats.active_trend == "N/A"
    assert stats.outdoor_trend == "N/A"
    assert stats.maintenance_trend == "N/A"


def test_build_location_stats_serializes_camel_case():
    stats = build_location_stats([location(LAST_MONTH)], now=NOW)
    data = stats.model_dump(by_alias=True)

    assert data["outdoorSites"] == 1
    assert data["totalTrend"] == "0.0% from last month"
