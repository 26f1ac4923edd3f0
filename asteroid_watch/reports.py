"""Assemble the public response shapes from upstream payloads.

Every builder is a pure function of its payloads plus the reference date;
only the ``fetched_at``/``generated_at`` stamp differs between two calls
with the same input.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from .compare import ComparisonResult, summarize
from .config import VERY_CLOSE_AU
from .normalize import (
    Approach,
    all_approaches,
    approaches_from_cad,
    approaches_from_feed,
    diameter_range,
    feed_days,
    orbital_profile,
    to_float,
)
from .pipeline import filter_sort_limit
from .threat import classify_threat
from .units import DateLike, date_offset, date_range, format_date, parse_date, utc_timestamp

NEO_SOURCE = "NASA NEO API (live)"
CAD_SOURCE = "NASA/JPL SBDB Close Approach Data API (live)"

SEARCH_LIMIT = 50
CLOSEST_LIMIT = 10
HAZARDOUS_LIMIT = 20
HISTORY_LIMIT = 10
HISTORY_CUTOFF = date(2020, 1, 1)

PERIOD_DAYS = {"week": 7, "month": 30, "year": 365}


def _closest_summary(approach: Approach) -> Dict[str, Any]:
    return {
        "name": approach.name,
        "id": approach.id,
        "distance_km": approach.distance_km,
        "distance_lunar": approach.distance_lunar,
        "velocity_kph": approach.velocity_kph,
        "is_hazardous": approach.is_hazardous,
    }


def _cad_summary(approach: Approach) -> Dict[str, Any]:
    return {
        "designation": approach.id,
        "close_approach_date": approach.date,
        "distance_au": approach.distance_au,
        "distance_km": approach.distance_km,
        "distance_lunar": approach.distance_lunar,
        "velocity_km_s": approach.velocity_km_s,
        "absolute_magnitude": approach.absolute_magnitude,
        "orbit_id": approach.orbit_id,
    }


def build_overview(feed: Dict[str, Any], today: date) -> Dict[str, Any]:
    day = format_date(today)
    objects = dict(feed_days(feed)).get(day, [])
    hazardous = [neo for neo in objects if neo.get("is_potentially_hazardous_asteroid")]

    # Every approach entry counts here, not just the first one per object.
    candidates = [a for neo in objects for a in all_approaches(neo)]
    closest = filter_sort_limit(candidates, limit=1)

    return {
        "date": day,
        "total_asteroids": feed.get("element_count", len(objects)),
        "hazardous_count": len(hazardous),
        "closest_approach": _closest_summary(closest[0]) if closest else None,
        "data_source": NEO_SOURCE,
        "fetched_at": utc_timestamp(),
        "upgrade_hint": "Use the lookup, search, top, compare and report views for detail",
    }


def recent_close_approaches(neo: Dict[str, Any]) -> List[Dict[str, Any]]:
    recent = []
    for approach in all_approaches(neo):
        when = parse_date(approach.date)
        if when is None or when < HISTORY_CUTOFF:
            continue
        recent.append(
            {
                "date": approach.date,
                "distance_km": approach.distance_km,
                "distance_lunar": approach.distance_lunar,
                "velocity_kph": approach.velocity_kph,
                "orbiting_body": approach.orbiting_body,
            }
        )
        if len(recent) == HISTORY_LIMIT:
            break
    return recent


def build_lookup(neo: Dict[str, Any]) -> Dict[str, Any]:
    min_km, max_km = diameter_range(neo, "kilometers")
    min_m, max_m = diameter_range(neo)
    return {
        "id": neo.get("id"),
        "name": neo.get("name"),
        "designation": neo.get("designation"),
        "nasa_jpl_url": neo.get("nasa_jpl_url"),
        "is_potentially_hazardous": bool(neo.get("is_potentially_hazardous_asteroid")),
        "is_sentry_object": bool(neo.get("is_sentry_object")),
        "absolute_magnitude": neo.get("absolute_magnitude_h"),
        "estimated_diameter": {"min_km": min_km, "max_km": max_km, "min_m": min_m, "max_m": max_m},
        "orbital_data": orbital_profile(neo),
        "recent_close_approaches": recent_close_approaches(neo),
        "fetched_at": utc_timestamp(),
    }


def build_search(feed: Dict[str, Any], start: str, end: str, hazardous_only: bool = False) -> Dict[str, Any]:
    found = filter_sort_limit(approaches_from_feed(feed), hazardous_only=hazardous_only)
    return {
        "search_period": {"start": start, "end": end},
        "total_found": len(found),
        "hazardous_count": sum(1 for a in found if a.is_hazardous),
        "asteroids": [a.as_dict() for a in filter_sort_limit(found, limit=SEARCH_LIMIT)],
        "fetched_at": utc_timestamp(),
    }


def build_top(cad: Dict[str, Any], period: str, limit: int, max_distance_ld: float) -> Dict[str, Any]:
    approaches = filter_sort_limit(
        approaches_from_cad(cad), max_distance_lunar=max_distance_ld, limit=limit
    )
    total = cad.get("total") or cad.get("count")
    return {
        "period": period,
        "max_distance_ld": max_distance_ld,
        "count": len(approaches),
        "total_in_database": int(to_float(total)),
        "closest_approaches": [_cad_summary(a) for a in approaches],
        "data_source": CAD_SOURCE,
        "fetched_at": utc_timestamp(),
    }


def build_compare(ids: Sequence[str], results: Sequence[ComparisonResult]) -> Dict[str, Any]:
    return {
        "compared_count": len(ids),
        "successful_lookups": sum(1 for r in results if r.error is None),
        "asteroids": [r.as_dict() for r in results],
        "summary": summarize(results),
        "fetched_at": utc_timestamp(),
    }


def daily_breakdown(feed: Dict[str, Any], start: DateLike, end: DateLike) -> Dict[str, Dict[str, int]]:
    """Per-day counts for every day in the window, zero-filled."""
    days = dict(feed_days(feed))
    breakdown = {}
    for day in date_range(start, end):
        objects = days.get(day, [])
        breakdown[day] = {
            "total": len(objects),
            "hazardous": sum(1 for neo in objects if neo.get("is_potentially_hazardous_asteroid")),
        }
    return breakdown


def very_close_approaches(cad: Dict[str, Any], threshold_au: float = VERY_CLOSE_AU) -> List[Dict[str, Any]]:
    return [
        {
            "designation": a.id,
            "date": a.date,
            "distance_au": a.distance_au,
            "distance_lunar": a.distance_lunar,
            "velocity_km_s": a.velocity_km_s,
        }
        for a in approaches_from_cad(cad)
        if a.distance_au < threshold_au
    ]


def build_report(
    feed: Dict[str, Any],
    cad: Dict[str, Any],
    today: date,
    days_ahead: int,
    include_sentry: bool = True,
) -> Dict[str, Any]:
    end = date_offset(days_ahead, today)
    approaches = approaches_from_feed(feed)
    hazardous = filter_sort_limit(approaches, hazardous_only=True)
    sentry_count: Optional[int] = sum(1 for a in approaches if a.is_sentry)

    # Hiding sentry objects only trims the listings; the verdict still sees them.
    listed = approaches
    if not include_sentry:
        listed = [a for a in approaches if not a.is_sentry]
        sentry_count = None

    closest = filter_sort_limit(listed, limit=CLOSEST_LIMIT)
    hazardous_listed = filter_sort_limit(listed, hazardous_only=True, limit=HAZARDOUS_LIMIT)
    very_close = very_close_approaches(cad)

    return {
        "report_period": {"start": format_date(today), "end": end, "days": days_ahead},
        "summary": {
            "total_asteroids": feed.get("element_count", len(approaches)),
            "hazardous_count": len(hazardous),
            "sentry_objects": sentry_count,
            "very_close_approaches": len(very_close),
        },
        "threat_level": classify_threat(hazardous).value,
        "daily_breakdown": daily_breakdown(feed, today, end),
        "closest_10": [a.as_dict() for a in closest],
        "hazardous_asteroids": [a.as_dict() for a in hazardous_listed],
        "very_close_approaches": very_close,
        "data_sources": [NEO_SOURCE, CAD_SOURCE],
        "generated_at": utc_timestamp(),
    }
