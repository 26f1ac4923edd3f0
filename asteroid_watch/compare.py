"""Side-by-side lookup of several objects.

Each identifier is resolved on its own; a lookup that fails becomes a
``Failed`` result instead of an exception, so ``asyncio.gather`` always
settles every lookup and the remaining objects are still reported.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Union

from .normalize import diameter_range, to_float
from .services import UpstreamError
from .units import parse_date, today as utc_today

log = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[Dict[str, Any]]]


@dataclass(frozen=True)
class Resolved:
    record: Dict[str, Any]

    @property
    def error(self) -> None:
        return None

    def as_dict(self) -> Dict[str, Any]:
        return dict(self.record)


@dataclass(frozen=True)
class Failed:
    id: str
    message: str

    @property
    def error(self) -> str:
        return self.message

    def as_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": None, "error": self.message}


ComparisonResult = Union[Resolved, Failed]


def next_earth_approach(neo: Dict[str, Any], today: date) -> Optional[Dict[str, Any]]:
    """Earliest Earth approach dated after ``today``."""
    upcoming = []
    for entry in neo.get("close_approach_data") or []:
        when = parse_date(entry.get("close_approach_date"))
        if entry.get("orbiting_body") == "Earth" and when is not None and when > today:
            upcoming.append((when, entry))
    if not upcoming:
        return None
    upcoming.sort(key=lambda pair: pair[0])
    entry = upcoming[0][1]
    return {
        "date": entry.get("close_approach_date"),
        "distance_km": to_float((entry.get("miss_distance") or {}).get("kilometers")),
        "velocity_kph": to_float((entry.get("relative_velocity") or {}).get("kilometers_per_hour")),
    }


def comparison_record(neo: Dict[str, Any], today: date) -> Dict[str, Any]:
    orbital = neo.get("orbital_data") or {}
    diameter_min, diameter_max = diameter_range(neo)
    return {
        "id": neo["id"],
        "name": neo["name"],
        "is_hazardous": bool(neo.get("is_potentially_hazardous_asteroid")),
        "diameter_min_m": diameter_min,
        "diameter_max_m": diameter_max,
        "absolute_magnitude": neo.get("absolute_magnitude_h"),
        "orbit_class": (orbital.get("orbit_class") or {}).get("orbit_class_type") or "Unknown",
        "orbital_period_days": to_float(orbital.get("orbital_period")),
        "next_earth_approach": next_earth_approach(neo, today),
        "error": None,
    }


async def resolve(asteroid_id: str, fetch: Fetcher, today: date) -> ComparisonResult:
    try:
        neo = await fetch(asteroid_id)
        return Resolved(comparison_record(neo, today))
    except UpstreamError as exc:
        log.warning("Lookup of %s failed: %s", asteroid_id, exc)
        return Failed(asteroid_id, str(exc))
    except (KeyError, TypeError, AttributeError) as exc:
        log.warning("Malformed payload for %s: %r", asteroid_id, exc)
        return Failed(asteroid_id, f"Malformed payload: {exc!r}")
    except Exception as exc:
        log.exception("Unexpected failure looking up %s", asteroid_id)
        return Failed(asteroid_id, f"Lookup failed: {exc!r}")


async def compare_objects(
    ids: Sequence[str], fetch: Fetcher, today: Optional[date] = None
) -> List[ComparisonResult]:
    """Resolve every id concurrently; results keep the input order."""
    today = today or utc_today()
    return list(await asyncio.gather(*(resolve(i, fetch, today) for i in ids)))


def summarize(results: Sequence[ComparisonResult]) -> Dict[str, Any]:
    valid = [r.record for r in results if isinstance(r, Resolved)]
    largest = None
    for record in valid:
        if (record["diameter_max_m"] or 0) > ((largest or {}).get("diameter_max_m") or 0):
            largest = record
    hazardous = [r["name"] for r in valid if r["is_hazardous"]]
    return {
        "largest": {"name": largest["name"], "diameter_max_m": largest["diameter_max_m"]} if largest else None,
        "hazardous_count": len(hazardous),
        "hazardous_names": hazardous,
    }
