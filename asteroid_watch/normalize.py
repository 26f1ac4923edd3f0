"""Flatten NeoWs feed objects and JPL close-approach rows into ``Approach``."""

import logging
import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from .units import au_to_km, au_to_lunar, format_date, km_to_lunar, kps_to_kph, parse_date

log = logging.getLogger(__name__)

CORE_FIELDS = (
    "id",
    "name",
    "date",
    "is_hazardous",
    "is_sentry",
    "distance_km",
    "distance_lunar",
    "velocity_kph",
    "diameter_min_m",
    "diameter_max_m",
)


@dataclass(frozen=True)
class Approach:
    id: Optional[str]
    name: Optional[str]
    date: str
    is_hazardous: bool
    is_sentry: bool
    distance_km: float
    distance_lunar: float
    velocity_kph: float
    diameter_min_m: float
    diameter_max_m: float
    distance_au: Optional[float] = None
    velocity_km_s: Optional[float] = None
    absolute_magnitude: Optional[float] = None
    orbit_id: Optional[str] = None
    orbiting_body: Optional[str] = None

    def as_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        return {key: data[key] for key in CORE_FIELDS}


class CadRow(NamedTuple):
    des: Optional[str]
    orbit_id: Optional[str]
    jd: Optional[str]
    cd: Optional[str]
    dist: Optional[str]
    dist_min: Optional[str]
    dist_max: Optional[str]
    v_rel: Optional[str]
    v_inf: Optional[str]
    t_sigma_f: Optional[str]
    h: Optional[str]


def parse_float(value: Any) -> Optional[float]:
    """Parse a numeric upstream field; ``None`` if absent, malformed or not finite."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def to_float(value: Any) -> float:
    """Parse a numeric upstream field, falling back to ``0.0``."""
    number = parse_float(value)
    if number is None:
        if value is not None:
            log.debug("Unparseable numeric field %r, using 0", value)
        return 0.0
    return number


def feed_days(feed: Dict[str, Any]) -> List[Tuple[str, List[Dict[str, Any]]]]:
    """The feed's date-keyed object lists as sorted ``(date, objects)`` pairs."""
    days = feed.get("near_earth_objects") or {}
    return sorted(((day, list(objs or [])) for day, objs in days.items()), key=lambda pair: pair[0])


def diameter_range(neo: Dict[str, Any], unit: str = "meters") -> Tuple[float, float]:
    diameter = (neo.get("estimated_diameter") or {}).get(unit) or {}
    return (
        to_float(diameter.get("estimated_diameter_min")),
        to_float(diameter.get("estimated_diameter_max")),
    )


def approach_from_entry(neo: Dict[str, Any], entry: Dict[str, Any], date: Optional[str] = None) -> Approach:
    miss = entry.get("miss_distance") or {}
    velocity = entry.get("relative_velocity") or {}
    distance_km = max(to_float(miss.get("kilometers")), 0.0)
    diameter_min, diameter_max = diameter_range(neo)
    return Approach(
        id=str(neo.get("id")),
        name=neo.get("name"),
        date=date or entry.get("close_approach_date"),
        is_hazardous=bool(neo.get("is_potentially_hazardous_asteroid")),
        is_sentry=bool(neo.get("is_sentry_object")),
        distance_km=distance_km,
        distance_lunar=km_to_lunar(distance_km),
        velocity_kph=to_float(velocity.get("kilometers_per_hour")),
        diameter_min_m=diameter_min,
        diameter_max_m=diameter_max,
        distance_au=to_float(miss.get("astronomical")),
        velocity_km_s=to_float(velocity.get("kilometers_per_second")),
        absolute_magnitude=neo.get("absolute_magnitude_h"),
        orbiting_body=entry.get("orbiting_body"),
    )


def first_approach(neo: Dict[str, Any], date: Optional[str] = None) -> Optional[Approach]:
    """The canonical approach of a feed object, ``None`` when it has none."""
    entries = neo.get("close_approach_data") or []
    if not entries:
        log.debug("NEO %s has no close approach data", neo.get("id"))
        return None
    return approach_from_entry(neo, entries[0], date)


def all_approaches(neo: Dict[str, Any]) -> List[Approach]:
    return [approach_from_entry(neo, entry) for entry in neo.get("close_approach_data") or []]


def approaches_from_feed(feed: Dict[str, Any]) -> List[Approach]:
    approaches = []
    for day, objects in feed_days(feed):
        for neo in objects:
            approach = first_approach(neo, day)
            if approach is not None:
                approaches.append(approach)
    return approaches


def decode_cad_row(row: List[Any]) -> CadRow:
    values = list(row[: len(CadRow._fields)])
    values += [None] * (len(CadRow._fields) - len(values))
    return CadRow(*values)


def approach_from_cad_row(row: List[Any]) -> Approach:
    cad = decode_cad_row(row)
    au = max(to_float(cad.dist), 0.0)
    velocity = to_float(cad.v_rel)
    parsed = parse_date(cad.cd)
    return Approach(
        id=cad.des,
        name=cad.des,
        date=format_date(parsed) if parsed else cad.cd,
        is_hazardous=False,
        is_sentry=False,
        distance_km=au_to_km(au),
        distance_lunar=au_to_lunar(au),
        velocity_kph=kps_to_kph(velocity),
        diameter_min_m=0.0,
        diameter_max_m=0.0,
        distance_au=au,
        velocity_km_s=velocity,
        absolute_magnitude=to_float(cad.h),
        orbit_id=cad.orbit_id,
    )


def approaches_from_cad(payload: Dict[str, Any]) -> List[Approach]:
    """Decode the table, dropping rows without a usable distance."""
    approaches = []
    for row in payload.get("data") or []:
        if parse_float(decode_cad_row(row).dist) is None:
            log.debug("Skipping close-approach row without distance: %r", row)
            continue
        approaches.append(approach_from_cad_row(row))
    return approaches


def orbital_profile(neo: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    orbital = neo.get("orbital_data")
    if not orbital:
        return None
    orbit_class = orbital.get("orbit_class") or {}
    return {
        "orbit_class": orbit_class.get("orbit_class_type"),
        "orbit_class_description": orbit_class.get("orbit_class_description"),
        "orbital_period_days": to_float(orbital.get("orbital_period")),
        "perihelion_distance_au": to_float(orbital.get("perihelion_distance")),
        "aphelion_distance_au": to_float(orbital.get("aphelion_distance")),
        "eccentricity": to_float(orbital.get("eccentricity")),
        "inclination_deg": to_float(orbital.get("inclination")),
    }
