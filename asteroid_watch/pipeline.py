from typing import Iterable, List, Optional

from .normalize import Approach


def filter_sort_limit(
    entities: Iterable[Approach],
    hazardous_only: bool = False,
    max_distance_lunar: Optional[float] = None,
    limit: Optional[int] = None,
) -> List[Approach]:
    """Filter, sort ascending by ``distance_km`` (stable), then truncate."""
    selected = [
        a
        for a in entities
        if (not hazardous_only or a.is_hazardous)
        and (max_distance_lunar is None or a.distance_lunar <= max_distance_lunar)
    ]
    selected.sort(key=lambda a: a.distance_km)
    if limit is not None:
        return selected[:limit]
    return selected
