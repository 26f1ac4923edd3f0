import asyncio
import logging
import os
from datetime import timedelta
from typing import Any, Dict, List, Optional, Tuple

import httpx

from .config import HTTP_TIMEOUT, JPL_CAD_API, NASA_API_KEY, NASA_NEO_API
from .units import DateLike, as_date, format_date

log = logging.getLogger(__name__)

# NeoWs rejects feed windows spanning more than seven days.
MAX_FEED_DAYS = 7


class UpstreamError(Exception):
    """An upstream service was unreachable or answered with an error."""


def _client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=HTTP_TIMEOUT)


def _api_key() -> str:
    return os.getenv("NASA_API_KEY", NASA_API_KEY)


async def fetch_json(url: str, params: Optional[Dict[str, Any]] = None) -> Any:
    """GET ``url`` and decode the JSON body."""
    log.info("Fetching %s", url)
    try:
        async with _client() as client:
            resp = await client.get(url, params=params)
        resp.raise_for_status()
        return resp.json()
    except httpx.HTTPStatusError as exc:
        raise UpstreamError(
            f"API error: {exc.response.status_code} {exc.response.reason_phrase} ({url})"
        ) from exc
    except httpx.InvalidURL as exc:
        raise UpstreamError(f"Invalid request URL: {exc} ({url})") from exc
    except httpx.HTTPError as exc:
        raise UpstreamError(f"API unavailable: {exc!r} ({url})") from exc
    except ValueError as exc:
        raise UpstreamError(f"Invalid JSON from {url}") from exc


def feed_windows(start: DateLike, end: DateLike) -> List[Tuple[str, str]]:
    """Split ``start``..``end`` into consecutive windows NeoWs will accept."""
    first, last = as_date(start), as_date(end)
    windows = []
    while first <= last:
        stop = min(first + timedelta(days=MAX_FEED_DAYS), last)
        windows.append((format_date(first), format_date(stop)))
        first = stop + timedelta(days=1)
    return windows


async def fetch_feed(start: DateLike, end: DateLike) -> Dict[str, Any]:
    """Fetch the NeoWs feed for ``start``..``end`` (inclusive)."""
    url = f"{NASA_NEO_API}/feed"
    chunks = await asyncio.gather(
        *(
            fetch_json(url, {"start_date": s, "end_date": e, "api_key": _api_key()})
            for s, e in feed_windows(start, end)
        )
    )
    if len(chunks) == 1:
        return chunks[0]

    merged: Dict[str, Any] = {"element_count": 0, "near_earth_objects": {}}
    for chunk in chunks:
        merged["element_count"] += chunk.get("element_count") or 0
        for day, objects in (chunk.get("near_earth_objects") or {}).items():
            merged["near_earth_objects"].setdefault(day, []).extend(objects)
    return merged


async def fetch_neo(asteroid_id: str) -> Dict[str, Any]:
    return await fetch_json(f"{NASA_NEO_API}/neo/{asteroid_id}", {"api_key": _api_key()})


async def fetch_close_approaches(
    max_distance_ld: float, date_max: DateLike, limit: Optional[int] = None
) -> Dict[str, Any]:
    """Fetch JPL close approaches from now until ``date_max``, closest first."""
    params: Dict[str, Any] = {
        "dist-max": f"{max_distance_ld:g}LD",
        "date-min": "now",
        "date-max": format_date(date_max),
        "sort": "dist",
    }
    if limit is not None:
        params["limit"] = limit
    return await fetch_json(JPL_CAD_API, params)
