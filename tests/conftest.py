import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from asteroid_watch.main import app


@pytest_asyncio.fixture
async def client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


def _approach(date, km, kph=50000.0, body="Earth"):
    return {
        "close_approach_date": date,
        "relative_velocity": {
            "kilometers_per_second": str(kph / 3600),
            "kilometers_per_hour": str(kph),
        },
        "miss_distance": {
            "astronomical": str(km / 149597870.7),
            "lunar": str(km / 384400),
            "kilometers": str(km),
        },
        "orbiting_body": body,
    }


@pytest.fixture
def make_neo():
    def factory(
        neo_id,
        approaches=(),
        name=None,
        hazardous=False,
        sentry=False,
        diameter_m=(100.0, 200.0),
        orbital_data=None,
    ):
        neo = {
            "id": neo_id,
            "name": name or f"({neo_id})",
            "designation": neo_id,
            "nasa_jpl_url": f"https://ssd.jpl.nasa.gov/tools/sbdb_lookup.html#/?sstr={neo_id}",
            "absolute_magnitude_h": 21.5,
            "estimated_diameter": {
                "kilometers": {
                    "estimated_diameter_min": diameter_m[0] / 1000,
                    "estimated_diameter_max": diameter_m[1] / 1000,
                },
                "meters": {
                    "estimated_diameter_min": diameter_m[0],
                    "estimated_diameter_max": diameter_m[1],
                },
            },
            "is_potentially_hazardous_asteroid": hazardous,
            "is_sentry_object": sentry,
            "close_approach_data": [_approach(*a) for a in approaches],
        }
        if orbital_data is not None:
            neo["orbital_data"] = orbital_data
        return neo

    return factory


@pytest.fixture
def make_feed():
    def factory(days):
        return {
            "element_count": sum(len(objs) for objs in days.values()),
            "near_earth_objects": days,
        }

    return factory


@pytest.fixture
def make_cad():
    def factory(rows):
        data = [
            [des, "12", "2461333.5", cd, str(au), str(au * 0.9), str(au * 1.1), str(v), str(v), "< 00:01", "24.3"]
            for des, cd, au, v in rows
        ]
        return {"count": str(len(data)), "data": data}

    return factory
