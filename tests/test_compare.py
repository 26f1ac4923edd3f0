from datetime import date

import httpx
import pytest

from asteroid_watch import compare, services
from asteroid_watch.services import UpstreamError

TODAY = date(2026, 10, 19)


def fetcher(objects):
    async def fetch(asteroid_id):
        if asteroid_id not in objects:
            raise UpstreamError("API error: 404 Not Found")
        return objects[asteroid_id]
    return fetch


def test_next_earth_approach_picks_earliest_future(make_neo):
    neo = make_neo("1", [
        ("2019-05-01", 1e6),
        ("2028-03-01", 3e6),
        ("2026-10-19", 1e5),
        ("2027-06-01", 2e6, 40000.0),
        ("2026-12-01", 5e5, 1000.0, "Mars"),
    ])
    nxt = compare.next_earth_approach(neo, TODAY)
    assert nxt == {"date": "2027-06-01", "distance_km": 2e6, "velocity_kph": 40000.0}


def test_next_earth_approach_none(make_neo):
    assert compare.next_earth_approach(make_neo("1", [("2020-01-01", 1e6)]), TODAY) is None
    assert compare.next_earth_approach(make_neo("2"), TODAY) is None


def test_comparison_record_defaults(make_neo):
    record = compare.comparison_record(make_neo("1", hazardous=True), TODAY)
    assert record["orbit_class"] == "Unknown"
    assert record["orbital_period_days"] == 0.0
    assert record["next_earth_approach"] is None
    assert record["is_hazardous"] is True
    assert record["error"] is None


@pytest.mark.asyncio
async def test_valid_and_invalid_ids(make_neo):
    objects = {"1": make_neo("1", name="Eros")}
    results = await compare.compare_objects(["1", "999"], fetcher(objects), TODAY)
    assert len(results) == 2
    assert results[0].error is None
    assert results[0].as_dict()["name"] == "Eros"
    assert isinstance(results[1], compare.Failed)
    assert results[1].as_dict() == {"id": "999", "name": None, "error": "API error: 404 Not Found"}


@pytest.mark.asyncio
async def test_malformed_payload_is_isolated(make_neo):
    objects = {"1": {"unexpected": True}, "2": make_neo("2")}
    results = await compare.compare_objects(["1", "2"], fetcher(objects), TODAY)
    assert results[0].error.startswith("Malformed payload")
    assert results[1].error is None


@pytest.mark.asyncio
async def test_results_keep_input_order(make_neo):
    objects = {i: make_neo(i) for i in ["5", "3", "4"]}
    results = await compare.compare_objects(["5", "3", "4"], fetcher(objects), TODAY)
    assert [r.record["id"] for r in results] == ["5", "3", "4"]


@pytest.mark.asyncio
async def test_summary_superlatives(make_neo):
    objects = {
        "1": make_neo("1", name="Small", diameter_m=(10, 20), hazardous=True),
        "2": make_neo("2", name="Big", diameter_m=(300, 700)),
        "3": make_neo("3", name="AlsoBig", diameter_m=(300, 700), hazardous=True),
    }
    results = await compare.compare_objects(["1", "2", "3", "404"], fetcher(objects), TODAY)
    summary = compare.summarize(results)
    assert summary["largest"] == {"name": "Big", "diameter_max_m": 700}
    assert summary["hazardous_count"] == 2
    assert summary["hazardous_names"] == ["Small", "AlsoBig"]


@pytest.mark.asyncio
async def test_summary_with_no_successes():
    results = await compare.compare_objects(["a", "b"], fetcher({}), TODAY)
    summary = compare.summarize(results)
    assert summary == {"largest": None, "hazardous_count": 0, "hazardous_names": []}


@pytest.mark.asyncio
async def test_unusable_id_does_not_abort_siblings(monkeypatch, make_neo):
    def handler(request):
        return httpx.Response(200, json=make_neo("1"))

    monkeypatch.setattr(
        services, "_client", lambda: httpx.AsyncClient(transport=httpx.MockTransport(handler))
    )
    results = await compare.compare_objects(["1", "bad\nid"], services.fetch_neo, TODAY)
    assert len(results) == 2
    assert results[0].error is None
    assert isinstance(results[1], compare.Failed)
    assert results[1].id == "bad\nid"


@pytest.mark.asyncio
async def test_unexpected_failure_becomes_failed(make_neo):
    async def fetch(asteroid_id):
        if asteroid_id == "2":
            raise RuntimeError("connection pool exhausted")
        return make_neo(asteroid_id)

    results = await compare.compare_objects(["1", "2"], fetch, TODAY)
    assert results[0].error is None
    assert "connection pool exhausted" in results[1].error
