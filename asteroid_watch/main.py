import asyncio
import logging
import time
from typing import Annotated

from fastapi import FastAPI, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import (
    Counter,
    Histogram,
    generate_latest,
    CONTENT_TYPE_LATEST,
)

from . import compare, reports, services, units
from .config import LOG_LEVEL
from .schemas import CompareRequest, ReportRequest, SearchRequest, TopRequest
from .services import UpstreamError

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Asteroid Watch",
    description="Near-Earth Object tracker built on live NASA and JPL data",
    version="1.0.0",
)
app.add_middleware(CORSMiddleware, allow_origins=["*"])

# Prometheus metrics
REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "http_status"],
)
REQUEST_LATENCY = Histogram(
    "http_request_latency_seconds",
    "HTTP request latency",
    ["method", "endpoint"],
)
UPSTREAM_FAILURES = Counter(
    "upstream_failures_total",
    "Upstream fetches that failed a request",
    ["endpoint"],
)


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    method = request.method
    endpoint = request.url.path
    start_time = time.monotonic()
    response = await call_next(request)
    duration = time.monotonic() - start_time
    REQUEST_COUNT.labels(method=method, endpoint=endpoint, http_status=response.status_code).inc()
    REQUEST_LATENCY.labels(method=method, endpoint=endpoint).observe(duration)
    return response


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError):
    logger.error("Upstream failure on %s: %s", request.url.path, exc)
    UPSTREAM_FAILURES.labels(endpoint=request.url.path).inc()
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.get("/healthz")
async def healthz():
    return {"ok": True}


@app.get("/overview")
async def overview():
    today = units.today()
    feed = await services.fetch_feed(today, today)
    return reports.build_overview(feed, today)


@app.get("/neos/{asteroid_id}")
async def lookup(asteroid_id: str):
    neo = await services.fetch_neo(asteroid_id)
    return reports.build_lookup(neo)


@app.get("/search")
async def search(params: Annotated[SearchRequest, Query()]):
    start = units.format_date(params.start_date or units.today())
    end = units.date_offset(params.days, start)
    feed = await services.fetch_feed(start, end)
    return reports.build_search(feed, start, end, params.hazardous_only)


@app.get("/top")
async def top(params: Annotated[TopRequest, Query()]):
    end = units.date_offset(reports.PERIOD_DAYS[params.period], units.today())
    cad = await services.fetch_close_approaches(params.max_distance_ld, end, params.limit)
    return reports.build_top(cad, params.period, params.limit, params.max_distance_ld)


@app.post("/compare")
async def compare_asteroids(req: CompareRequest):
    results = await compare.compare_objects(req.asteroid_ids, services.fetch_neo, units.today())
    return reports.build_compare(req.asteroid_ids, results)


@app.get("/report")
async def report(params: Annotated[ReportRequest, Query()]):
    today = units.today()
    end = units.date_offset(params.days_ahead, today)
    feed, cad = await asyncio.gather(
        services.fetch_feed(today, end),
        services.fetch_close_approaches(10, end),
    )
    return reports.build_report(feed, cad, today, params.days_ahead, params.include_sentry)


@app.get("/metrics")
async def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
