import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from auditor.batch import bulk_scan, compare
from auditor.core import analyze_page
from auditor.scorer import score_payload
from .cache import get_cached, set_cached, is_cache_healthy
from .schemas import (
    BulkScanRequest,
    BulkScanResponse,
    CompareRequest,
    CompareResponse,
    ErrorResponse,
    FetchPageRequest,
    HealthResponse,
    ScoreRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _error(status_code: int, message: str, status: int = None) -> JSONResponse:
    body = ErrorResponse(error=message, status=status).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


@router.post(
    "/fetch-page",
    summary="Fetch a URL, extract its on-page signals and score them",
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def fetch_page(request: FetchPageRequest):
    """
    Returns every extracted signal flattened into the top level, plus `scored`.

    - Checks Redis cache first (keyed on URL + keywords).
    - Target answered non-2xx: HTTP 400 with the upstream status.
    - Target unreachable: HTTP 502.
    """
    url = request.url

    # cache-aside: serve from Redis if we've analyzed this URL recently
    cached = get_cached(url, request.keywords)
    if cached:
        logger.info("Cache hit for %s", url)
        return {**cached, "cached": True}

    result = await analyze_page(url, keywords=request.keywords)

    if not result.ok:
        if result.status_code:
            return _error(400, result.error, status=result.status_code)
        # complete network failure: not cached, surfaced as HTTP 502
        return _error(502, f"Failed to reach URL: {result.error}")

    data = result.to_dict()
    set_cached(url, data, request.keywords)
    return {**data, "cached": False}


@router.post("/score", summary="Score hand-supplied page signals without fetching")
async def score(request: ScoreRequest):
    try:
        result = score_payload(request.model_dump())
    except (TypeError, ValueError) as exc:
        # a field of the wrong shape (e.g. word_count: "many")
        logger.info("Rejected /score payload: %s", exc)
        return _error(422, f"Invalid signal fields: {exc}")
    return {"ok": True, **result.to_dict()}


@router.post("/compare", response_model=CompareResponse, summary="Analyze 2-5 URLs side by side")
async def compare_urls(request: CompareRequest) -> CompareResponse:
    results = await compare(request.urls, keywords=request.keywords)
    return CompareResponse(results=results)


@router.post("/bulk-scan", response_model=BulkScanResponse, summary="Analyze 1-20 URLs and summarise")
async def bulk_scan_urls(request: BulkScanRequest) -> BulkScanResponse:
    outcome = await bulk_scan(request.urls, keywords=request.keywords)
    return BulkScanResponse(**outcome)


@router.get("/health", response_model=HealthResponse, summary="Service health check")
async def health_check() -> HealthResponse:
    cache_status = "connected" if is_cache_healthy() else "unavailable"
    return HealthResponse(status="ok", cache=cache_status)
