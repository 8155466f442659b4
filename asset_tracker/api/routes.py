"""
FastAPI routes for price lookups, rankings and bulk snapshots.
All endpoints are read-only; errors share the `{error, details, status}` shape.
"""
from __future__ import annotations

import asyncio
import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Mapping, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from asset_tracker.cache.ttl_cache import TTLCache
from asset_tracker.config.settings import Settings, settings as default_settings
from asset_tracker.internal_metrics import MetricsCollector
from asset_tracker.observability import RequestStats, RequestTimer
from asset_tracker.providers.base import PriceAdapter
from asset_tracker.providers.registry import build_adapters
from asset_tracker.providers.ticker_adapter import CryptoTickerAdapter
from asset_tracker.providers.yahoo_adapter import YahooStockAdapter
from asset_tracker.schemas.asset import (
    AssetListResponse,
    AssetQuote,
    PriceResponse,
    RankedAsset,
    RankedListResponse,
)
from asset_tracker.schemas.common import ErrorResponse, HealthResponse, MetricsResponse, RequestLatency
from asset_tracker.services.batch_fetcher import BatchFetcher
from asset_tracker.services.metrics_engine import (
    filter_snapshots,
    rank_gainers,
    rank_losers,
    rank_stable,
    top_snapshots,
    validate_category,
)
from asset_tracker.services.price_service import PriceService
from asset_tracker.services.snapshot_service import SnapshotService
from asset_tracker.utils.asset_class import AssetClass, normalize_asset_class
from asset_tracker.utils.period_mapper import DEFAULT_PERIOD, PERIODS, validate_period
from asset_tracker.utils.symbol_normalizer import normalize_symbol, parse_symbol_list
from asset_tracker.utils.validators import clamp

logger = logging.getLogger(__name__)
router = APIRouter()

DEFAULT_LIMIT = 10
MIN_LIMIT = 1
MAX_LIMIT = 50
DEFAULT_VOL_THRESHOLD = 2.0
MAX_VOL_THRESHOLD = 50.0
STABLE_PERIODS = ("1d", "1w")
STABLE_DEFAULT_PERIOD = "1w"
TOP_SNAPSHOT_LIMIT = 5

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid asset class, symbol or period"},
    404: {"model": ErrorResponse, "description": "Provider returned no data"},
    422: {"model": ErrorResponse, "description": "Validation error"},
    500: {"model": ErrorResponse, "description": "Internal server error"},
}


def _bad_request(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=400, detail=str(exc))


def _flatten_validation_errors(exc: RequestValidationError) -> str:
    """Return a concise, stable validation message string."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(i) for i in err.get("loc", []) if i != "body")
        msg = err.get("msg", "Invalid value")
        parts.append(f"{loc}: {msg}")
    return "; ".join(parts)


def get_price_service(request: Request) -> PriceService:
    return request.app.state.price_service


def get_batch_fetcher(request: Request) -> BatchFetcher:
    return request.app.state.batch_fetcher


def get_snapshot_service(request: Request) -> SnapshotService:
    return request.app.state.snapshot_service


def create_app(
    config: Optional[Settings] = None,
    adapters: Optional[Mapping[AssetClass, PriceAdapter]] = None,
    cache: Optional[TTLCache] = None,
    snapshot_service: Optional[SnapshotService] = None,
) -> FastAPI:
    config = config or default_settings
    cache = cache or TTLCache(default_ttl_seconds=config.cache_ttl_seconds)
    adapters = adapters or build_adapters(config)
    provider_metrics = MetricsCollector()
    price_service = PriceService(adapters, cache, config.cache_ttl_seconds, metrics=provider_metrics)

    app = FastAPI(
        title=config.app_name,
        version=config.app_version,
        description="Read-only price, ranking and snapshot API for stocks, crypto and forex.",
    )
    app.state.settings = config
    app.state.cache = cache
    app.state.provider_metrics = provider_metrics
    app.state.request_stats = RequestStats()
    app.state.price_service = price_service
    app.state.batch_fetcher = BatchFetcher(
        price_service,
        {
            AssetClass.STOCKS: config.stock_universe,
            AssetClass.CRYPTO: config.crypto_universe,
            AssetClass.FOREX: config.forex_universe,
        },
    )
    app.state.snapshot_service = snapshot_service or SnapshotService(
        YahooStockAdapter(config),
        CryptoTickerAdapter(config),
        cache,
        config.cache_ttl_seconds,
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_: Request, exc: StarletteHTTPException):
        details = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        payload = ErrorResponse(error="request_failed", details=details, status=exc.status_code)
        return JSONResponse(status_code=exc.status_code, content=payload.model_dump())

    @app.exception_handler(RequestValidationError)
    async def request_validation_exception_handler(_: Request, exc: RequestValidationError):
        payload = ErrorResponse(error="validation_error", details=_flatten_validation_errors(exc), status=422)
        return JSONResponse(status_code=422, content=payload.model_dump())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(_: Request, exc: Exception):
        logger.error(f"Unhandled API exception: {exc}", exc_info=True)
        payload = ErrorResponse(error="internal_server_error", details="Unexpected server error", status=500)
        return JSONResponse(status_code=500, content=payload.model_dump())

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
        timer = RequestTimer()
        response = None
        try:
            response = await call_next(request)
            response.headers["x-request-id"] = request_id
            return response
        finally:
            latency_ms = round(timer.elapsed_ms(), 2)
            status_code = response.status_code if response else 500
            request.app.state.request_stats.record(latency_ms, status_code)
            logger.info(
                "request_complete",
                extra={
                    "request_id": request_id,
                    "path": request.url.path,
                    "status_code": status_code,
                    "latency_ms": latency_ms,
                    "cache_hit": response.headers.get("x-cache-hit") if response else None,
                },
            )

    app.include_router(router)
    return app


@router.get("/", summary="API index")
async def root():
    return {
        "status": "running",
        "message": "Asset Tracker API is live",
        "available_routes": [
            "/health",
            "/metrics",
            "/api/v1/price/{asset_class}/{symbol}?period=1d",
            "/api/v1/gainers/{asset_class}?limit=10&timeframe=1d",
            "/api/v1/losers/{asset_class}?limit=10&timeframe=1d",
            "/api/v1/stable/{asset_class}?limit=10&vol_threshold=2&timeframe=1w",
            "/api/assets?category=gainers&symbols=BTC-USD,TSLA,EURUSD=X",
            "/api/top-gainers",
            "/api/top-losers",
        ],
    }


@router.get("/health", response_model=HealthResponse, summary="Service health")
async def health():
    return HealthResponse(status="ok", message="Asset Tracker API is live", timestamp=datetime.now(timezone.utc))


@router.get("/metrics", response_model=MetricsResponse, summary="Runtime metrics")
async def metrics(request: Request):
    state = request.app.state
    snapshot = state.request_stats.snapshot()
    return MetricsResponse(
        service=state.settings.app_name,
        uptime_seconds=round(state.request_stats.uptime_seconds(), 3),
        api_latency_ms=RequestLatency(
            request_count=snapshot.request_count,
            average=snapshot.average_ms,
            max=snapshot.max_ms,
            last=snapshot.last_ms,
            status_classes=snapshot.status_classes,
        ),
        cache=state.cache.metrics(),
        providers=state.provider_metrics.provider_status(),
        timestamp=datetime.now(timezone.utc),
    )


@router.get(
    "/api/v1/price/{asset_class}/{symbol}",
    response_model=PriceResponse,
    responses=ERROR_RESPONSES,
    summary="Price series for one symbol",
)
async def price(
    asset_class: str,
    symbol: str,
    period: str = Query(DEFAULT_PERIOD, description=f"One of {', '.join(PERIODS)}"),
    service: PriceService = Depends(get_price_service),
):
    try:
        clean_class = normalize_asset_class(asset_class)
        clean_symbol = normalize_symbol(symbol)
        clean_period = validate_period(period)
    except ValueError as exc:
        raise _bad_request(exc) from exc

    result, hit = await asyncio.to_thread(service.get_price, clean_class, clean_symbol, clean_period)
    if not result.ok:
        raise HTTPException(status_code=404, detail=result.error)

    payload = PriceResponse(
        asset_class=clean_class.value,
        symbol=clean_symbol,
        period=clean_period,
        current_price=result.current_price,
        candles=result.candles,
        data_source="cache" if hit else "live",
    )
    return JSONResponse(content=payload.model_dump(mode="json"), headers={"x-cache-hit": str(hit).lower()})


async def _ranked_listing(
    fetcher: BatchFetcher,
    asset_class: str,
    limit: int,
    timeframe: str,
    allowed_periods: tuple[str, ...],
    rank: Callable[[list[AssetQuote], int], list[RankedAsset]],
) -> RankedListResponse:
    try:
        clean_class = normalize_asset_class(asset_class)
        clean_period = validate_period(timeframe, allowed_periods)
    except ValueError as exc:
        raise _bad_request(exc) from exc

    clean_limit = int(clamp(limit, MIN_LIMIT, MAX_LIMIT))
    quotes = await fetcher.fetch_top_assets(clean_class, clean_limit, clean_period)
    return RankedListResponse(
        asset_class=clean_class.value,
        timeframe=clean_period,
        fetched_at=datetime.now(timezone.utc),
        total_fetched=len(quotes),
        items=rank(quotes, clean_limit),
    )


@router.get(
    "/api/v1/gainers/{asset_class}",
    response_model=RankedListResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
    summary="Top gainers by percent change",
)
async def gainers(
    asset_class: str,
    limit: int = Query(DEFAULT_LIMIT, description=f"Clamped to {MIN_LIMIT}-{MAX_LIMIT}"),
    timeframe: str = Query(DEFAULT_PERIOD, description=f"One of {', '.join(PERIODS)}"),
    fetcher: BatchFetcher = Depends(get_batch_fetcher),
):
    return await _ranked_listing(fetcher, asset_class, limit, timeframe, PERIODS, rank_gainers)


@router.get(
    "/api/v1/losers/{asset_class}",
    response_model=RankedListResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
    summary="Top losers by percent change",
)
async def losers(
    asset_class: str,
    limit: int = Query(DEFAULT_LIMIT, description=f"Clamped to {MIN_LIMIT}-{MAX_LIMIT}"),
    timeframe: str = Query(DEFAULT_PERIOD, description=f"One of {', '.join(PERIODS)}"),
    fetcher: BatchFetcher = Depends(get_batch_fetcher),
):
    return await _ranked_listing(fetcher, asset_class, limit, timeframe, PERIODS, rank_losers)


@router.get(
    "/api/v1/stable/{asset_class}",
    response_model=RankedListResponse,
    response_model_exclude_none=True,
    responses=ERROR_RESPONSES,
    summary="Least volatile symbols under a threshold",
)
async def stable(
    asset_class: str,
    limit: int = Query(DEFAULT_LIMIT, description=f"Clamped to {MIN_LIMIT}-{MAX_LIMIT}"),
    vol_threshold: float = Query(DEFAULT_VOL_THRESHOLD, description=f"Clamped to 0-{MAX_VOL_THRESHOLD:g}"),
    timeframe: str = Query(STABLE_DEFAULT_PERIOD, description=f"One of {', '.join(STABLE_PERIODS)}"),
    fetcher: BatchFetcher = Depends(get_batch_fetcher),
):
    threshold = clamp(vol_threshold, 0.0, MAX_VOL_THRESHOLD)
    return await _ranked_listing(
        fetcher,
        asset_class,
        limit,
        timeframe,
        STABLE_PERIODS,
        lambda quotes, n: rank_stable(quotes, n, threshold),
    )


@router.get("/api/assets", response_model=AssetListResponse, responses=ERROR_RESPONSES, summary="Bulk price snapshots")
async def assets(
    request: Request,
    category: Optional[str] = Query(None, description="gainers, losers or stable"),
    symbols: Optional[str] = Query(None, description="Comma separated symbols, e.g. BTC-USD,TSLA,EURUSD=X"),
    service: SnapshotService = Depends(get_snapshot_service),
):
    try:
        category = validate_category(category)
        symbol_list = parse_symbol_list(symbols) if symbols else list(request.app.state.settings.default_symbols)
    except ValueError as exc:
        raise _bad_request(exc) from exc

    items = filter_snapshots(await service.get_snapshots(symbol_list), category)
    return AssetListResponse(
        fetched_at=datetime.now(timezone.utc),
        category=category,
        total_fetched=len(items),
        items=items,
    )


async def _top_listing(request: Request, service: SnapshotService, direction: str) -> AssetListResponse:
    snapshots = await service.get_snapshots(list(request.app.state.settings.default_symbols))
    items = top_snapshots(snapshots, direction, TOP_SNAPSHOT_LIMIT)
    return AssetListResponse(
        fetched_at=datetime.now(timezone.utc),
        category=direction,
        total_fetched=len(items),
        items=items,
    )


@router.get("/api/top-gainers", response_model=AssetListResponse, summary="Top 5 gainers of the default list")
async def top_gainers(request: Request, service: SnapshotService = Depends(get_snapshot_service)):
    return await _top_listing(request, service, "gainers")


@router.get("/api/top-losers", response_model=AssetListResponse, summary="Top 5 losers of the default list")
async def top_losers(request: Request, service: SnapshotService = Depends(get_snapshot_service)):
    return await _top_listing(request, service, "losers")
