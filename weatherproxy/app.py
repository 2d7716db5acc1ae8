"""Weather forecast proxy: FastAPI app serving normalized CWA forecasts."""

import logging

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from weatherproxy.config.loader import load_config, resolve_api_key
from weatherproxy.config.schema import ProxyConfig
from weatherproxy.ingest.cwa_client import CwaClient
from weatherproxy.ingest.transformer import ForecastTransformer
from weatherproxy.models.common import utc_now_iso
from weatherproxy.models.errors import WeatherProxyError

logger = logging.getLogger(__name__)

router = APIRouter()


def get_config(request: Request) -> ProxyConfig:
    return request.app.state.config


def get_transformer(config: ProxyConfig = Depends(get_config)) -> ForecastTransformer:
    """Build a request-scoped transformer; the credential is read on every call."""
    client = CwaClient.from_config(config.upstream, resolve_api_key(config.upstream))
    return ForecastTransformer(client)


# ── Routes ──────────────────────────────────────────────────────


@router.get("/")
def index(config: ProxyConfig = Depends(get_config)):
    """Static index of available endpoints."""
    endpoints = {slug: f"/api/weather/{slug}" for slug in config.city_registry()}
    endpoints["health"] = "/api/health"
    return {
        "message": "Welcome to the CWA weather forecast API",
        "endpoints": endpoints,
    }


@router.get("/api/health")
def get_health():
    return {"status": "OK", "timestamp": utc_now_iso()}


@router.get("/api/weather/{city}")
def get_city_weather(
    city: str,
    request: Request,
    config: ProxyConfig = Depends(get_config),
    transformer: ForecastTransformer = Depends(get_transformer),
):
    """36-hour forecast for one registered city."""
    city_config = config.city_registry().get(city)
    if city_config is None:
        raise HTTPException(404, f"No route for {request.url.path}")
    forecast = transformer.fetch(city_config.location_name)
    return {"success": True, "data": forecast.to_dict()}


# ── Error handlers ──────────────────────────────────────────────


async def _proxy_error_handler(request: Request, exc: WeatherProxyError) -> JSONResponse:
    logger.warning(
        "%s %s -> %d %s: %s",
        request.method, request.url.path, exc.status_code, type(exc).__name__, exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        body = {"error": "Path not found", "message": f"No route for {request.url.path}"}
    else:
        body = {"error": "Request error", "message": str(exc.detail)}
    return JSONResponse(
        status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None)
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=500,
        content={"error": "Server error", "message": "Internal server error"},
    )


def create_app(config: ProxyConfig | None = None) -> FastAPI:
    config = config or load_config()

    app = FastAPI(title="CWA Weather Proxy", version="0.1.0")
    app.state.config = config
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    app.add_exception_handler(WeatherProxyError, _proxy_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
    return app


app = create_app()


if __name__ == "__main__":
    from weatherproxy.cli import main

    raise SystemExit(main(["serve"]))
