"""
HTTP API for the chart screenshot service.
Provides the service descriptor, a health check and the screenshot route.
"""

from datetime import datetime, timezone
from typing import Dict, Optional

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .browser import BrowserSessionManager
from .config import Config, load_config
from .errors import ErrorKind, ScreenshotError, create_error_response
from .logging_setup import get_logger
from .symbols import validate_interval, validate_symbol

logger = get_logger(__name__)

SERVICE_NAME = "TradingView Screenshot Service"
EXAMPLE_SYMBOL = "BINANCE:BTCUSDT"

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


# ==================== Response Models ====================

class ServiceInfo(BaseModel):
    """Service descriptor returned by the root endpoint"""
    service: str
    status: str
    version: str
    endpoints: Dict[str, str]
    example: str
    documentation: str


class HealthStatus(BaseModel):
    """Health status model"""
    status: str = Field(..., description="Always 'healthy' while the process serves requests")
    timestamp: str = Field(..., description="Current UTC time, ISO-8601")


class ErrorResponse(BaseModel):
    """Error envelope shared by every failure response"""
    error: str
    message: str


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def create_app(config: Optional[Config] = None,
               session_manager: Optional[BrowserSessionManager] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Validated configuration (loaded from the environment if omitted)
        session_manager: Browser session manager (built from `config` if omitted)
    """
    config = config or load_config()
    session_manager = session_manager or BrowserSessionManager(config)

    app = FastAPI(
        title=SERVICE_NAME,
        description="Captures TradingView chart screenshots with a headless browser",
        version=__version__,
    )
    app.state.config = config
    app.state.session_manager = session_manager

    @app.get("/", response_model=ServiceInfo)
    async def root():
        return ServiceInfo(
            service=SERVICE_NAME,
            status="running",
            version=__version__,
            endpoints={
                "health": "/health",
                "screenshot": "/screenshot?symbol=EXCHANGE:SYMBOL",
            },
            example=f"/screenshot?symbol={EXAMPLE_SYMBOL}",
            documentation="/docs",
        )

    @app.get("/health", response_model=HealthStatus)
    async def health():
        return HealthStatus(status="healthy", timestamp=utc_timestamp())

    @app.get(
        "/screenshot",
        responses={
            200: {"content": {"image/png": {}}, "description": "Chart screenshot"},
            400: {"model": ErrorResponse, "description": "Invalid symbol or interval"},
            408: {"model": ErrorResponse, "description": "Chart navigation timed out"},
            500: {"model": ErrorResponse, "description": "Screenshot capture failed"},
            502: {"model": ErrorResponse, "description": "Could not reach the chart site"},
        },
    )
    async def screenshot(
        symbol: Optional[str] = Query(None, description="EXCHANGE:PAIR, e.g. BINANCE:BTCUSDT"),
        interval: Optional[str] = Query(None, description="Chart resolution, e.g. 15, 240, 1D"),
    ):
        try:
            if not validate_symbol(symbol):
                raise ScreenshotError(ErrorKind.VALIDATION)
            interval = interval or None
            if interval is not None and not validate_interval(interval):
                raise ScreenshotError(
                    ErrorKind.VALIDATION,
                    "Interval must be a chart resolution such as 15, 240, 1D or 1W",
                    error="Invalid interval format",
                )
            image = await session_manager.capture(symbol, interval)
        except ScreenshotError as e:
            if e.kind is not ErrorKind.VALIDATION:
                logger.error("Screenshot for %s failed (%s): %s", symbol, e.kind.value, e.message)
            return JSONResponse(status_code=e.status_code, content=e.to_dict())

        headers = {**NO_CACHE_HEADERS, "Content-Length": str(len(image))}
        return Response(content=image, media_type="image/png", headers=headers)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # Unknown paths and unsupported methods are both reported as missing endpoints.
        if exc.status_code in (404, 405):
            return JSONResponse(
                status_code=404,
                content=create_error_response("Not found", "The requested endpoint does not exist"),
            )
        return JSONResponse(
            status_code=exc.status_code,
            content=create_error_response("HTTP error", str(exc.detail)),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=create_error_response("Internal server error", "An unexpected error occurred"),
        )

    return app
