"""
FastAPI application for the Web Console backend.

Serves the console actions (sections, forms, item CRUD, K4 keys and
sync-ssm admin actions) to a thin browser front-end.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from consolectl.constants import API_BASE, SECTIONS, SSM_API_BASE, SUBSCRIBER_API_BASE, TYPE_MAPPING
from consolectl.http_client import APIConnectionError, ConsoleClientError

from .config import settings
from .api.routes import router
from .services.console_service import get_console_service

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the shared console context on startup, close its session on shutdown."""
    ctx = get_console_service().ctx
    logger.info(f"{settings.app_name} v{settings.app_version} on {settings.api_prefix}")
    for api_base in (API_BASE, SUBSCRIBER_API_BASE, SSM_API_BASE):
        logger.info(f"  {api_base} -> {ctx.client.url(api_base)}")

    yield

    logger.info(f"Closing config API session for {settings.app_name}")
    ctx.client.session.close()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description=(
        "Admin API for a 5G mobile-core configuration service: device groups, "
        "network slices, gNB/UPF inventory, subscribers and K4 keys."
    ),
    lifespan=lifespan,
    docs_url=f"{settings.api_prefix}/docs",
    redoc_url=f"{settings.api_prefix}/redoc",
    openapi_url=f"{settings.api_prefix}/openapi.json"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

app.include_router(router, prefix=settings.api_prefix)


@app.get("/", include_in_schema=False)
async def root():
    """Entry points and the section/type names the API accepts."""
    return JSONResponse({
        "service": settings.app_name,
        "version": settings.app_version,
        "docs": f"{settings.api_prefix}/docs",
        "health": f"{settings.api_prefix}/health",
        "sections": sorted(SECTIONS),
        "types": sorted(TYPE_MAPPING),
    })


@app.exception_handler(ConsoleClientError)
async def config_api_exception_handler(request: Request, exc: ConsoleClientError):
    """Config API failures that escaped a handler answer 502 (503 when unreachable)."""
    status_code = 503 if isinstance(exc, APIConnectionError) else 502
    logger.error(f"Config API error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"error": "Config API error", "message": str(exc)}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": str(exc) if settings.debug else "An unexpected error occurred"
        }
    )


def main():
    """Run the backend with uvicorn."""
    import uvicorn

    uvicorn.run(
        "web_backend.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info"
    )


if __name__ == "__main__":
    main()
