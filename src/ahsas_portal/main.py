"""FastAPI application entry point for the AHSAS portal functions."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from ahsas_portal import __version__
from ahsas_portal.api.routes import router
from ahsas_portal.config import get_settings
from ahsas_portal.exceptions import PortalError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

CORS_ALLOW_HEADERS = ["authorization", "x-client-info", "apikey", "content-type"]
PERMISSIVE_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"Starting AHSAS portal functions v{__version__}")
    settings = get_settings()
    logger.info(f"Debug mode: {settings.debug}")

    yield

    logger.info("Shutting down AHSAS portal functions")


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def http_error_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
    message = "Invalid request body"
    if fields:
        message = f"{message}: {', '.join(fields)}"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message},
    )


async def error_guard(request: Request, call_next):
    """Turn any unhandled failure into a 500 carrying its message."""
    try:
        return await call_next(request)
    except Exception as e:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(e) or "Unknown error"},
        )


async def permissive_cors(request: Request, call_next):
    """Answer any OPTIONS request and stamp CORS headers on every response.

    Browser preflights are answered by CORSMiddleware before reaching here.
    """
    if request.method == "OPTIONS":
        return Response(status_code=status.HTTP_200_OK, headers=PERMISSIVE_CORS_HEADERS)

    response = await call_next(request)
    for name, value in PERMISSIVE_CORS_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="AHSAS Portal Functions",
        description="Admin-privileged account operations for the member portal",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # Order matters: CORS is added last so it wraps the error guard
    app.middleware("http")(error_guard)
    if "*" in settings.cors_allow_origins:
        app.middleware("http")(permissive_cors)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["POST", "GET", "OPTIONS"],
        allow_headers=CORS_ALLOW_HEADERS,
    )

    app.include_router(router)

    return app


# Create app instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "ahsas_portal.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
