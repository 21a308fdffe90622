"""Application entry point and FastAPI app factory."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import IntegrityError

from app.api.router import api_router
from app.core.config import get_settings
from app.core.exceptions import GeocodingError, VisitLogError
from app.core.logging_config import setup_logging
from app.schemas.response import error_response, validation_error_response

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events (startup/shutdown)."""
    # Startup: configure logging (app.log + uploads.log)
    setup_logging()
    Path(get_settings().UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    yield
    # Shutdown


app = FastAPI(
    title="Visit Log API",
    version="1.0.0",
    description="Locations, visits and visit photos with map markers and paginated history views.",
    lifespan=lifespan,
)

# CORS: with allow_credentials=True, origins cannot be "*". Use explicit list.
_default_cors_origins = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


def _get_cors_origins() -> list[str]:
    """Return list of allowed CORS origins from settings or default dev list."""
    settings = get_settings()
    if settings.CORS_ORIGINS.strip():
        return [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]
    return _default_cors_origins


app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -----------------------------------------------------------------------------
# Error envelopes
# -----------------------------------------------------------------------------


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """422 with the first failing constraint's message (e.g. latitude out of range)."""
    body = validation_error_response(exc.errors())
    logger.info("Validation failed on %s: %s", request.url.path, body.message)
    return JSONResponse(status_code=422, content=body.model_dump())


@app.exception_handler(GeocodingError)
async def geocoding_error_handler(request: Request, exc: GeocodingError) -> JSONResponse:
    logger.warning("Geocoder error on %s: %s (upstream status %s)", request.url.path, exc.message, exc.upstream_status)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.message, data={"upstream_status": exc.upstream_status}).model_dump(),
    )


@app.exception_handler(VisitLogError)
async def visit_log_error_handler(request: Request, exc: VisitLogError) -> JSONResponse:
    """NotFoundError (404), ReferencedRecordError (409), UploadError (400/500)."""
    if exc.status_code >= 500:
        logger.error("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    else:
        logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_response(exc.message).model_dump())


@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """409 for a constraint the services did not check up front."""
    logger.warning("Constraint violation on %s: %s", request.url.path, exc.orig)
    return JSONResponse(
        status_code=409,
        content=error_response("Request conflicts with stored records").model_dump(),
    )


settings = get_settings()

app.include_router(api_router, prefix=settings.API_PREFIX)

# Uploaded photos are served from the same origin as the API
app.mount(
    settings.UPLOAD_URL_PREFIX,
    StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
    name="uploads",
)
