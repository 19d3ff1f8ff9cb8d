import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from app.api.routes import router
from app.config import settings
from app.modules.export import InvalidExportDatasetError, InvalidExportFormatError
from app.modules.record_source import DatasetValidationError, RecordSourceError
from app.schemas.error import ErrorResponse

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

VERSION = "0.1.0"

app = FastAPI(
    title="OSINT Fleet Tracker",
    description=(
        "Last known positions of naval vessels from curated, sourced events. "
        "Published coordinates are coarsened to 0.1 degree."
    ),
    version=VERSION,
)

# CORS: origins from settings (supports comma-separated env var)
cors_origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.RATE_LIMIT])
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.include_router(router, prefix="/api/v1")


# ── Structured error handlers ─────────────────────────────────────────────────

def _error(status_code: int, error: str, detail=None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=error, detail=detail).model_dump())


@app.exception_handler(InvalidExportDatasetError)
async def invalid_dataset_handler(request: Request, exc: InvalidExportDatasetError):
    return _error(400, "Invalid dataset. Supported values are 'events' or 'vessels'.", str(exc))


@app.exception_handler(InvalidExportFormatError)
async def invalid_format_handler(request: Request, exc: InvalidExportFormatError):
    return _error(400, "Invalid export format", str(exc))


@app.exception_handler(DatasetValidationError)
async def dataset_validation_handler(request: Request, exc: DatasetValidationError):
    return _error(500, str(exc), exc.errors)


@app.exception_handler(RecordSourceError)
async def record_source_handler(request: Request, exc: RecordSourceError):
    logger.error("Record source failure on %s %s: %s", request.method, request.url.path, exc.__cause__ or exc)
    return _error(502, str(exc), "The data store is unavailable.")


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return _error(422, "Validation error", str(exc))


@app.exception_handler(Exception)
async def general_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled exception on %s %s:\n%s", request.method, request.url.path, traceback.format_exc())
    return _error(500, "Internal server error", "An unexpected error occurred.")


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "version": VERSION}
