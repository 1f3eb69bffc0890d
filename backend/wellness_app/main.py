# backend/wellness_app/main.py

import logging
import time

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from sqlalchemy import text
from sqlalchemy.exc import TimeoutError as SA_TimeoutError
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import models  # noqa: F401 - register tables on Base.metadata
from .api import api_business, api_customer, api_therapist, auth
from .core.config import settings
from .core.observability import setup_logging
from .database import Base, engine
from .utils.errors import WorkflowError, error_message
from .utils.status_logger import register_status_listeners

setup_logging()
logger = logging.getLogger(__name__)

register_status_listeners()
Base.metadata.create_all(bind=engine)

_BOOT_TS = time.time()

app = FastAPI(title="Wellness Marketplace API", default_response_class=ORJSONResponse)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials="*" not in settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
logger.info("CORS origins set to: %s", settings.CORS_ORIGINS)


def _failure(code: int, message: str) -> ORJSONResponse:
    return ORJSONResponse(status_code=code, content={"success": False, "error": message})


@app.middleware("http")
async def catch_exceptions(request: Request, call_next):
    """Turn anything unhandled into a ``{success: false, error}`` body."""
    try:
        return await call_next(request)
    except SA_TimeoutError as exc:
        logger.error("DB timeout at %s: %s", request.url.path, str(exc))
        return _failure(status.HTTP_503_SERVICE_UNAVAILABLE, "Database busy, please retry")
    except Exception as exc:
        logger.exception("Unhandled error at %s: %s", request.url.path, exc)
        return _failure(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            str(exc) or "Internal server error",
        )


@app.exception_handler(WorkflowError)
async def workflow_exception_handler(request: Request, exc: WorkflowError):
    if exc.status_code >= 500:
        logger.error("Workflow error %s at %s: %s", exc.status_code, request.url.path, exc.message)
    else:
        logger.info("Workflow rejected %s at %s: %s", exc.status_code, request.url.path, exc.message)
    return _failure(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.info("HTTP error %s at %s: %s", exc.status_code, request.url.path, exc.detail)
    response = _failure(exc.status_code, error_message(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed input is a 400 carrying the first validation message."""
    errors = exc.errors()
    logger.warning("Validation error at %s: %s", request.url.path, errors)
    message = "Invalid request"
    if errors:
        first = errors[0]
        loc = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))
    return _failure(status.HTTP_400_BAD_REQUEST, message)


@app.get("/healthz", tags=["health"])
async def healthz():
    """Liveness probe: the process can respond; does not touch the DB."""
    return {"status": "ok", "uptime_s": round(time.time() - _BOOT_TS, 1)}


@app.get("/healthz/ready", tags=["health"])
def health_ready():
    """Readiness probe: one round trip to the database."""
    started = time.perf_counter()
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as exc:
        logger.warning("Readiness DB ping failed: %s", exc)
        return ORJSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "error", "ready": False, "error": str(exc)},
            headers={"Cache-Control": "no-store"},
        )
    return ORJSONResponse(
        content={
            "status": "ok",
            "ready": True,
            "db_ping_ms": round((time.perf_counter() - started) * 1000, 1),
        },
        headers={"Cache-Control": "no-store"},
    )


api_prefix = settings.API_PREFIX

app.include_router(auth.router, prefix=f"{api_prefix}/auth", tags=["auth"])
app.include_router(api_business.router, prefix=f"{api_prefix}/business", tags=["business"])
app.include_router(api_therapist.router, prefix=f"{api_prefix}/therapist", tags=["therapist"])
app.include_router(api_customer.router, prefix=f"{api_prefix}/customer", tags=["customer"])
