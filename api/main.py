import logging
import time

import asyncpg
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from auth import router as auth_router
from core import db
from core.config import get_settings, load_frontend_url
from core.errors import AppError
from core.logging import setup_logging
from core.responses import error_envelope
from platform_fees import router as platform_fees_router
from service_offerings import router as service_offerings_router
from specialists import router as specialists_router
from users import router as users_router

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Bad configuration or an unreachable database is fatal at startup.
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info("Starting application env=%s frontend=%s", settings.env, settings.frontend_url)
    await db.init_pool(settings.database_url)
    try:
        yield
    finally:
        logger.info("Shutting down application")
        await db.close_pool()


app = FastAPI(lifespan=lifespan)

# Cookies are cross-origin, so the frontend origin must be explicit (no "*").
app.add_middleware(
    CORSMiddleware,
    allow_origins=[load_frontend_url()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "%s %s -> %s (%.4fs)",
        request.method,
        request.url.path,
        response.status_code,
        time.perf_counter() - start,
    )
    return response


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    logger.info("%s on %s %s: %s", exc.kind.value, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_envelope(exc.message))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    sources = [
        {
            "path": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": str(err.get("msg", "")),
        }
        for err in exc.errors()
    ]
    logger.info("Validation error on %s %s: %s", request.method, request.url.path, sources)
    return JSONResponse(status_code=400, content=error_envelope("Validation Error", sources))


# Constraint violations that slip past the service pre-checks (concurrent
# creates, deleting a row that is still referenced).
DUPLICATE_ENTRY_MESSAGE = "Duplicate entry. The resource already exists."
INVALID_REFERENCE_MESSAGE = "Invalid reference. The record is missing or still in use."


@app.exception_handler(asyncpg.UniqueViolationError)
async def unique_violation_handler(request: Request, exc: asyncpg.UniqueViolationError):
    logger.warning(
        "Unique violation on %s %s: constraint=%s",
        request.method,
        request.url.path,
        getattr(exc, "constraint_name", None),
    )
    return JSONResponse(status_code=409, content=error_envelope(DUPLICATE_ENTRY_MESSAGE))


@app.exception_handler(asyncpg.ForeignKeyViolationError)
async def foreign_key_violation_handler(request: Request, exc: asyncpg.ForeignKeyViolationError):
    logger.warning(
        "Foreign key violation on %s %s: constraint=%s",
        request.method,
        request.url.path,
        getattr(exc, "constraint_name", None),
    )
    return JSONResponse(status_code=400, content=error_envelope(INVALID_REFERENCE_MESSAGE))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content=error_envelope(str(exc.detail)))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception: %s on %s %s",
        type(exc).__name__,
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return JSONResponse(status_code=500, content=error_envelope("Something went wrong!"))


app.include_router(auth_router.router, prefix=API_PREFIX, tags=["auth"])
app.include_router(platform_fees_router.router, prefix=API_PREFIX, tags=["platform-fees"])
app.include_router(service_offerings_router.router, prefix=API_PREFIX, tags=["service-offerings"])
app.include_router(specialists_router.router, prefix=API_PREFIX, tags=["specialists"])
app.include_router(users_router.router, prefix=API_PREFIX, tags=["users"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "API is running"}
