"""
FishSpot API Server

REST API for finding fishing locations and moderating them
"""

import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.config import settings
from app.api.routers import admin, auth, favorites, locations, me, owner
from app.api.schemas import HealthResponse
from app.api.services.catalog import ensure_seasons
from app.core.async_database import get_async_db_manager
from app.core.error_handling import ErrorCodes, FishSpotError
from app.core.logger import configure_logging, get_logger, get_logger_instance
from app.core.security import get_credential_service

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle"""
    configure_logging()
    logger.info(f"FishSpot API starting - port: {settings.API_PORT}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    # fail fast on a missing JWT_SECRET
    get_credential_service()

    db_manager = get_async_db_manager()
    if settings.AUTO_CREATE_TABLES:
        await db_manager.create_all()
    async with db_manager.get_session() as session:
        await ensure_seasons(session)

    yield

    logger.info("FishSpot API shutting down")
    await db_manager.close()


app = FastAPI(
    title="FishSpot API",
    description="Fishing location search, reviews, favorites and moderation",
    version=settings.VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
    max_age=3600,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    get_logger_instance().log_request(
        request.method,
        request.url.path,
        response.status_code,
        time.perf_counter() - started,
    )
    return response


# ========== error handlers ==========

@app.exception_handler(FishSpotError)
async def fishspot_error_handler(request: Request, exc: FishSpotError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.to_dict()}")
    else:
        logger.warning(f"{request.method} {request.url.path}: [{exc.error_code}] {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and parameters answer 400, not 422"""
    fields = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ())[1:]),
            "message": error.get("msg", ""),
        }
        for error in exc.errors()
    ]
    logger.warning(f"{request.method} {request.url.path}: invalid request {fields}")
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid request",
            "code": ErrorCodes.VALIDATION_INVALID_FORMAT,
            "fields": fields,
        },
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "Server error", "code": ErrorCodes.SERVER_ERROR},
    )


# ========== routers ==========

app.include_router(auth.router, prefix="/auth", tags=["auth"])
app.include_router(me.router, prefix="/me", tags=["me"])
app.include_router(locations.router, prefix="/locations", tags=["locations"])
app.include_router(owner.router, prefix="/owner", tags=["owner"])
app.include_router(admin.router, prefix="/admin", tags=["admin"])
app.include_router(favorites.router, prefix="/favorites", tags=["favorites"])


@app.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(ok=True, service=settings.SERVICE_NAME, version=settings.VERSION)


if __name__ == "__main__":
    uvicorn.run(
        "app.api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )
