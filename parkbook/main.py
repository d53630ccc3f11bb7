"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import Depends, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import inspect, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from parkbook.api.router import api_router
from parkbook.config import settings
from parkbook.core.errors import ReservationError
from parkbook.db.base import Base
from parkbook.db.models import Booking
from parkbook.db.session import engine, get_session_factory

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events."""
    # Startup
    logger.info("Starting %s v%s", settings.APP_NAME, settings.APP_VERSION)

    yield

    # Shutdown
    logger.info("Shutting down...")
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ReservationError)
async def reservation_error_handler(request: Request, exc: ReservationError):
    """Map reservation errors to their status codes."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies as 400, like every other input error."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors()), "reason": "invalid_input"},
    )


# Include routers
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/")
async def root():
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/health/db")
async def health_db(session_factory: async_sessionmaker = Depends(get_session_factory)):
    """Check that the database accepts connections."""
    try:
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Database connection check failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable", "detail": "Failed to connect to the database"},
        )
    return {"status": "healthy", "message": "Database connection successful!"}


def _describe_schema(connection) -> Dict[str, Any]:
    inspector = inspect(connection)
    tables = sorted(inspector.get_table_names())
    booking_columns = []
    if Booking.__tablename__ in tables:
        booking_columns = [
            {"name": column["name"], "type": str(column["type"]), "nullable": column["nullable"]}
            for column in inspector.get_columns(Booking.__tablename__)
        ]
    return {"tables": tables, "booking_columns": booking_columns}


@app.get("/health/db/schema")
async def health_db_schema(session_factory: async_sessionmaker = Depends(get_session_factory)):
    """
    Report the database tables and the applied Alembic revision.

    Answers 503 when a table the models expect is missing.
    """
    try:
        async with session_factory() as session:
            connection = await session.connection()
            schema = await connection.run_sync(_describe_schema)
            revision = None
            if "alembic_version" in schema["tables"]:
                revision = await session.scalar(text("SELECT version_num FROM alembic_version"))
    except SQLAlchemyError as exc:
        logger.error("Database schema check failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "unavailable", "detail": "Failed to inspect the database"},
        )

    missing = sorted(set(Base.metadata.tables) - set(schema["tables"]))
    body = {**schema, "alembic_revision": revision, "missing_tables": missing}
    if missing:
        logger.warning("Database schema is missing tables: %s", ", ".join(missing))
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "incomplete", **body},
        )
    return {"status": "healthy", **body}
