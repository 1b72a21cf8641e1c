"""
Lajme news aggregator - FastAPI application
"""

import asyncio
import os
import subprocess
import sys
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy import text

from lajme.api.v1.api import api_router
from lajme.core.config import settings
from lajme.core.database import close_db, engine, init_db
from lajme.core.exceptions import setup_exception_handlers
from lajme.core.logging import configure_logging


async def wait_for_database(max_retries: int = 30, retry_delay: int = 2) -> bool:
    """Wait for database to be ready"""
    logger.info("Waiting for database to be ready...")

    for attempt in range(max_retries):
        try:
            async with engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("Database is ready!")
            return True
        except Exception as e:
            logger.warning(f"Database not ready (attempt {attempt + 1}/{max_retries}): {e}")
            if attempt < max_retries - 1:
                await asyncio.sleep(retry_delay)

    logger.error("Database failed to become ready after maximum retries")
    return False


def _get_alembic_cwd() -> Path:
    """Directory holding alembic.ini."""
    return Path(__file__).resolve().parent.parent


async def apply_migrations() -> bool:
    """Apply database migrations"""
    if not settings.RUN_MIGRATIONS:
        logger.warning("RUN_MIGRATIONS flag disabled, skipping alembic upgrade.")
        return True

    logger.info("Applying database migrations...")
    try:
        result = subprocess.run(
            [sys.executable, "-m", "alembic", "upgrade", "head"],
            capture_output=True,
            text=True,
            cwd=str(_get_alembic_cwd()),
            env=os.environ.copy(),
            check=False,
        )
    except FileNotFoundError as exc:
        logger.error(f"Alembic command not found: {exc}")
        return False

    if result.returncode == 0:
        if result.stdout.strip():
            logger.info(f"Alembic output:\n{result.stdout.strip()}")
        logger.info("Database migrations applied successfully.")
        return True

    logger.error(f"Alembic upgrade failed with return code {result.returncode}")
    if result.stderr.strip():
        logger.error(f"Alembic stderr:\n{result.stderr.strip()}")
    return False


configure_logging()

app = FastAPI(
    title=settings.APP_NAME,
    description="Albanian news aggregation API",
    version=settings.VERSION,
    docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None,
    openapi_url="/openapi.json" if settings.ENVIRONMENT != "production" else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_origin_regex=settings.ALLOWED_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)

app.include_router(api_router)


@app.on_event("startup")
async def startup_event():
    """Initialize application on startup"""
    logger.info(f"Starting {settings.APP_NAME}...")

    if not await wait_for_database():
        raise RuntimeError("Database connection failed during startup")

    if not await apply_migrations():
        raise RuntimeError("Database migrations failed during startup")

    await init_db()
    logger.info("Application startup complete!")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"Shutting down {settings.APP_NAME}...")
    await close_db()


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "service": "lajme-api",
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT,
        },
    )


@app.get("/")
async def root():
    return JSONResponse(
        status_code=200,
        content={
            "message": f"Welcome to {settings.APP_NAME}",
            "version": settings.VERSION,
            "docs": "/docs" if settings.ENVIRONMENT != "production" else "Not available in production",
            "health": "/health",
        },
    )
