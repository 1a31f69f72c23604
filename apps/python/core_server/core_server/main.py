"""FastAPI application composing the users API router."""

from __future__ import annotations

import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pymongo.errors import PyMongoError

from db_core import DatabaseError, close_connection, ensure_connected, ping
from users_api import router as users_router
from users_repo import register_revalidation_hook

from .config import settings


def _configure_logging() -> None:
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)
    logger.info("Logger configured at {level} level", level=settings.log_level)


def _log_revalidation(path: str) -> None:
    logger.info("Cached render of {path} invalidated", path=path)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await ensure_connected()
    yield
    await close_connection()


_configure_logging()
register_revalidation_hook(_log_revalidation)

app = FastAPI(title=settings.api_title, version=settings.api_version, lifespan=lifespan)

# Allow the front-end origins (with credentials) to talk to this API.
if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.info("CORS middleware added {origins}", origins=settings.cors_allow_origins)


@app.get("/health", tags=["health"])
async def health() -> dict[str, str]:
    """Simple liveness endpoint for load balancers and probes."""

    return {"status": "ok"}


@app.get("/health/db", tags=["health"])
async def database_health() -> dict[str, bool]:
    """Connect (raising instead of swallowing failures) and ping MongoDB."""

    try:
        await ensure_connected(raise_on_error=True)
        return await ping()
    except (DatabaseError, PyMongoError) as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc


app.include_router(users_router)

"""Run with:

    uvicorn core_server.main:app --host 0.0.0.0 --port 8000 --reload
"""
