"""Main FastAPI application for Docportal."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import SQLAlchemyError

from . import __version__
from .config import load_config
from .errors import DocportalError
from .models.database import init_db, close_db, get_session_factory
from .routers import (
    auth_router,
    structure_router,
    search_router,
    categories_router,
    documents_router,
    users_router,
    settings_router,
    uploads_router,
)
from .services.user import UserService
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)


async def create_default_admin() -> None:
    """Make sure the configured admin account exists."""
    config = load_config()
    async with get_session_factory()() as db:
        await UserService(db).ensure_default_admin(config.admin)
        await db.commit()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    config = load_config()
    setup_logging()
    logger.info("Starting Docportal...")

    await init_db()
    logger.info("Database initialized")
    await create_default_admin()

    logger.info(f"Server: {config.server.host}:{config.server.port}")
    logger.info(f"Hidden subcategory policy: {config.structure.hidden_policy.value}")

    yield

    logger.info("Shutting down Docportal...")
    await close_db()


app = FastAPI(
    title="Docportal",
    description="Self-hosted documentation portal",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware (for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DocportalError)
async def docportal_error_handler(request: Request, exc: DocportalError):
    """Map service errors to HTTP responses."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"{request.method} {request.url.path} database error: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Database error"})


# Register API routers
app.include_router(auth_router)
app.include_router(structure_router)
app.include_router(search_router)
app.include_router(categories_router)
app.include_router(documents_router)
app.include_router(users_router)
app.include_router(settings_router)
app.include_router(uploads_router)


# Health check endpoint
@app.get("/api/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "service": "docportal"}
