"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from iam.presentation import router as iam_router
from infrastructure.database.dependencies import (
    close_database_connections,
    get_write_session,
)
from infrastructure.logging import configure_logging
from infrastructure.settings import get_settings
from infrastructure.version import __version__
from workloads.presentation import router as workloads_router


@asynccontextmanager
async def dockyard_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Database engine lifecycle (created lazily, disposed on shutdown)
    """
    configure_logging(debug=get_settings().debug)
    yield
    await close_database_connections()


app = FastAPI(
    title="Dockyard API",
    description="Multi-tenant control panel for applications, components, "
    "container groups and their secrets",
    version=__version__,
    lifespan=dockyard_lifespan,
)

# Include bounded context routes
app.include_router(iam_router)
app.include_router(workloads_router)


@app.get("/health")
def health():
    """Basic health check endpoint."""
    return {"status": "ok"}


@app.get("/health/db")
async def health_db(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> dict:
    """Check database connection health."""
    try:
        async with session.begin():
            await session.execute(text("SELECT 1"))
        return {"status": "ok", "connected": True}
    except Exception as e:
        return {"status": "error", "connected": False, "error": type(e).__name__}
