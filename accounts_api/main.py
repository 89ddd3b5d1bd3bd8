"""
FastAPI application factory and entry point.

This module creates and configures the FastAPI application:
  1. Logging — configured before anything else logs
  2. Lifespan manager — DB table creation, optional sample data, cleanup
  3. Middleware — request id for log correlation, CORS
  4. Exception handlers — maps domain errors to HTTP responses
  5. Router registration — mounts the accounts endpoints

Running locally:
    uvicorn accounts_api.main:app --reload
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import accounts_api.models  # noqa: F401  (registers tables on Base.metadata)
from accounts_api.config import settings
from accounts_api.database import AsyncSessionLocal, Base, engine
from accounts_api.exceptions import register_exception_handlers
from accounts_api.logging_config import setup_logging
from accounts_api.middleware import RequestIDMiddleware
from accounts_api.routers import accounts
from accounts_api.sample_data import load_sample_accounts

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
      Creates all database tables if they don't exist, then seeds sample
      accounts when LOAD_SAMPLE_DATA is set and the store is empty.

    Shutdown:
      Disposes of the database engine, closing all connections cleanly.
    """
    # --- Startup ---
    # SQLite will not create missing parent directories for its file
    if engine.url.get_backend_name() == "sqlite" and engine.url.database:
        Path(engine.url.database).parent.mkdir(parents=True, exist_ok=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if settings.LOAD_SAMPLE_DATA:
        async with AsyncSessionLocal() as session:
            await load_sample_accounts(session)
            await session.commit()
    yield
    # --- Shutdown ---
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Banking account management: open, list, view, update and close accounts",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Exception handlers
# ---------------------------------------------------------------------------

register_exception_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

app.include_router(accounts.router, prefix="/accounts", tags=["Accounts"])
