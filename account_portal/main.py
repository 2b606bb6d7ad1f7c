"""
FastAPI application factory and entry point.

This module creates and configures the FastAPI application:
  1. Lifespan manager — opens and closes the upstream HTTP client
  2. CORS middleware — allows frontend origins to make cross-origin requests
  3. Exception handlers — maps domain errors to HTTP responses
  4. Router registration — mounts the account endpoints

Running locally:
    uvicorn account_portal.main:app --reload
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from account_portal.config import settings
from account_portal.exceptions import register_exception_handlers
from account_portal.logging import setup_logging
from account_portal.routers import accounts
from account_portal.upstream import create_upstream_client


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup:
      Configures logging, then creates the single UpstreamClient shared by
      all requests. It holds a connection pool and no request state.

    Shutdown:
      Closes the client and its connections.
    """
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    app.state.upstream = create_upstream_client()
    yield
    await app.state.upstream.aclose()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Search, view and edit credit-card accounts through the account backend",
    lifespan=lifespan,
)

# ---------------------------------------------------------------------------
# Middleware
# ---------------------------------------------------------------------------

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

app.include_router(accounts.router, prefix="/api/accounts", tags=["Accounts"])


# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------

@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for load balancers and uptime checks."""
    return {"status": "ok", "version": settings.APP_VERSION}
