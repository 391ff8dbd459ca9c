"""
Main FastAPI application for the NFL Vote API.
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from pathlib import Path

# Load environment variables from .env file before settings are read
from dotenv import load_dotenv
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from app.core.config import settings
from app.core.database import init_db
from app.core.logging import configure_logging, get_logger
from app.core.middleware import CorrelationIdMiddleware
from app.api.routes import game_results, nfl_matchups, votes, user_results
from app.services.odds_api_service import close_odds_service

configure_logging(
    level=settings.LOG_LEVEL,
    json_output=settings.LOG_JSON,
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan events."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    # Hosted Postgres is migrated out of band; only create tables for SQLite
    if settings.DATABASE_URL.startswith("sqlite"):
        init_db()
        logger.info("Local SQLite tables created")

    yield

    await close_odds_service()
    logger.info("Shutting down application")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="NFL matchups, votes and game results for the pick'em web app",
    lifespan=lifespan
)

# Add correlation ID middleware (must be added before CORS for proper header handling)
app.add_middleware(CorrelationIdMiddleware)

# Prometheus metrics must be wired before routes are included
instrumentator = Instrumentator()
instrumentator.instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(nfl_matchups.router, prefix="/api")
app.include_router(game_results.router, prefix="/api")
app.include_router(votes.router, prefix="/api")
app.include_router(user_results.router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "endpoints": {
            "nfl_matchups": "/api/nfl-matchups",
            "game_results": "/api/game-results",
            "votes": "/api/votes",
            "user_results": "/api/user-results",
            "docs": "/docs",
            "health": "/health",
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION
    }


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Last-resort handler: log the cause, answer with a generic 500."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "kind": "internal"}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT, reload=settings.DEBUG)
