"""
Backend entry point.

One Python process, one asyncio event loop:
1. FastAPI (HTTP API for the authoring UI and participants)
2. Archival scheduler (flips ended challenges to archived)

FastAPI's lifespan starts and stops the scheduler and disposes the
database engine on shutdown.

Run with: python main.py [--port PORT]
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv

project_root = Path(__file__).parent

# Load .env.local first (if exists), then .env as fallback
load_dotenv(project_root / ".env.local")
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.archival import init_archive_scheduler, shutdown_archive_scheduler
from core.blocks import get_registry
from core.config import check_required_env_vars, get_allowed_origins, get_api_port
from core.database import close_engine, is_configured
from web_api.routes.admin import router as admin_router
from web_api.routes.blocks import router as blocks_router
from web_api.routes.blocks import types_router as block_types_router
from web_api.routes.challenges import router as challenges_router
from web_api.routes.cron import router as cron_router

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan context manager.

    Builds the block registry up front so registration conflicts fail
    startup, then runs the archival scheduler alongside the API.
    """
    ok, warnings = check_required_env_vars()
    for warning in warnings:
        logger.warning(warning)
    if not ok:
        raise RuntimeError("Missing required environment variables")

    registry = get_registry()
    logger.info(f"Registered block types: {', '.join(registry.types())}")

    if is_configured():
        init_archive_scheduler()
    else:
        logger.warning("DATABASE_URL not set, archival scheduler will not start")

    yield

    shutdown_archive_scheduler()
    await close_engine()


app = FastAPI(
    title="Challenge Platform API",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(block_types_router)
app.include_router(blocks_router)
app.include_router(challenges_router)
app.include_router(admin_router)
app.include_router(cron_router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "database_configured": is_configured()}


if __name__ == "__main__":
    import argparse

    import uvicorn

    parser = argparse.ArgumentParser(description="Challenge Platform Server")
    parser.add_argument(
        "--port",
        type=int,
        default=get_api_port(),
        help="Port to run the server on (default: API_PORT or 8000)",
    )
    args = parser.parse_args()

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=args.port,
    )
