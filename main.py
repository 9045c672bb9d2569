"""
Dashboard Background Service

This is the entry point for the background service.
It wires together the configuration, API routes and uploaded image serving.
"""
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

# API routes
from api.routes_background import setup_background_routes
from api.routes_system import setup_system_routes

# Config
from config import BACKGROUND_UPLOAD_PREFIX, DEFAULT_PORT, PRODUCTION_PORT, UPLOAD_DIR
from managers.sysconfig import get_config
from utils.httpcache import http_cache

# Logging setup
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan management for FastAPI application.
    Handles startup and shutdown tasks.
    """
    # STARTUP
    logging.info("Starting dashboard background service...")

    try:
        config = await get_config()
        http_cache.ttl = config.http_cache_ttl
        if not config.unsplash_api_key:
            logging.warning("No Unsplash API key configured, unsplash backgrounds will fail")
        logging.info("Dashboard background service started successfully!")
    except Exception as e:
        logging.error(f"Failed to start dashboard background service: {e}")
        raise

    yield  # Application is running

    # SHUTDOWN
    logging.info("Shutting down dashboard background service...")
    http_cache.clear()


def create_app(upload_dir: str = UPLOAD_DIR) -> FastAPI:
    """Create the FastAPI app serving uploads from upload_dir"""
    app = FastAPI(
        title="Dashboard Background",
        description="Background image resolution for the dashboard start page",
        version="1.0.0",
        lifespan=lifespan
    )

    app.include_router(setup_background_routes(upload_dir))
    app.include_router(setup_system_routes())

    # Uploaded backgrounds, referenced by the orchestrator as /background/<name>
    os.makedirs(upload_dir, exist_ok=True)
    app.mount(BACKGROUND_UPLOAD_PREFIX.rstrip("/"), StaticFiles(directory=upload_dir), name="background")

    return app


app = create_app()


if __name__ == "__main__":
    import argparse
    import uvicorn

    # Parse command line arguments
    parser = argparse.ArgumentParser(description='Dashboard background service')
    parser.add_argument('--production', action='store_true',
                       help='Run in production mode (port 80)')
    parser.add_argument('--port', type=int, default=None,
                       help='Custom port (overrides --production)')
    args = parser.parse_args()

    # Determine port
    if args.port:
        port = args.port
    elif args.production:
        port = PRODUCTION_PORT
    else:
        port = DEFAULT_PORT

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=port,
        log_level="info",
        reload=False
    )
