"""
System Routes

Handles health checks and configuration status.
"""
from datetime import datetime

from fastapi import APIRouter

from managers.sysconfig import get_config, reload_config
from utils.httpcache import http_cache

VERSION = "1.0.0"


def setup_system_routes() -> APIRouter:
    """
    Setup system routes

    Returns:
        Configured APIRouter
    """
    router = APIRouter(prefix="/api/system")

    @router.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "version": VERSION,
        }

    @router.get("/config")
    async def config_status():
        """Configuration status, secrets omitted"""
        config = await get_config()
        return {
            "unsplash_configured": bool(config.unsplash_api_key),
            "request_timeout_ms": config.request_timeout_ms,
            "http_cache_ttl": config.http_cache_ttl,
            "http_cache_entries": len(http_cache),
        }

    @router.post("/config/reload")
    async def config_reload():
        """Reread the system configuration file and drop cached listings"""
        reload_config()
        http_cache.clear()
        config = await get_config()
        http_cache.ttl = config.http_cache_ttl
        return {"status": "success", "unsplash_configured": bool(config.unsplash_api_key)}

    return router
