"""
Custom SMB Shares - FastAPI Application Entry Point

Main app setup, router mounting, startup hooks, and uvicorn launch.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from . import config as config_module
from .routers import backup, directory, permissions, samba, settings, shares

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Suppress noisy uvicorn access logs
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


# ============================================================================
# Lifespan (startup / shutdown)
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log where shares are stored; nothing is regenerated at startup."""
    shares_file = config_module.shares_file()
    logger.info(
        f"Custom SMB Shares using {shares_file} "
        f"({len(config_module.load_shares())} shares, "
        f"plugin {'enabled' if config_module.is_plugin_enabled() else 'disabled'})"
    )
    yield
    logger.info("Shutting down Custom SMB Shares")


# ============================================================================
# App Creation
# ============================================================================

app = FastAPI(
    title="Custom SMB Shares",
    version="1.0",
    docs_url=None,  # Disable Swagger UI in production
    redoc_url=None,
    lifespan=lifespan,
)

app.include_router(shares.router)
app.include_router(samba.router)
app.include_router(backup.router)
app.include_router(settings.router)
app.include_router(directory.router)
app.include_router(permissions.router)


@app.get("/api/health")
async def health():
    return {"status": "ok"}


# ============================================================================
# Error Handlers
# ============================================================================

@app.exception_handler(404)
async def not_found(request: Request, exc):
    detail = getattr(exc, "detail", None) or "Not found"
    return JSONResponse({"error": detail, "detail": detail}, status_code=404)


# ============================================================================
# Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    host = config_module.HOST
    port = config_module.PORT

    logger.info(f"Starting Custom SMB Shares on http://{host}:{port}")
    uvicorn.run(
        "smbshares.main:app",
        host=host,
        port=port,
        workers=1,
        log_level="warning",
    )
