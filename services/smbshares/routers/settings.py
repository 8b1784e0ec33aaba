"""
Custom SMB Shares - Plugin Settings Routes
"""

import logging

from fastapi import APIRouter, HTTPException

from .. import config as config_module
from ..models import SettingsUpdate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["settings"])


@router.get("/settings")
async def get_settings():
    return {
        "enabled": config_module.is_plugin_enabled(),
        "config_base": str(config_module.get_config_base()),
    }


@router.post("/settings")
async def update_settings(body: SettingsUpdate):
    """Enable or disable share management."""
    if not config_module.set_plugin_enabled(body.enabled):
        raise HTTPException(status_code=500, detail="Failed to save settings")
    return {"status": "saved", "enabled": body.enabled}
