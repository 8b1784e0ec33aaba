"""
Custom SMB Shares - Samba Service Routes

Daemon status, manual reload and a preview of the generated config.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from .. import config as config_module
from ..dependencies import get_shares
from ..smb_conf import render_samba_config
from ..smb_manager import apply_shares, get_samba_status, reload_samba

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["samba"])


@router.get("/samba/status")
async def samba_status():
    """smbd running state plus plugin/config file info."""
    status = get_samba_status()
    conf = config_module.smb_custom_conf()
    return {
        **status,
        "plugin_enabled": config_module.is_plugin_enabled(),
        "config_file": str(conf),
        "config_exists": conf.exists(),
    }


@router.post("/samba/reload")
async def samba_reload(regenerate: bool = False):
    """Reload smbd; with regenerate=true rewrite smb-custom.conf first."""
    if regenerate:
        result = apply_shares(config_module.load_shares())
    else:
        result = reload_samba()

    if not result["success"]:
        raise HTTPException(status_code=500, detail=f"Failed to reload Samba: {result['error']}")
    return {**result, "message": "Samba reloaded successfully"}


@router.get("/config/preview")
async def preview_config(shares: list = Depends(get_shares)):
    """The text that would be written to smb-custom.conf right now."""
    generated = render_samba_config(shares)
    return {
        "config": generated.text,
        "skipped": {
            ident: [{"code": e.value, "message": e.message} for e in errors]
            for ident, errors in generated.skipped.items()
        },
    }
