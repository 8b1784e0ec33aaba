"""
Custom SMB Shares - Backup, Restore & Import/Export Routes
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Request

from .. import config as config_module
from ..dependencies import get_shares, require_plugin_enabled
from ..smb_conf import share_identifier, validate_shares
from ..smb_manager import apply_shares
from ..validation import ShareError, check_share_path

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["backup"])


def _checked_filename(filename: str) -> str:
    if not config_module.is_valid_backup_name(filename):
        raise HTTPException(status_code=400, detail="Invalid backup filename")
    return filename


def _import_errors(shares: List[Dict[str, Any]]) -> Dict[str, List[ShareError]]:
    """Field errors plus on-disk path errors, keyed by share identifier."""
    invalid = validate_shares(shares)
    for index, share in enumerate(shares):
        ident = share_identifier(share, index)
        errors = invalid.get(ident, [])
        if ShareError.INVALID_PATH in errors:
            continue
        path_errors = check_share_path(share["path"], config_module.FS_ROOT)
        if path_errors:
            invalid[ident] = errors + path_errors
    return invalid


@router.get("/backups")
async def list_backups():
    return {"success": True, "backups": config_module.list_backups()}


@router.post("/backups")
async def create_backup():
    filename = config_module.backup_shares()
    if not filename:
        raise HTTPException(status_code=500, detail="Failed to create backup")
    return {"success": True, "message": "Backup created", "filename": filename}


@router.get("/backups/{filename}")
async def view_backup(filename: str):
    shares = config_module.view_backup(_checked_filename(filename))
    if shares is None:
        raise HTTPException(status_code=404, detail="Backup not found")
    return {"success": True, "config": shares}


@router.post("/backups/{filename}/restore", dependencies=[Depends(require_plugin_enabled)])
async def restore_backup(filename: str):
    """Restore a backup; the current share list is backed up first."""
    _checked_filename(filename)
    if config_module.view_backup(filename) is None:
        raise HTTPException(status_code=404, detail="Backup not found")

    config_module.backup_shares()
    if not config_module.restore_backup(filename):
        raise HTTPException(status_code=500, detail="Failed to restore backup")

    result = apply_shares(config_module.load_shares())
    return {"success": True, "message": "Backup restored successfully", "sambaReloaded": result}


@router.delete("/backups/{filename}")
async def delete_backup(filename: str):
    _checked_filename(filename)
    if not config_module.delete_backup(filename):
        raise HTTPException(status_code=404, detail="Backup not found")
    return {"success": True, "message": "Backup deleted"}


@router.get("/export")
async def export_config(shares: list = Depends(get_shares)):
    """Download the share list."""
    return {"success": True, "timestamp": datetime.now().isoformat(), "config": shares}


@router.post("/import", dependencies=[Depends(require_plugin_enabled)])
async def import_config(request: Request):
    """Replace the share list from an uploaded JSON array (or an export)."""
    content_type = request.headers.get("content-type", "")

    try:
        if "multipart" in content_type:
            form = await request.form()
            file = form.get("file")
            if not file or isinstance(file, str):
                raise HTTPException(status_code=400, detail="No file provided")
            data = json.loads(await file.read())
        else:
            data = json.loads(await request.body())
    except (ValueError, RecursionError):
        raise HTTPException(status_code=400, detail="Invalid configuration format")

    shares = data.get("config") if isinstance(data, dict) else data
    if not isinstance(shares, list) or not all(isinstance(s, dict) for s in shares):
        raise HTTPException(status_code=400, detail="Invalid configuration format")

    invalid = _import_errors(shares)
    if invalid:
        details = "; ".join(
            f"{ident}: {', '.join(e.message for e in errors)}" for ident, errors in invalid.items()
        )
        raise HTTPException(status_code=400, detail=f"Invalid share: {details}")

    config_module.backup_shares()
    if not config_module.save_shares(shares):
        raise HTTPException(status_code=500, detail="Failed to save shares")

    result = apply_shares(shares)
    logger.info(f"Imported {len(shares)} shares")
    return {"success": True, "message": "Configuration imported successfully", "sambaReloaded": result}
