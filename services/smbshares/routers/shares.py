"""
Custom SMB Shares - Share Management Routes

List, add, update, delete and enable/disable shares. Every change is
persisted to shares.json, written to smb-custom.conf and reloaded.
"""

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from .. import config as config_module
from ..dependencies import get_shares, read_payload, require_plugin_enabled
from ..models import ShareForm, ToggleRequest
from ..smb_manager import apply_shares, verify_samba_share
from ..validation import check_share_path, error_messages, validate_share

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/shares", tags=["shares"])


def _parse_share(payload: Any) -> Dict[str, Any]:
    """Sanitize and validate a submitted share; raise 400 on any error."""
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Expected share fields")
    try:
        share = ShareForm.model_validate(payload).to_share()
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=f"Invalid share fields: {e.error_count()} error(s)")

    errors = validate_share(share)
    if errors:
        raise HTTPException(status_code=400, detail=error_messages(errors))

    path_errors = check_share_path(share["path"], config_module.FS_ROOT)
    if path_errors:
        raise HTTPException(status_code=400, detail=f"{error_messages(path_errors)}: {share['path']}")
    return share


def _save_and_apply(shares: List[Dict[str, Any]], name: str, should_exist: bool, action: str) -> Dict[str, Any]:
    if not config_module.save_shares(shares):
        raise HTTPException(status_code=500, detail="Failed to save shares")

    result = apply_shares(shares)
    if not result["success"]:
        raise HTTPException(status_code=500, detail=f"Failed to reload Samba: {result['error']}")

    verified = verify_samba_share(name, should_exist)
    suffix = "and verified" if verified else "but verification failed"
    return {
        "success": True,
        "verified": verified,
        "message": f'Share "{name}" {action} {suffix}',
        "skipped": result.get("skipped", {}),
    }


@router.get("")
async def list_shares(shares: List[Dict[str, Any]] = Depends(get_shares)):
    """All stored shares, in order."""
    return shares


@router.get("/{name}")
async def get_share(name: str, shares: List[Dict[str, Any]] = Depends(get_shares)):
    index = config_module.find_share_index(shares, name)
    if index == -1:
        raise HTTPException(status_code=404, detail="Share not found")
    return shares[index]


@router.post("", dependencies=[Depends(require_plugin_enabled)])
async def add_share(request: Request):
    """Create a share from form or JSON fields."""
    share = _parse_share(await read_payload(request))
    name = share["name"]

    shares = config_module.load_shares()
    if config_module.find_share_index(shares, name) != -1:
        raise HTTPException(status_code=400, detail="Share name already exists")

    shares.append(share)
    response = _save_and_apply(shares, name, True, "added")
    logger.info(f"Share added: {name}")
    return response


@router.put("/{original_name}", dependencies=[Depends(require_plugin_enabled)])
async def update_share(original_name: str, request: Request):
    """Replace a share, looked up by its current name (renames allowed)."""
    share = _parse_share(await read_payload(request))
    name = share["name"]

    shares = config_module.load_shares()
    index = config_module.find_share_index(shares, original_name)
    if index == -1:
        raise HTTPException(status_code=404, detail="Share not found")
    if name != original_name and config_module.find_share_index(shares, name) != -1:
        raise HTTPException(status_code=400, detail="Share name already exists")

    config_module.backup_shares()
    shares[index] = share
    response = _save_and_apply(shares, name, True, "updated")
    logger.info(f"Share updated: {original_name} -> {name}" if name != original_name else f"Share updated: {name}")
    return response


@router.delete("/{name}", dependencies=[Depends(require_plugin_enabled)])
async def delete_share(name: str):
    shares = config_module.load_shares()
    index = config_module.find_share_index(shares, name)
    if index == -1:
        raise HTTPException(status_code=404, detail="Share not found")

    del shares[index]
    response = _save_and_apply(shares, name, False, "deleted")
    logger.info(f"Share deleted: {name}")
    return response


@router.post("/{name}/toggle", dependencies=[Depends(require_plugin_enabled)])
async def toggle_share(name: str, request: Request):
    """Set enabled explicitly (form or JSON), or flip it when no value is given."""
    payload = await read_payload(request)
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Expected toggle fields")
    try:
        body = ToggleRequest.model_validate(payload)
    except ValidationError:
        raise HTTPException(status_code=400, detail="Invalid enabled value")

    shares = config_module.load_shares()
    index = config_module.find_share_index(shares, name)
    if index == -1:
        raise HTTPException(status_code=404, detail="Share not found")

    share = shares[index]
    if body.enabled is None:
        share["enabled"] = not share.get("enabled", True)
    else:
        share["enabled"] = body.enabled

    if not config_module.save_shares(shares):
        raise HTTPException(status_code=500, detail="Failed to save shares")

    result = apply_shares(shares)
    logger.info(f"Share {name} {'enabled' if share['enabled'] else 'disabled'}")
    return {"success": True, "enabled": share["enabled"], "sambaReloaded": result}
