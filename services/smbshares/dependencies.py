"""
Custom SMB Shares - FastAPI Dependencies

Reusable dependency injection functions for route handlers.
"""

import json
import logging
from typing import Any, Dict, List

from fastapi import HTTPException, Request

from . import config as config_module

logger = logging.getLogger(__name__)


def get_shares() -> List[Dict[str, Any]]:
    """Load and return the current share list."""
    return config_module.load_shares()


async def require_plugin_enabled() -> None:
    """Reject share changes while the plugin is disabled in settings."""
    if not config_module.is_plugin_enabled():
        raise HTTPException(
            status_code=400,
            detail="Plugin is disabled. Enable it in Settings first.",
        )


async def read_payload(request: Request) -> Any:
    """Request body as JSON, or as a dict of form fields for form posts."""
    content_type = request.headers.get("content-type", "")

    if "multipart" in content_type or "x-www-form-urlencoded" in content_type:
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    body = await request.body()
    if not body:
        return {}
    try:
        return json.loads(body)
    except (ValueError, RecursionError):
        raise HTTPException(status_code=400, detail="Invalid JSON body")
