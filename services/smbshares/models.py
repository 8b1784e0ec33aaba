"""
Custom SMB Shares - Pydantic Models

Request bodies for the share form and the small settings/toggle APIs.
"""

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .sanitize import sanitize_share_data


# ============================================================================
# Share
# ============================================================================

class ShareForm(BaseModel):
    """Share add/edit form. Defaults mirror what the form submits."""
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    name: str = ""
    path: str = ""
    comment: str = ""
    enabled: Union[bool, str] = "yes"
    export: str = "e"
    volsizelimit: str = ""
    case_sensitive: str = "auto"
    security: str = "public"
    user_access: Union[Dict[str, Any], str] = "{}"
    hosts_allow: str = ""
    hosts_deny: str = ""
    fruit: Union[bool, str] = "no"
    create_mask: str = "0664"
    directory_mask: str = "0775"
    force_user: str = ""
    force_group: str = ""
    hide_dot_files: Union[bool, str] = "yes"

    def to_share(self) -> Dict[str, Any]:
        """Stored share record: trimmed, empty fields dropped."""
        data = self.model_dump()
        enabled = data["enabled"]
        if isinstance(enabled, str):
            enabled = enabled.strip().lower() in ("yes", "true", "1", "on")
        data["enabled"] = enabled
        return sanitize_share_data(data)


class ToggleRequest(BaseModel):
    enabled: Optional[bool] = None


# ============================================================================
# Settings / Permissions
# ============================================================================

class SettingsUpdate(BaseModel):
    enabled: bool


class PermissionBits(BaseModel):
    owner_read: bool = False
    owner_write: bool = False
    owner_execute: bool = False
    group_read: bool = False
    group_write: bool = False
    group_execute: bool = False
    others_read: bool = False
    others_write: bool = False
    others_execute: bool = False


class MaskResponse(BaseModel):
    mask: str = Field(..., pattern=r"^[0-7]{4}$")
