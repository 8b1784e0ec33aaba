"""
Custom SMB Shares - Permission Mask Routes

Backs the rwx checkbox grid of the share form.
"""

from fastapi import APIRouter, HTTPException

from ..models import MaskResponse, PermissionBits
from ..permissions import mask_to_permissions, permissions_to_mask

router = APIRouter(prefix="/api/permissions", tags=["permissions"])


@router.get("/{mask}", response_model=PermissionBits)
async def parse_mask(mask: str):
    try:
        return PermissionBits(**mask_to_permissions(mask))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("", response_model=MaskResponse)
async def build_mask(bits: PermissionBits):
    return MaskResponse(mask=permissions_to_mask(bits.model_dump()))
