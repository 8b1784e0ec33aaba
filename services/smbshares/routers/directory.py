"""
Custom SMB Shares - User & Group Routes

Principals for the user-access picker.
"""

from fastapi import APIRouter, Query

from ..directory import get_system_groups, get_system_users, search_principals

router = APIRouter(prefix="/api", tags=["directory"])


@router.get("/users")
async def list_users():
    return {"success": True, "users": sorted(get_system_users(), key=lambda u: u["name"].lower())}


@router.get("/groups")
async def list_groups():
    return {"success": True, "groups": get_system_groups()}


@router.get("/users/search")
async def search(query: str = Query("", max_length=64)):
    """Users and @groups matching query (at least 2 characters)."""
    return search_principals(query)
