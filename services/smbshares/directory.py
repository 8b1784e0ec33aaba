"""
Custom SMB Shares - System Users & Groups

Principals offered by the user-access picker, read from passwd/group.
"""

import logging
from typing import Any, Dict, List

from . import config as config_module

logger = logging.getLogger(__name__)

MIN_REGULAR_ID = 1000
SYSTEM_USERS = ("root", "nobody")
SYSTEM_GROUPS = ("users", "wheel", "disk")
MIN_QUERY_LENGTH = 2


def _read_entries(path: str) -> List[List[str]]:
    try:
        with open(path) as f:
            return [line.rstrip("\n").split(":") for line in f if line.strip()]
    except OSError as e:
        logger.error(f"Failed to read {path}: {e}")
        return []


def _to_int(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return -1


def get_system_users() -> List[Dict[str, Any]]:
    """Regular users (uid >= 1000) plus root and nobody."""
    users = []
    for parts in _read_entries(config_module.PASSWD_FILE):
        if len(parts) < 3:
            continue
        name, uid = parts[0], _to_int(parts[2])
        if uid >= MIN_REGULAR_ID or name in SYSTEM_USERS:
            users.append({"name": name, "uid": uid, "type": "user"})
    return users


def get_system_groups() -> List[Dict[str, Any]]:
    groups = []
    for parts in _read_entries(config_module.GROUP_FILE):
        if len(parts) < 3:
            continue
        name, gid = parts[0], _to_int(parts[2])
        if gid >= MIN_REGULAR_ID or name in SYSTEM_GROUPS:
            groups.append({"name": name, "gid": gid, "type": "group"})
    return groups


def search_principals(query: str, limit: int = 10) -> List[Dict[str, Any]]:
    """Users and @groups whose names contain the query (case-insensitive)."""
    query = (query or "").strip().lower()
    if len(query) < MIN_QUERY_LENGTH:
        return []

    results: List[Dict[str, Any]] = []

    for parts in _read_entries(config_module.PASSWD_FILE):
        if len(parts) < 5:
            continue
        name, uid, fullname = parts[0], _to_int(parts[2]), parts[4]
        if uid < MIN_REGULAR_ID or name == "root":
            continue
        if query in name.lower() or query in fullname.lower():
            results.append({"name": name, "type": "user", "fullname": fullname})

    for parts in _read_entries(config_module.GROUP_FILE):
        if len(parts) < 4:
            continue
        name = parts[0]
        members = [m for m in parts[3].split(",") if m]
        if query in name.lower():
            results.append({"name": f"@{name}", "type": "group", "members": len(members)})

    return results[:limit]
