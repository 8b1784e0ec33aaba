"""
Custom SMB Shares - User Access Model

user_access arrives either as JSON text (form posts) or as an already
decoded mapping (shares.json). It is resolved once into a canonical
principal -> AccessLevel mapping before any config is built.
"""

import json
import logging
from enum import Enum
from typing import Any, Dict, List, Mapping

logger = logging.getLogger(__name__)


class AccessLevel(str, Enum):
    READ_WRITE = "read-write"
    READ_ONLY = "read-only"
    NO_ACCESS = "no-access"

    @classmethod
    def coerce(cls, value: Any) -> "AccessLevel":
        """Unknown levels grant nothing."""
        try:
            return cls(value)
        except (ValueError, TypeError):
            return cls.NO_ACCESS


def resolve_access(raw: Any) -> Dict[str, AccessLevel]:
    """Normalize user_access input. Never raises; bad input yields {}."""
    if isinstance(raw, str):
        if not raw.strip():
            return {}
        try:
            raw = json.loads(raw)
        except (ValueError, RecursionError):
            logger.warning("Ignoring user_access that is not valid JSON")
            return {}

    if not isinstance(raw, Mapping):
        return {}

    return {str(principal): AccessLevel.coerce(level) for principal, level in raw.items()}


def write_principals(access: Mapping[str, AccessLevel]) -> List[str]:
    """Principals eligible for the write list."""
    return [p for p, level in access.items() if level is AccessLevel.READ_WRITE]


def valid_principals(access: Mapping[str, AccessLevel]) -> List[str]:
    """Principals allowed to connect at all (read-only or read-write)."""
    return [
        p for p, level in access.items()
        if level in (AccessLevel.READ_WRITE, AccessLevel.READ_ONLY)
    ]
