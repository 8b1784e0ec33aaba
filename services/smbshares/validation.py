"""
Custom SMB Shares - Share Validation

Structural checks on share attributes. Errors are returned, never raised,
so the caller can decide between rejecting a request and reporting fields.
"""

import logging
import os
import re
from enum import Enum
from pathlib import Path
from typing import Any, List, Mapping

logger = logging.getLogger(__name__)

SHARE_NAME_PATTERN = re.compile(r"[A-Za-z0-9_-]+")
MASK_PATTERN = re.compile(r"[0-7]{4}")
VOLUME_SIZE_PATTERN = re.compile(r"[0-9]+")
MNT_PREFIX = "/mnt/"


class ShareError(str, Enum):
    INVALID_SHARE_NAME = "InvalidShareName"
    INVALID_PATH = "InvalidPath"
    INVALID_CREATE_MASK = "InvalidCreateMask"
    INVALID_DIRECTORY_MASK = "InvalidDirectoryMask"
    INVALID_VOLUME_SIZE = "InvalidVolumeSize"
    PATH_NOT_FOUND = "PathNotFound"
    PATH_OUTSIDE_MNT = "PathOutsideMnt"
    PATH_NOT_DIRECTORY = "PathNotDirectory"
    PATH_NOT_WRITABLE = "PathNotWritable"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    ShareError.INVALID_SHARE_NAME: "Invalid share name. Use only letters, numbers, hyphens, and underscores.",
    ShareError.INVALID_PATH: "Path must start with /mnt/",
    ShareError.INVALID_CREATE_MASK: "Invalid create mask. Must be 4 octal digits (0-7).",
    ShareError.INVALID_DIRECTORY_MASK: "Invalid directory mask. Must be 4 octal digits (0-7).",
    ShareError.INVALID_VOLUME_SIZE: "Invalid volume size limit. Must be a whole number of megabytes.",
    ShareError.PATH_NOT_FOUND: "Path does not exist",
    ShareError.PATH_OUTSIDE_MNT: "Invalid path: must be under /mnt/",
    ShareError.PATH_NOT_DIRECTORY: "Path is not a directory",
    ShareError.PATH_NOT_WRITABLE: "Path is not writable",
}


def _present(value: Any) -> bool:
    return value is not None and value != ""


def _matches(pattern: re.Pattern, value: Any) -> bool:
    return isinstance(value, str) and pattern.fullmatch(value) is not None


def validate_share(share: Mapping[str, Any]) -> List[ShareError]:
    """Return every rule the share violates (empty list means valid)."""
    errors: List[ShareError] = []

    if not _matches(SHARE_NAME_PATTERN, share.get("name")):
        errors.append(ShareError.INVALID_SHARE_NAME)

    path = share.get("path")
    if not isinstance(path, str) or not path.startswith(MNT_PREFIX):
        errors.append(ShareError.INVALID_PATH)

    create_mask = share.get("create_mask")
    if _present(create_mask) and not _matches(MASK_PATTERN, create_mask):
        errors.append(ShareError.INVALID_CREATE_MASK)

    directory_mask = share.get("directory_mask")
    if _present(directory_mask) and not _matches(MASK_PATTERN, directory_mask):
        errors.append(ShareError.INVALID_DIRECTORY_MASK)

    volsizelimit = share.get("volsizelimit")
    if _present(volsizelimit) and not _matches(VOLUME_SIZE_PATTERN, str(volsizelimit)):
        errors.append(ShareError.INVALID_VOLUME_SIZE)

    return errors


def is_valid_share(share: Mapping[str, Any]) -> bool:
    return not validate_share(share)


def check_share_path(path: str, fs_root: str = "/") -> List[ShareError]:
    """Check that a /mnt/ path exists on disk and is a writable directory.

    The path is resolved beneath fs_root and canonicalized, so a symlink
    pointing outside /mnt/ is rejected even though its literal path passes
    validate_share().
    """
    root = Path(fs_root).resolve()
    candidate = root / path.lstrip("/")

    try:
        real = candidate.resolve(strict=True)
    except (OSError, RuntimeError, ValueError):
        return [ShareError.PATH_NOT_FOUND]

    mnt_root = root / MNT_PREFIX.strip("/")
    if real == mnt_root or mnt_root not in real.parents:
        logger.warning(f"Rejected share path {path!r}: resolves to {real}")
        return [ShareError.PATH_OUTSIDE_MNT]
    if not real.is_dir():
        return [ShareError.PATH_NOT_DIRECTORY]
    if not os.access(real, os.W_OK):
        return [ShareError.PATH_NOT_WRITABLE]
    return []


def error_messages(errors: List[ShareError]) -> str:
    """Join error messages for a single-line API response."""
    return ", ".join(e.message for e in errors)
