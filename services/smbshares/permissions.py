"""
Custom SMB Shares - Permission Bits

Conversion between the nine rwx checkboxes of the share form and the
4-digit octal masks stored in create_mask / directory_mask.
"""

import re
from typing import Dict, Mapping

CLASSES = ("owner", "group", "others")
MODES = (("read", 4), ("write", 2), ("execute", 1))

PERMISSION_BITS = tuple(f"{cls}_{mode}" for cls in CLASSES for mode, _ in MODES)

_MASK_PATTERN = re.compile(r"[0-7]{4}")


def permissions_to_mask(perms: Mapping[str, bool]) -> str:
    """Build a mask like "0664" from permission flags (missing = False)."""
    digits = []
    for cls in CLASSES:
        digit = sum(value for mode, value in MODES if perms.get(f"{cls}_{mode}"))
        digits.append(str(digit))
    return "0" + "".join(digits)


def mask_to_permissions(mask: str) -> Dict[str, bool]:
    """Expand a 4-digit octal mask into permission flags.

    The leading (setuid/setgid/sticky) digit is not represented.
    """
    if not isinstance(mask, str) or not _MASK_PATTERN.fullmatch(mask):
        raise ValueError(f"Invalid permission mask: {mask!r}")

    perms: Dict[str, bool] = {}
    for cls, digit in zip(CLASSES, mask[1:]):
        bits = int(digit)
        for mode, value in MODES:
            perms[f"{cls}_{mode}"] = bool(bits & value)
    return perms
