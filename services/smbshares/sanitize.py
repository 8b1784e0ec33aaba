"""
Custom SMB Shares - Input Sanitization

Structural cleanup of submitted share attributes and the newline guard
applied to every value written into smb.conf.
"""

from typing import Any, Dict, Mapping


def sanitize_share_data(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Trim string values and drop keys left empty.

    Does not validate or coerce: non-string values (flags, decoded
    user_access mappings) are passed through as-is.
    """
    cleaned: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            value = value.strip()
            if value == "":
                continue
        cleaned[key] = value
    return cleaned


def strip_newlines(value: Any) -> str:
    """Remove CR/LF so a value can never start a new smb.conf line."""
    if value is None:
        return ""
    return str(value).replace("\r", "").replace("\n", "")
