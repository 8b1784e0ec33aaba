"""
Custom SMB Shares - smb.conf Generation

Pure functions turning stored share attributes into Samba share stanzas.
Every directive goes through Directives.render(), which strips newlines
from keys and values, so user input can never open a new config line.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from .access import resolve_access, valid_principals, write_principals
from .sanitize import strip_newlines
from .validation import ShareError, validate_share

logger = logging.getLogger(__name__)

INDENT = "    "

SECURITY_MODES = ("public", "secure", "private")
DEFAULT_SECURITY = "public"

DEFAULT_CREATE_MASK = "0664"
DEFAULT_DIRECTORY_MASK = "0775"

HIDDEN_EXPORTS = ("eh", "eth")
TIME_MACHINE_EXPORTS = ("et", "eth")
NOT_EXPORTED = "-"

FRUIT_VFS_OBJECTS = "catia fruit streams_xattr"

_FALSE_FLAGS = ("no", "false", "0", "off")


# ============================================================================
# Directive Builder
# ============================================================================

class Directives:
    """Ordered (key, value) pairs rendered as indented smb.conf lines."""

    def __init__(self) -> None:
        self._items: List[Tuple[str, str]] = []

    def add(self, key: str, value: Any) -> "Directives":
        self._items.append((key, value))
        return self

    def add_if(self, key: str, value: Any) -> "Directives":
        """Add only when the value is present and non-empty."""
        if value is not None and strip_newlines(value).strip() != "":
            self.add(key, value)
        return self

    def extend(self, other: "Directives") -> "Directives":
        self._items.extend(other._items)
        return self

    def __len__(self) -> int:
        return len(self._items)

    def render(self) -> str:
        return "".join(
            f"{INDENT}{strip_newlines(key)} = {strip_newlines(value)}\n"
            for key, value in self._items
        )


def _yes_no(value: Any, default: bool) -> str:
    if value is None or value == "":
        flag = default
    elif isinstance(value, bool):
        flag = value
    else:
        flag = str(value).strip().lower() not in _FALSE_FLAGS
    return "yes" if flag else "no"


def security_mode(share: Mapping[str, Any]) -> str:
    """Unrecognized or missing modes fall back to public."""
    mode = share.get("security")
    return mode if mode in SECURITY_MODES else DEFAULT_SECURITY


# ============================================================================
# Security / Permission / Host Builders
# ============================================================================

def security_directives(share: Mapping[str, Any]) -> Directives:
    mode = security_mode(share)
    directives = Directives()

    if mode == "public":
        return directives.add("guest ok", "yes").add("read only", "no")

    access = resolve_access(share.get("user_access"))
    writers = " ".join(strip_newlines(p) for p in write_principals(access))

    if mode == "secure":
        directives.add("guest ok", "yes").add("read only", "yes")
    else:
        readers = " ".join(strip_newlines(p) for p in valid_principals(access))
        directives.add("guest ok", "no").add("read only", "yes")
        directives.add_if("valid users", readers)

    return directives.add_if("write list", writers)


def permission_directives(share: Mapping[str, Any]) -> Directives:
    return (
        Directives()
        .add_if("force user", share.get("force_user"))
        .add_if("force group", share.get("force_group"))
        .add("create mask", share.get("create_mask") or DEFAULT_CREATE_MASK)
        .add("directory mask", share.get("directory_mask") or DEFAULT_DIRECTORY_MASK)
        .add("hide dot files", _yes_no(share.get("hide_dot_files"), default=True))
    )


def host_access_directives(share: Mapping[str, Any]) -> Directives:
    return (
        Directives()
        .add_if("hosts allow", share.get("hosts_allow"))
        .add_if("hosts deny", share.get("hosts_deny"))
    )


def export_directives(share: Mapping[str, Any]) -> Directives:
    """Visibility, case handling and macOS/Time Machine options."""
    export = share.get("export") or "e"
    directives = Directives()

    directives.add("browseable", "no" if export in HIDDEN_EXPORTS else "yes")

    case_sensitive = share.get("case_sensitive") or "auto"
    if case_sensitive == "forced":
        directives.add("case sensitive", "yes")
        directives.add("default case", "lower")
        directives.add("preserve case", "no")
        directives.add("short preserve case", "no")
    elif case_sensitive == "yes":
        directives.add("case sensitive", "yes")

    if export in TIME_MACHINE_EXPORTS:
        directives.add("vfs objects", FRUIT_VFS_OBJECTS)
        directives.add("fruit:time machine", "yes")
        volsizelimit = share.get("volsizelimit")
        if volsizelimit not in (None, ""):
            directives.add("fruit:time machine max size", f"{volsizelimit}M")
    elif _yes_no(share.get("fruit"), default=False) == "yes":
        directives.add("vfs objects", FRUIT_VFS_OBJECTS)

    return directives


def build_security_config(share: Mapping[str, Any]) -> str:
    """guest ok / read only / valid users / write list for the share's mode."""
    return security_directives(share).render()


def build_permission_config(share: Mapping[str, Any]) -> str:
    return permission_directives(share).render()


def build_host_access_config(share: Mapping[str, Any]) -> str:
    return host_access_directives(share).render()


# ============================================================================
# Assembler
# ============================================================================

class GeneratedConfig(NamedTuple):
    text: str
    skipped: Dict[str, List[ShareError]]


def share_identifier(share: Mapping[str, Any], index: int) -> str:
    name = share.get("name")
    return str(name) if name else f"#{index}"


def is_exported(share: Mapping[str, Any]) -> bool:
    """Disabled shares and export "-" stay in the store but not in smb.conf."""
    if share.get("enabled", True) is False:
        return False
    return share.get("export", "e") != NOT_EXPORTED


def build_share_stanza(share: Mapping[str, Any]) -> str:
    """Render one [name] section. Assumes the share already validated."""
    directives = Directives().add("path", share.get("path", ""))
    directives.add_if("comment", share.get("comment"))
    directives.extend(export_directives(share))
    directives.extend(security_directives(share))
    directives.extend(permission_directives(share))
    directives.extend(host_access_directives(share))

    header = f"[{strip_newlines(share.get('name', ''))}]\n"
    return header + directives.render() + "\n"


def validate_shares(shares: Iterable[Mapping[str, Any]]) -> Dict[str, List[ShareError]]:
    """Map share identifier -> error codes for every invalid share."""
    report: Dict[str, List[ShareError]] = {}
    for index, share in enumerate(shares):
        errors = validate_share(share)
        if errors:
            report[share_identifier(share, index)] = errors
    return report


def render_samba_config(shares: Sequence[Mapping[str, Any]]) -> GeneratedConfig:
    """Build the config text for all shares, in input order.

    Invalid shares are skipped and reported instead of failing the batch.
    Duplicate names are passed through untouched.
    """
    sections: List[str] = []
    skipped: Dict[str, List[ShareError]] = {}

    for index, share in enumerate(shares):
        if not isinstance(share, Mapping):
            skipped[f"#{index}"] = [ShareError.INVALID_SHARE_NAME, ShareError.INVALID_PATH]
            continue
        errors = validate_share(share)
        if errors:
            skipped[share_identifier(share, index)] = errors
            continue
        if not is_exported(share):
            continue
        sections.append(build_share_stanza(share))

    return GeneratedConfig("".join(sections), skipped)


def generate_samba_config(shares: Sequence[Mapping[str, Any]], warnings: Optional[list] = None) -> str:
    """Config text for all valid shares; skipped shares are logged.

    When a list is passed as warnings, one message per skipped share is
    appended to it.
    """
    result = render_samba_config(shares)
    for ident, errors in result.skipped.items():
        message = f"Skipped share {ident}: {', '.join(e.value for e in errors)}"
        logger.warning(message)
        if warnings is not None:
            warnings.append(message)
    return result.text
