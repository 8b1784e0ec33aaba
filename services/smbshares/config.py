"""
Custom SMB Shares - Configuration & Persistence

Config paths, shares.json load/save, plugin settings and share backups.
"""

import json
import logging
import os
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

PLUGIN_NAME = "custom.smb.shares"

# SMB_SHARES_CONFIG_BASE points at the flash config directory (/boot/config)
DEFAULT_CONFIG_BASE = os.getenv("SMB_SHARES_CONFIG_BASE", "/boot/config")

# Root that share paths (/mnt/...) are resolved beneath
FS_ROOT = os.getenv("SMB_SHARES_FS_ROOT", "/")

SMB_CONF = os.getenv("SMB_SHARES_SMB_CONF", "/etc/samba/smb.conf")
TESTPARM = os.getenv("SMB_SHARES_TESTPARM", "testparm")
SMBCONTROL = os.getenv("SMB_SHARES_SMBCONTROL", "smbcontrol")
RC_SAMBA = os.getenv("SMB_SHARES_RC_SAMBA", "/etc/rc.d/rc.samba")

PASSWD_FILE = os.getenv("SMB_SHARES_PASSWD_FILE", "/etc/passwd")
GROUP_FILE = os.getenv("SMB_SHARES_GROUP_FILE", "/etc/group")

HOST = os.getenv("SMB_SHARES_HOST", "127.0.0.1")
PORT = int(os.getenv("SMB_SHARES_PORT", "5080"))

BACKUP_NAME_PATTERN = re.compile(r"shares_[\d_-]+\.json")


# ============================================================================
# Paths
# ============================================================================

_config_base_override: Optional[Path] = None


def get_config_base() -> Path:
    if _config_base_override is not None:
        return _config_base_override
    return Path(DEFAULT_CONFIG_BASE)


def set_config_base(path) -> None:
    """Point all config paths at another directory (tests, chroots)."""
    global _config_base_override
    _config_base_override = Path(path)


def reset_config_base() -> None:
    global _config_base_override
    _config_base_override = None


def plugin_dir() -> Path:
    return get_config_base() / "plugins" / PLUGIN_NAME


def shares_file() -> Path:
    return plugin_dir() / "shares.json"


def settings_file() -> Path:
    return plugin_dir() / "settings.cfg"


def smb_custom_conf() -> Path:
    return plugin_dir() / "smb-custom.conf"


def smb_extra_conf() -> Path:
    return get_config_base() / "smb-extra.conf"


def backup_dir() -> Path:
    return plugin_dir() / "backups"


def atomic_write(path: Path, content: str) -> None:
    """Write to a temp file, fsync, then rename over the target."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_file = path.with_name(path.name + ".tmp")
    with open(tmp_file, "w") as f:
        f.write(content)
        f.flush()
        os.fsync(f.fileno())
    os.replace(str(tmp_file), str(path))


# ============================================================================
# Shares Load / Save
# ============================================================================

def load_shares() -> List[Dict[str, Any]]:
    """Load the share list. Missing or unreadable files yield []."""
    path = shares_file()
    if not path.exists():
        return []
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, ValueError, RecursionError) as e:
        logger.error(f"Failed to load shares from {path}: {e}")
        return []

    if not isinstance(data, list):
        logger.warning(f"Ignoring {path}: expected a JSON array")
        return []
    return [s for s in data if isinstance(s, dict)]


def save_shares(shares: List[Dict[str, Any]]) -> bool:
    """Persist the share list with an atomic write."""
    try:
        atomic_write(shares_file(), json.dumps(shares, indent=4))
        logger.info(f"Saved {len(shares)} shares")
        return True
    except OSError as e:
        logger.error(f"Failed to save shares: {e}")
        return False


def find_share_index(shares: List[Dict[str, Any]], name: str) -> int:
    for index, share in enumerate(shares):
        if share.get("name") == name:
            return index
    return -1


# ============================================================================
# Plugin Settings
# ============================================================================

def load_settings() -> Dict[str, str]:
    """Parse settings.cfg (KEY="value" lines)."""
    path = settings_file()
    settings: Dict[str, str] = {}
    if not path.exists():
        return settings
    try:
        lines = path.read_text().splitlines()
    except OSError as e:
        logger.error(f"Failed to read {path}: {e}")
        return settings

    for line in lines:
        line = line.strip()
        if not line or line.startswith(("#", ";")) or "=" not in line:
            continue
        key, value = line.split("=", 1)
        settings[key.strip()] = value.strip().strip('"').strip("'")
    return settings


def save_settings(settings: Dict[str, str]) -> bool:
    content = "".join(f'{key}="{value}"\n' for key, value in settings.items())
    try:
        atomic_write(settings_file(), content)
        return True
    except OSError as e:
        logger.error(f"Failed to save settings: {e}")
        return False


def is_plugin_enabled() -> bool:
    """Enabled unless settings.cfg says SERVICE="disabled"."""
    return load_settings().get("SERVICE", "enabled") == "enabled"


def set_plugin_enabled(enabled: bool) -> bool:
    settings = load_settings()
    settings["SERVICE"] = "enabled" if enabled else "disabled"
    if not save_settings(settings):
        return False
    logger.info(f"Plugin {settings['SERVICE']}")
    return True


# ============================================================================
# Backups
# ============================================================================

def is_valid_backup_name(filename: str) -> bool:
    return bool(filename) and BACKUP_NAME_PATTERN.fullmatch(filename) is not None


def backup_shares() -> Optional[str]:
    """Copy the current shares.json into the backup directory.

    Returns the backup filename, or None if there was nothing to back up
    or the copy failed.
    """
    source = shares_file()
    if not source.exists():
        return None
    filename = f"shares_{datetime.now().strftime('%Y%m%d_%H%M%S_%f')}.json"
    try:
        backup_dir().mkdir(parents=True, exist_ok=True)
        (backup_dir() / filename).write_text(source.read_text())
    except OSError as e:
        logger.error(f"Failed to back up shares: {e}")
        return None
    logger.info(f"Shares backed up to {filename}")
    return filename


def list_backups() -> List[Dict[str, Any]]:
    """Backups newest first."""
    directory = backup_dir()
    if not directory.is_dir():
        return []
    backups = []
    for path in directory.iterdir():
        if not is_valid_backup_name(path.name):
            continue
        stat = path.stat()
        backups.append({
            "filename": path.name,
            "size": stat.st_size,
            "modified": datetime.fromtimestamp(stat.st_mtime).isoformat(),
        })
    backups.sort(key=lambda b: b["filename"], reverse=True)
    return backups


def _backup_path(filename: str) -> Optional[Path]:
    if not is_valid_backup_name(filename):
        return None
    path = backup_dir() / filename
    return path if path.is_file() else None


def view_backup(filename: str) -> Optional[List[Dict[str, Any]]]:
    path = _backup_path(filename)
    if path is None:
        return None
    try:
        data = json.loads(path.read_text())
    except (OSError, ValueError, RecursionError) as e:
        logger.error(f"Failed to read backup {filename}: {e}")
        return None
    return data if isinstance(data, list) else None


def restore_backup(filename: str) -> bool:
    shares = view_backup(filename)
    if shares is None:
        return False
    if not save_shares(shares):
        return False
    logger.info(f"Restored shares from {filename}")
    return True


def delete_backup(filename: str) -> bool:
    path = _backup_path(filename)
    if path is None:
        return False
    try:
        path.unlink()
    except OSError as e:
        logger.error(f"Failed to delete backup {filename}: {e}")
        return False
    logger.info(f"Deleted backup {filename}")
    return True
