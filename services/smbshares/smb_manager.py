"""
Custom SMB Shares - Samba Configuration Manager

Write smb-custom.conf from the share list, hook it into smb-extra.conf,
check it with testparm and signal smbd to reload.
"""

import logging
import subprocess
import threading
from typing import Any, Dict, List, Optional

from . import config as config_module
from .smb_conf import render_samba_config

logger = logging.getLogger(__name__)

CONF_HEADER = (
    "# Custom SMB Shares - Samba Configuration (auto-generated)\n"
    "# Do not edit manually - managed by the Custom SMB Shares plugin\n"
    "\n"
)

# Serializes write + reload so smbd never reads a half-applied config
_apply_lock = threading.Lock()


def _run_command(cmd: List[str], timeout: int = 30) -> subprocess.CompletedProcess:
    return subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)


def _command_output(result: subprocess.CompletedProcess) -> str:
    return "\n".join(part.strip() for part in (result.stdout, result.stderr) if part and part.strip())


def write_samba_config(content: str) -> bool:
    """Atomically replace smb-custom.conf."""
    path = config_module.smb_custom_conf()
    try:
        config_module.atomic_write(path, CONF_HEADER + content)
    except OSError as e:
        logger.error(f"Failed to write {path}: {e}")
        return False
    logger.info(f"Samba configuration written to {path}")
    return True


def ensure_samba_include() -> bool:
    """Make sure smb-extra.conf includes our generated file."""
    extra = config_module.smb_extra_conf()
    include_line = f"include = {config_module.smb_custom_conf()}"
    try:
        content = extra.read_text() if extra.exists() else ""
        if include_line in content.splitlines():
            return True
        extra.parent.mkdir(parents=True, exist_ok=True)
        with open(extra, "a") as f:
            if content and not content.endswith("\n"):
                f.write("\n")
            f.write(f"\n# Custom SMB Shares plugin\n{include_line}\n")
    except OSError as e:
        logger.error(f"Failed to add include directive to {extra}: {e}")
        return False
    logger.info(f"Added include directive for custom SMB shares to {extra}")
    return True


def reload_samba() -> Dict[str, Any]:
    """Validate smb.conf with testparm, then ask all smbd processes to reload."""
    try:
        result = _run_command([config_module.TESTPARM, "-s", config_module.SMB_CONF])
        if result.returncode != 0:
            error = f"Invalid Samba configuration: {_command_output(result)}"
            logger.error(error)
            return {"success": False, "error": error}

        result = _run_command([config_module.SMBCONTROL, "all", "reload-config"])
        if result.returncode != 0:
            error = _command_output(result) or "smbcontrol reload-config failed"
            logger.error(f"Samba reload failed: {error}")
            return {"success": False, "error": error}
    except (OSError, subprocess.SubprocessError) as e:
        logger.error(f"Samba reload failed: {e}")
        return {"success": False, "error": str(e)}

    logger.info("Samba configuration reloaded")
    return {"success": True, "error": ""}


def list_samba_sections() -> Optional[List[str]]:
    """Section names as smbd sees them, or None if testparm failed."""
    try:
        result = _run_command([config_module.TESTPARM, "-s", config_module.SMB_CONF])
    except (OSError, subprocess.SubprocessError) as e:
        logger.error(f"testparm failed: {e}")
        return None
    if result.returncode != 0:
        return None

    sections = []
    for line in result.stdout.splitlines():
        line = line.strip()
        if line.startswith("[") and line.endswith("]"):
            sections.append(line[1:-1])
    return sections


def verify_samba_share(name: str, should_exist: bool = True) -> bool:
    sections = list_samba_sections()
    if sections is None:
        return False
    return (name in sections) == should_exist


def get_samba_status() -> Dict[str, Any]:
    try:
        result = _run_command([config_module.RC_SAMBA, "status"], timeout=10)
    except (OSError, subprocess.SubprocessError) as e:
        logger.error(f"Failed to query Samba status: {e}")
        return {"running": False, "output": str(e)}
    output = _command_output(result)
    return {"running": result.returncode == 0 and "running" in output, "output": output}


def apply_shares(shares: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Regenerate smb-custom.conf from shares and reload Samba."""
    generated = render_samba_config(shares)
    skipped = {ident: [e.value for e in errors] for ident, errors in generated.skipped.items()}
    for ident, codes in skipped.items():
        logger.warning(f"Skipped share {ident} during config generation: {', '.join(codes)}")

    with _apply_lock:
        if not write_samba_config(generated.text):
            return {"success": False, "error": "Failed to write Samba configuration", "skipped": skipped}
        ensure_samba_include()
        result = reload_samba()

    result["skipped"] = skipped
    return result
