import subprocess

import pytest
from fastapi.testclient import TestClient

from smbshares import config as config_module
from smbshares import smb_manager


class FakeSamba:
    """Stands in for testparm/smbcontrol/rc.samba.

    testparm lists the sections of the generated smb-custom.conf, the way
    the real one would after the include is resolved.
    """

    def __init__(self):
        self.calls = []
        self.testparm_rc = 0
        self.smbcontrol_rc = 0
        self.status_output = "smbd is running"
        self.status_rc = 0

    def __call__(self, cmd, timeout=30):
        self.calls.append(list(cmd))
        program = cmd[0]
        if program == config_module.TESTPARM:
            conf = config_module.smb_custom_conf()
            text = conf.read_text() if conf.exists() else ""
            sections = "\n".join(line for line in text.splitlines() if line.startswith("["))
            return subprocess.CompletedProcess(cmd, self.testparm_rc, stdout=sections, stderr="")
        if program == config_module.SMBCONTROL:
            stderr = "" if self.smbcontrol_rc == 0 else "no smbd processes"
            return subprocess.CompletedProcess(cmd, self.smbcontrol_rc, stdout="", stderr=stderr)
        return subprocess.CompletedProcess(cmd, self.status_rc, stdout=self.status_output, stderr="")

    def programs(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def config_base(tmp_path):
    base = tmp_path / "boot" / "config"
    base.mkdir(parents=True)
    config_module.set_config_base(base)
    yield base
    config_module.reset_config_base()


@pytest.fixture
def fs_root(tmp_path, monkeypatch):
    """A scratch filesystem root holding /mnt/user/{media,backup}."""
    root = tmp_path / "root"
    for name in ("media", "backup"):
        (root / "mnt" / "user" / name).mkdir(parents=True)
    monkeypatch.setattr(config_module, "FS_ROOT", str(root))
    return root


@pytest.fixture
def fake_samba(monkeypatch):
    fake = FakeSamba()
    monkeypatch.setattr(smb_manager, "_run_command", fake)
    return fake


@pytest.fixture
def client(config_base, fs_root, fake_samba):
    from smbshares.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_share():
    def _make(name="Media", path="/mnt/user/media", **extra):
        share = {"name": name, "path": path}
        share.update(extra)
        return share
    return _make
