import os

import pytest

from smbshares.sanitize import sanitize_share_data, strip_newlines
from smbshares.validation import (
    ShareError,
    check_share_path,
    error_messages,
    is_valid_share,
    validate_share,
)


# ============================================================================
# Sanitizer
# ============================================================================

def test_sanitize_trims_whitespace():
    result = sanitize_share_data({"name": "  Media  ", "path": "\t/mnt/user/media\n"})
    assert result == {"name": "Media", "path": "/mnt/user/media"}


def test_sanitize_drops_empty_and_whitespace_only_values():
    result = sanitize_share_data({"name": "Media", "comment": "", "force_user": "   "})
    assert result == {"name": "Media"}


def test_sanitize_passes_non_strings_through():
    access = {"admin": "read-write"}
    result = sanitize_share_data({"enabled": False, "user_access": access, "count": 0})
    assert result == {"enabled": False, "user_access": access, "count": 0}


def test_sanitize_does_not_modify_input():
    raw = {"name": " Media "}
    sanitize_share_data(raw)
    assert raw == {"name": " Media "}


@pytest.mark.parametrize("raw, expected", [
    ("test\n", "test"),
    ("test\r", "test"),
    ("test\r\n", "test"),
    ("a\nb\r\nc", "abc"),
    ("normal string", "normal string"),
    ("", ""),
    (None, ""),
])
def test_strip_newlines(raw, expected):
    assert strip_newlines(raw) == expected


# ============================================================================
# Validator
# ============================================================================

def test_valid_share_has_no_errors():
    share = {"name": "Media_2-x", "path": "/mnt/user/media", "create_mask": "0644"}
    assert validate_share(share) == []
    assert is_valid_share(share)


@pytest.mark.parametrize("name", ["", "my share", "share;rm", "../etc", "share\n", "名前", None])
def test_invalid_share_names(name):
    assert ShareError.INVALID_SHARE_NAME in validate_share({"name": name, "path": "/mnt/user"})


@pytest.mark.parametrize("path", ["", "/etc/passwd", "mnt/user", "/mntx/user", None])
def test_invalid_paths(path):
    assert validate_share({"name": "ok", "path": path}) == [ShareError.INVALID_PATH]


@pytest.mark.parametrize("mask", ["777", "0778", "abcd", "07777", "0777\n"])
def test_invalid_masks(mask):
    errors = validate_share({"name": "ok", "path": "/mnt/a", "create_mask": mask, "directory_mask": mask})
    assert errors == [ShareError.INVALID_CREATE_MASK, ShareError.INVALID_DIRECTORY_MASK]


def test_absent_masks_are_not_checked():
    assert validate_share({"name": "ok", "path": "/mnt/a", "create_mask": ""}) == []


def test_errors_accumulate():
    errors = validate_share({"name": "bad name", "path": "/tmp", "create_mask": "9999", "volsizelimit": "1G"})
    assert errors == [
        ShareError.INVALID_SHARE_NAME,
        ShareError.INVALID_PATH,
        ShareError.INVALID_CREATE_MASK,
        ShareError.INVALID_VOLUME_SIZE,
    ]


def test_error_messages_are_joined():
    text = error_messages([ShareError.INVALID_SHARE_NAME, ShareError.INVALID_PATH])
    assert text == (
        "Invalid share name. Use only letters, numbers, hyphens, and underscores., "
        "Path must start with /mnt/"
    )


# ============================================================================
# On-disk path check
# ============================================================================

def test_check_share_path_accepts_writable_directory(fs_root):
    assert check_share_path("/mnt/user/media", str(fs_root)) == []


def test_check_share_path_missing(fs_root):
    assert check_share_path("/mnt/user/nope", str(fs_root)) == [ShareError.PATH_NOT_FOUND]


def test_check_share_path_traversal(fs_root):
    (fs_root / "etc").mkdir()
    assert check_share_path("/mnt/user/../../etc", str(fs_root)) == [ShareError.PATH_OUTSIDE_MNT]


def test_check_share_path_symlink_outside_mnt(fs_root):
    (fs_root / "etc").mkdir()
    os.symlink(fs_root / "etc", fs_root / "mnt" / "user" / "evil")
    assert check_share_path("/mnt/user/evil", str(fs_root)) == [ShareError.PATH_OUTSIDE_MNT]


def test_check_share_path_file(fs_root):
    (fs_root / "mnt" / "user" / "file.txt").write_text("x")
    assert check_share_path("/mnt/user/file.txt", str(fs_root)) == [ShareError.PATH_NOT_DIRECTORY]
