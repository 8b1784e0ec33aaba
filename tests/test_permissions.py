import itertools

import pytest

from smbshares.permissions import PERMISSION_BITS, mask_to_permissions, permissions_to_mask


def test_bit_names():
    assert PERMISSION_BITS == (
        "owner_read", "owner_write", "owner_execute",
        "group_read", "group_write", "group_execute",
        "others_read", "others_write", "others_execute",
    )


@pytest.mark.parametrize("mask, granted", [
    ("0644", {"owner_read", "owner_write", "group_read", "others_read"}),
    ("0775", {"owner_read", "owner_write", "owner_execute", "group_read", "group_write",
              "group_execute", "others_read", "others_execute"}),
    ("0600", {"owner_read", "owner_write"}),
    ("0000", set()),
])
def test_known_masks(mask, granted):
    perms = mask_to_permissions(mask)
    assert {bit for bit, on in perms.items() if on} == granted
    assert permissions_to_mask(perms) == mask


def test_missing_bits_default_to_off():
    assert permissions_to_mask({"owner_read": True}) == "0400"
    assert permissions_to_mask({}) == "0000"


def test_leading_digit_is_ignored():
    assert mask_to_permissions("1777") == mask_to_permissions("0777")


def test_all_512_combinations_round_trip():
    seen = set()
    for combo in itertools.product((False, True), repeat=9):
        perms = dict(zip(PERMISSION_BITS, combo))
        mask = permissions_to_mask(perms)
        assert mask_to_permissions(mask) == perms
        seen.add(mask)
    assert len(seen) == 512


@pytest.mark.parametrize("mask", ["777", "0778", "", None, "07777"])
def test_invalid_mask(mask):
    with pytest.raises(ValueError):
        mask_to_permissions(mask)
