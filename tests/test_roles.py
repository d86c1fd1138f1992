from __future__ import annotations

import pytest

from shelter_platform.auth.roles import (
    RoleName,
    UnknownRole,
    is_valid_role,
    role_id_of,
    role_name_of,
)


def test_role_ids_are_stable() -> None:
    assert role_id_of("admin") == 1
    assert role_id_of("member") == 2
    assert role_id_of(RoleName.adopter) == 3


def test_role_name_of_known_ids() -> None:
    assert role_name_of(1) is RoleName.admin
    assert role_name_of(2) is RoleName.member
    assert role_name_of(3) is RoleName.adopter


def test_unknown_role_id_defaults_to_adopter() -> None:
    assert role_name_of(42) is RoleName.adopter


def test_unknown_role_id_strict_raises() -> None:
    with pytest.raises(UnknownRole):
        role_name_of(42, strict=True)


def test_unknown_role_name_raises() -> None:
    assert not is_valid_role("owner")
    with pytest.raises(UnknownRole):
        role_id_of("owner")


def test_role_names_are_case_sensitive() -> None:
    assert is_valid_role("member")
    assert not is_valid_role("Member")

