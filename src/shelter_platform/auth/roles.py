"""
shelter_platform.auth.roles

Role utilities for mapping between role ids and names.

Responsibilities:
- Define the closed role universe {admin, member, adopter} and their stable ids.
- Map ids <-> names for the authorization gate and the membership services.
"""

from __future__ import annotations

import enum


class RoleName(enum.StrEnum):
    admin = "admin"
    member = "member"
    adopter = "adopter"


class UnknownRole(ValueError):
    pass


ROLE_IDS: dict[RoleName, int] = {
    RoleName.admin: 1,
    RoleName.member: 2,
    RoleName.adopter: 3,
}

_ROLE_NAMES: dict[int, RoleName] = {role_id: name for name, role_id in ROLE_IDS.items()}


def role_name_of(role_id: int, *, strict: bool = False) -> RoleName:
    """
    Unknown ids resolve to `adopter` (least privilege) unless `strict` is set,
    in which case they raise `UnknownRole`.
    """

    name = _ROLE_NAMES.get(role_id)
    if name is None:
        if strict:
            raise UnknownRole(f"unknown role id: {role_id}")
        return RoleName.adopter
    return name


def role_id_of(role_name: str) -> int:
    if not is_valid_role(role_name):
        raise UnknownRole(f"unknown role name: {role_name!r}")
    return ROLE_IDS[RoleName(role_name)]


def is_valid_role(role_name: str) -> bool:
    return role_name in RoleName.__members__


# --- Module Notes -----------------------------------------------------------
# Role ids double as primary keys of the `roles` table (seeded in db.init_db).
