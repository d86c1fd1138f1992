"""
shelter_platform.services.user_directory

User directory: maps verified identities to internal user records.

Responsibilities:
- Upsert-by-priority identity sync (subject id, then email, then create).
- Placeholder users for invitations sent before someone ever signs in.
"""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from shelter_platform.auth.identity import IdentityClaims
from shelter_platform.db.models import User
from shelter_platform.db.repositories.users import UserRepo
from shelter_platform.errors import Conflict
from shelter_platform.observability.logging import get_logger

log = get_logger(__name__)


class UserDirectory:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._users = UserRepo(session)

    async def get(self, user_id: int) -> User | None:
        return await self._users.get(user_id)

    async def find_by_email(self, email: str) -> User | None:
        return await self._users.find_by_email(email)

    async def create_placeholder(self, email: str) -> User:
        # Name defaults to the email until the person signs in and sync fills it.
        user = await self._users.create(email=email, name=email, subject_id=None)
        log.info("user_placeholder_created", user_id=user.id)
        return user

    async def sync_from_identity(self, claims: IdentityClaims) -> User:
        """
        Resolve the local user for verified claims, in priority order:
        1. by subject id (updating name/email when they drifted),
        2. by email (pre-existing or invited account; attach the subject id),
        3. create.

        A concurrent first sign-in for the same subject loses the insert race on
        the unique subject_id constraint; in that case the winner's row is read back
        (without the drifted profile applied). A unique-email clash with no row for
        the subject is a `Conflict`.
        """

        try:
            return await self._sync(claims)
        except IntegrityError as e:
            await self._session.rollback()
            user = await self._users.find_by_subject_id(claims.subject_id)
            if user is None:
                log.warning("user_sync_email_conflict")
                raise Conflict("Email is already linked to another account") from e
            log.info("user_sync_race_resolved", user_id=user.id)
            return user

    async def _sync(self, claims: IdentityClaims) -> User:
        user = await self._users.find_by_subject_id(claims.subject_id)
        if user is not None:
            if user.name != claims.display_name or user.email != claims.email:
                await self._users.update(user, name=claims.display_name, email=claims.email)
                log.info("user_profile_updated", user_id=user.id)
            return user

        user = await self._users.find_by_email(claims.email)
        if user is not None:
            await self._users.update(user, subject_id=claims.subject_id, name=claims.display_name)
            log.info("user_identity_linked", user_id=user.id)
            return user

        user = await self._users.create(
            email=claims.email, name=claims.display_name, subject_id=claims.subject_id
        )
        log.info("user_created", user_id=user.id)
        return user


# --- Module Notes -----------------------------------------------------------
# The caller commits right after sync so the upsert is atomic per user row and
# independent of whatever the rest of the request does.
