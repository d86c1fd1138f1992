"""
shelter_platform.db.repositories.users

Repository for `User` entities.

Responsibilities:
- Keyed lookups used by identity sync (subject id, email, id).
- Insert/update of user rows; never deletes.
"""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shelter_platform.db.models import User


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: int) -> User | None:
        return await self._session.get(User, user_id)

    async def find_by_subject_id(self, subject_id: str) -> User | None:
        stmt = select(User).where(User.subject_id == subject_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def find_by_email(self, email: str) -> User | None:
        stmt = select(User).where(User.email == email)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def create(self, *, email: str, name: str, subject_id: str | None = None) -> User:
        user = User(email=email, name=name, subject_id=subject_id)
        self._session.add(user)
        await self._session.flush()
        return user

    async def update(
        self,
        user: User,
        *,
        name: str | None = None,
        email: str | None = None,
        subject_id: str | None = None,
    ) -> User:
        if name is not None:
            user.name = name
        if email is not None:
            user.email = email
        if subject_id is not None:
            user.subject_id = subject_id
        await self._session.flush()
        return user
