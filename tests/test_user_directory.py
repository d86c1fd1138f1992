from __future__ import annotations

import pytest
from fastapi import FastAPI
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from shelter_platform.auth.identity import IdentityClaims
from shelter_platform.db.models import User
from shelter_platform.db.repositories.users import UserRepo
from shelter_platform.errors import Conflict
from shelter_platform.services.user_directory import UserDirectory


async def _count_users(session: AsyncSession) -> int:
    return (await session.execute(select(func.count()).select_from(User))).scalar_one()


@pytest.mark.asyncio
async def test_sync_creates_then_reuses(session: AsyncSession) -> None:
    directory = UserDirectory(session)
    claims = IdentityClaims(subject_id="sub-1", email="a@example.com", display_name="Alice")

    first = await directory.sync_from_identity(claims)
    await session.commit()
    second = await directory.sync_from_identity(claims)
    await session.commit()

    assert first.id == second.id
    assert second.subject_id == "sub-1"
    assert await _count_users(session) == 1


@pytest.mark.asyncio
async def test_sync_refreshes_drifted_profile(session: AsyncSession) -> None:
    directory = UserDirectory(session)
    await directory.sync_from_identity(
        IdentityClaims(subject_id="sub-1", email="a@example.com", display_name="Alice")
    )
    await session.commit()

    user = await directory.sync_from_identity(
        IdentityClaims(subject_id="sub-1", email="alice@example.org", display_name="Alice B.")
    )
    await session.commit()

    assert user.email == "alice@example.org"
    assert user.name == "Alice B."
    assert await _count_users(session) == 1


@pytest.mark.asyncio
async def test_sync_links_invited_placeholder_by_email(session: AsyncSession) -> None:
    directory = UserDirectory(session)
    placeholder = await directory.create_placeholder("bob@example.com")
    await session.commit()
    assert placeholder.subject_id is None
    assert placeholder.name == "bob@example.com"

    user = await directory.sync_from_identity(
        IdentityClaims(subject_id="sub-bob", email="bob@example.com", display_name="Bob")
    )
    await session.commit()

    assert user.id == placeholder.id
    assert user.subject_id == "sub-bob"
    assert user.name == "Bob"
    assert await _count_users(session) == 1


def _insert_competitor_before_create(monkeypatch, app: FastAPI, **competitor) -> None:
    """Commit `competitor` from a second session right before the directory inserts."""

    real_create = UserRepo.create

    async def create(self: UserRepo, **fields) -> User:
        async with app.state.sessionmaker() as other:
            other.add(User(**competitor))
            await other.commit()
        return await real_create(self, **fields)

    monkeypatch.setattr(UserRepo, "create", create)


@pytest.mark.asyncio
async def test_sync_returns_winner_when_first_sign_in_races(
    app: FastAPI, session: AsyncSession, monkeypatch
) -> None:
    _insert_competitor_before_create(
        monkeypatch, app, subject_id="sub-race", email="race@example.com", name="Winner"
    )

    user = await UserDirectory(session).sync_from_identity(
        IdentityClaims(subject_id="sub-race", email="race@example.com", display_name="Loser")
    )
    await session.commit()

    assert user.subject_id == "sub-race"
    assert user.name == "Winner"
    assert await _count_users(session) == 1


@pytest.mark.asyncio
async def test_sync_keeps_row_when_email_drifts_onto_another_user(session: AsyncSession) -> None:
    directory = UserDirectory(session)
    alice = await directory.sync_from_identity(
        IdentityClaims(subject_id="sub-a", email="a@example.com", display_name="Alice")
    )
    await directory.sync_from_identity(
        IdentityClaims(subject_id="sub-b", email="b@example.com", display_name="Bob")
    )
    await session.commit()

    # The unique email constraint rejects the drift; the subject's existing row wins.
    user = await directory.sync_from_identity(
        IdentityClaims(subject_id="sub-a", email="b@example.com", display_name="Alice")
    )
    await session.commit()

    assert user.id == alice.id
    assert user.email == "a@example.com"
    assert await _count_users(session) == 2


@pytest.mark.asyncio
async def test_sync_email_taken_by_another_subject_is_conflict(
    app: FastAPI, session: AsyncSession, monkeypatch
) -> None:
    _insert_competitor_before_create(
        monkeypatch, app, subject_id="sub-other", email="shared@example.com", name="Other"
    )

    with pytest.raises(Conflict):
        await UserDirectory(session).sync_from_identity(
            IdentityClaims(subject_id="sub-new", email="shared@example.com", display_name="New")
        )

    assert await _count_users(session) == 1
