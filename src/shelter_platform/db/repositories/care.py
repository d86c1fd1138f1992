"""
shelter_platform.db.repositories.care

Repositories for pet care records (vaccines, vaccinations, events).

Responsibilities:
- Reference list of vaccines.
- Per-pet vaccination and event history with soft deletion.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shelter_platform.db.models import Event, Vaccination, Vaccine


class VaccineRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_all(self) -> list[Vaccine]:
        return list((await self._session.execute(select(Vaccine).order_by(Vaccine.id))).scalars().all())

    async def get(self, vaccine_id: int) -> Vaccine | None:
        return await self._session.get(Vaccine, vaccine_id)

    async def find_by_name(self, name: str) -> Vaccine | None:
        stmt = select(Vaccine).where(Vaccine.name == name)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def create(self, *, name: str, description: str | None = None) -> Vaccine:
        vaccine = Vaccine(name=name, description=description)
        self._session.add(vaccine)
        await self._session.flush()
        return vaccine


class VaccinationRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_all(
        self,
        *,
        pet_id: int | None = None,
        vaccine_id: int | None = None,
        include_deleted: bool = False,
    ) -> list[Vaccination]:
        stmt = select(Vaccination).order_by(Vaccination.id)
        if pet_id is not None:
            stmt = stmt.where(Vaccination.pet_id == pet_id)
        if vaccine_id is not None:
            stmt = stmt.where(Vaccination.vaccine_id == vaccine_id)
        if not include_deleted:
            stmt = stmt.where(Vaccination.deleted_at.is_(None))
        return list((await self._session.execute(stmt)).scalars().all())

    async def get(self, vaccination_id: int) -> Vaccination | None:
        vaccination = await self._session.get(Vaccination, vaccination_id)
        if vaccination is None or vaccination.is_deleted:
            return None
        return vaccination

    async def create(self, *, pet_id: int, vaccine_id: int) -> Vaccination:
        vaccination = Vaccination(pet_id=pet_id, vaccine_id=vaccine_id)
        self._session.add(vaccination)
        await self._session.flush()
        return vaccination

    async def soft_delete(self, vaccination: Vaccination) -> None:
        vaccination.mark_deleted()
        await self._session.flush()


class EventRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def find_all(self, *, pet_id: int | None = None, include_deleted: bool = False) -> list[Event]:
        stmt = select(Event).order_by(Event.date_time)
        if pet_id is not None:
            stmt = stmt.where(Event.pet_id == pet_id)
        if not include_deleted:
            stmt = stmt.where(Event.deleted_at.is_(None))
        return list((await self._session.execute(stmt)).scalars().all())

    async def get(self, event_id: int) -> Event | None:
        event = await self._session.get(Event, event_id)
        if event is None or event.is_deleted:
            return None
        return event

    async def create(
        self, *, pet_id: int, name: str, date_time: datetime, description: str | None = None
    ) -> Event:
        event = Event(pet_id=pet_id, name=name, description=description, date_time=date_time)
        self._session.add(event)
        await self._session.flush()
        return event

    async def update(self, event: Event, **fields: Any) -> Event:
        for key, value in fields.items():
            setattr(event, key, value)
        await self._session.flush()
        return event

    async def soft_delete(self, event: Event) -> None:
        event.mark_deleted()
        await self._session.flush()


# --- Module Notes -----------------------------------------------------------
# Authorization for care records is decided by the owning pet's shelter; these
# repos never look at memberships.
