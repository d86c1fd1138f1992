"""
shelter_platform.db.models

Persistence schema for the shelter platform.

Responsibilities:
- Define ORM models for the tenant boundary and its resources:
  - Shelter: tenant boundary owning pets and memberships
  - User / Role / Assignment: principals and the (user, role, shelter) ACL
  - Pet / AdoptionRequest: resources resolved back to a shelter for authorization
  - Species/Sex/PetStatus/Size/Color lookups: reference data for pet attributes
  - Vaccine / Vaccination / Event: pet care records
  - ShelterAccessRequest: platform onboarding requests, reviewed by operators
"""

from __future__ import annotations

import enum
from datetime import date, datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Column,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shelter_platform.db.base import Base, SoftDeleteMixin, TimestampMixin, utcnow


class PetStatus(enum.StrEnum):
    in_shelter = "in_shelter"
    in_transit = "in_transit"
    adopted = "adopted"


class AdoptionStatus(enum.StrEnum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class AccessRequestStatus(enum.StrEnum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class User(TimestampMixin, Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Null for placeholder users invited before they ever signed in.
    subject_id: Mapped[str | None] = mapped_column(String(255), nullable=True, unique=True)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    country: Mapped[str | None] = mapped_column(String(100), nullable=True)
    state: Mapped[str | None] = mapped_column(String(100), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)


class Role(Base):
    __tablename__ = "roles"

    # Ids are fixed reference data (see auth.roles); never autoincremented.
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    role: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)


class Shelter(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "shelters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    state: Mapped[str | None] = mapped_column(String(100), nullable=True)
    country: Mapped[str | None] = mapped_column(String(100), nullable=True)
    zip: Mapped[int | None] = mapped_column(Integer, nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)

    pets: Mapped[list[Pet]] = relationship(back_populates="shelter")


class Assignment(Base):
    __tablename__ = "assignments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role_id: Mapped[int] = mapped_column(
        ForeignKey("roles.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    shelter_id: Mapped[int] = mapped_column(
        ForeignKey("shelters.id", ondelete="CASCADE"), nullable=False, index=True
    )

    __table_args__ = (
        UniqueConstraint("user_id", "role_id", "shelter_id", name="uq_assignments_user_role_shelter"),
        Index("ix_assignments_user_shelter", "user_id", "shelter_id"),
    )


# Reference data for pet attributes; seeded by init_db.


class SpeciesLookup(Base):
    __tablename__ = "pet_species"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    species: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)


class SexLookup(Base):
    __tablename__ = "sexes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sex: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)


class PetStatusLookup(Base):
    __tablename__ = "pet_statuses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    status: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)


class SizeLookup(Base):
    __tablename__ = "pet_sizes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    size: Mapped[str] = mapped_column(String(20), nullable=False, unique=True)


class ColorLookup(Base):
    __tablename__ = "pet_colors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    color: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)


pet_pet_colors = Table(
    "pet_pet_colors",
    Base.metadata,
    Column("pet_id", ForeignKey("pets.id", ondelete="CASCADE"), primary_key=True),
    Column("color_id", ForeignKey("pet_colors.id", ondelete="RESTRICT"), primary_key=True, index=True),
)


class Pet(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "pets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    birthdate: Mapped[date | None] = mapped_column(nullable=True)
    breed: Mapped[str | None] = mapped_column(String(255), nullable=True)
    species: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    sex: Mapped[str] = mapped_column(String(20), nullable=False)
    size: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[PetStatus] = mapped_column(Enum(PetStatus), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Authoritative edge for tenant resolution.
    shelter_id: Mapped[int] = mapped_column(
        ForeignKey("shelters.id", ondelete="CASCADE"), nullable=False, index=True
    )

    shelter: Mapped[Shelter] = relationship(back_populates="pets")
    colors: Mapped[list[ColorLookup]] = relationship(
        secondary=pet_pet_colors, lazy="selectin", order_by=ColorLookup.id
    )


class AdoptionRequest(TimestampMixin, Base):
    __tablename__ = "adoption_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pet_id: Mapped[int] = mapped_column(
        ForeignKey("pets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    status: Mapped[AdoptionStatus] = mapped_column(
        Enum(AdoptionStatus), nullable=False, index=True
    )
    answers: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    admin_message: Mapped[str | None] = mapped_column(Text, nullable=True)


class Vaccine(Base):
    __tablename__ = "vaccines"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)


class Vaccination(SoftDeleteMixin, Base):
    __tablename__ = "vaccinations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    vaccine_id: Mapped[int] = mapped_column(
        ForeignKey("vaccines.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    pet_id: Mapped[int] = mapped_column(
        ForeignKey("pets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # When the vaccine was administered (recorded).
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)


class Event(SoftDeleteMixin, TimestampMixin, Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pet_id: Mapped[int] = mapped_column(
        ForeignKey("pets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    date_time: Mapped[datetime] = mapped_column(nullable=False)


class ShelterAccessRequest(TimestampMixin, Base):
    """Onboarding form submitted by organisations that want a shelter on the platform."""

    __tablename__ = "shelter_access_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    shelter_name: Mapped[str] = mapped_column(String(255), nullable=False)
    shelter_type: Mapped[str] = mapped_column(String(100), nullable=False)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    state: Mapped[str] = mapped_column(String(100), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False)
    contact_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_email: Mapped[str] = mapped_column(String(320), nullable=False)
    contact_phone: Mapped[str] = mapped_column(String(50), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[AccessRequestStatus] = mapped_column(
        Enum(AccessRequestStatus), nullable=False, default=AccessRequestStatus.pending, index=True
    )


# --- Module Notes -----------------------------------------------------------
# Unique subject_id/email on users and the (user, role, shelter) constraint on
# assignments are what make identity sync and invitations race-safe; the
# services rely on them rather than on application locks.
