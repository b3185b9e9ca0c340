"""Mini README: SQLAlchemy records for budget projects and their positions.

Structure:
    * Base - shared declarative base.
    * ProjectRecord - one production budget with its day and rate settings.
    * PositionRecord - one cost line owned by exactly one project.

Deleting a project removes its positions both through the ORM cascade and
the ``ON DELETE CASCADE`` foreign key, so raw SQL deletes behave the same.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what SQLite hands back."""

    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_identifier() -> str:
    return str(uuid.uuid4())


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat(timespec="microseconds") if value is not None else None


class Base(DeclarativeBase):
    """Shared declarative base for all budget tables."""


class ProjectRecord(Base):
    """A production budget."""

    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_identifier)
    name: Mapped[str] = mapped_column(Text, nullable=False, default="Neues Projekt")
    shooting_days: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    # Stored for the client, the calculation always books hotel nights.
    include_hotel: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    hotel_cost_per_night: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    per_diem: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    actual_per_diem: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    positions: Mapped[List["PositionRecord"]] = relationship(
        back_populates="project",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=lambda: [PositionRecord.sort_order, PositionRecord.created_at],
    )

    def touch(self) -> None:
        """Refresh the modification timestamp."""

        self.updated_at = utcnow()

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "shooting_days": self.shooting_days,
            "include_hotel": self.include_hotel,
            "hotel_cost_per_night": self.hotel_cost_per_night,
            "per_diem": self.per_diem,
            "actual_per_diem": self.actual_per_diem,
            "archived": self.archived,
            "created_at": _isoformat(self.created_at),
            "updated_at": _isoformat(self.updated_at),
        }


class PositionRecord(Base):
    """A cost line of a project."""

    __tablename__ = "positions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_identifier)
    project_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    daily_rate: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    flat_fee: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    hotel_nights: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    travel_costs: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    days_on_set: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, default=None)
    costs: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    color: Mapped[Optional[str]] = mapped_column(String(16), nullable=True, default=None)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    actual_costs: Mapped[Optional[float]] = mapped_column(Float, nullable=True, default=None)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)

    project: Mapped[ProjectRecord] = relationship(back_populates="positions")

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "type": self.type,
            "name": self.name,
            "daily_rate": self.daily_rate,
            "flat_fee": self.flat_fee,
            "hotel_nights": self.hotel_nights,
            "travel_costs": self.travel_costs,
            "days_on_set": self.days_on_set,
            "costs": self.costs,
            "color": self.color,
            "active": self.active,
            "actual_costs": self.actual_costs,
            "sort_order": self.sort_order,
            "created_at": _isoformat(self.created_at),
        }
