"""
Module: clevio_kernel.models.blackout_window
Responsibility: ORM persistence for administrator-defined blackout windows.
Architecture position: Kernel > Models.

Invariants enforced:
    - Full-day rows carry no times; partial rows carry both with
      start_time < end_time (CHECK constraint mirrors the domain record).
"""

from __future__ import annotations

from datetime import date, datetime, time

from sqlalchemy import Boolean, CheckConstraint, Date, DateTime, Index, String, Time
from sqlalchemy.orm import Mapped, mapped_column

from clevio_kernel.db.base import Base
from clevio_kernel.domain.availability import BlackoutWindow


class BlackoutWindowModel(Base):
    """Persistent blackout window."""

    __tablename__ = "blackout_windows"

    __table_args__ = (
        CheckConstraint(
            "(is_full_day AND start_time IS NULL AND end_time IS NULL) OR "
            "(NOT is_full_day AND start_time IS NOT NULL AND end_time IS NOT NULL "
            "AND start_time < end_time)",
            name="ck_blackout_windows_shape",
        ),
        Index("ix_blackout_windows_date", "on_date"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    on_date: Mapped[date] = mapped_column(Date, nullable=False)
    reason: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    is_full_day: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    start_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    end_time: Mapped[time | None] = mapped_column(Time, nullable=True)
    created_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<BlackoutWindow {self.id} {self.on_date} full_day={self.is_full_day}>"

    def to_dto(self) -> BlackoutWindow:
        return BlackoutWindow(
            window_id=self.id,
            on_date=self.on_date,
            reason=self.reason,
            is_full_day=self.is_full_day,
            start_time=self.start_time,
            end_time=self.end_time,
            created_at=self.created_at,
        )

    @classmethod
    def from_dto(cls, dto: BlackoutWindow) -> BlackoutWindowModel:
        return cls(
            id=dto.window_id,
            on_date=dto.on_date,
            reason=dto.reason,
            is_full_day=dto.is_full_day,
            start_time=dto.start_time,
            end_time=dto.end_time,
            created_at=dto.created_at,
        )
