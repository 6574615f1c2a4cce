from __future__ import annotations

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

SCENE_SCHEMA_VERSION = 2


class Base(DeclarativeBase):
    """Base class for all database models."""


class ShootDay(Base):
    """A calendar day of principal photography.

    Schema:
    - id: UUID primary key
    - project_id: Owning project
    - day_number: 1-based shoot day number shown on the strip board
    - shoot_date: Calendar date (nullable until the day is dated)
    - total_page_eighths: Derived sum of scene lengths
    - scene_count: Derived number of assigned scenes

    Rules:
    - total_page_eighths and scene_count are never hand-edited; they are
      overwritten by the day aggregate recalculator only
    - Days are created and deleted by the schedule editor, not by reconciliation
    """

    __tablename__ = "shoot_days"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    project_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    day_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    shoot_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    total_page_eighths: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    scene_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    scenes: Mapped[list[Scene]] = relationship("Scene", back_populates="shoot_day")

    __table_args__ = (Index("idx_shoot_days_project_number", "project_id", "day_number"),)

    @property
    def display_title(self) -> str:
        """Strip board title, e.g. "Day 2 - Mar 04, 2026"."""
        if self.shoot_date is None:
            return f"Day {self.day_number}"
        return f"Day {self.day_number} - {self.shoot_date.strftime('%b %d, %Y')}"

    def __repr__(self) -> str:
        return f"<ShootDay {self.id} day={self.day_number} eighths={self.total_page_eighths} scenes={self.scene_count}>"


class Scene(Base):
    """A single script unit with a stable identity across re-imports.

    Schema:
    - id: UUID primary key (stable identity, the only scheduling key)
    - project_id: Owning project
    - schema_version: Record layout version, resolved at load time
    - number: Scene number from the script ("12", "12A"); may transiently repeat
    - heading: Raw heading line
    - location_type: INT, EXT, INT/EXT, I/E or empty
    - script_location: Location name from the heading
    - time_of_day: DAY, NIGHT, ...
    - page_eighths: Length in eighths of a page (>= 0, 8 eighths = 1 page)
    - script_order_index: Position in script order
    - shoot_day_id: Optional shoot day assignment
    - shoot_day_order: Position within the assigned day (nullable)

    Rules:
    - Script order and shoot day assignment are independent
    - Reconciliation never deletes scenes, it only clears assignments
    """

    __tablename__ = "scenes"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()), index=True)
    project_id: Mapped[str] = mapped_column(String, nullable=False, index=True)
    schema_version: Mapped[int] = mapped_column(Integer, nullable=False, default=SCENE_SCHEMA_VERSION)
    number: Mapped[str] = mapped_column(String, nullable=False, default="")
    heading: Mapped[str] = mapped_column(Text, nullable=False, default="")
    location_type: Mapped[str] = mapped_column(String, nullable=False, default="")
    script_location: Mapped[str] = mapped_column(String, nullable=False, default="")
    time_of_day: Mapped[str] = mapped_column(String, nullable=False, default="")
    page_eighths: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    script_order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    shoot_day_id: Mapped[str | None] = mapped_column(String, ForeignKey("shoot_days.id"), nullable=True, index=True)
    shoot_day_order: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc)
    )

    shoot_day: Mapped[ShootDay | None] = relationship("ShootDay", back_populates="scenes")

    __table_args__ = (Index("idx_scenes_project_order", "project_id", "script_order_index"),)

    @property
    def is_scheduled(self) -> bool:
        return self.shoot_day is not None

    def __repr__(self) -> str:
        return f"<Scene {self.id} #{self.number} eighths={self.page_eighths} day={self.shoot_day_id}>"
