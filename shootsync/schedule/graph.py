"""Schedule graph handle.

ScheduleGraph is the explicit dependency the reconciler works against: the
scene/day records of one project plus the transaction boundary (a SQLAlchemy
session owned by the caller). Nothing in the engine reaches for a global
session.
"""

from __future__ import annotations

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from shootsync.core.errors import PersistenceError
from shootsync.db.models import Scene, ShootDay


class ScheduleGraph:
    """Scenes and shoot days of one project, bound to a session."""

    def __init__(self, session: Session, project_id: str) -> None:
        self.session = session
        self.project_id = project_id

    def scenes(self) -> list[Scene]:
        """All scenes of the project in script order."""
        result = self.session.execute(
            select(Scene).where(Scene.project_id == self.project_id).order_by(Scene.script_order_index, Scene.id)
        )
        return list(result.scalars().all())

    def shoot_days(self) -> list[ShootDay]:
        """All shoot days of the project, earliest first."""
        result = self.session.execute(
            select(ShootDay).where(ShootDay.project_id == self.project_id).order_by(ShootDay.day_number, ShootDay.id)
        )
        return list(result.scalars().all())

    def get_scene(self, scene_id: str) -> Scene | None:
        scene = self.session.get(Scene, scene_id)
        if scene is None or scene.project_id != self.project_id:
            return None
        return scene

    def has_scene_id(self, scene_id: str) -> bool:
        """Whether a scene with this id exists in any project."""
        return self.session.get(Scene, scene_id) is not None

    def add_scene(self, scene: Scene) -> None:
        self.session.add(scene)

    def commit(self, operation: str) -> None:
        """Commit the current transaction.

        Raises:
            PersistenceError: If the commit fails. The transaction is rolled
                back first, so no partial change survives.
        """
        try:
            self.session.commit()
        except SQLAlchemyError as e:
            logger.error(f"[SCHEDULE] {operation} commit failed for project_id={self.project_id}: {e}")
            self.rollback()
            raise PersistenceError(operation, e) from e

    def rollback(self) -> None:
        self.session.rollback()
