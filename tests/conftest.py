"""Root conftest for all tests.

Provides an isolated in-memory SQLite session per test plus small factories
for shoot days and scenes.
"""

from collections.abc import Callable

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from shootsync.db.models import Base, Scene, ShootDay
from shootsync.schedule.graph import ScheduleGraph


@pytest.fixture
def project_id() -> str:
    """Stable project ID used across schedule tests."""
    return "project-1"


@pytest.fixture(scope="function")
def db_session():
    """
    Provides an in-memory SQLite DB session for tests.

    This fixture:
    - Creates an isolated in-memory SQLite database per test
    - Shares one connection (StaticPool) so every session sees the same data
    - Enables foreign key constraints

    Tests are free to commit; the database disappears with the engine.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def graph(db_session: Session, project_id: str) -> ScheduleGraph:
    return ScheduleGraph(db_session, project_id)


@pytest.fixture
def make_day(db_session: Session, project_id: str) -> Callable[..., ShootDay]:
    """Factory for committed shoot days."""

    def _make_day(day_number: int = 1, **kwargs) -> ShootDay:
        day = ShootDay(project_id=kwargs.pop("project_id", project_id), day_number=day_number, **kwargs)
        db_session.add(day)
        db_session.commit()
        return day

    return _make_day


@pytest.fixture
def make_scene(db_session: Session, project_id: str) -> Callable[..., Scene]:
    """Factory for committed scenes, optionally assigned to a shoot day."""
    counter = {"n": 0}

    def _make_scene(
        number: str | None = None,
        page_eighths: int = 8,
        day: ShootDay | None = None,
        **kwargs,
    ) -> Scene:
        counter["n"] += 1
        scene = Scene(
            project_id=kwargs.pop("project_id", project_id),
            number=number or str(counter["n"]),
            heading=kwargs.pop("heading", "INT. KITCHEN - DAY"),
            page_eighths=page_eighths,
            script_order_index=kwargs.pop("script_order_index", counter["n"] - 1),
            shoot_day=day,
            shoot_day_order=kwargs.pop("shoot_day_order", counter["n"] if day is not None else None),
            **kwargs,
        )
        db_session.add(scene)
        db_session.commit()
        return scene

    return _make_scene
