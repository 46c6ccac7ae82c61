from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
BACKEND = ROOT / "backend"
if str(BACKEND) not in sys.path:
    sys.path.insert(0, str(BACKEND))

# Keep the app's own engine in memory so importing it never touches disk.
os.environ.setdefault("DATABASE_URL", "sqlite://")

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from syllaboard.engine.dice import DieRoller  # noqa: E402
from syllaboard.schemas import Course, PathCell, Task  # noqa: E402


class FixedRoller(DieRoller):
    """Always lands on ``value``, but never below the requested minimum."""

    def __init__(self, value: int) -> None:
        super().__init__()
        self.value = value
        self.calls: list[int] = []

    def roll(self, min_face: int = 1) -> int:
        self.calls.append(min_face)
        return max(self.clamp_face(min_face), self.value)


def make_course(task_count: int = 4, cells_per_task: int = 3) -> Course:
    """Course with 20-point tasks and cell ``i`` worth ``10 + i`` reward."""
    tasks = [Task(title=f"Task {i}", type="quiz", points=20) for i in range(task_count)]
    cells = [PathCell(name=f"cell {i}", reward=10 + i) for i in range(task_count * cells_per_task)]
    return Course(course_name="Algorithms", term="Fall 2025", tasks=tasks, path_vector=cells)


@pytest.fixture
def course() -> Course:
    return make_course()


@pytest.fixture
def session_factory():
    from syllaboard.db import Base

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def roller() -> FixedRoller:
    return FixedRoller(5)


@pytest.fixture
def api_client(session_factory, roller):
    """FastAPI TestClient with an in-memory DB and a predictable die."""
    from fastapi.testclient import TestClient

    from syllaboard.db import get_db
    from syllaboard.engine.progression import ProgressionEngine
    from syllaboard.main import app
    from syllaboard.routers.student import get_engine

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    engine = ProgressionEngine(roller)
    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_engine] = lambda: engine
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
