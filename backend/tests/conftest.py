"""
Configuration partagée pour tous les tests.
Override la dépendance get_store pour éviter toute écriture dans la base réelle.
"""

import datetime as dt
import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from unittest.mock import MagicMock  # noqa: E402

from eps_planner.database import get_store  # noqa: E402
from eps_planner.main import app  # noqa: E402
from eps_planner.schemas.cycle import Cycle, Session  # noqa: E402
from eps_planner.schemas.school_class import Level, SchoolClass, TimeSlot  # noqa: E402

MONDAY = 1


@pytest.fixture
def client():
    """Client HTTP de test avec le magasin d'état mocké."""
    mock_store = MagicMock()
    app.dependency_overrides[get_store] = lambda: mock_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# --- Helpers de construction ---

def make_session(session_id, date, order=0, time="09:30", **kwargs) -> Session:
    return Session(
        id=session_id,
        cycle_id=kwargs.pop("cycle_id", "cycle1"),
        order=order,
        date=dt.date.fromisoformat(date),
        time=time,
        theme=kwargs.pop("theme", f"Thème {session_id}"),
        **kwargs,
    )


def make_cycle(sessions, cycle_id="cycle1", class_id="classe1", level=Level.TC) -> Cycle:
    return Cycle(
        id=cycle_id,
        class_id=class_id,
        class_name="TC A",
        level=level,
        activity="Basket-ball",
        module=1,
        semester=1,
        planned_sessions=len(sessions),
        sessions=sessions,
    )


def make_class(class_id="classe1", name="TC A", level=Level.TC, slots=None) -> SchoolClass:
    if slots is None:
        slots = [TimeSlot(weekday=MONDAY, start="09:30", duration_min=60)]
    return SchoolClass(id=class_id, name=name, level=level, time_slots=slots)


def monday_cycle() -> Cycle:
    """Cycle de 4 séances hebdomadaires, le lundi à partir du 2025-09-01."""
    return make_cycle([
        make_session("s1", "2025-09-01", 1),
        make_session("s2", "2025-09-08", 2),
        make_session("s3", "2025-09-15", 3),
        make_session("s4", "2025-09-22", 4),
    ])
