"""
Tests du magasin d'état : document JSON en base (SQLite en mémoire) et
magasin en mémoire.
"""

from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from conftest import make_class, monday_cycle

import eps_planner.models  # noqa: F401
from eps_planner.database import Base
from eps_planner.models.document import Document
from eps_planner.schemas.absence import Absence, AbsenceUpdate
from eps_planner.schemas.state import EpsState
from eps_planner.services.absence_service import update_absence
from eps_planner.store import InMemoryStore, SqlDocumentStore


@pytest.fixture
def db():
    engine = create_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine)()
    yield session
    session.close()
    engine.dispose()


def make_state() -> EpsState:
    return EpsState(
        classes=[make_class()],
        cycles=[monday_cycle()],
        absences=[Absence(id="abs1", start_date=date(2025, 9, 8), end_date=date(2025, 9, 8))],
    )


# --- SqlDocumentStore ---

def test_document_absent_etat_vide(db):
    state = SqlDocumentStore(db, key="test").load()
    assert state == EpsState()


def test_save_puis_load(db):
    store = SqlDocumentStore(db, key="test")
    store.save(make_state())

    loaded = store.load()
    assert loaded.get_class("classe1").time_slots[0].start == "09:30"
    assert loaded.get_cycle("cycle1").sessions[1].date == date(2025, 9, 8)
    assert loaded.get_absence("abs1") is not None


def test_save_remplace_le_document(db):
    store = SqlDocumentStore(db, key="test")
    store.save(make_state())
    store.save(EpsState(classes=[make_class(name="TC B")]))

    assert db.query(Document).count() == 1
    loaded = store.load()
    assert [c.name for c in loaded.classes] == ["TC B"]
    assert loaded.cycles == []


def test_mise_a_jour_null_rechargeable(db):
    """Un PUT avec un champ à null ne doit pas corrompre le document persisté."""
    store = SqlDocumentStore(db, key="test")
    store.save(make_state())
    update_absence(store, "abs1", AbsenceUpdate.model_validate({"start_date": None, "end_date": None}))

    loaded = store.load()
    assert loaded.get_absence("abs1").start_date == date(2025, 9, 8)
    assert loaded.get_absence("abs1").end_date == date(2025, 9, 8)


def test_cles_independantes(db):
    SqlDocumentStore(db, key="a").save(make_state())
    assert SqlDocumentStore(db, key="b").load() == EpsState()


def test_cle_par_defaut(db):
    assert SqlDocumentStore(db).key == "eps:data"


# --- InMemoryStore ---

def test_memoire_copie_isolee():
    store = InMemoryStore(make_state())
    state = store.load()
    state.classes.clear()

    assert len(store.load().classes) == 1


def test_memoire_save():
    store = InMemoryStore()
    state = store.load()
    state.classes.append(make_class())
    store.save(state)
    state.classes.clear()

    assert [c.id for c in store.load().classes] == ["classe1"]
