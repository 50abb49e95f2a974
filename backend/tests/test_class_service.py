"""
Tests unitaires pour le service de gestion des classes et des élèves.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from conftest import make_class, monday_cycle

from eps_planner.schemas.evaluation import Dims, Evaluation
from eps_planner.schemas.school_class import (
    ClassCreate,
    ClassUpdate,
    Level,
    StudentCreate,
    StudentUpdate,
    TimeSlot,
)
from eps_planner.schemas.state import EpsState
from eps_planner.services.class_service import (
    add_student,
    create_class,
    delete_class,
    delete_student,
    get_class,
    get_classes,
    get_students,
    update_class,
    update_student,
)
from eps_planner.store import InMemoryStore


def make_store() -> InMemoryStore:
    return InMemoryStore(EpsState(classes=[make_class()], cycles=[monday_cycle()]))


# --- Validation des schémas ---

def test_class_create_nom_vide_rejete():
    with pytest.raises(ValidationError):
        ClassCreate(name="   ", level=Level.TC)


def test_class_create_nom_valide():
    c = ClassCreate(name="  TC A  ", level="TC")
    assert c.name == "TC A"  # strip appliqué


def test_class_create_niveau_inconnu():
    with pytest.raises(ValidationError):
        ClassCreate(name="TC A", level="3ème")


def test_class_create_deux_horaires_meme_jour():
    with pytest.raises(ValidationError):
        ClassCreate(name="TC A", level=Level.TC, time_slots=[
            TimeSlot(weekday=1, start="09:30"),
            TimeSlot(weekday=1, start="14:00"),
        ])


@pytest.mark.parametrize("start", ["9h30", "24:00", "09:60", ""])
def test_horaire_heure_invalide(start):
    with pytest.raises(ValidationError):
        TimeSlot(weekday=1, start=start)


@pytest.mark.parametrize("weekday", [-1, 7])
def test_horaire_jour_invalide(weekday):
    with pytest.raises(ValidationError):
        TimeSlot(weekday=weekday, start="09:30")


def test_horaire_duree_par_defaut():
    assert TimeSlot(weekday=0, start="08:00").duration_min == 60


# ============================================================
# Classes
# ============================================================

def test_create_class_succes():
    store = InMemoryStore()
    result = create_class(store, ClassCreate(
        name="1BAC SE", level=Level.FIRST_YEAR,
        time_slots=[TimeSlot(weekday=3, start="10:00", duration_min=120)],
    ))

    assert result.name == "1BAC SE"
    assert result.nb_students == 0
    assert result.nb_cycles == 0
    assert len(store.load().classes) == 1


def test_create_class_nom_duplique():
    store = make_store()
    with pytest.raises(ValueError, match="existe déjà"):
        create_class(store, ClassCreate(name="TC A", level=Level.TC))
    assert len(store.load().classes) == 1


def test_get_classes_triees_avec_compteurs():
    store = InMemoryStore(EpsState(
        classes=[make_class("c2", "TC B"), make_class("classe1", "TC A")],
        cycles=[monday_cycle()],
    ))
    add_student(store, "classe1", StudentCreate(last_name="Alaoui"))

    classes = get_classes(store)
    assert [c.name for c in classes] == ["TC A", "TC B"]
    assert (classes[0].nb_students, classes[0].nb_cycles) == (1, 1)
    assert (classes[1].nb_students, classes[1].nb_cycles) == (0, 0)


def test_get_class_introuvable():
    assert get_class(make_store(), "inconnue") is None


def test_update_class_renomme_les_cycles():
    store = make_store()
    result = update_class(store, "classe1", ClassUpdate(name="TC Sciences"))

    assert result.name == "TC Sciences"
    assert store.load().get_cycle("cycle1").class_name == "TC Sciences"
    assert store.load().get_class("classe1").time_slots[0].start == "09:30"


def test_update_class_horaires():
    store = make_store()
    result = update_class(store, "classe1", ClassUpdate(time_slots=[TimeSlot(weekday=2, start="15:00")]))

    assert [s.weekday for s in result.time_slots] == [2]
    assert result.name == "TC A"


def test_update_class_nom_duplique():
    store = InMemoryStore(EpsState(classes=[make_class(), make_class("c2", "TC B")]))
    with pytest.raises(ValueError):
        update_class(store, "c2", ClassUpdate(name="TC A"))


def test_update_class_introuvable():
    assert update_class(make_store(), "inconnue", ClassUpdate(name="X")) is None


def test_delete_class_cascade():
    store = make_store()
    student = add_student(store, "classe1", StudentCreate(last_name="Alaoui"))
    state = store.load()
    state.evaluations.append(Evaluation(
        student_id=student.id, cycle_id="cycle1", dims=Dims(motricite=10),
        final_grade=6.0, evaluated_at=date(2025, 10, 1),
    ))
    store.save(state)

    assert delete_class(store, "classe1") is True
    state = store.load()
    assert state.classes == []
    assert state.students == []
    assert state.cycles == []
    assert state.evaluations == []


def test_delete_class_introuvable():
    assert delete_class(make_store(), "inconnue") is False


# ============================================================
# Élèves
# ============================================================

def test_add_student_niveau_de_la_classe():
    store = InMemoryStore(EpsState(classes=[make_class(level=Level.SECOND_YEAR)]))
    student = add_student(store, "classe1", StudentCreate(last_name=" Alaoui ", first_name="Sara", number=3))

    assert student.last_name == "Alaoui"
    assert student.level == Level.SECOND_YEAR
    assert student.display_name == "Alaoui Sara"
    assert student.active is True


def test_add_student_classe_introuvable():
    with pytest.raises(ValueError, match="Classe introuvable"):
        add_student(make_store(), "inconnue", StudentCreate(last_name="Alaoui"))


def test_get_students_tri_et_filtre():
    store = make_store()
    add_student(store, "classe1", StudentCreate(last_name="Sans numéro"))
    add_student(store, "classe1", StudentCreate(last_name="Bennani", number=2))
    inactive = add_student(store, "classe1", StudentCreate(last_name="Alaoui", number=1))
    update_student(store, inactive.id, StudentUpdate(active=False))

    assert [s.last_name for s in get_students(store, "classe1")] == ["Alaoui", "Bennani", "Sans numéro"]
    assert [s.last_name for s in get_students(store, "classe1", active_only=True)] == ["Bennani", "Sans numéro"]


def test_update_student_champs_fournis_seulement():
    store = make_store()
    student = add_student(store, "classe1", StudentCreate(last_name="Alaoui", first_name="Sara"))
    updated = update_student(store, student.id, StudentUpdate(number=7))

    assert updated.number == 7
    assert updated.first_name == "Sara"


def test_update_student_champ_null_ignore():
    store = make_store()
    student = add_student(store, "classe1", StudentCreate(last_name="Alaoui", first_name="Sara"))
    update_student(store, student.id, StudentUpdate.model_validate({"last_name": None, "active": None, "number": 3}))

    stored = store.load().get_student(student.id)
    assert stored.last_name == "Alaoui"
    assert stored.active is True
    assert stored.number == 3


def test_update_student_introuvable():
    assert update_student(make_store(), "inconnu", StudentUpdate(number=1)) is None


def test_delete_student_supprime_ses_evaluations():
    store = make_store()
    student = add_student(store, "classe1", StudentCreate(last_name="Alaoui"))
    state = store.load()
    state.evaluations.append(Evaluation(
        student_id=student.id, cycle_id="cycle1", dims=Dims(),
        final_grade=0.0, evaluated_at=date(2025, 10, 1),
    ))
    store.save(state)

    assert delete_student(store, student.id) is True
    assert store.load().students == []
    assert store.load().evaluations == []


def test_delete_student_introuvable():
    assert delete_student(make_store(), "inconnu") is False
