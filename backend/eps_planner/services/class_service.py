"""
Service métier pour la gestion des classes EPS et de leurs élèves.
"""

import logging
from typing import List, Optional

from eps_planner.schemas.school_class import (
    ClassCreate,
    ClassResponse,
    ClassUpdate,
    SchoolClass,
    Student,
    StudentCreate,
    StudentUpdate,
)
from eps_planner.schemas.state import EpsState
from eps_planner.store import StateStore

logger = logging.getLogger(__name__)


def create_class(store: StateStore, data: ClassCreate) -> ClassResponse:
    """
    Crée une nouvelle classe avec ses horaires hebdomadaires.
    Lève une ValueError si le nom existe déjà.
    """
    state = store.load()
    if any(c.name == data.name for c in state.classes):
        raise ValueError(f"Une classe avec le nom '{data.name}' existe déjà.")

    school_class = SchoolClass(**data.model_dump())
    state.classes.append(school_class)
    store.save(state)

    logger.info("Classe créée : %s (%s) — %d horaire(s)", school_class.name, school_class.id, len(school_class.time_slots))
    return _to_response(state, school_class)


def get_classes(store: StateStore) -> List[ClassResponse]:
    """Retourne toutes les classes, triées par nom."""
    state = store.load()
    return [_to_response(state, c) for c in sorted(state.classes, key=lambda c: c.name)]


def get_class(store: StateStore, class_id: str) -> Optional[ClassResponse]:
    """Retourne une classe par son ID, ou None si inexistante."""
    state = store.load()
    school_class = state.get_class(class_id)
    if school_class is None:
        return None
    return _to_response(state, school_class)


def update_class(store: StateStore, class_id: str, data: ClassUpdate) -> Optional[ClassResponse]:
    """
    Met à jour les champs fournis d'une classe.
    Un changement de nom est répercuté sur les cycles (nom dénormalisé).
    Les nouveaux horaires servent aux prochaines reprogrammations ; les séances
    déjà planifiées ne sont pas déplacées.
    """
    state = store.load()
    school_class = state.get_class(class_id)
    if school_class is None:
        return None

    update_data = {
        field: getattr(data, field)
        for field in data.model_fields_set
        if getattr(data, field) is not None
    }
    new_name = update_data.get("name")
    if new_name and any(c.name == new_name and c.id != class_id for c in state.classes):
        raise ValueError("Une classe avec ce nom existe déjà.")

    for field, value in update_data.items():
        setattr(school_class, field, value)
    if new_name:
        for cycle in state.cycles:
            if cycle.class_id == class_id:
                cycle.class_name = new_name

    store.save(state)
    return _to_response(state, school_class)


def delete_class(store: StateStore, class_id: str) -> bool:
    """
    Supprime une classe avec ses élèves, ses cycles et leurs évaluations.
    Retourne True si supprimé, False si introuvable.
    """
    state = store.load()
    if state.get_class(class_id) is None:
        return False

    cycle_ids = {c.id for c in state.cycles if c.class_id == class_id}
    state.classes = [c for c in state.classes if c.id != class_id]
    state.students = [s for s in state.students if s.class_id != class_id]
    state.cycles = [c for c in state.cycles if c.class_id != class_id]
    state.evaluations = [e for e in state.evaluations if e.cycle_id not in cycle_ids]
    store.save(state)

    logger.info("Classe supprimée : %s — %d cycle(s) supprimé(s)", class_id, len(cycle_ids))
    return True


# --- Gestion des élèves ---

def add_student(store: StateStore, class_id: str, data: StudentCreate) -> Student:
    """Ajoute un élève à une classe. Le niveau de l'élève est celui de la classe."""
    state = store.load()
    school_class = state.get_class(class_id)
    if school_class is None:
        raise ValueError("Classe introuvable.")

    student = Student(class_id=class_id, level=school_class.level, **data.model_dump())
    state.students.append(student)
    store.save(state)
    return student


def get_students(store: StateStore, class_id: str, active_only: bool = False) -> List[Student]:
    """Élèves d'une classe, triés par numéro puis par nom."""
    students = [s for s in store.load().students if s.class_id == class_id]
    if active_only:
        students = [s for s in students if s.active]
    return sorted(students, key=lambda s: (s.number is None, s.number or 0, s.last_name))


def update_student(store: StateStore, student_id: str, data: StudentUpdate) -> Optional[Student]:
    state = store.load()
    student = state.get_student(student_id)
    if student is None:
        return None

    for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(student, field, value)
    store.save(state)
    return student


def delete_student(store: StateStore, student_id: str) -> bool:
    """Supprime un élève et ses évaluations. Retourne True si supprimé, False si introuvable."""
    state = store.load()
    if state.get_student(student_id) is None:
        return False

    state.students = [s for s in state.students if s.id != student_id]
    state.evaluations = [e for e in state.evaluations if e.student_id != student_id]
    store.save(state)
    return True


def _to_response(state: EpsState, school_class: SchoolClass) -> ClassResponse:
    """Construit le schéma de réponse avec les compteurs élèves et cycles."""
    return ClassResponse(
        id=school_class.id,
        name=school_class.name,
        level=school_class.level,
        time_slots=school_class.time_slots,
        nb_students=sum(1 for s in state.students if s.class_id == school_class.id),
        nb_cycles=sum(1 for c in state.cycles if c.class_id == school_class.id),
    )
