"""
Service métier pour les cycles d'apprentissage.
Création (une classe ou toutes les classes d'un niveau), lecture, modification
et suppression.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from eps_planner.data.curriculum import session_themes, theme_for
from eps_planner.schemas.cycle import Cycle, CycleCreate, CycleUpdate, Session
from eps_planner.schemas.school_class import SchoolClass
from eps_planner.services.sequencer import normalize
from eps_planner.services.slot_generator import generate_slots
from eps_planner.store import StateStore

logger = logging.getLogger(__name__)


def create_cycles(store: StateStore, data: CycleCreate) -> List[Cycle]:
    """
    Crée un cycle par classe ciblée.

    Étapes :
    1. Résoudre les classes (une classe précise, ou toutes celles du niveau)
    2. Générer les dates des séances depuis les horaires hebdomadaires
    3. Nommer chaque séance avec l'objectif correspondant du référentiel
    4. Trier / numéroter (la dernière séance porte l'évaluation)

    Les classes sans horaire sont ignorées lors d'une création par niveau ;
    pour une classe précise, une ValueError est levée.
    """
    state = store.load()

    if data.class_id is not None:
        school_class = state.get_class(data.class_id)
        if school_class is None:
            raise ValueError("Classe introuvable.")
        if not school_class.time_slots:
            raise ValueError(
                f"La classe '{school_class.name}' n'a aucun horaire hebdomadaire : "
                "impossible de planifier les séances."
            )
        targets = [school_class]
    else:
        targets = [c for c in state.classes if c.level == data.level]

    now = datetime.now(timezone.utc)
    created = []
    for school_class in targets:
        if not school_class.time_slots:
            logger.warning("Classe %s ignorée : aucun horaire hebdomadaire", school_class.name)
            continue
        cycle = _build_cycle(school_class, data)
        cycle.updated_at = now
        created.append(cycle)

    state.cycles.extend(created)
    store.save(state)

    logger.info(
        "%d cycle(s) créé(s) — %s, module %d, %d séances",
        len(created), data.activity, data.module, data.planned_sessions,
    )
    return created


def get_cycles(store: StateStore, class_id: Optional[str] = None) -> List[Cycle]:
    """Retourne les cycles (éventuellement d'une classe), triés par classe, semestre puis module."""
    cycles = store.load().cycles
    if class_id is not None:
        cycles = [c for c in cycles if c.class_id == class_id]
    return sorted(cycles, key=lambda c: (c.class_name, c.semester, c.module))


def get_cycle(store: StateStore, cycle_id: str) -> Optional[Cycle]:
    return store.load().get_cycle(cycle_id)


def update_cycle(store: StateStore, cycle_id: str, data: CycleUpdate) -> Optional[Cycle]:
    """Met à jour les champs fournis d'un cycle (les séances ne sont pas touchées)."""
    state = store.load()
    cycle = state.get_cycle(cycle_id)
    if cycle is None:
        return None

    for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(cycle, field, value)
    cycle.updated_at = datetime.now(timezone.utc)
    store.save(state)
    return cycle


def delete_cycle(store: StateStore, cycle_id: str) -> bool:
    """
    Supprime un cycle, ses séances et les évaluations qui lui sont rattachées.
    Retourne True si supprimé, False si introuvable.
    """
    state = store.load()
    if state.get_cycle(cycle_id) is None:
        return False

    state.cycles = [c for c in state.cycles if c.id != cycle_id]
    state.evaluations = [e for e in state.evaluations if e.cycle_id != cycle_id]
    store.save(state)
    logger.info("Cycle supprimé : %s", cycle_id)
    return True


def _build_cycle(school_class: SchoolClass, data: CycleCreate) -> Cycle:
    cycle_id = str(uuid.uuid4())
    themes = session_themes(school_class.level, data.module, data.activity)
    slots = generate_slots(data.start_date, school_class.time_slots, count=data.planned_sessions)

    sessions = [
        Session(
            cycle_id=cycle_id,
            order=idx + 1,
            date=slot.date,
            time=slot.time,
            theme=theme_for(themes, idx),
        )
        for idx, slot in enumerate(slots)
    ]

    return Cycle(
        id=cycle_id,
        class_id=school_class.id,
        class_name=school_class.name,
        level=school_class.level,
        activity=data.activity,
        module=data.module,
        semester=data.semester,
        planned_sessions=data.planned_sessions,
        sessions=normalize(sessions),
    )
