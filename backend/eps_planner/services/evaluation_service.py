"""
Service métier pour les évaluations sommatives de fin de cycle.
La note finale est calculée par le barème du niveau du cycle (scoring).
"""

import datetime as dt
import logging
from typing import List, Optional

from eps_planner.schemas.cycle import SessionStatus
from eps_planner.schemas.evaluation import Evaluation, EvaluationCreate
from eps_planner.services.scoring import compute_final_grade
from eps_planner.store import StateStore

logger = logging.getLogger(__name__)


def record_evaluation(store: StateStore, data: EvaluationCreate) -> Evaluation:
    """
    Enregistre l'évaluation d'un élève pour un cycle.

    Une nouvelle saisie remplace la précédente pour le même couple (élève, cycle).
    La séance portant l'évaluation passe au statut « Évaluée ».
    Lève une ValueError si le cycle ou l'élève est introuvable.
    """
    state = store.load()
    cycle = state.get_cycle(data.cycle_id)
    if cycle is None:
        raise ValueError("Cycle introuvable.")
    student = state.get_student(data.student_id)
    if student is None or student.class_id != cycle.class_id:
        raise ValueError("Élève introuvable dans la classe du cycle.")

    evaluation = Evaluation(
        student_id=data.student_id,
        cycle_id=data.cycle_id,
        dims=data.dims,
        final_grade=compute_final_grade(cycle.level, data.dims),
        comment=data.comment,
        evaluated_at=data.evaluated_at or dt.date.today(),
    )
    state.evaluations = [
        e for e in state.evaluations
        if not (e.student_id == data.student_id and e.cycle_id == data.cycle_id)
    ]
    state.evaluations.append(evaluation)

    for session in cycle.sessions:
        if session.evaluation_due:
            session.status = SessionStatus.EVALUATED
    store.save(state)

    logger.info(
        "Évaluation enregistrée — élève %s, cycle %s : %.1f/20",
        student.id, cycle.id, evaluation.final_grade,
    )
    return evaluation


def get_evaluations(
    store: StateStore,
    cycle_id: Optional[str] = None,
    student_id: Optional[str] = None,
) -> List[Evaluation]:
    """Évaluations filtrées par cycle et/ou élève."""
    return [
        e for e in store.load().evaluations
        if (cycle_id is None or e.cycle_id == cycle_id)
        and (student_id is None or e.student_id == student_id)
    ]


def cycle_average(store: StateStore, cycle_id: str) -> Optional[float]:
    """Moyenne des notes finales d'un cycle, arrondie au centième ; None si aucune évaluation."""
    grades = [e.final_grade for e in get_evaluations(store, cycle_id=cycle_id)]
    if not grades:
        return None
    return round(sum(grades) / len(grades), 2)
