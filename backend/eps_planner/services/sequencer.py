"""
Séquenceur de séances : tri chronologique et renumérotation.
"""

from typing import List

from eps_planner.schemas.cycle import Session, SessionStatus


def _status_at(session: Session, is_last: bool, cycle_evaluated: bool) -> SessionStatus:
    # Le statut « Évaluée » suit la séance due pour l'évaluation
    if not cycle_evaluated:
        return session.status
    if is_last:
        return SessionStatus.EVALUATED
    if session.status == SessionStatus.EVALUATED:
        return SessionStatus.ATTENDANCE_TAKEN if session.attendance else SessionStatus.PLANNED
    return session.status


def normalize(sessions: List[Session]) -> List[Session]:
    """
    Trie les séances par date croissante (à date égale, par numéro actuel),
    renumérote 1..N et marque la dernière comme due pour l'évaluation.

    Si le cycle a déjà été évalué, le statut « Évaluée » est reporté sur la
    nouvelle dernière séance ; l'ancienne retrouve « Appel fait » ou « Planifiée ».
    Fonction pure et idempotente : les séances d'entrée ne sont pas modifiées.
    """
    ordered = sorted(sessions, key=lambda s: (s.date, s.order))
    last = len(ordered) - 1
    evaluated = any(s.status == SessionStatus.EVALUATED for s in ordered)
    return [
        s.model_copy(update={
            "order": idx + 1,
            "evaluation_due": idx == last,
            "status": _status_at(s, idx == last, evaluated),
        })
        for idx, s in enumerate(ordered)
    ]
