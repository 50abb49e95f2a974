"""
Service métier pour le suivi des séances : appel, cahier de texte,
verrouillage, séances du jour et taux de présence.
"""

import datetime as dt
import logging
from typing import List, Optional, Tuple

from eps_planner.schemas.cycle import (
    AttendanceEntry,
    AttendanceStatus,
    Cycle,
    DaySession,
    Journal,
    Session,
    SessionStatus,
)
from eps_planner.schemas.state import EpsState
from eps_planner.store import StateStore

logger = logging.getLogger(__name__)

# Statuts comptés comme présents dans le taux de présence
PRESENT_STATUSES = {AttendanceStatus.PRESENT, AttendanceStatus.LATE}


def build_roster(store: StateStore, cycle_id: str, session_id: str) -> Optional[List[AttendanceEntry]]:
    """
    Liste d'appel d'une séance : l'appel déjà saisi s'il existe, sinon tous les
    élèves actifs de la classe, marqués présents par défaut.
    """
    state = store.load()
    cycle, session = _find_session(state, cycle_id, session_id)
    if session is None:
        return None
    if session.attendance:
        return session.attendance

    students = sorted(
        (s for s in state.students if s.class_id == cycle.class_id and s.active),
        key=lambda s: (s.number is None, s.number or 0, s.last_name),
    )
    return [
        AttendanceEntry(student_id=s.id, name=s.display_name, status=AttendanceStatus.PRESENT)
        for s in students
    ]


def record_attendance(
    store: StateStore, cycle_id: str, session_id: str, entries: List[AttendanceEntry]
) -> Optional[Session]:
    """
    Enregistre l'appel d'une séance (remplace l'appel précédent).
    Lève une ValueError si un élève n'appartient pas à la classe du cycle.
    """
    state = store.load()
    cycle, session = _find_session(state, cycle_id, session_id)
    if session is None:
        return None

    class_students = {s.id for s in state.students if s.class_id == cycle.class_id}
    unknown = [e.student_id for e in entries if e.student_id not in class_students]
    if unknown:
        raise ValueError(f"Élève(s) hors de la classe : {', '.join(unknown)}")

    session.attendance = entries
    if session.status == SessionStatus.PLANNED:
        session.status = SessionStatus.ATTENDANCE_TAKEN
    store.save(state)

    logger.info(
        "Appel enregistré — cycle %s, séance %d : %d élèves, %d absents",
        cycle.id, session.order, len(entries),
        sum(1 for e in entries if e.status not in PRESENT_STATUSES),
    )
    return session


def update_journal(store: StateStore, cycle_id: str, session_id: str, journal: Journal) -> Optional[Session]:
    """Remplace le cahier de texte d'une séance."""
    state = store.load()
    _, session = _find_session(state, cycle_id, session_id)
    if session is None:
        return None

    session.journal = journal
    store.save(state)
    return session


def set_locked(store: StateStore, cycle_id: str, session_id: str, locked: bool) -> Optional[Session]:
    """Verrouille (ou déverrouille) une séance : une séance verrouillée n'est jamais reportée."""
    state = store.load()
    _, session = _find_session(state, cycle_id, session_id)
    if session is None:
        return None

    session.locked = locked
    store.save(state)
    return session


def lock_past_sessions(store: StateStore, today: Optional[dt.date] = None) -> int:
    """Verrouille toutes les séances dont la date est passée. Retourne le nombre de séances verrouillées."""
    today = today or dt.date.today()
    state = store.load()

    locked = 0
    for cycle in state.cycles:
        for session in cycle.sessions:
            if session.date < today and not session.locked:
                session.locked = True
                locked += 1

    if locked:
        store.save(state)
        logger.info("%d séance(s) passée(s) verrouillée(s)", locked)
    return locked


def sessions_on(store: StateStore, day: Optional[dt.date] = None) -> List[DaySession]:
    """Séances de tous les cycles tombant le jour donné (aujourd'hui par défaut), par heure croissante."""
    day = day or dt.date.today()
    found = [
        DaySession(
            cycle_id=cycle.id,
            class_id=cycle.class_id,
            class_name=cycle.class_name,
            activity=cycle.activity,
            session=session,
        )
        for cycle in store.load().cycles
        for session in cycle.sessions
        if session.date == day
    ]
    # Séances sans heure en tête, comme une heure vide
    return sorted(found, key=lambda d: (d.session.time or "", d.class_name))


def attendance_rate(cycle: Cycle, student_id: Optional[str] = None) -> float:
    """
    Pourcentage de présence (présents + retards) sur les séances où l'appel a été fait,
    pour tout le cycle ou pour un élève. Retourne 0 si aucun appel.
    """
    entries = [
        e for s in cycle.sessions for e in s.attendance
        if student_id is None or e.student_id == student_id
    ]
    if not entries:
        return 0.0
    present = sum(1 for e in entries if e.status in PRESENT_STATUSES)
    return round(100 * present / len(entries), 1)


def _find_session(state: EpsState, cycle_id: str, session_id: str) -> Tuple[Optional[Cycle], Optional[Session]]:
    cycle = state.get_cycle(cycle_id)
    if cycle is None:
        return None, None
    session = next((s for s in cycle.sessions if s.id == session_id), None)
    return cycle, session
