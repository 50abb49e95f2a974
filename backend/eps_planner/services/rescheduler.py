"""
Moteur de reprogrammation des séances suite à une absence du professeur.

Stratégie unique : chaque séance impactée est déplacée vers le premier créneau
hebdomadaire de la classe, strictement postérieur à sa date, hors de toute
fenêtre d'absence et non occupé par une autre séance du cycle.

Chaque déplacement est tracé dans l'historique de la séance
(`reschedule_history`) ; les champs `is_rescheduled`, `absence_origin_id` et
`original_date` reflètent le déplacement le plus récent. L'annulation
(`reverse`) retire l'entrée de l'absence concernée et restaure la date.
"""

import datetime as dt
import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Protocol, Set, Tuple

from eps_planner.schemas.absence import Absence
from eps_planner.schemas.cycle import Cycle, RescheduleEntry, Session
from eps_planner.schemas.school_class import TimeSlot
from eps_planner.services.sequencer import normalize
from eps_planner.services.slot_generator import MAX_WEEKS, Slot, generate_slots, slot_key

logger = logging.getLogger(__name__)

DateWindow = Tuple[dt.date, dt.date]


class RescheduleStrategy(Protocol):
    def candidates(self, after: dt.date) -> Iterator[Slot]:
        """Créneaux candidats strictement postérieurs à `after`, par ordre chronologique."""
        ...


class WeeklyPatternStrategy:
    """Candidats issus des horaires hebdomadaires de la classe."""

    def __init__(self, patterns: Iterable[TimeSlot], max_weeks: int = MAX_WEEKS):
        self.patterns = list(patterns)
        self.max_weeks = max_weeks

    def candidates(self, after: dt.date) -> Iterator[Slot]:
        return generate_slots(after + dt.timedelta(days=1), self.patterns, max_weeks=self.max_weeks)


@dataclass
class RescheduleResult:
    cycle: Cycle
    moved_count: int
    unplaced_session_ids: List[str] = field(default_factory=list)


def reschedule(
    cycle: Cycle,
    absence: Absence,
    patterns: Optional[Iterable[TimeSlot]] = None,
    blocked_windows: Iterable[DateWindow] = (),
    strategy: Optional[RescheduleStrategy] = None,
) -> RescheduleResult:
    """
    Reprogramme les séances du cycle situées dans l'absence.

    Étapes :
    1. Trier les séances (séquenceur)
    2. Repérer les séances impactées (dans l'intervalle, non verrouillées,
       pas déjà déplacées par cette même absence)
    3. Construire l'ensemble des créneaux occupés par les autres séances
    4. Affecter à chaque séance impactée, dans l'ordre chronologique, le premier
       créneau libre hors absences, puis le marquer occupé
    5. Re-trier et renuméroter

    Une séance sans créneau disponible (classe sans horaire, horizon épuisé)
    reste en place et figure dans `unplaced_session_ids`.
    """
    sessions = normalize(cycle.sessions)
    impacted_ids = {s.id for s in sessions if is_impacted(s, absence)}
    if not impacted_ids:
        return RescheduleResult(cycle=cycle, moved_count=0)

    if strategy is None:
        strategy = WeeklyPatternStrategy(patterns or [])
    windows = [(absence.start_date, absence.end_date), *blocked_windows]
    occupied = {slot_key(s.date, s.time) for s in sessions if s.id not in impacted_ids}

    moved_count = 0
    unplaced: List[str] = []
    result: List[Session] = []
    for session in sessions:
        if session.id not in impacted_ids:
            result.append(session)
            continue

        slot = _first_free_slot(strategy.candidates(session.date), windows, occupied)
        if slot is None:
            unplaced.append(session.id)
            occupied.add(slot_key(session.date, session.time))
            result.append(session)
            continue

        occupied.add(slot)
        result.append(_move(session, slot, absence.id))
        moved_count += 1

    if unplaced:
        logger.warning(
            "Cycle %s : %d séance(s) sans créneau disponible pour l'absence %s",
            cycle.id, len(unplaced), absence.id,
        )
    if moved_count == 0:
        return RescheduleResult(cycle=cycle, moved_count=0, unplaced_session_ids=unplaced)

    logger.info(
        "Cycle %s : %d séance(s) reportée(s) pour l'absence %s",
        cycle.id, moved_count, absence.id,
    )
    return RescheduleResult(
        cycle=cycle.model_copy(update={"sessions": normalize(result)}),
        moved_count=moved_count,
        unplaced_session_ids=unplaced,
    )


def reverse(cycle: Cycle, absence_id: str) -> Cycle:
    """
    Annule les déplacements causés par une absence.
    Idempotent : un second appel ne trouve plus de séance marquée.
    """
    changed = False
    sessions = []
    for session in cycle.sessions:
        history = _history(session)
        idx = next((i for i, e in enumerate(history) if e.absence_id == absence_id), None)
        if idx is None:
            sessions.append(session)
            continue
        sessions.append(_unwind(session, history, idx))
        changed = True

    if not changed:
        return cycle
    return cycle.model_copy(update={"sessions": normalize(sessions)})


def is_impacted(session: Session, absence: Absence) -> bool:
    return (
        absence.covers(session.date)
        and not session.locked
        and not moved_by(session, absence.id)
    )


def moved_by(session: Session, absence_id: str) -> bool:
    """Garde de ré-entrance : la séance a-t-elle déjà été déplacée par cette absence ?"""
    return session.absence_origin_id == absence_id or any(
        e.absence_id == absence_id for e in session.reschedule_history
    )


def _first_free_slot(
    candidates: Iterator[Slot],
    windows: List[DateWindow],
    occupied: Set[Slot],
) -> Optional[Slot]:
    for candidate in candidates:
        if any(start <= candidate.date <= end for start, end in windows):
            continue
        if candidate in occupied:
            continue
        return candidate
    return None


def _move(session: Session, slot: Slot, absence_id: str) -> Session:
    entry = RescheduleEntry(
        absence_id=absence_id,
        from_date=session.date,
        from_time=session.time,
        to_date=slot.date,
        to_time=slot.time,
    )
    history = [*_history(session), entry]
    return session.model_copy(update={"date": slot.date, "time": slot.time, **_provenance(history)})


def _history(session: Session) -> List[RescheduleEntry]:
    """Historique des déplacements ; reconstitué depuis les champs simples pour les anciens documents."""
    if session.reschedule_history:
        return list(session.reschedule_history)
    if session.absence_origin_id and session.original_date:
        return [RescheduleEntry(
            absence_id=session.absence_origin_id,
            from_date=session.original_date,
            from_time=session.time,
            to_date=session.date,
            to_time=session.time,
        )]
    return []


def _unwind(session: Session, history: List[RescheduleEntry], idx: int) -> Session:
    entry = history[idx]
    remaining = history[:idx] + history[idx + 1:]
    update = {}
    if idx == len(history) - 1:
        update["date"] = entry.from_date
        update["time"] = entry.from_time
    else:
        # Un déplacement plus récent subsiste : il hérite du point de départ retiré
        remaining[idx] = remaining[idx].model_copy(
            update={"from_date": entry.from_date, "from_time": entry.from_time}
        )
    update.update(_provenance(remaining))
    return session.model_copy(update=update)


def _provenance(history: List[RescheduleEntry]) -> dict:
    if not history:
        return {
            "is_rescheduled": False,
            "absence_origin_id": None,
            "original_date": None,
            "reschedule_history": [],
        }
    latest = history[-1]
    return {
        "is_rescheduled": True,
        "absence_origin_id": latest.absence_id,
        "original_date": latest.from_date,
        "reschedule_history": history,
    }
