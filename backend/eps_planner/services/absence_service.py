"""
Service métier pour les absences du professeur.

Cycle de vie : en_attente → approuve (déclenche la reprogrammation de tous les
cycles) ou refuse. La suppression d'une absence validée annule d'abord ses
reports. Chaque opération lit l'état complet, calcule le nouvel état et
l'écrit en une fois.
"""

import datetime as dt
import logging
from datetime import datetime, timezone
from typing import List, Optional

from eps_planner.config import settings
from eps_planner.schemas.absence import (
    Absence,
    AbsenceCreate,
    AbsenceStatus,
    AbsenceUpdate,
    ApprovalResult,
)
from eps_planner.schemas.state import EpsState
from eps_planner.services.rescheduler import WeeklyPatternStrategy, reschedule, reverse
from eps_planner.store import StateStore

logger = logging.getLogger(__name__)


class InvalidDateRange(ValueError):
    """La date de début est postérieure à la date de fin."""


def validate_dates(start_date: dt.date, end_date: dt.date) -> None:
    if start_date > end_date:
        raise InvalidDateRange("La date de début doit être antérieure ou égale à la date de fin.")


def create_absence(store: StateStore, data: AbsenceCreate) -> Absence:
    """Enregistre une absence en attente. Lève InvalidDateRange avant toute écriture."""
    validate_dates(data.start_date, data.end_date)

    state = store.load()
    absence = Absence(**data.model_dump(), created_at=datetime.now(timezone.utc))
    state.absences.append(absence)
    store.save(state)

    logger.info("Absence créée : %s (%s → %s)", absence.id, absence.start_date, absence.end_date)
    return absence


def get_absences(store: StateStore) -> List[Absence]:
    """Retourne toutes les absences, de la plus récente à la plus ancienne."""
    return sorted(store.load().absences, key=lambda a: a.start_date, reverse=True)


def get_absence(store: StateStore, absence_id: str) -> Optional[Absence]:
    return store.load().get_absence(absence_id)


def update_absence(store: StateStore, absence_id: str, data: AbsenceUpdate) -> Optional[Absence]:
    """
    Met à jour les champs fournis d'une absence.
    Les dates d'une absence validée ne peuvent pas changer : il faut la supprimer
    (ce qui annule ses reports) puis la recréer.
    """
    state = store.load()
    absence = state.get_absence(absence_id)
    if absence is None:
        return None

    update_data = data.model_dump(exclude_unset=True, exclude_none=True)
    start_date = update_data.get("start_date") or absence.start_date
    end_date = update_data.get("end_date") or absence.end_date
    validate_dates(start_date, end_date)

    if absence.status == AbsenceStatus.APPROVED and (start_date, end_date) != (absence.start_date, absence.end_date):
        raise ValueError(
            "Impossible de modifier les dates d'une absence validée : "
            "supprimez-la puis créez-en une nouvelle."
        )

    for field, value in update_data.items():
        setattr(absence, field, value)
    store.save(state)
    return absence


def approve_absence(store: StateStore, absence_id: str) -> Optional[ApprovalResult]:
    """
    Valide une absence et reprogramme les séances impactées de chaque cycle.

    Les autres absences validées sont des fenêtres interdites pour les nouveaux
    créneaux. Une seconde validation est sans effet (séances déjà marquées).
    """
    state = store.load()
    absence = state.get_absence(absence_id)
    if absence is None:
        return None

    blocked = [
        (a.start_date, a.end_date)
        for a in state.absences
        if a.status == AbsenceStatus.APPROVED and a.id != absence.id
    ]
    now = datetime.now(timezone.utc)

    moved_count = 0
    unplaced_count = 0
    missing_schedule = False
    cycles_modified: List[str] = []
    impacted = list(absence.impacted_session_ids)

    for idx, cycle in enumerate(state.cycles):
        school_class = state.get_class(cycle.class_id)
        patterns = school_class.time_slots if school_class else []
        strategy = WeeklyPatternStrategy(patterns, settings.RESCHEDULE_HORIZON_WEEKS)

        result = reschedule(cycle, absence, blocked_windows=blocked, strategy=strategy)
        unplaced_count += len(result.unplaced_session_ids)
        if result.unplaced_session_ids and not patterns:
            missing_schedule = True
        if result.moved_count == 0:
            continue

        moved_count += result.moved_count
        cycles_modified.append(cycle.id)
        state.cycles[idx] = result.cycle.model_copy(update={"updated_at": now})
        for session in result.cycle.sessions:
            if session.absence_origin_id == absence.id and session.id not in impacted:
                impacted.append(session.id)

    absence.status = AbsenceStatus.APPROVED
    absence.impacted_session_ids = impacted
    store.save(state)

    message = _approval_message(moved_count, unplaced_count, missing_schedule)
    logger.info(
        "Absence %s validée : %d séance(s) reportée(s), %d non reportée(s), %d cycle(s) modifié(s)",
        absence.id, moved_count, unplaced_count, len(cycles_modified),
    )
    return ApprovalResult(
        absence_id=absence.id,
        moved_count=moved_count,
        unplaced_count=unplaced_count,
        cycles_modified=cycles_modified,
        message=message,
    )


def reject_absence(store: StateStore, absence_id: str) -> Optional[Absence]:
    """
    Refuse une absence. Sans effet sur les cycles, sauf si elle était validée :
    ses reports sont alors annulés.
    """
    state = store.load()
    absence = state.get_absence(absence_id)
    if absence is None:
        return None

    if absence.status == AbsenceStatus.APPROVED:
        _reverse_all(state, absence.id)
        absence.impacted_session_ids = []
    absence.status = AbsenceStatus.REJECTED
    store.save(state)
    logger.info("Absence refusée : %s", absence.id)
    return absence


def delete_absence(store: StateStore, absence_id: str) -> bool:
    """
    Supprime une absence. Si elle était validée, les séances qu'elle a
    reportées retrouvent d'abord leur date d'origine.
    Retourne True si supprimée, False si introuvable.
    """
    state = store.load()
    absence = state.get_absence(absence_id)
    if absence is None:
        return False

    restored = 0
    if absence.status == AbsenceStatus.APPROVED:
        restored = _reverse_all(state, absence.id)
    state.absences = [a for a in state.absences if a.id != absence_id]
    store.save(state)

    logger.info("Absence supprimée : %s — %d cycle(s) restauré(s)", absence_id, restored)
    return True


def get_absences_in_progress(store: StateStore, today: Optional[dt.date] = None) -> List[Absence]:
    """Absences validées couvrant la date du jour."""
    today = today or dt.date.today()
    return [
        a for a in store.load().absences
        if a.status == AbsenceStatus.APPROVED and a.covers(today)
    ]


def _reverse_all(state: EpsState, absence_id: str) -> int:
    """Annule les reports d'une absence sur tous les cycles ; retourne le nombre de cycles modifiés."""
    now = datetime.now(timezone.utc)
    restored = 0
    for idx, cycle in enumerate(state.cycles):
        reverted = reverse(cycle, absence_id)
        if reverted is not cycle:
            state.cycles[idx] = reverted.model_copy(update={"updated_at": now})
            restored += 1
    return restored


def _approval_message(moved_count: int, unplaced_count: int, missing_schedule: bool) -> str:
    if moved_count > 0:
        message = f"Planification ajustée : {moved_count} séance(s) reportée(s)."
        if unplaced_count:
            message += f" {unplaced_count} séance(s) n'ont pas pu être reportées."
        return message
    if missing_schedule:
        return "Impossible de reporter : aucun horaire hebdomadaire défini pour la classe."
    if unplaced_count:
        return f"Impossible de reporter {unplaced_count} séance(s) : aucun créneau libre."
    return "Absence validée. Aucune séance à reporter pour cette période."
