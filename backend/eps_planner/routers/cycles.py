"""
Router pour les cycles d'apprentissage et le suivi de leurs séances
(appel, cahier de texte, verrouillage).
"""

import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from eps_planner.data.aps_grids import aps_grid
from eps_planner.data.curriculum import curriculum_for
from eps_planner.database import get_store
from eps_planner.schemas.cycle import (
    AttendanceEntry,
    AttendanceUpdate,
    Cycle,
    CycleCreate,
    CycleUpdate,
    DaySession,
    Journal,
    Session,
)
from eps_planner.schemas.school_class import Level
from eps_planner.services import cycle_service, session_service
from eps_planner.store import StateStore

router = APIRouter(prefix="/api/v1/cycles", tags=["Cycles"])


@router.post("", response_model=List[Cycle], status_code=201, summary="Créer un ou plusieurs cycles")
def create_cycles(data: CycleCreate, store: StateStore = Depends(get_store)):
    """
    Crée un cycle pour une classe, ou un cycle par classe d'un niveau.
    Les dates des séances suivent les horaires hebdomadaires à partir de start_date.
    """
    try:
        return cycle_service.create_cycles(store, data)
    except ValueError as e:
        msg = str(e)
        if "introuvable" in msg:
            raise HTTPException(status_code=404, detail=msg)
        raise HTTPException(status_code=400, detail=msg)


@router.get("", response_model=List[Cycle], summary="Lister les cycles")
def list_cycles(class_id: Optional[str] = None, store: StateStore = Depends(get_store)):
    return cycle_service.get_cycles(store, class_id=class_id)


@router.get("/curriculum", summary="Référentiel des modules d'un niveau")
def get_curriculum(level: Level):
    """Modules du niveau, leur intitulé et les APS proposées à la création d'un cycle."""
    return curriculum_for(level)


@router.get("/aps-grid", summary="Grille d'évaluation d'une APS")
def get_aps_grid(activity: str, level: Level):
    """Critères et points de la grille (Athlétisme, Sports collectifs ou Gymnastique) dont relève l'APS."""
    return aps_grid(activity, level)


@router.get("/today", response_model=List[DaySession], summary="Séances du jour")
def get_sessions_of_day(day: Optional[dt.date] = None, store: StateStore = Depends(get_store)):
    """Séances de toutes les classes à la date donnée (aujourd'hui par défaut), triées par heure."""
    return session_service.sessions_on(store, day)


@router.get("/{cycle_id}", response_model=Cycle, summary="Détail d'un cycle")
def get_cycle(cycle_id: str, store: StateStore = Depends(get_store)):
    cycle = cycle_service.get_cycle(store, cycle_id)
    if cycle is None:
        raise HTTPException(status_code=404, detail="Cycle introuvable.")
    return cycle


@router.put("/{cycle_id}", response_model=Cycle, summary="Modifier un cycle")
def update_cycle(cycle_id: str, data: CycleUpdate, store: StateStore = Depends(get_store)):
    cycle = cycle_service.update_cycle(store, cycle_id, data)
    if cycle is None:
        raise HTTPException(status_code=404, detail="Cycle introuvable.")
    return cycle


@router.delete("/{cycle_id}", status_code=204, summary="Supprimer un cycle")
def delete_cycle(cycle_id: str, store: StateStore = Depends(get_store)):
    success = cycle_service.delete_cycle(store, cycle_id)
    if not success:
        raise HTTPException(status_code=404, detail="Cycle introuvable.")


@router.get("/{cycle_id}/attendance-rate", summary="Taux de présence d'un cycle")
def get_attendance_rate(cycle_id: str, student_id: Optional[str] = None, store: StateStore = Depends(get_store)):
    cycle = cycle_service.get_cycle(store, cycle_id)
    if cycle is None:
        raise HTTPException(status_code=404, detail="Cycle introuvable.")
    return {"cycle_id": cycle_id, "student_id": student_id, "rate": session_service.attendance_rate(cycle, student_id)}


# --- Séances ---

@router.get(
    "/{cycle_id}/sessions/{session_id}/attendance",
    response_model=List[AttendanceEntry],
    summary="Liste d'appel d'une séance",
)
def get_roster(cycle_id: str, session_id: str, store: StateStore = Depends(get_store)):
    """Retourne l'appel saisi, ou les élèves actifs de la classe marqués présents par défaut."""
    roster = session_service.build_roster(store, cycle_id, session_id)
    if roster is None:
        raise HTTPException(status_code=404, detail="Séance introuvable.")
    return roster


@router.put("/{cycle_id}/sessions/{session_id}/attendance", response_model=Session, summary="Faire l'appel")
def record_attendance(cycle_id: str, session_id: str, data: AttendanceUpdate, store: StateStore = Depends(get_store)):
    try:
        session = session_service.record_attendance(store, cycle_id, session_id, data.entries)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if session is None:
        raise HTTPException(status_code=404, detail="Séance introuvable.")
    return session


@router.put("/{cycle_id}/sessions/{session_id}/journal", response_model=Session, summary="Remplir le cahier de texte")
def update_journal(cycle_id: str, session_id: str, data: Journal, store: StateStore = Depends(get_store)):
    session = session_service.update_journal(store, cycle_id, session_id, data)
    if session is None:
        raise HTTPException(status_code=404, detail="Séance introuvable.")
    return session


@router.post("/{cycle_id}/sessions/{session_id}/lock", response_model=Session, summary="Verrouiller une séance")
def lock_session(cycle_id: str, session_id: str, store: StateStore = Depends(get_store)):
    """Une séance verrouillée n'est jamais déplacée par une reprogrammation."""
    session = session_service.set_locked(store, cycle_id, session_id, True)
    if session is None:
        raise HTTPException(status_code=404, detail="Séance introuvable.")
    return session


@router.delete("/{cycle_id}/sessions/{session_id}/lock", response_model=Session, summary="Déverrouiller une séance")
def unlock_session(cycle_id: str, session_id: str, store: StateStore = Depends(get_store)):
    session = session_service.set_locked(store, cycle_id, session_id, False)
    if session is None:
        raise HTTPException(status_code=404, detail="Séance introuvable.")
    return session
