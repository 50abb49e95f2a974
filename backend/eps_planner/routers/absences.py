"""
Router pour les absences du professeur.
La validation d'une absence reprogramme les séances impactées ; la suppression
d'une absence validée annule ses reports.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from eps_planner.database import get_store
from eps_planner.schemas.absence import Absence, AbsenceCreate, AbsenceUpdate, ApprovalResult
from eps_planner.services import absence_service
from eps_planner.store import StateStore

router = APIRouter(prefix="/api/v1/absences", tags=["Absences"])


@router.post("", response_model=Absence, status_code=201, summary="Déclarer une absence")
def create_absence(data: AbsenceCreate, store: StateStore = Depends(get_store)):
    """Enregistre une absence en attente. La date de début doit précéder ou égaler la date de fin."""
    try:
        return absence_service.create_absence(store, data)
    except absence_service.InvalidDateRange as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.get("", response_model=List[Absence], summary="Lister les absences")
def list_absences(store: StateStore = Depends(get_store)):
    return absence_service.get_absences(store)


@router.get("/in-progress", response_model=List[Absence], summary="Absences en cours")
def list_absences_in_progress(store: StateStore = Depends(get_store)):
    """Absences validées couvrant la date du jour."""
    return absence_service.get_absences_in_progress(store)


@router.get("/{absence_id}", response_model=Absence, summary="Détail d'une absence")
def get_absence(absence_id: str, store: StateStore = Depends(get_store)):
    absence = absence_service.get_absence(store, absence_id)
    if absence is None:
        raise HTTPException(status_code=404, detail="Absence introuvable.")
    return absence


@router.put("/{absence_id}", response_model=Absence, summary="Modifier une absence")
def update_absence(absence_id: str, data: AbsenceUpdate, store: StateStore = Depends(get_store)):
    try:
        absence = absence_service.update_absence(store, absence_id, data)
    except absence_service.InvalidDateRange as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if absence is None:
        raise HTTPException(status_code=404, detail="Absence introuvable.")
    return absence


@router.post("/{absence_id}/approve", response_model=ApprovalResult, summary="Valider une absence")
def approve_absence(absence_id: str, store: StateStore = Depends(get_store)):
    """
    Valide l'absence et reporte les séances impactées de tous les cycles.

    - Chaque séance est déplacée vers le prochain créneau libre de sa classe
    - Les séances verrouillées ne bougent pas
    - Idempotent : une seconde validation ne reporte aucune séance
    """
    result = absence_service.approve_absence(store, absence_id)
    if result is None:
        raise HTTPException(status_code=404, detail="Absence introuvable.")
    return result


@router.post("/{absence_id}/reject", response_model=Absence, summary="Refuser une absence")
def reject_absence(absence_id: str, store: StateStore = Depends(get_store)):
    absence = absence_service.reject_absence(store, absence_id)
    if absence is None:
        raise HTTPException(status_code=404, detail="Absence introuvable.")
    return absence


@router.delete("/{absence_id}", status_code=204, summary="Supprimer une absence")
def delete_absence(absence_id: str, store: StateStore = Depends(get_store)):
    """Supprime l'absence ; si elle était validée, les séances reportées retrouvent leur date."""
    success = absence_service.delete_absence(store, absence_id)
    if not success:
        raise HTTPException(status_code=404, detail="Absence introuvable.")
