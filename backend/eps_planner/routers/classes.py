"""
Router pour la gestion des classes EPS, de leurs horaires et de leurs élèves.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from eps_planner.database import get_store
from eps_planner.schemas.school_class import (
    ClassCreate,
    ClassResponse,
    ClassUpdate,
    Student,
    StudentCreate,
    StudentUpdate,
)
from eps_planner.services import class_service
from eps_planner.store import StateStore

router = APIRouter(prefix="/api/v1/classes", tags=["Classes"])


@router.post("", response_model=ClassResponse, status_code=201, summary="Créer une classe")
def create_class(data: ClassCreate, store: StateStore = Depends(get_store)):
    """Crée une classe avec un nom unique et ses horaires hebdomadaires (un seul par jour)."""
    try:
        return class_service.create_class(store, data)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("", response_model=List[ClassResponse], summary="Lister les classes")
def list_classes(store: StateStore = Depends(get_store)):
    """Retourne toutes les classes avec leur nombre d'élèves et de cycles."""
    return class_service.get_classes(store)


@router.get("/{class_id}", response_model=ClassResponse, summary="Détail d'une classe")
def get_class(class_id: str, store: StateStore = Depends(get_store)):
    school_class = class_service.get_class(store, class_id)
    if school_class is None:
        raise HTTPException(status_code=404, detail="Classe introuvable.")
    return school_class


@router.put("/{class_id}", response_model=ClassResponse, summary="Modifier une classe")
def update_class(class_id: str, data: ClassUpdate, store: StateStore = Depends(get_store)):
    try:
        result = class_service.update_class(store, class_id, data)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if result is None:
        raise HTTPException(status_code=404, detail="Classe introuvable.")
    return result


@router.delete("/{class_id}", status_code=204, summary="Supprimer une classe")
def delete_class(class_id: str, store: StateStore = Depends(get_store)):
    """Supprime une classe avec ses élèves, ses cycles et leurs évaluations."""
    success = class_service.delete_class(store, class_id)
    if not success:
        raise HTTPException(status_code=404, detail="Classe introuvable.")


# --- Gestion des élèves ---

@router.post("/{class_id}/students", response_model=Student, status_code=201, summary="Ajouter un élève")
def add_student(class_id: str, data: StudentCreate, store: StateStore = Depends(get_store)):
    try:
        return class_service.add_student(store, class_id, data)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{class_id}/students", response_model=List[Student], summary="Lister les élèves d'une classe")
def list_students(class_id: str, active_only: bool = False, store: StateStore = Depends(get_store)):
    return class_service.get_students(store, class_id, active_only=active_only)


@router.put("/students/{student_id}", response_model=Student, summary="Modifier un élève")
def update_student(student_id: str, data: StudentUpdate, store: StateStore = Depends(get_store)):
    student = class_service.update_student(store, student_id, data)
    if student is None:
        raise HTTPException(status_code=404, detail="Élève introuvable.")
    return student


@router.delete("/students/{student_id}", status_code=204, summary="Supprimer un élève")
def delete_student(student_id: str, store: StateStore = Depends(get_store)):
    success = class_service.delete_student(store, student_id)
    if not success:
        raise HTTPException(status_code=404, detail="Élève introuvable.")
