"""
Router pour les évaluations sommatives et le calcul de note finale.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from eps_planner.database import get_store
from eps_planner.schemas.evaluation import Evaluation, EvaluationCreate, GradePreview
from eps_planner.services import evaluation_service, scoring
from eps_planner.store import StateStore

router = APIRouter(prefix="/api/v1/evaluations", tags=["Évaluations"])


@router.post("", response_model=Evaluation, status_code=201, summary="Saisir une évaluation")
def record_evaluation(data: EvaluationCreate, store: StateStore = Depends(get_store)):
    """Enregistre (ou remplace) l'évaluation d'un élève pour un cycle et calcule sa note finale."""
    try:
        return evaluation_service.record_evaluation(store, data)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("", response_model=List[Evaluation], summary="Lister les évaluations")
def list_evaluations(
    cycle_id: Optional[str] = None,
    student_id: Optional[str] = None,
    store: StateStore = Depends(get_store),
):
    return evaluation_service.get_evaluations(store, cycle_id=cycle_id, student_id=student_id)


@router.post("/preview", summary="Calculer une note finale sans l'enregistrer")
def preview_grade(data: GradePreview):
    """Applique le barème du niveau aux dimensions fournies (arrondi au demi-point)."""
    return {
        "level": data.level,
        "final_grade": scoring.compute_final_grade(data.level, data.dims),
        "dimensions": scoring.applicable_dimensions(data.level),
    }


@router.get("/cycles/{cycle_id}/average", summary="Moyenne d'un cycle")
def get_cycle_average(cycle_id: str, store: StateStore = Depends(get_store)):
    """Moyenne des notes finales du cycle ; null si aucune évaluation."""
    return {"cycle_id": cycle_id, "average": evaluation_service.cycle_average(store, cycle_id)}
