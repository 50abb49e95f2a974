"""
Schémas Pydantic pour les évaluations sommatives des élèves.
"""

import datetime as dt
import uuid
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, Field

from eps_planner.schemas.school_class import Level


class Dimension(str, Enum):
    MOTOR = "motricite"
    TACTICAL = "tactique"
    BEHAVIOUR = "comportement"
    KNOWLEDGE = "connaissances"
    PROJECT = "projet"


class Dims(BaseModel):
    """Notes brutes par dimension, chacune sur 20. Les dimensions absentes valent 0."""
    motricite: Optional[float] = Field(default=None, ge=0, le=20)
    tactique: Optional[float] = Field(default=None, ge=0, le=20)
    comportement: Optional[float] = Field(default=None, ge=0, le=20)
    connaissances: Optional[float] = Field(default=None, ge=0, le=20)
    projet: Optional[float] = Field(default=None, ge=0, le=20)

    def as_mapping(self) -> Dict[Dimension, float]:
        return {Dimension(k): v for k, v in self.model_dump(exclude_none=True).items()}


class Evaluation(BaseModel):
    id: str = Field(default_factory=lambda: f"eval-{uuid.uuid4().hex[:12]}")
    student_id: str
    cycle_id: str
    dims: Dims
    final_grade: float
    comment: Optional[str] = None
    evaluated_at: dt.date


class EvaluationCreate(BaseModel):
    student_id: str
    cycle_id: str
    dims: Dims
    comment: Optional[str] = None
    evaluated_at: Optional[dt.date] = None


class GradePreview(BaseModel):
    level: Level
    dims: Dims
