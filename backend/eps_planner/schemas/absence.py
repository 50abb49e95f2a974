"""
Schémas Pydantic pour les absences du professeur.
"""

import datetime as dt
import uuid
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator


class AbsenceType(str, Enum):
    ILLNESS = "maladie"
    COMPETITION = "competition"
    TRAINING = "formation"
    PUBLIC_HOLIDAY = "jour_ferie"
    LEAVE = "conge"
    OTHER = "autre"


class AbsenceStatus(str, Enum):
    PENDING = "en_attente"
    APPROVED = "approuve"
    REJECTED = "refuse"


def check_date_range(start: Optional[dt.date], end: Optional[dt.date]) -> None:
    if start is not None and end is not None and start > end:
        raise ValueError("La date de début doit être antérieure ou égale à la date de fin.")


class Absence(BaseModel):
    """Intervalle fermé [start_date, end_date] d'absence du professeur."""
    id: str = Field(default_factory=lambda: f"abs-{uuid.uuid4().hex[:12]}")
    start_date: dt.date
    end_date: dt.date
    type: AbsenceType = AbsenceType.OTHER
    reason: str = ""
    status: AbsenceStatus = AbsenceStatus.PENDING
    created_at: Optional[dt.datetime] = None
    impacted_session_ids: List[str] = []  # IDs des séances reportées par cette absence

    def covers(self, day: dt.date) -> bool:
        return self.start_date <= day <= self.end_date


class AbsenceCreate(BaseModel):
    start_date: dt.date
    end_date: dt.date
    type: AbsenceType = AbsenceType.OTHER
    reason: str = ""

    @model_validator(mode="after")
    def valid_range(self) -> "AbsenceCreate":
        check_date_range(self.start_date, self.end_date)
        return self


class AbsenceUpdate(BaseModel):
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None
    type: Optional[AbsenceType] = None
    reason: Optional[str] = None

    @model_validator(mode="after")
    def valid_range(self) -> "AbsenceUpdate":
        check_date_range(self.start_date, self.end_date)
        return self


class ApprovalResult(BaseModel):
    """Rapport de validation d'une absence (reprogrammation des cycles)."""
    absence_id: str
    moved_count: int
    unplaced_count: int
    cycles_modified: List[str]
    message: str
