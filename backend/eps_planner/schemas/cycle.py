"""
Schémas Pydantic pour les cycles d'apprentissage et leurs séances.

Note : on importe datetime en tant que module (dt) pour éviter le conflit de nommage
entre le champ `date` et le type `datetime.date` dans Pydantic v2.
"""

import datetime as dt
import uuid
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from eps_planner.schemas.school_class import Level, check_time


class SessionStatus(str, Enum):
    PLANNED = "Planifiée"
    ATTENDANCE_TAKEN = "Appel fait"
    EVALUATED = "Évaluée"


class AttendanceStatus(str, Enum):
    PRESENT = "PRESENT"
    LATE = "RETARD"
    ABSENT = "ABSENT"
    EXCUSED = "EXCUSE"


class AttendanceEntry(BaseModel):
    """Ligne de la liste d'appel d'une séance."""
    student_id: str
    name: str
    status: AttendanceStatus
    behaviour: Literal["+", "-", ""] = ""


class Journal(BaseModel):
    """Cahier de texte d'une séance."""
    objectives: Optional[str] = None
    content: Optional[str] = None
    organisation: Optional[str] = None
    instructions: Optional[str] = None
    criteria: Optional[str] = None


class RescheduleEntry(BaseModel):
    """Un déplacement de séance causé par une absence (du plus ancien au plus récent)."""
    absence_id: str
    from_date: dt.date
    from_time: Optional[str] = None
    to_date: dt.date
    to_time: Optional[str] = None


class Session(BaseModel):
    """Séance d'un cycle."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    cycle_id: str = ""
    order: int = 0
    date: dt.date
    time: Optional[str] = None
    theme: str = ""
    locked: bool = False
    evaluation_due: bool = False
    status: SessionStatus = SessionStatus.PLANNED
    attendance: List[AttendanceEntry] = []
    journal: Journal = Field(default_factory=Journal)

    # Provenance : présents uniquement tant que la séance est reportée
    is_rescheduled: bool = False
    absence_origin_id: Optional[str] = None
    original_date: Optional[dt.date] = None
    reschedule_history: List[RescheduleEntry] = []

    @field_validator("time")
    @classmethod
    def valid_time(cls, v: Optional[str]) -> Optional[str]:
        return check_time(v) if v is not None else v


class CycleStatus(str, Enum):
    PLANNED = "planifié"
    DONE = "réalisé"
    EVALUATED = "évalué"


class Cycle(BaseModel):
    """Cycle d'apprentissage : une APS enseignée à une classe sur plusieurs séances."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    class_id: str
    class_name: str
    level: Level
    activity: str
    module: int = Field(ge=1, le=6)
    semester: int = Field(ge=1, le=2)
    planned_sessions: int = Field(ge=0)
    sessions: List[Session] = []
    status: CycleStatus = CycleStatus.PLANNED
    updated_at: Optional[dt.datetime] = None


def check_activity(v: str) -> str:
    if not v.strip():
        raise ValueError("L'APS ne peut pas être vide.")
    return v.strip()


class CycleCreate(BaseModel):
    """
    Création d'un cycle pour une classe (class_id) ou pour toutes les classes
    d'un niveau (level). Exactement l'un des deux doit être fourni.
    """
    class_id: Optional[str] = None
    level: Optional[Level] = None
    activity: str
    module: int = Field(ge=1, le=6)
    semester: int = Field(ge=1, le=2)
    planned_sessions: int = Field(ge=1, le=60)
    start_date: dt.date

    @field_validator("activity")
    @classmethod
    def activity_not_empty(cls, v: str) -> str:
        return check_activity(v)

    @model_validator(mode="after")
    def class_or_level(self) -> "CycleCreate":
        if (self.class_id is None) == (self.level is None):
            raise ValueError("Fournir soit une classe, soit un niveau.")
        return self


class CycleUpdate(BaseModel):
    activity: Optional[str] = None
    status: Optional[CycleStatus] = None

    @field_validator("activity")
    @classmethod
    def activity_not_empty(cls, v: Optional[str]) -> Optional[str]:
        return check_activity(v) if v is not None else v


class AttendanceUpdate(BaseModel):
    entries: List[AttendanceEntry]

    @field_validator("entries")
    @classmethod
    def not_empty(cls, v: List[AttendanceEntry]) -> List[AttendanceEntry]:
        if not v:
            raise ValueError("La liste d'appel ne peut pas être vide.")
        return v


class DaySession(BaseModel):
    """Séance d'une journée, avec la classe et l'APS de son cycle."""
    cycle_id: str
    class_id: str
    class_name: str
    activity: str
    session: Session
