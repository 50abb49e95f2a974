"""
Schémas Pydantic pour les classes EPS et leurs élèves.
"""

import re
import uuid
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


class Level(str, Enum):
    """Niveau d'une classe ou d'un élève."""
    TC = "TC"
    FIRST_YEAR = "1ère Bac"
    SECOND_YEAR = "2ème Bac"


def check_time(v: str) -> str:
    """Valide une heure au format HH:MM (24h)."""
    if not TIME_PATTERN.match(v):
        raise ValueError("L'heure doit être au format HH:MM (24h).")
    return v


class TimeSlot(BaseModel):
    """Horaire hebdomadaire d'une classe (jour 0 = dimanche … 6 = samedi)."""
    weekday: int = Field(ge=0, le=6)
    start: str
    duration_min: int = Field(default=60, gt=0)
    room: Optional[str] = None

    @field_validator("start")
    @classmethod
    def valid_start(cls, v: str) -> str:
        return check_time(v)


def check_distinct_weekdays(slots: List[TimeSlot]) -> List[TimeSlot]:
    weekdays = [s.weekday for s in slots]
    if len(weekdays) != len(set(weekdays)):
        raise ValueError("Deux horaires d'une même classe ne peuvent pas tomber le même jour.")
    return slots


class SchoolClass(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    level: Level
    time_slots: List[TimeSlot] = []


class ClassCreate(BaseModel):
    name: str
    level: Level
    time_slots: List[TimeSlot] = []

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom de la classe ne peut pas être vide.")
        return v.strip()

    @field_validator("time_slots")
    @classmethod
    def distinct_weekdays(cls, v: List[TimeSlot]) -> List[TimeSlot]:
        return check_distinct_weekdays(v)


class ClassUpdate(BaseModel):
    name: Optional[str] = None
    level: Optional[Level] = None
    time_slots: Optional[List[TimeSlot]] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Le nom de la classe ne peut pas être vide.")
        return v.strip() if v else v

    @field_validator("time_slots")
    @classmethod
    def distinct_weekdays(cls, v: Optional[List[TimeSlot]]) -> Optional[List[TimeSlot]]:
        if v is not None:
            check_distinct_weekdays(v)
        return v


class ClassResponse(BaseModel):
    id: str
    name: str
    level: Level
    time_slots: List[TimeSlot]
    nb_students: int
    nb_cycles: int


class Student(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    class_id: str
    last_name: str
    first_name: Optional[str] = None
    number: Optional[int] = None
    level: Level
    active: bool = True  # les élèves inactifs ne sont pas proposés pour l'appel

    @property
    def display_name(self) -> str:
        return f"{self.last_name} {self.first_name}" if self.first_name else self.last_name


class StudentCreate(BaseModel):
    last_name: str
    first_name: Optional[str] = None
    number: Optional[int] = Field(default=None, ge=1)

    @field_validator("last_name")
    @classmethod
    def last_name_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Le nom de l'élève ne peut pas être vide.")
        return v.strip()


class StudentUpdate(BaseModel):
    last_name: Optional[str] = None
    first_name: Optional[str] = None
    number: Optional[int] = Field(default=None, ge=1)
    active: Optional[bool] = None

    @field_validator("last_name")
    @classmethod
    def last_name_not_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Le nom de l'élève ne peut pas être vide.")
        return v.strip() if v else v
