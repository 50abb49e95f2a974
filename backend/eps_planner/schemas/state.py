"""
Document d'état complet de l'application, lu et écrit d'un seul bloc.
"""

from typing import List, Optional

from pydantic import BaseModel

from eps_planner.schemas.absence import Absence
from eps_planner.schemas.cycle import Cycle
from eps_planner.schemas.evaluation import Evaluation
from eps_planner.schemas.school_class import SchoolClass, Student


class EpsState(BaseModel):
    classes: List[SchoolClass] = []
    students: List[Student] = []
    cycles: List[Cycle] = []
    absences: List[Absence] = []
    evaluations: List[Evaluation] = []

    def get_class(self, class_id: str) -> Optional[SchoolClass]:
        return next((c for c in self.classes if c.id == class_id), None)

    def get_cycle(self, cycle_id: str) -> Optional[Cycle]:
        return next((c for c in self.cycles if c.id == cycle_id), None)

    def get_absence(self, absence_id: str) -> Optional[Absence]:
        return next((a for a in self.absences if a.id == absence_id), None)

    def get_student(self, student_id: str) -> Optional[Student]:
        return next((s for s in self.students if s.id == student_id), None)
