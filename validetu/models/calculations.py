"""
Vues calculées ("WithCalculations") et résultats de simulation.

Ces modèles ne sont jamais persistés : ils sont recalculés à chaque lecture
à partir des entités brutes.
"""
import enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from validetu.models.academic import AcademicYear, Semester, Subject, UE


class SubjectStatus(str, enum.Enum):
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"


class SubjectWithCalculations(Subject):
    initial_average: Optional[float] = None
    final_average: Optional[float] = None
    status: SubjectStatus = SubjectStatus.WARNING


class UEWithCalculations(UE):
    subjects: List[SubjectWithCalculations] = Field(default_factory=list)
    average: Optional[float] = None
    is_valid: bool = False


class SemesterWithCalculations(Semester):
    ues: List[UEWithCalculations] = Field(default_factory=list)
    average: Optional[float] = None
    total_credits: float = 0
    validated_credits: float = 0


class AcademicYearWithCalculations(AcademicYear):
    semesters: List[SemesterWithCalculations] = Field(default_factory=list)
    total_credits: int = 60
    validated_credits: float = 0
    can_progress: bool = False


class SubjectNeedingRetake(BaseModel):
    """Matière dont la moyenne initiale est sous la note éliminatoire, avec sa position dans l'arbre"""
    subject: SubjectWithCalculations
    academic_year_id: str
    academic_year_title: str
    semester_id: str
    semester_title: str
    ue_id: str
    ue_name: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SimulationResult(BaseModel):
    """Notes minimales de rattrapage, indexées par identifiant de matière"""
    minimum_grades: Dict[str, float] = Field(default_factory=dict)
    is_possible: bool
    message: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UESimulationOutcome(BaseModel):
    """Résultat d'une simulation "et si" avec des notes proposées"""
    is_valid: bool
    average: Optional[float] = None
    message: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


__all__ = [
    "SubjectStatus",
    "SubjectWithCalculations",
    "UEWithCalculations",
    "SemesterWithCalculations",
    "AcademicYearWithCalculations",
    "SubjectNeedingRetake",
    "SimulationResult",
    "UESimulationOutcome",
]
