"""
Modèles de données : entités brutes de l'arbre académique et vues calculées.
"""

from validetu.models.academic import (
    TreeModel,
    User,
    Subject,
    UE,
    Semester,
    AcademicYear,
)
from validetu.models.calculations import (
    SubjectStatus,
    SubjectWithCalculations,
    UEWithCalculations,
    SemesterWithCalculations,
    AcademicYearWithCalculations,
    SubjectNeedingRetake,
    SimulationResult,
    UESimulationOutcome,
)

__all__ = [
    "TreeModel",
    "User",
    "Subject",
    "UE",
    "Semester",
    "AcademicYear",
    "SubjectStatus",
    "SubjectWithCalculations",
    "UEWithCalculations",
    "SemesterWithCalculations",
    "AcademicYearWithCalculations",
    "SubjectNeedingRetake",
    "SimulationResult",
    "UESimulationOutcome",
]
