"""
ValidEtu : suivi des notes, moyennes, crédits et progression d'un étudiant.

    from validetu import AcademicState, User
    from validetu.schemas import AcademicYearCreate

    state = AcademicState()
    state.sign_in(User(id="u1", nom="Doe", prenom="Jane", email="jane@example.com"))
    year = state.tree.create_academic_year(AcademicYearCreate(title="L1"))
    state.tree.get_academic_year_with_calculations(year.id)
"""

__version__ = "1.0.0"

from validetu.core.exceptions import (
    ValidEtuError,
    NotFoundError,
    UnauthenticatedError,
    ConstraintViolationError,
    PersistenceError,
)
from validetu.crud.academic_tree import AcademicTree
from validetu.db.persistence import (
    PersistenceAdapter,
    InMemoryPersistence,
    JsonFilePersistence,
    get_persistence,
)
from validetu.grading_engine import GradingEngine, GradingRules
from validetu.main import AcademicState
from validetu.models import (
    User,
    Subject,
    UE,
    Semester,
    AcademicYear,
    SubjectStatus,
    SimulationResult,
    SubjectNeedingRetake,
)

__all__ = [
    "__version__",
    "ValidEtuError",
    "NotFoundError",
    "UnauthenticatedError",
    "ConstraintViolationError",
    "PersistenceError",
    "AcademicTree",
    "PersistenceAdapter",
    "InMemoryPersistence",
    "JsonFilePersistence",
    "get_persistence",
    "GradingEngine",
    "GradingRules",
    "AcademicState",
    "User",
    "Subject",
    "UE",
    "Semester",
    "AcademicYear",
    "SubjectStatus",
    "SimulationResult",
    "SubjectNeedingRetake",
]
