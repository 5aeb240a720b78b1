from validetu.schemas.academic import (
    AcademicYearCreate,
    AcademicYearUpdate,
    SemesterCreate,
    SemesterUpdate,
    UECreate,
    UEUpdate,
    SubjectCreate,
    SubjectUpdate,
    SubjectGradesUpdate,
    UserUpdate,
)

__all__ = [
    "AcademicYearCreate",
    "AcademicYearUpdate",
    "SemesterCreate",
    "SemesterUpdate",
    "UECreate",
    "UEUpdate",
    "SubjectCreate",
    "SubjectUpdate",
    "SubjectGradesUpdate",
    "UserUpdate",
]
