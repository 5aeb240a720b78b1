"""
Modèles Pydantic de l'arbre académique.

Chaque entité se sérialise avec des clés camelCase (`userId`,
`academicYearId`, ...) et accepte aussi les noms Python en entrée.
Les notes absentes sont conservées comme `None` (`null` en JSON).
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class TreeModel(BaseModel):
    id: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class User(TreeModel):
    nom: str
    prenom: str
    email: EmailStr


class Subject(TreeModel):
    """Matière d'une UE. Les trois notes sont sur 20 et optionnelles."""
    name: str
    coefficient: float
    ue_id: str
    interrogation: Optional[float] = None
    devoir: Optional[float] = None
    rattrapage: Optional[float] = None


class UE(TreeModel):
    """Unité d'enseignement"""
    name: str
    credits: float
    semester_id: str
    subjects: List[Subject] = Field(default_factory=list)


class Semester(TreeModel):
    title: str
    academic_year_id: str
    ues: List[UE] = Field(default_factory=list)


class AcademicYear(TreeModel):
    title: str
    user_id: str
    semesters: List[Semester] = Field(default_factory=list)


__all__ = [
    "TreeModel",
    "User",
    "Subject",
    "UE",
    "Semester",
    "AcademicYear",
]
