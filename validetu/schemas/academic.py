from pydantic import BaseModel, EmailStr
from typing import Optional


class AcademicYearCreate(BaseModel):
    title: str

class AcademicYearUpdate(BaseModel):
    title: Optional[str] = None

class SemesterCreate(BaseModel):
    title: str

class SemesterUpdate(BaseModel):
    title: Optional[str] = None

class UECreate(BaseModel):
    name: str
    credits: float

class UEUpdate(BaseModel):
    name: Optional[str] = None
    credits: Optional[float] = None

class SubjectCreate(BaseModel):
    name: str
    coefficient: float

class SubjectUpdate(BaseModel):
    name: Optional[str] = None
    coefficient: Optional[float] = None

class SubjectGradesUpdate(BaseModel):
    # Champ omis = inchangé ; None explicite = note effacée
    interrogation: Optional[float] = None
    devoir: Optional[float] = None
    rattrapage: Optional[float] = None

class UserUpdate(BaseModel):
    nom: Optional[str] = None
    prenom: Optional[str] = None
    email: Optional[EmailStr] = None
