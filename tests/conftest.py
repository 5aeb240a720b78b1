import itertools

import pytest

from validetu.core.config import Settings
from validetu.crud.academic_tree import AcademicTree
from validetu.db.persistence import InMemoryPersistence
from validetu.grading_engine import GradingRules
from validetu.main import AcademicState
from validetu.models.academic import AcademicYear, Semester, Subject, UE, User

_ids = itertools.count(1)


def make_subject(interrogation=None, devoir=None, rattrapage=None, coefficient=1, name=None, ue_id="ue"):
    n = next(_ids)
    return Subject(
        id=f"subject-{n}",
        name=name or f"Matière {n}",
        coefficient=coefficient,
        ue_id=ue_id,
        interrogation=interrogation,
        devoir=devoir,
        rattrapage=rattrapage,
    )


def graded(value, coefficient=1, name=None):
    """Matière dont la moyenne finale vaut `value` (interrogation = devoir = value)."""
    return make_subject(interrogation=value, devoir=value, coefficient=coefficient, name=name)


def retaken(final, coefficient=1, name=None):
    """
    Matière rattrapée dont la moyenne finale vaut exactement `final`
    (moyenne initiale de 5, note de rattrapage `final`).
    """
    return make_subject(interrogation=5, devoir=5, rattrapage=final, coefficient=coefficient, name=name)


def make_ue(subjects, credits=6, ue_id=None):
    ue_id = ue_id or f"ue-{next(_ids)}"
    return UE(
        id=ue_id,
        name=f"UE {ue_id}",
        credits=credits,
        semester_id="semester",
        subjects=[s.model_copy(update={"ue_id": ue_id}) for s in subjects],
    )


def make_semester(ues):
    return Semester(id=f"semester-{next(_ids)}", title="S", academic_year_id="year", ues=ues)


def make_year(semesters):
    return AcademicYear(id=f"year-{next(_ids)}", title="L1", user_id="user-1", semesters=semesters)


@pytest.fixture
def rules():
    return GradingRules.get_default_rules()


@pytest.fixture
def user():
    return User(id="user-1", nom="Batera", prenom="Nathanaël", email="etudiant@example.com")


@pytest.fixture
def other_user():
    return User(id="user-2", nom="Kasongo", prenom="Amani", email="amani@example.com")


@pytest.fixture
def tree():
    return AcademicTree("user-1")


@pytest.fixture
def persistence():
    return InMemoryPersistence()


@pytest.fixture
def state(persistence):
    return AcademicState(persistence=persistence, settings=Settings(STORAGE_BACKEND="memory"))
