"""
Arbre académique d'un utilisateur : années → semestres → UE → matières.

Les entités sont rangées dans une table indexée par identifiant ; chaque
parent garde la liste ordonnée des identifiants de ses enfants. Une
modification touche uniquement le nœud concerné, sans reconstruire l'arbre.
Les lectures renvoient des copies détachées.
"""
import logging
import uuid
from contextlib import contextmanager
from typing import Callable, Dict, Iterable, List, Mapping, Optional

from validetu.core.exceptions import NotFoundError, UnauthenticatedError
from validetu.grading_engine import GradingEngine, GradingRules
from validetu.models.academic import AcademicYear, Semester, Subject, UE
from validetu.models.calculations import (
    AcademicYearWithCalculations,
    SemesterWithCalculations,
    SimulationResult,
    SubjectNeedingRetake,
    SubjectWithCalculations,
    UESimulationOutcome,
    UEWithCalculations,
)
from validetu.schemas.academic import (
    AcademicYearCreate,
    AcademicYearUpdate,
    SemesterCreate,
    SemesterUpdate,
    SubjectCreate,
    SubjectGradesUpdate,
    SubjectUpdate,
    UECreate,
    UEUpdate,
)

OnChange = Callable[["AcademicTree"], None]


def _new_id() -> str:
    return uuid.uuid4().hex


class AcademicTree:
    """
    Agrégat CRUD de l'arbre académique d'un utilisateur.

    Toute opération sur un identifiant inconnu lève `NotFoundError` sans
    modification partielle. Après chaque mutation, `on_change` est appelé une
    fois avec l'arbre (sauvegarde, rafraîchissement...) ; s'il lève une
    exception, l'arbre revient à son état d'avant la mutation et l'exception
    remonte.
    """

    def __init__(self, user_id: str, rules: Optional[GradingRules] = None,
                 on_change: Optional[OnChange] = None):
        if not user_id:
            raise UnauthenticatedError()
        self.user_id = user_id
        self.engine = GradingEngine(rules)
        self.on_change = on_change

        self._years: Dict[str, AcademicYear] = {}
        self._semesters: Dict[str, Semester] = {}
        self._ues: Dict[str, UE] = {}
        self._subjects: Dict[str, Subject] = {}
        self._children: Dict[str, List[str]] = {}
        self._year_order: List[str] = []
        # Années d'un autre propriétaire trouvées au chargement, conservées telles quelles
        self._foreign_years: List[AcademicYear] = []

    @property
    def rules(self) -> GradingRules:
        return self.engine.rules

    # ------------------------------------------------------------------
    # Chargement / sérialisation
    # ------------------------------------------------------------------

    @classmethod
    def from_years(cls, user_id: str, years: Iterable[AcademicYear],
                   rules: Optional[GradingRules] = None,
                   on_change: Optional[OnChange] = None) -> "AcademicTree":
        """Reconstruire l'arbre depuis la forme imbriquée persistée."""
        tree = cls(user_id, rules=rules)
        for year in years:
            if year.user_id != user_id:
                logging.warning("Academic year %s owned by %s kept aside while loading tree of %s",
                                year.id, year.user_id, user_id)
                tree._foreign_years.append(year.model_copy(deep=True))
                continue
            tree._insert_year(year)
        tree.on_change = on_change
        return tree

    def _insert_year(self, year: AcademicYear) -> None:
        self._years[year.id] = year.model_copy(update={"semesters": []})
        self._year_order.append(year.id)
        self._children[year.id] = []
        for semester in year.semesters:
            # Les références vers le parent suivent toujours la position dans l'arbre
            self._semesters[semester.id] = semester.model_copy(update={"ues": [], "academic_year_id": year.id})
            self._children[year.id].append(semester.id)
            self._children[semester.id] = []
            for ue in semester.ues:
                self._ues[ue.id] = ue.model_copy(update={"subjects": [], "semester_id": semester.id})
                self._children[semester.id].append(ue.id)
                self._children[ue.id] = []
                for subject in ue.subjects:
                    self._subjects[subject.id] = subject.model_copy(update={"ue_id": ue.id})
                    self._children[ue.id].append(subject.id)

    def to_years(self) -> List[AcademicYear]:
        """Instantané imbriqué de tout l'arbre, dans l'ordre d'insertion."""
        return [self._build_year(year_id) for year_id in self._year_order]

    def to_storage(self) -> List[AcademicYear]:
        """Instantané à sauvegarder : l'arbre, puis les années mises de côté au chargement."""
        return self.to_years() + [year.model_copy(deep=True) for year in self._foreign_years]

    def _snapshot(self):
        # Les entités sont remplacées, jamais modifiées en place : une copie des tables suffit
        return (
            dict(self._years),
            dict(self._semesters),
            dict(self._ues),
            dict(self._subjects),
            {node_id: list(ids) for node_id, ids in self._children.items()},
            list(self._year_order),
        )

    def _restore(self, snapshot) -> None:
        (self._years, self._semesters, self._ues, self._subjects,
         self._children, self._year_order) = snapshot

    @contextmanager
    def _changing(self):
        """Appliquer une mutation puis appeler `on_change`, en annulant la mutation si le hook échoue"""
        if self.on_change is None:
            yield
            return
        snapshot = self._snapshot()
        yield
        try:
            self.on_change(self)
        except Exception:
            self._restore(snapshot)
            logging.error("Change hook failed for tree of user %s, mutation rolled back", self.user_id)
            raise

    # ------------------------------------------------------------------
    # Recherche
    # ------------------------------------------------------------------

    def _lookup(self, table: Dict, entity: str, entity_id: str):
        if not entity_id or entity_id not in table:
            raise NotFoundError(entity, entity_id)
        return table[entity_id]

    def _build_subject(self, subject_id: str) -> Subject:
        return self._subjects[subject_id].model_copy()

    def _build_ue(self, ue_id: str) -> UE:
        subjects = [self._build_subject(sid) for sid in self._children[ue_id]]
        return self._ues[ue_id].model_copy(update={"subjects": subjects})

    def _build_semester(self, semester_id: str) -> Semester:
        ues = [self._build_ue(uid) for uid in self._children[semester_id]]
        return self._semesters[semester_id].model_copy(update={"ues": ues})

    def _build_year(self, year_id: str) -> AcademicYear:
        semesters = [self._build_semester(sid) for sid in self._children[year_id]]
        return self._years[year_id].model_copy(update={"semesters": semesters})

    # ------------------------------------------------------------------
    # Années académiques
    # ------------------------------------------------------------------

    def create_academic_year(self, year_in: AcademicYearCreate) -> AcademicYear:
        year = AcademicYear(id=_new_id(), title=year_in.title, user_id=self.user_id)
        with self._changing():
            self._years[year.id] = year
            self._children[year.id] = []
            self._year_order.append(year.id)
        logging.info("Created academic year %s (%s) for user %s", year.id, year.title, self.user_id)
        return year.model_copy(deep=True)

    def update_academic_year(self, year_id: str, year_in: AcademicYearUpdate) -> AcademicYear:
        year = self._lookup(self._years, "AcademicYear", year_id)
        changes = year_in.model_dump(exclude_unset=True, exclude_none=True)
        with self._changing():
            self._years[year_id] = year.model_copy(update=changes)
        logging.debug("Updated academic year %s: %s", year_id, changes)
        return self._build_year(year_id)

    def delete_academic_year(self, year_id: str) -> None:
        self._lookup(self._years, "AcademicYear", year_id)
        with self._changing():
            for semester_id in list(self._children[year_id]):
                self._drop_semester(semester_id)
            del self._children[year_id]
            del self._years[year_id]
            self._year_order.remove(year_id)
        logging.info("Deleted academic year %s", year_id)

    def get_academic_year(self, year_id: str) -> AcademicYear:
        self._lookup(self._years, "AcademicYear", year_id)
        return self._build_year(year_id)

    def list_academic_years(self) -> List[AcademicYear]:
        return self.to_years()

    def get_academic_year_with_calculations(self, year_id: str) -> AcademicYearWithCalculations:
        return self.engine.year_with_calculations(self.get_academic_year(year_id))

    def list_academic_years_with_calculations(self) -> List[AcademicYearWithCalculations]:
        return [self.engine.year_with_calculations(year) for year in self.to_years()]

    def list_subjects_needing_retake(self) -> List[SubjectNeedingRetake]:
        """
        Matières de toutes les années dont la moyenne initiale est sous la note
        éliminatoire, dans l'ordre de l'arbre. Une matière déjà rattrapée reste
        listée ; une matière sans moyenne initiale ne l'est pas.
        """
        entries = []
        for year in self.list_academic_years_with_calculations():
            for semester in year.semesters:
                for ue in semester.ues:
                    for subject in ue.subjects:
                        if subject.initial_average is None or self.rules.is_subject_passing(subject.initial_average):
                            continue
                        entries.append(SubjectNeedingRetake(
                            subject=subject,
                            academic_year_id=year.id,
                            academic_year_title=year.title,
                            semester_id=semester.id,
                            semester_title=semester.title,
                            ue_id=ue.id,
                            ue_name=ue.name,
                        ))
        return entries

    # ------------------------------------------------------------------
    # Semestres
    # ------------------------------------------------------------------

    def create_semester(self, academic_year_id: str, semester_in: SemesterCreate) -> Semester:
        self._lookup(self._years, "AcademicYear", academic_year_id)
        semester = Semester(id=_new_id(), title=semester_in.title, academic_year_id=academic_year_id)
        with self._changing():
            self._semesters[semester.id] = semester
            self._children[semester.id] = []
            self._children[academic_year_id].append(semester.id)
        logging.info("Created semester %s (%s) in year %s", semester.id, semester.title, academic_year_id)
        return semester.model_copy(deep=True)

    def update_semester(self, semester_id: str, semester_in: SemesterUpdate) -> Semester:
        semester = self._lookup(self._semesters, "Semester", semester_id)
        changes = semester_in.model_dump(exclude_unset=True, exclude_none=True)
        with self._changing():
            self._semesters[semester_id] = semester.model_copy(update=changes)
        logging.debug("Updated semester %s: %s", semester_id, changes)
        return self._build_semester(semester_id)

    def delete_semester(self, semester_id: str) -> None:
        semester = self._lookup(self._semesters, "Semester", semester_id)
        with self._changing():
            self._children[semester.academic_year_id].remove(semester_id)
            self._drop_semester(semester_id)
        logging.info("Deleted semester %s", semester_id)

    def _drop_semester(self, semester_id: str) -> None:
        for ue_id in self._children.pop(semester_id):
            self._drop_ue(ue_id)
        del self._semesters[semester_id]

    def get_semester(self, semester_id: str) -> Semester:
        self._lookup(self._semesters, "Semester", semester_id)
        return self._build_semester(semester_id)

    def get_semester_with_calculations(self, semester_id: str) -> SemesterWithCalculations:
        return self.engine.semester_with_calculations(self.get_semester(semester_id))

    # ------------------------------------------------------------------
    # UE
    # ------------------------------------------------------------------

    def create_ue(self, semester_id: str, ue_in: UECreate) -> UE:
        self._lookup(self._semesters, "Semester", semester_id)
        ue = UE(id=_new_id(), name=ue_in.name, credits=ue_in.credits, semester_id=semester_id)
        with self._changing():
            self._ues[ue.id] = ue
            self._children[ue.id] = []
            self._children[semester_id].append(ue.id)
        logging.info("Created UE %s (%s, %s credits) in semester %s", ue.id, ue.name, ue.credits, semester_id)
        return ue.model_copy(deep=True)

    def update_ue(self, ue_id: str, ue_in: UEUpdate) -> UE:
        ue = self._lookup(self._ues, "UE", ue_id)
        changes = ue_in.model_dump(exclude_unset=True, exclude_none=True)
        with self._changing():
            self._ues[ue_id] = ue.model_copy(update=changes)
        logging.debug("Updated UE %s: %s", ue_id, changes)
        return self._build_ue(ue_id)

    def delete_ue(self, ue_id: str) -> None:
        ue = self._lookup(self._ues, "UE", ue_id)
        with self._changing():
            self._children[ue.semester_id].remove(ue_id)
            self._drop_ue(ue_id)
        logging.info("Deleted UE %s", ue_id)

    def _drop_ue(self, ue_id: str) -> None:
        for subject_id in self._children.pop(ue_id):
            del self._subjects[subject_id]
        del self._ues[ue_id]

    def get_ue(self, ue_id: str) -> UE:
        self._lookup(self._ues, "UE", ue_id)
        return self._build_ue(ue_id)

    def get_ue_with_calculations(self, ue_id: str) -> UEWithCalculations:
        return self.engine.ue_with_calculations(self.get_ue(ue_id))

    # ------------------------------------------------------------------
    # Matières
    # ------------------------------------------------------------------

    def create_subject(self, ue_id: str, subject_in: SubjectCreate) -> Subject:
        self._lookup(self._ues, "UE", ue_id)
        subject = Subject(id=_new_id(), name=subject_in.name, coefficient=subject_in.coefficient, ue_id=ue_id)
        with self._changing():
            self._subjects[subject.id] = subject
            self._children[ue_id].append(subject.id)
        logging.info("Created subject %s (%s, coef %s) in UE %s", subject.id, subject.name, subject.coefficient, ue_id)
        return subject.model_copy(deep=True)

    def update_subject(self, subject_id: str, subject_in: SubjectUpdate) -> Subject:
        subject = self._lookup(self._subjects, "Subject", subject_id)
        changes = subject_in.model_dump(exclude_unset=True, exclude_none=True)
        with self._changing():
            self._subjects[subject_id] = subject.model_copy(update=changes)
        logging.debug("Updated subject %s: %s", subject_id, changes)
        return self._build_subject(subject_id)

    def update_subject_grades(self, subject_id: str, grades_in: SubjectGradesUpdate) -> Subject:
        subject = self._lookup(self._subjects, "Subject", subject_id)
        # None explicite efface la note ; un champ omis reste inchangé
        changes = grades_in.model_dump(exclude_unset=True)
        with self._changing():
            self._subjects[subject_id] = subject.model_copy(update=changes)
        logging.debug("Updated grades of subject %s: %s", subject_id, changes)
        return self._build_subject(subject_id)

    def delete_subject(self, subject_id: str) -> None:
        subject = self._lookup(self._subjects, "Subject", subject_id)
        with self._changing():
            self._children[subject.ue_id].remove(subject_id)
            del self._subjects[subject_id]
        logging.info("Deleted subject %s", subject_id)

    def get_subject(self, subject_id: str) -> Subject:
        self._lookup(self._subjects, "Subject", subject_id)
        return self._build_subject(subject_id)

    def get_subject_with_calculations(self, subject_id: str) -> SubjectWithCalculations:
        return self.engine.subject_with_calculations(self.get_subject(subject_id))

    # ------------------------------------------------------------------
    # Simulations
    # ------------------------------------------------------------------

    def simulate_minimum_grades(self, ue_id: str) -> SimulationResult:
        return self.engine.simulate_minimum_grades(self.get_ue(ue_id))

    def simulate_ue_grades(self, ue_id: str, grades: Mapping[str, float]) -> UESimulationOutcome:
        return self.engine.simulate_ue_grades(self.get_ue(ue_id), grades)
