"""
État applicatif : session utilisateur + arbre académique + stockage.

`AcademicState` remplace un singleton global : il est créé par la couche
appelante, porte la session de l'utilisateur connecté et sauvegarde l'arbre
complet après chaque mutation. Il applique aussi les limites de saisie
(plafond de crédits par semestre, crédits et coefficients positifs, notes
entre 0 et 20) que l'arbre brut ne vérifie pas.
"""
import logging
from typing import Optional

from validetu.core.config import Settings, settings as default_settings
from validetu.core.exceptions import ConstraintViolationError, UnauthenticatedError
from validetu.core.session import UserSession
from validetu.crud.academic_tree import AcademicTree
from validetu.db.persistence import PersistenceAdapter, get_persistence
from validetu.grading_engine import GradingRules
from validetu.models.academic import UE, Subject, User
from validetu.schemas.academic import (
    SubjectCreate,
    SubjectGradesUpdate,
    SubjectUpdate,
    UECreate,
    UEUpdate,
)


class AcademicState:
    def __init__(self, persistence: Optional[PersistenceAdapter] = None,
                 rules: Optional[GradingRules] = None,
                 settings: Optional[Settings] = None):
        self.settings = settings or default_settings
        self.persistence = persistence or get_persistence(self.settings)
        self.rules = rules or GradingRules.from_settings(self.settings)
        self.session = UserSession()
        self._tree: Optional[AcademicTree] = None

    @property
    def current_user(self) -> Optional[User]:
        return self.session.current_user

    @property
    def tree(self) -> AcademicTree:
        """Arbre de l'utilisateur connecté ; lève `UnauthenticatedError` sinon."""
        self.session.require_user()
        if self._tree is None:
            raise UnauthenticatedError()
        return self._tree

    def sign_in(self, user: User) -> AcademicTree:
        """Ouvrir la session de `user` et charger son arbre en entier."""
        # Chargement avant toute modification de la session : un échec laisse l'état intact
        years = self.persistence.load(user.id) or []
        tree = AcademicTree.from_years(user.id, years, rules=self.rules, on_change=self._save)
        if self.session.is_authenticated:
            self.sign_out()
        self.session.sign_in(user)
        self._tree = tree
        logging.info("Academic tree loaded for user %s (%d year(s))", user.id, len(years))
        return self._tree

    def sign_out(self) -> None:
        self._tree = None
        self.session.sign_out()

    def _save(self, tree: AcademicTree) -> None:
        self.persistence.save(tree.user_id, tree.to_storage())

    # ------------------------------------------------------------------
    # Limites de saisie
    # ------------------------------------------------------------------

    def _check_semester_credits(self, semester_id: str, new_credits: float,
                                exclude_ue_id: Optional[str] = None) -> None:
        semester = self.tree.get_semester(semester_id)
        current = sum(ue.credits for ue in semester.ues if ue.id != exclude_ue_id)
        total = current + new_credits
        cap = self.rules.credits_per_semester
        if total > cap:
            raise ConstraintViolationError(
                f"Le total des crédits ne peut pas dépasser {cap}. "
                f"Actuellement: {current:g}, Après modification: {total:g}"
            )

    def create_ue(self, semester_id: str, ue_in: UECreate) -> UE:
        if ue_in.credits <= 0:
            raise ConstraintViolationError(f"UE credits must be positive, got {ue_in.credits:g}")
        self._check_semester_credits(semester_id, ue_in.credits)
        return self.tree.create_ue(semester_id, ue_in)

    def update_ue(self, ue_id: str, ue_in: UEUpdate) -> UE:
        if ue_in.credits is not None:
            if ue_in.credits <= 0:
                raise ConstraintViolationError(f"UE credits must be positive, got {ue_in.credits:g}")
            ue = self.tree.get_ue(ue_id)
            self._check_semester_credits(ue.semester_id, ue_in.credits, exclude_ue_id=ue_id)
        return self.tree.update_ue(ue_id, ue_in)

    def update_subject_grades(self, subject_id: str, grades_in: SubjectGradesUpdate) -> Subject:
        for field, value in grades_in.model_dump(exclude_unset=True).items():
            if value is not None and not self.rules.validate_grade(value):
                raise ConstraintViolationError(
                    f"La note '{field}' doit être comprise entre "
                    f"{self.rules.min_grade:g} et {self.rules.max_grade:g}, reçu {value:g}"
                )
        return self.tree.update_subject_grades(subject_id, grades_in)

    def _check_coefficient(self, coefficient: float) -> None:
        if coefficient <= 0:
            raise ConstraintViolationError(f"Le coefficient doit être positif, reçu {coefficient:g}")

    def create_subject(self, ue_id: str, subject_in: SubjectCreate) -> Subject:
        self._check_coefficient(subject_in.coefficient)
        return self.tree.create_subject(ue_id, subject_in)

    def update_subject(self, subject_id: str, subject_in: SubjectUpdate) -> Subject:
        if subject_in.coefficient is not None:
            self._check_coefficient(subject_in.coefficient)
        return self.tree.update_subject(subject_id, subject_in)
