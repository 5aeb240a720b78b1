"""
Règles de validation configurables
"""
import math
from typing import Any, Dict, Optional

from pydantic import BaseModel


class GradingRules(BaseModel):
    """
    Règles de calcul des moyennes et de validation

    Les valeurs par défaut correspondent au système LMD : notes sur 20,
    matière validée à 7, UE validée à 10, 48 crédits sur 60 pour progresser.
    """

    # Bornes des notes
    min_grade: float = 0.0
    max_grade: float = 20.0

    # Pondération de la moyenne initiale d'une matière
    interrogation_weight: float = 0.4
    devoir_weight: float = 0.6

    # Seuils de réussite
    subject_pass_grade: float = 7.0  # Note éliminatoire par matière
    ue_pass_average: float = 10.0

    # Crédits
    credits_per_year: int = 60
    credits_per_semester: int = 30
    min_credits_for_progression: int = 48

    # Arrondi des notes minimales proposées par le simulateur
    rounding_step: float = 0.5

    def to_dict(self) -> Dict[str, Any]:
        """Convertir en dictionnaire"""
        return self.model_dump()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GradingRules":
        """Créer depuis un dictionnaire"""
        return cls(**data)

    @classmethod
    def get_default_rules(cls) -> "GradingRules":
        """Obtenir les règles par défaut"""
        return cls()

    @classmethod
    def from_settings(cls, settings: Optional[Any] = None) -> "GradingRules":
        """Créer les règles à partir de la configuration de l'application"""
        if settings is None:
            from validetu.core.config import settings
        return cls(
            subject_pass_grade=settings.GRADING_SUBJECT_PASS_GRADE,
            ue_pass_average=settings.GRADING_UE_PASS_AVERAGE,
            credits_per_year=settings.GRADING_CREDITS_PER_YEAR,
            credits_per_semester=settings.GRADING_CREDITS_PER_SEMESTER,
            min_credits_for_progression=settings.GRADING_MIN_CREDITS_FOR_PROGRESSION,
        )

    def validate_grade(self, grade: float) -> bool:
        """Vérifier si une note est dans les bornes"""
        return self.min_grade <= grade <= self.max_grade

    def is_subject_passing(self, average: Optional[float]) -> bool:
        """Vérifier si une moyenne de matière atteint la note éliminatoire"""
        return average is not None and average >= self.subject_pass_grade

    def is_ue_passing(self, average: Optional[float]) -> bool:
        """Vérifier si une moyenne d'UE permet la validation"""
        return average is not None and average >= self.ue_pass_average

    def can_progress(self, credits_earned: float) -> bool:
        """Déterminer si un étudiant peut passer en année supérieure"""
        return credits_earned >= self.min_credits_for_progression

    def round_up(self, value: float) -> float:
        """Arrondir au pas supérieur (0.5 par défaut) : ceil(x * 2) / 2"""
        factor = 1 / self.rounding_step
        return math.ceil(value * factor) / factor


DEFAULT_RULES = GradingRules.get_default_rules()
