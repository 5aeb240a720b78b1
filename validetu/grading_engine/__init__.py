"""
Moteur de calcul des notes

Ce module contient toute la logique automatique pour :
- Moyennes des matières (interrogation, devoir, rattrapage)
- Moyennes et validation des UE
- Moyennes et crédits des semestres
- Crédits et progression de l'année
- Simulation des notes minimales de rattrapage
"""
from validetu.grading_engine.engine import GradingEngine
from validetu.grading_engine.rules import GradingRules, DEFAULT_RULES
from validetu.grading_engine.grades import (
    subject_initial_average,
    subject_final_average,
    is_subject_validated,
    subject_status,
)
from validetu.grading_engine.aggregation import (
    ue_average,
    is_ue_valid,
    semester_average,
    semester_total_credits,
    semester_validated_credits,
    year_total_credits,
    year_validated_credits,
    year_can_progress,
)
from validetu.grading_engine.simulation import simulate_minimum_grades, simulate_ue_grades

__all__ = [
    "GradingEngine",
    "GradingRules",
    "DEFAULT_RULES",
    "subject_initial_average",
    "subject_final_average",
    "is_subject_validated",
    "subject_status",
    "ue_average",
    "is_ue_valid",
    "semester_average",
    "semester_total_credits",
    "semester_validated_credits",
    "year_total_credits",
    "year_validated_credits",
    "year_can_progress",
    "simulate_minimum_grades",
    "simulate_ue_grades",
]
