"""
Agrégation des moyennes et des crédits : UE, semestre, année.

Une donnée manquante bloque l'agrégation au niveau supérieur : elle n'est
jamais comptée comme zéro.
"""
from typing import Optional

from validetu.grading_engine.grades import is_subject_validated, subject_final_average
from validetu.grading_engine.rules import DEFAULT_RULES, GradingRules
from validetu.models.academic import AcademicYear, Semester, UE


def ue_average(ue: UE, rules: GradingRules = DEFAULT_RULES) -> Optional[float]:
    """Moyenne pondérée par les coefficients des moyennes finales des matières."""
    if not ue.subjects:
        return None

    total_weighted = 0.0
    total_coefficients = 0.0
    for subject in ue.subjects:
        final = subject_final_average(subject, rules)
        if final is None:
            return None
        total_weighted += final * subject.coefficient
        total_coefficients += subject.coefficient

    if total_coefficients == 0:
        return None
    return total_weighted / total_coefficients


def is_ue_valid(ue: UE, rules: GradingRules = DEFAULT_RULES) -> bool:
    """Toutes les matières ≥ 7 ET moyenne d'UE ≥ 10. Une UE vide n'est pas validée."""
    if not ue.subjects:
        return False
    if not all(is_subject_validated(s, rules) for s in ue.subjects):
        return False
    return rules.is_ue_passing(ue_average(ue, rules))


def semester_average(semester: Semester, rules: GradingRules = DEFAULT_RULES) -> Optional[float]:
    """Moyenne des UE pondérée par les crédits."""
    if not semester.ues:
        return None

    total_weighted = 0.0
    total_credits = 0.0
    for ue in semester.ues:
        average = ue_average(ue, rules)
        if average is None:
            return None
        total_weighted += average * ue.credits
        total_credits += ue.credits

    if total_credits == 0:
        return None
    return total_weighted / total_credits


def semester_total_credits(semester: Semester) -> float:
    return sum(ue.credits for ue in semester.ues)


def semester_validated_credits(semester: Semester, rules: GradingRules = DEFAULT_RULES) -> float:
    return sum(ue.credits for ue in semester.ues if is_ue_valid(ue, rules))


def year_total_credits(year: AcademicYear, rules: GradingRules = DEFAULT_RULES) -> int:
    # Nominal : 2 semestres de 30 crédits, indépendamment des UE saisies
    return rules.credits_per_year


def year_validated_credits(year: AcademicYear, rules: GradingRules = DEFAULT_RULES) -> float:
    return sum(semester_validated_credits(s, rules) for s in year.semesters)


def year_can_progress(year: AcademicYear, rules: GradingRules = DEFAULT_RULES) -> bool:
    return rules.can_progress(year_validated_credits(year, rules))
