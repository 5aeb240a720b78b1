"""
Simulateur de rattrapage.

`simulate_minimum_grades` calcule la note minimale à obtenir au rattrapage
pour que la moyenne de l'UE atteigne 10. `simulate_ue_grades` évalue une UE
avec des notes proposées par l'étudiant ("et si j'avais ces notes ?").
"""
import logging
from typing import Mapping

from validetu.core.exceptions import ConstraintViolationError
from validetu.grading_engine.aggregation import ue_average
from validetu.grading_engine.grades import subject_final_average
from validetu.grading_engine.rules import DEFAULT_RULES, GradingRules
from validetu.models.academic import UE
from validetu.models.calculations import SimulationResult, UESimulationOutcome


def _fmt(value: float) -> str:
    return f"{value:g}"


def simulate_minimum_grades(ue: UE, rules: GradingRules = DEFAULT_RULES) -> SimulationResult:
    finals = {s.id: subject_final_average(s, rules) for s in ue.subjects}
    retake = [
        s for s in ue.subjects
        if finals[s.id] is None or finals[s.id] < rules.subject_pass_grade
    ]

    if not retake:
        average = ue_average(ue, rules)
        if average is not None and average < rules.ue_pass_average:
            return SimulationResult(
                is_possible=False,
                message=(
                    f"Toutes les matières ont des moyennes ≥ {_fmt(rules.subject_pass_grade)} "
                    f"mais la moyenne de l'UE est < {_fmt(rules.ue_pass_average)}. "
                    "Aucun rattrapage possible."
                ),
            )
        return SimulationResult(
            is_possible=True,
            message="Cette UE est déjà validée ou ne nécessite pas de rattrapage.",
        )

    retake_ids = {s.id for s in retake}
    total_coefficients = sum(s.coefficient for s in ue.subjects)
    total_points = sum(
        finals[s.id] * s.coefficient
        for s in ue.subjects
        if s.id not in retake_ids and finals[s.id] is not None
    )
    points_needed = rules.ue_pass_average * total_coefficients - total_points

    if len(retake) == 1:
        subject = retake[0]
        if subject.coefficient <= 0:
            return SimulationResult(
                is_possible=False,
                message=f"Le coefficient de {subject.name} est nul : le rattrapage ne peut pas modifier la moyenne de l'UE.",
            )

        minimum_grade = points_needed / subject.coefficient
        logging.debug("simulate_minimum_grades: ue=%s subject=%s raw=%.4f", ue.id, subject.id, minimum_grade)
        if minimum_grade > rules.max_grade:
            return SimulationResult(
                minimum_grades={subject.id: rules.max_grade},
                is_possible=False,
                message=(
                    f"Même avec une note maximale de {_fmt(rules.max_grade)} au rattrapage de "
                    f"{subject.name}, la moyenne de l'UE sera insuffisante."
                ),
            )

        # Pas de plancher à la note éliminatoire dans ce cas, contrairement au cas multiple
        grade = rules.round_up(minimum_grade)
        return SimulationResult(
            minimum_grades={subject.id: grade},
            is_possible=True,
            message=f"Obtenir au moins {_fmt(grade)} au rattrapage de {subject.name} permettra de valider l'UE.",
        )

    total_retake_coefficients = sum(s.coefficient for s in retake)
    if total_retake_coefficients <= 0:
        return SimulationResult(
            is_possible=False,
            message="Les matières à rattraper ont des coefficients nuls : la moyenne de l'UE ne peut pas évoluer.",
        )

    average_needed = points_needed / total_retake_coefficients
    logging.debug("simulate_minimum_grades: ue=%s retakes=%d raw=%.4f", ue.id, len(retake), average_needed)
    if average_needed > rules.max_grade:
        return SimulationResult(
            minimum_grades={s.id: rules.max_grade for s in retake},
            is_possible=False,
            message="Même avec des notes maximales aux rattrapages, la validation de l'UE est impossible.",
        )

    grade = max(rules.subject_pass_grade, rules.round_up(average_needed))
    minimum_grades = {}
    message = "Pour valider l'UE, obtenir au moins:\n"
    for subject in retake:
        minimum_grades[subject.id] = grade
        message += f"- {_fmt(grade)} au rattrapage de {subject.name}\n"

    return SimulationResult(minimum_grades=minimum_grades, is_possible=True, message=message)


def simulate_ue_grades(
    ue: UE,
    grades: Mapping[str, float],
    rules: GradingRules = DEFAULT_RULES,
) -> UESimulationOutcome:
    """
    Évaluer une UE avec des moyennes proposées par matière.

    `grades` associe un identifiant de matière à une moyenne simulée sur 20.
    Une note hors bornes lève `ConstraintViolationError`.
    """
    for subject_id, grade in grades.items():
        if not rules.validate_grade(grade):
            raise ConstraintViolationError(
                f"Simulated grade for subject {subject_id!r} must be between "
                f"{_fmt(rules.min_grade)} and {_fmt(rules.max_grade)}, got {grade}"
            )

    if not ue.subjects:
        return UESimulationOutcome(is_valid=False, message="Cette UE ne contient aucune matière.")

    if any(s.id not in grades for s in ue.subjects):
        return UESimulationOutcome(
            is_valid=False,
            message="Veuillez attribuer une note à toutes les matières pour simuler la validation de l'UE.",
        )

    if any(grades[s.id] < rules.subject_pass_grade for s in ue.subjects):
        return UESimulationOutcome(
            is_valid=False,
            message=(
                "L'UE ne peut pas être validée car une ou plusieurs matières ont une moyenne "
                f"inférieure à {_fmt(rules.subject_pass_grade)}."
            ),
        )

    total_coefficients = sum(s.coefficient for s in ue.subjects)
    if total_coefficients == 0:
        return UESimulationOutcome(is_valid=False, message="La somme des coefficients de l'UE est nulle.")

    average = sum(grades[s.id] * s.coefficient for s in ue.subjects) / total_coefficients
    if rules.is_ue_passing(average):
        return UESimulationOutcome(
            is_valid=True,
            average=average,
            message=f"L'UE est validée avec ces notes. Moyenne simulée: {average:.2f}/20",
        )
    return UESimulationOutcome(
        is_valid=False,
        average=average,
        message=(
            f"L'UE n'est pas validée avec ces notes. Il faut une moyenne d'au moins "
            f"{_fmt(rules.ue_pass_average)}/20, mais la moyenne simulée est {average:.2f}/20."
        ),
    )
