"""
Calcul des moyennes d'une matière.

Moyenne initiale = 40 % interrogation + 60 % devoir, définie seulement quand
les deux notes sont présentes. Le rattrapage ne compte que si la moyenne
initiale est sous la note éliminatoire.
"""
from typing import Optional

from validetu.grading_engine.rules import DEFAULT_RULES, GradingRules
from validetu.models.academic import Subject
from validetu.models.calculations import SubjectStatus


def subject_initial_average(subject: Subject, rules: GradingRules = DEFAULT_RULES) -> Optional[float]:
    if subject.interrogation is None or subject.devoir is None:
        return None
    return subject.interrogation * rules.interrogation_weight + subject.devoir * rules.devoir_weight


def subject_final_average(subject: Subject, rules: GradingRules = DEFAULT_RULES) -> Optional[float]:
    """Moyenne retenue pour la validation, après application du rattrapage."""
    initial = subject_initial_average(subject, rules)
    if initial is None:
        return None

    if initial >= rules.subject_pass_grade:
        return initial

    if subject.rattrapage is not None:
        return max(initial, subject.rattrapage)
    return initial


def is_subject_validated(subject: Subject, rules: GradingRules = DEFAULT_RULES) -> bool:
    return rules.is_subject_passing(subject_final_average(subject, rules))


def subject_status(subject: Subject, rules: GradingRules = DEFAULT_RULES) -> SubjectStatus:
    """
    danger : moyenne finale sous la note éliminatoire
    warning : notes incomplètes, ou matière validée uniquement grâce au rattrapage
    success : sinon
    """
    initial = subject_initial_average(subject, rules)
    final = subject_final_average(subject, rules)

    if final is None:
        return SubjectStatus.WARNING
    if final < rules.subject_pass_grade:
        return SubjectStatus.DANGER
    if initial is not None and initial < rules.subject_pass_grade:
        return SubjectStatus.WARNING
    return SubjectStatus.SUCCESS
