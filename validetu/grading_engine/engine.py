"""
Moteur de calcul : projection des entités brutes en vues calculées.

Les vues sont construites de bas en haut (matières, puis UE, puis semestre,
puis année) et ne modifient jamais les entités d'origine.
"""
from typing import Mapping, Optional

from validetu.grading_engine import aggregation, grades, simulation
from validetu.grading_engine.rules import GradingRules
from validetu.models.academic import AcademicYear, Semester, Subject, UE
from validetu.models.calculations import (
    AcademicYearWithCalculations,
    SemesterWithCalculations,
    SimulationResult,
    SubjectWithCalculations,
    UESimulationOutcome,
    UEWithCalculations,
)


class GradingEngine:
    """
    Moteur de calcul des moyennes, validations et crédits.
    """

    def __init__(self, rules: Optional[GradingRules] = None):
        self.rules = rules or GradingRules.get_default_rules()

    def subject_with_calculations(self, subject: Subject) -> SubjectWithCalculations:
        return SubjectWithCalculations(
            **subject.model_dump(),
            initial_average=grades.subject_initial_average(subject, self.rules),
            final_average=grades.subject_final_average(subject, self.rules),
            status=grades.subject_status(subject, self.rules),
        )

    def ue_with_calculations(self, ue: UE) -> UEWithCalculations:
        data = ue.model_dump(exclude={"subjects"})
        return UEWithCalculations(
            **data,
            subjects=[self.subject_with_calculations(s) for s in ue.subjects],
            average=aggregation.ue_average(ue, self.rules),
            is_valid=aggregation.is_ue_valid(ue, self.rules),
        )

    def semester_with_calculations(self, semester: Semester) -> SemesterWithCalculations:
        ues = [self.ue_with_calculations(ue) for ue in semester.ues]
        data = semester.model_dump(exclude={"ues"})
        return SemesterWithCalculations(
            **data,
            ues=ues,
            average=aggregation.semester_average(semester, self.rules),
            total_credits=aggregation.semester_total_credits(semester),
            validated_credits=sum(ue.credits for ue in ues if ue.is_valid),
        )

    def year_with_calculations(self, year: AcademicYear) -> AcademicYearWithCalculations:
        semesters = [self.semester_with_calculations(s) for s in year.semesters]
        validated_credits = sum(s.validated_credits for s in semesters)
        data = year.model_dump(exclude={"semesters"})
        return AcademicYearWithCalculations(
            **data,
            semesters=semesters,
            total_credits=aggregation.year_total_credits(year, self.rules),
            validated_credits=validated_credits,
            can_progress=self.rules.can_progress(validated_credits),
        )

    def simulate_minimum_grades(self, ue: UE) -> SimulationResult:
        return simulation.simulate_minimum_grades(ue, self.rules)

    def simulate_ue_grades(self, ue: UE, proposed: Mapping[str, float]) -> UESimulationOutcome:
        return simulation.simulate_ue_grades(ue, proposed, self.rules)
