"""Tests du simulateur de rattrapage."""
import pytest

from validetu.core.exceptions import ConstraintViolationError
from validetu.grading_engine.simulation import simulate_minimum_grades, simulate_ue_grades

from conftest import graded, make_subject, make_ue, retaken


class TestSingleRetake:

    def test_required_grade_is_not_floored_at_seven(self):
        # A : moyenne finale 14, coef 2 ; B : à rattraper, coef 1
        # total_coefficients = 3, total_points = 28, g = (30 - 28) / 1 = 2
        a = retaken(14, coefficient=2, name="A")
        b = make_subject(interrogation=5, devoir=5, coefficient=1, name="B")
        ue = make_ue([a, b])
        b_id = ue.subjects[1].id

        result = simulate_minimum_grades(ue)

        assert result.is_possible
        assert result.minimum_grades == {b_id: 2.0}
        assert result.minimum_grades[b_id] < 7
        assert "2" in result.message and "B" in result.message

    def test_unset_subject_counts_as_retake(self):
        ue = make_ue([retaken(14, coefficient=2), make_subject(coefficient=1)])
        result = simulate_minimum_grades(ue)
        assert result.minimum_grades == {ue.subjects[1].id: 2.0}

    def test_rounds_up_to_half_point(self):
        # g = (30 - 12.5) / 2 = 8.75 -> 9
        ue = make_ue([retaken(12.5, coefficient=1), make_subject(interrogation=5, devoir=5, coefficient=2)])
        result = simulate_minimum_grades(ue)
        assert result.minimum_grades == {ue.subjects[1].id: 9.0}

    def test_impossible_caps_at_twenty(self):
        # g = (110 - 75) / 1 = 35
        ue = make_ue([retaken(7.5, coefficient=10), make_subject(coefficient=1, name="Physique")])
        result = simulate_minimum_grades(ue)
        assert not result.is_possible
        assert result.minimum_grades == {ue.subjects[1].id: 20}
        assert "Physique" in result.message


class TestMultipleRetakes:

    def test_shared_target_is_floored_at_seven(self):
        # g = (40 - 28) / 2 = 6 -> 7
        ue = make_ue([
            retaken(14, coefficient=2),
            make_subject(coefficient=1, name="B"),
            make_subject(interrogation=2, devoir=4, coefficient=1, name="C"),
        ])
        result = simulate_minimum_grades(ue)
        b_id, c_id = ue.subjects[1].id, ue.subjects[2].id

        assert result.is_possible
        assert result.minimum_grades == {b_id: 7.0, c_id: 7.0}
        assert "- 7 au rattrapage de B" in result.message
        assert "- 7 au rattrapage de C" in result.message

    def test_shared_target_above_seven(self):
        # g = (30 - 10) / 2 = 10
        ue = make_ue([graded(10), make_subject(), make_subject()])
        result = simulate_minimum_grades(ue)
        assert result.minimum_grades == {ue.subjects[1].id: 10.0, ue.subjects[2].id: 10.0}

    def test_impossible_sets_every_retake_to_twenty(self):
        # g = (120 - 75) / 2 = 22.5
        ue = make_ue([retaken(7.5, coefficient=10), make_subject(), make_subject()])
        result = simulate_minimum_grades(ue)
        assert not result.is_possible
        assert result.minimum_grades == {ue.subjects[1].id: 20, ue.subjects[2].id: 20}


class TestNoRetake:

    def test_all_subjects_pass_but_average_below_ten_is_impossible(self):
        result = simulate_minimum_grades(make_ue([retaken(8), retaken(9)]))
        assert not result.is_possible
        assert result.minimum_grades == {}

    def test_validated_ue_needs_nothing(self):
        result = simulate_minimum_grades(make_ue([graded(15), graded(10)]))
        assert result.is_possible
        assert result.minimum_grades == {}

    def test_empty_ue_needs_nothing(self):
        result = simulate_minimum_grades(make_ue([]))
        assert result.is_possible
        assert result.minimum_grades == {}


class TestWhatIfSimulation:

    def setup_method(self):
        self.ue = make_ue([make_subject(coefficient=2), make_subject(coefficient=1)])
        self.a_id = self.ue.subjects[0].id
        self.b_id = self.ue.subjects[1].id

    def test_missing_grade(self):
        outcome = simulate_ue_grades(self.ue, {self.a_id: 12})
        assert not outcome.is_valid
        assert outcome.average is None

    def test_subject_below_seven(self):
        outcome = simulate_ue_grades(self.ue, {self.a_id: 18, self.b_id: 6})
        assert not outcome.is_valid
        assert outcome.average is None

    def test_valid_average(self):
        outcome = simulate_ue_grades(self.ue, {self.a_id: 11, self.b_id: 8})
        assert outcome.is_valid
        assert outcome.average == pytest.approx(10.0)
        assert "10.00/20" in outcome.message

    def test_average_below_ten(self):
        outcome = simulate_ue_grades(self.ue, {self.a_id: 10, self.b_id: 7})
        assert not outcome.is_valid
        assert outcome.average == pytest.approx(9.0)

    @pytest.mark.parametrize("grade", [-1, 20.5])
    def test_out_of_bounds_grade_is_rejected(self, grade):
        with pytest.raises(ConstraintViolationError):
            simulate_ue_grades(self.ue, {self.a_id: grade, self.b_id: 12})
