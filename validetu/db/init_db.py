"""
Initialisation d'un arbre avec des données de démonstration
"""
import logging

from validetu.main import AcademicState
from validetu.models.academic import AcademicYear
from validetu.schemas.academic import (
    AcademicYearCreate,
    SemesterCreate,
    SubjectCreate,
    SubjectGradesUpdate,
    UECreate,
)

# (semestre, [(UE, crédits, [(matière, coef, interrogation, devoir, rattrapage)])])
DEMO_SEMESTERS = [
    ("Semestre 1", [
        ("Mathématiques", 12, [
            ("Analyse 1", 2, 12.0, 14.0, None),
            ("Algèbre 1", 1, 9.0, 11.0, None),
        ]),
        ("Informatique", 10, [
            ("Algorithmique", 2, 15.0, 13.0, None),
            ("Architecture", 1, 6.0, 5.0, 11.0),
        ]),
        ("Langues", 8, [
            ("Anglais", 1, 13.0, 12.0, None),
        ]),
    ]),
    ("Semestre 2", [
        ("Physique", 12, [
            ("Mécanique", 2, 8.0, 6.0, None),
            ("Électricité", 1, 10.0, 9.0, None),
        ]),
        ("Programmation", 12, [
            ("Python", 2, 16.0, 15.0, None),
            ("Bases de données", 1, None, None, None),
        ]),
        ("Méthodologie", 6, [
            ("Expression écrite", 1, 11.0, 10.0, None),
        ]),
    ]),
]


def init_demo_data(state: AcademicState, title: str = "Licence 1 - 2024/2025") -> AcademicYear:
    """Créer une année de démonstration pour l'utilisateur connecté"""
    tree = state.tree
    year = tree.create_academic_year(AcademicYearCreate(title=title))

    for semester_title, ues in DEMO_SEMESTERS:
        semester = tree.create_semester(year.id, SemesterCreate(title=semester_title))
        for ue_name, credits, subjects in ues:
            ue = state.create_ue(semester.id, UECreate(name=ue_name, credits=credits))
            for name, coefficient, interrogation, devoir, rattrapage in subjects:
                subject = state.create_subject(ue.id, SubjectCreate(name=name, coefficient=coefficient))
                state.update_subject_grades(subject.id, SubjectGradesUpdate(
                    interrogation=interrogation,
                    devoir=devoir,
                    rattrapage=rattrapage,
                ))

    logging.info("Demo data created for user %s: year %s", tree.user_id, year.id)
    return tree.get_academic_year(year.id)
