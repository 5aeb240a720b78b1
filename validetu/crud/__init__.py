from validetu.crud.academic_tree import AcademicTree

__all__ = ["AcademicTree"]
