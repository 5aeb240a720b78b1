"""Exceptions du moteur de suivi académique"""


class ValidEtuError(Exception):
    """Exception de base pour les erreurs académiques"""
    pass


class NotFoundError(ValidEtuError):
    """Se lance quand un identifiant (année, semestre, UE, matière) n'existe pas"""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found: {entity_id!r}")


class UnauthenticatedError(ValidEtuError):
    """Se lance quand une opération exige un utilisateur connecté"""

    def __init__(self, message: str = "Aucun utilisateur connecté"):
        super().__init__(message)


class ConstraintViolationError(ValidEtuError):
    """Se lance quand une limite imposée par l'appelant est dépassée (crédits, bornes de notes)"""
    pass


class PersistenceError(ValidEtuError):
    """Se lance quand la lecture ou l'écriture du stockage échoue"""
    pass
