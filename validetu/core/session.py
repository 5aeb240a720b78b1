"""
Session utilisateur : qui est connecté.

L'authentification elle-même (mots de passe, jetons) n'est pas gérée ici ;
la session reçoit un utilisateur déjà identifié.
"""
import logging
from typing import Optional

from validetu.core.exceptions import UnauthenticatedError
from validetu.models.academic import User
from validetu.schemas.academic import UserUpdate


class UserSession:
    def __init__(self):
        self.current_user: Optional[User] = None

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def sign_in(self, user: User) -> User:
        self.current_user = user
        logging.info("User %s signed in", user.id)
        return user

    def sign_out(self) -> None:
        if self.current_user is not None:
            logging.info("User %s signed out", self.current_user.id)
        self.current_user = None

    def require_user(self) -> User:
        """Obtenir l'utilisateur courant, ou lever `UnauthenticatedError`."""
        if self.current_user is None:
            raise UnauthenticatedError()
        return self.current_user

    def update_profile(self, user_in: UserUpdate) -> User:
        user = self.require_user()
        changes = user_in.model_dump(exclude_unset=True, exclude_none=True)
        self.current_user = user.model_copy(update=changes)
        logging.debug("Updated profile of user %s: %s", user.id, sorted(changes))
        return self.current_user
