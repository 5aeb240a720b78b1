"""
Persistance des arbres académiques.

Le stockage est indexé par utilisateur (`validetu_years_<userId>`) : les
arbres de deux utilisateurs ne se mélangent jamais. L'arbre est toujours
lu et écrit en entier, sous sa forme imbriquée (liste d'années).
"""
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import TypeAdapter, ValidationError

from validetu.core.exceptions import PersistenceError
from validetu.models.academic import AcademicYear

_years_adapter = TypeAdapter(List[AcademicYear])

DEFAULT_KEY_PREFIX = "validetu_years_"


def dump_years(years: List[AcademicYear]) -> List[Dict[str, Any]]:
    return [year.to_dict() for year in years]


def parse_years(payload: Any) -> List[AcademicYear]:
    try:
        return _years_adapter.validate_python(payload)
    except ValidationError as e:
        raise PersistenceError(f"Stored academic tree is invalid: {e}") from e


class PersistenceAdapter(ABC):
    """Contrat de stockage : chargement et sauvegarde de l'arbre d'un utilisateur."""

    def __init__(self, key_prefix: str = DEFAULT_KEY_PREFIX):
        self.key_prefix = key_prefix

    def storage_key(self, user_id: str) -> str:
        if not user_id:
            raise PersistenceError("A user id is required to build a storage key")
        return f"{self.key_prefix}{user_id}"

    @abstractmethod
    def load(self, user_id: str) -> Optional[List[AcademicYear]]:
        """Retourne l'arbre stocké, ou None si l'utilisateur n'a rien enregistré."""

    @abstractmethod
    def save(self, user_id: str, years: List[AcademicYear]) -> None:
        """Remplace l'arbre stocké par `years`."""


class InMemoryPersistence(PersistenceAdapter):
    """Stockage en mémoire (tests, sessions éphémères)."""

    def __init__(self, key_prefix: str = DEFAULT_KEY_PREFIX):
        super().__init__(key_prefix)
        self._store: Dict[str, List[Dict[str, Any]]] = {}

    def load(self, user_id: str) -> Optional[List[AcademicYear]]:
        payload = self._store.get(self.storage_key(user_id))
        if payload is None:
            return None
        return parse_years(payload)

    def save(self, user_id: str, years: List[AcademicYear]) -> None:
        self._store[self.storage_key(user_id)] = dump_years(years)
        logging.debug("Saved %d academic year(s) for user %s in memory", len(years), user_id)


class JsonFilePersistence(PersistenceAdapter):
    """Un fichier JSON par utilisateur dans `storage_dir`."""

    def __init__(self, storage_dir: str, key_prefix: str = DEFAULT_KEY_PREFIX):
        super().__init__(key_prefix)
        self.storage_dir = Path(storage_dir)

    def _path(self, user_id: str) -> Path:
        if any(sep in user_id for sep in ("/", "\\")) or user_id in (".", ".."):
            raise PersistenceError(f"Invalid user id for file storage: {user_id!r}")
        return self.storage_dir / f"{self.storage_key(user_id)}.json"

    def load(self, user_id: str) -> Optional[List[AcademicYear]]:
        path = self._path(user_id)
        if not path.exists():
            logging.debug("No stored tree for user %s at %s", user_id, path)
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, ValueError) as e:
            logging.error("Could not read academic tree from %s: %s", path, e)
            raise PersistenceError(f"Could not read {path}: {e}") from e
        years = parse_years(payload)
        logging.info("Loaded %d academic year(s) for user %s", len(years), user_id)
        return years

    def save(self, user_id: str, years: List[AcademicYear]) -> None:
        path = self._path(user_id)
        try:
            self.storage_dir.mkdir(parents=True, exist_ok=True)
            # Écriture dans un fichier temporaire puis remplacement : jamais de fichier à moitié écrit
            fd, tmp_path = tempfile.mkstemp(dir=self.storage_dir, prefix=".tmp_", suffix=".json")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(dump_years(years), f, ensure_ascii=False, indent=2)
                os.replace(tmp_path, path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as e:
            logging.error("Could not write academic tree to %s: %s", path, e)
            raise PersistenceError(f"Could not write {path}: {e}") from e
        logging.debug("Saved %d academic year(s) for user %s to %s", len(years), user_id, path)


def get_persistence(settings: Optional[Any] = None) -> PersistenceAdapter:
    """Instancier le stockage configuré (`STORAGE_BACKEND`)."""
    if settings is None:
        from validetu.core.config import settings
    if settings.STORAGE_BACKEND == "memory":
        return InMemoryPersistence(settings.STORAGE_KEY_PREFIX)
    return JsonFilePersistence(settings.STORAGE_DIR, settings.STORAGE_KEY_PREFIX)
