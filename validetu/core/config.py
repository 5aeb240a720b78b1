"""
Configuration centrale de l'application
"""
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration de l'application"""

    # Application
    APP_NAME: str = "ValidEtu"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"

    # Stockage (un fichier JSON par utilisateur, ou mémoire pour les tests)
    STORAGE_BACKEND: str = "json"
    STORAGE_DIR: str = "./data"
    STORAGE_KEY_PREFIX: str = "validetu_years_"

    # Règles de validation
    GRADING_SUBJECT_PASS_GRADE: float = 7.0
    GRADING_UE_PASS_AVERAGE: float = 10.0
    GRADING_CREDITS_PER_YEAR: int = 60
    GRADING_CREDITS_PER_SEMESTER: int = 30
    GRADING_MIN_CREDITS_FOR_PROGRESSION: int = 48

    @field_validator("STORAGE_BACKEND")
    @classmethod
    def check_storage_backend(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("json", "memory"):
            raise ValueError(f"STORAGE_BACKEND must be 'json' or 'memory', got {v!r}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.strip().upper()

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",  # Ignore les variables non déclarées dans le .env
    )


# Instance unique pour l'application
settings = Settings()
