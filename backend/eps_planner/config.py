"""
Configuration centrale de l'application via variables d'environnement.
Charger depuis un fichier .env en développement.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Base de données (document unique JSON, SQLite par défaut)
    DATABASE_URL: str = "sqlite:///./eps_planner.db"
    STATE_DOCUMENT_KEY: str = "eps:data"

    # Reprogrammation : horizon de recherche des créneaux (en semaines, ~10 ans)
    RESCHEDULE_HORIZON_WEEKS: int = 520

    # Verrouillage automatique des séances passées
    LOCK_JOB_INTERVAL_HOURS: int = 6

    # Environnement
    ENV: str = "development"

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = Settings()
