# carte_loyers/api/config/settings.py
"""
Configuration centralisée (Pydantic v2 + pydantic-settings).
Sources data.gouv / geo.api, politique de retry, cache de géocodage
et correspondance des colonnes du CSV de la carte des loyers.
"""

from pathlib import Path
from typing import Dict, List, Optional

from dotenv import load_dotenv
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

# Champ logique -> en-tête du CSV "Carte des loyers"
DEFAULT_RENT_COLUMNS: Dict[str, str] = {
    "code_insee": "INSEE_C",
    "commune": "LIBGEO",
    "loyer_m2": "loypredm2",
    "borne_basse": "lwr.IPm2",
    "borne_haute": "upr.IPm2",
    "niveau_prediction": "TYPPRED",
    "nb_observations": "nbobs_com",
    "r2": "R2_adj",
    "loyer_m2_maison": "loypredm2_maison",
    "loyer_m2_appartement": "loypredm2_appartement",
}

# Colonnes dont l'absence n'empêche pas la construction de l'index
OPTIONAL_RENT_FIELDS = frozenset({"loyer_m2_maison", "loyer_m2_appartement"})


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=True,
        validate_assignment=True,
        extra="ignore",
    )

    # --- Base ---
    PROJECT_NAME: str = "Simulateur Investissement Locatif"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # --- API ---
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_V1_STR: str = "/api/v1"
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:8501"

    # --- Sources de données ---
    DATAGOUV_API_BASE: str = "https://www.data.gouv.fr/api/1"
    RENT_DATASET_SLUG: str = (
        "carte-des-loyers-indicateurs-de-loyers-dannonce-par-commune-en-2024"
    )
    RESOURCE_EXCLUDE_PATTERN: str = "documentation|doc|dictionnaire"
    GEO_API_URL: str = "https://geo.api.gouv.fr/communes"
    GEOCODE_CANDIDATES_LIMIT: int = 5
    HTTP_USER_AGENT: str = "SimulateurLocatif/1.0"

    # --- Réseau ---
    FETCH_RETRIES: int = 2
    FETCH_TIMEOUT_MS: int = 20000
    FETCH_BACKOFF_MS: int = 500

    # --- CSV ---
    RENT_COLUMNS: Dict[str, str] = dict(DEFAULT_RENT_COLUMNS)

    # --- Cache de géocodage ---
    CACHE_BACKEND: str = "file"
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_FILE: Optional[Path] = None
    GEOCODE_CACHE_NAMESPACE: str = "simulateur.geocode_cache.v1"

    # --- Paths ---
    DATA_DIR: Path = Path("./data")
    LOG_DIR: Path = Path("./logs")

    # --- Logs ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"

    # --- Monitoring ---
    METRICS_ENABLED: bool = True

    # -------- Validators / Hooks --------
    @field_validator("ENVIRONMENT")
    @classmethod
    def _validate_environment(cls, v: str) -> str:
        allowed = {"development", "staging", "production", "test"}
        if v not in allowed:
            raise ValueError(f"ENVIRONMENT doit être dans {sorted(allowed)}")
        return v

    @field_validator("REDIS_URL", mode="before")
    @classmethod
    def validate_redis_url(cls, value: str) -> str:
        if not value.startswith(("redis://", "rediss://")):
            raise ValueError("REDIS_URL doit commencer par 'redis://'.")
        return value

    @field_validator("CACHE_BACKEND")
    @classmethod
    def validate_cache_backend(cls, value: str) -> str:
        value = value.lower()
        if value not in {"memory", "file", "redis"}:
            raise ValueError("CACHE_BACKEND doit valoir memory, file ou redis.")
        return value

    @field_validator("FETCH_RETRIES", "FETCH_TIMEOUT_MS", "FETCH_BACKOFF_MS")
    @classmethod
    def validate_non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("Les paramètres réseau doivent être positifs.")
        return value

    @field_validator("RENT_COLUMNS")
    @classmethod
    def validate_rent_columns(cls, value: Dict[str, str]) -> Dict[str, str]:
        unknown = set(value) - set(DEFAULT_RENT_COLUMNS)
        if unknown:
            raise ValueError(f"Champs de colonnes inconnus: {sorted(unknown)}")
        # Les champs non surchargés gardent leur en-tête par défaut
        return {**DEFAULT_RENT_COLUMNS, **value}

    @model_validator(mode="after")
    def _after(self) -> "Settings":
        if self.CACHE_FILE is None:
            object.__setattr__(
                self, "CACHE_FILE", self.DATA_DIR / "geocode_cache.json"
            )
        return self

    # -------- Helpers --------
    @property
    def cors_origins_list(self) -> List[str]:
        return (
            ["*"]
            if not self.CORS_ORIGINS
            else [o.strip() for o in self.CORS_ORIGINS.split(",")]
        )

    @property
    def dataset_url(self) -> str:
        return f"{self.DATAGOUV_API_BASE}/datasets/{self.RENT_DATASET_SLUG}/"

    def resource_download_url(self, resource_id: str) -> str:
        return f"{self.DATAGOUV_API_BASE}/datasets/r/{resource_id}"

    def get_log_path(self, filename: str = "app.log") -> Path:
        return self.LOG_DIR / filename


settings = Settings()
