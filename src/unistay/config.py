"""
Configuración centralizada del sistema.
Carga variables de entorno y define settings globales.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Encontrar la raíz del proyecto (donde está el .env)
# config.py -> unistay/ -> src/ -> raíz del proyecto
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Configuración principal de la aplicación."""

    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Supabase
    supabase_url: str = Field(..., description="URL del proyecto Supabase")
    supabase_key: str = Field(..., description="Anon key de Supabase")
    supabase_service_key: Optional[str] = Field(
        None, description="Service role key para operaciones admin"
    )

    # Admin: allow-list de emails (JSON en el .env: ["a@x.com", "b@y.com"])
    admin_emails: list[str] = Field(
        default_factory=lambda: ["admin@unistay.com"],
        description="Emails con acceso al panel de administración",
    )

    # API HTTP
    api_listen: str = Field("0.0.0.0", description="Host de escucha de la API")
    api_port: int = Field(8080, description="Puerto de la API")
    max_upload_mb: int = Field(
        10, ge=1, description="Tamaño máximo de un request multipart (MB)"
    )

    # Logging
    log_level: str = Field("INFO", description="Nivel de logging")


@lru_cache
def get_settings() -> Settings:
    """Obtiene la configuración cacheada."""
    return Settings()


# Constantes del sistema
UNIVERSITIES = [
    {"id": "123e4567-e89b-12d3-a456-426614174001", "name": "Makerere"},
    {"id": "123e4567-e89b-12d3-a456-426614174002", "name": "Kyambogo"},
    {"id": "123e4567-e89b-12d3-a456-426614174003", "name": "MUBS"},
    {"id": "123e4567-e89b-12d3-a456-426614174004", "name": "UCU"},
    {"id": "123e4567-e89b-12d3-a456-426614174005", "name": "UMU Nkozi"},
    {"id": "123e4567-e89b-12d3-a456-426614174006", "name": "KIU"},
    {"id": "123e4567-e89b-12d3-a456-426614174007", "name": "MUST"},
    {"id": "123e4567-e89b-12d3-a456-426614174008", "name": "Aga Khan"},
    {"id": "123e4567-e89b-12d3-a456-426614174009", "name": "Gulu"},
    {"id": "123e4567-e89b-12d3-a456-426614174010", "name": "Lira"},
    {"id": "123e4567-e89b-12d3-a456-426614174011", "name": "IUEA"},
]

AMENITIES_LIST = [
    {"name": "WiFi", "icon": "fas fa-wifi"},
    {"name": "Shuttle", "icon": "fas fa-bus"},
    {"name": "Security", "icon": "fas fa-shield-alt"},
    {"name": "DSTV", "icon": "fas fa-tv"},
    {"name": "Pool", "icon": "fas fa-swimmer"},
    {"name": "Gym", "icon": "fas fa-dumbbell"},
    {"name": "Restaurant", "icon": "fas fa-utensils"},
    {"name": "Water", "icon": "fas fa-shower"},
]

JOB_TYPES = ["Full-time", "Part-time", "Internship"]

# Perfil de roommate
GENDERS = ["Male", "Female"]
SEEKING_GENDERS = ["Male", "Female", "Any"]
LEASE_DURATIONS = ["Semester", "Full Year", "Flexible"]
STUDY_SCHEDULES = ["Early Bird", "Night Owl", "Flexible"]
CLEANLINESS_LEVELS = ["Tidy", "Average", "Relaxed"]
GUEST_FREQUENCIES = ["Rarely", "Sometimes", "Often"]
DRINKING_HABITS = ["Socially", "Rarely", "No"]
