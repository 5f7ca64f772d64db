"""
Módulo de base de datos.

Provee acceso a Supabase y operaciones CRUD.
"""

from unistay.database.supabase_client import get_supabase_client, SupabaseClient
from unistay.database.repositories import (
    CrudRepository,
    HostelRepository,
    NewsRepository,
    EventRepository,
    JobRepository,
    RoommateProfileRepository,
    DealRepository,
    SpotlightRepository,
    ConfessionRepository,
    REPOSITORY_CLASSES,
    build_repositories,
)

__all__ = [
    "get_supabase_client",
    "SupabaseClient",
    "CrudRepository",
    "HostelRepository",
    "NewsRepository",
    "EventRepository",
    "JobRepository",
    "RoommateProfileRepository",
    "DealRepository",
    "SpotlightRepository",
    "ConfessionRepository",
    "REPOSITORY_CLASSES",
    "build_repositories",
]
