"""
Cliente de Supabase.

Singleton para conexión a la base de datos, storage y auth.
"""

from functools import lru_cache
from typing import Any, Optional

import structlog
from supabase import create_client, Client

from unistay.config import get_settings

logger = structlog.get_logger()


class SupabaseClient:
    """Wrapper del cliente de Supabase con métodos de utilidad."""

    def __init__(self, client: Client, url: Optional[str] = None):
        self._client = client
        self._url = (url or "").rstrip("/")

    @property
    def client(self) -> Client:
        """Acceso directo al cliente de Supabase."""
        return self._client

    @property
    def url(self) -> str:
        """URL base del proyecto."""
        return self._url

    def table(self, name: str):
        """Acceso a una tabla específica."""
        return self._client.table(name)

    def bucket(self, name: str):
        """Acceso a un bucket de Storage."""
        return self._client.storage.from_(name)

    def get_auth_user(self, token: str) -> Optional[Any]:
        """
        Obtiene el usuario de Supabase Auth dueño de un access token.

        Returns:
            El usuario de Auth, o None si el token no tiene sesión
        """
        response = self._client.auth.get_user(token)
        return response.user if response else None


@lru_cache
def get_supabase_client() -> SupabaseClient:
    """
    Obtiene el cliente de Supabase (singleton cacheado).

    Returns:
        SupabaseClient configurado

    Raises:
        ValueError: Si las credenciales no están configuradas
    """
    settings = get_settings()

    if not settings.supabase_url or not settings.supabase_key:
        raise ValueError(
            "SUPABASE_URL y SUPABASE_KEY son requeridos. "
            "Configura las variables de entorno."
        )

    # Usar service key si está disponible para operaciones admin
    key = settings.supabase_service_key or settings.supabase_key

    client = create_client(settings.supabase_url, key)
    logger.info("Cliente de Supabase inicializado", url=settings.supabase_url)

    return SupabaseClient(client, url=settings.supabase_url)
