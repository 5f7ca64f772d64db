"""
Sesión del usuario.

El núcleo solo necesita saber quién es el usuario actual y si es admin.
La autenticación en sí la resuelve Supabase Auth.
"""

from typing import Optional

import structlog

from unistay.config import Settings, get_settings
from unistay.database import SupabaseClient
from unistay.models import User

logger = structlog.get_logger()


def resolve_user(client: SupabaseClient, token: Optional[str]) -> Optional[User]:
    """
    Obtiene el usuario dueño de un access token de Supabase.

    Returns:
        User, o None si no hay token o la sesión no es válida
    """
    if not token:
        return None

    try:
        auth_user = client.get_auth_user(token)
    except Exception as e:
        # Token vencido o inválido: se trata como visitante anónimo
        logger.warning("Sesión inválida", error=str(e))
        return None

    if auth_user is None:
        return None
    return User.from_auth_user(auth_user)


def is_admin(user: Optional[User], settings: Optional[Settings] = None) -> bool:
    """Un usuario es admin si su email está en la allow-list."""
    if user is None or not user.email:
        return False
    settings = settings or get_settings()
    allowed = {email.strip().lower() for email in settings.admin_emails}
    return user.email.lower() in allowed
