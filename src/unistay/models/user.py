"""
Modelo de Usuario autenticado.

El usuario vive en Supabase Auth; acá solo se guarda lo que
el núcleo necesita: ID, nombre y email.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """Usuario de la sesión actual."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="UID de Supabase Auth")
    name: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_auth_user(cls, auth_user: Any) -> "User":
        """Construye el usuario a partir del objeto de Supabase Auth."""
        metadata = getattr(auth_user, "user_metadata", None) or {}
        name = metadata.get("full_name") or metadata.get("name")
        email = getattr(auth_user, "email", None)
        if not name and email:
            name = email.split("@")[0]
        return cls(id=str(auth_user.id), name=name, email=email)
