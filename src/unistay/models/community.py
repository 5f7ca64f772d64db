"""
Comunidad: descuentos de comercios, spotlights de estudiantes y confesiones anónimas.
"""

from datetime import datetime, timezone
from typing import ClassVar, Optional

from pydantic import Field

from unistay.models.base import EntityModel


class Deal(EntityModel):
    """Descuento de un comercio para estudiantes."""

    title: str = Field(..., description="Título del descuento")
    business: str = Field(default="", description="Comercio que lo ofrece")
    description: str = Field(default="")
    discount: str = Field(default="", description="'20% off', '2x1', etc.")
    image_url: str = Field(default="")
    expires_at: Optional[str] = Field(None, description="Fecha ISO de vencimiento")


class Spotlight(EntityModel):
    """Estudiante o grupo destacado."""

    name: str = Field(..., description="Nombre del destacado")
    headline: str = Field(default="")
    description: str = Field(default="")
    image_url: str = Field(default="")
    university_id: Optional[str] = None


class Confession(EntityModel):
    """Confesión anónima. No lleva imágenes."""

    HAS_IMAGES: ClassVar[bool] = False

    content: str = Field(..., min_length=1, max_length=2000)
    university_id: Optional[str] = None
    created_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    likes: int = Field(default=0, ge=0)

    def stored_image_urls(self) -> list[str]:
        return []

    @classmethod
    def image_fields(cls, primary_url: str, image_urls: list[str]) -> dict:
        return {}
