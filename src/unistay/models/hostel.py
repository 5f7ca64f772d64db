"""
Modelo de Hostel.

Un hostel tiene una imagen principal (thumbnail) y la lista
ordenada de todas sus imágenes. La principal es la primera subida,
que no siempre encabeza la lista.
"""

from pydantic import BaseModel, Field

from unistay.models.base import EntityModel


class Amenity(BaseModel):
    """Amenity con su ícono de font-awesome."""

    name: str
    icon: str = Field(default="fas fa-check")


class Hostel(EntityModel):
    """Hostel cercano a una universidad."""

    name: str = Field(..., description="Nombre del hostel")
    location: str = Field(default="", description="Ubicación como texto")
    price_range: str = Field(default="", description="Rango de precios (UGX)")
    image_url: str = Field(default="", description="Imagen principal")
    image_urls: list[str] = Field(
        default_factory=list,
        description="Todas las imágenes en el orden elegido, incluida la principal",
    )
    rating: float = Field(default=0.0, ge=0, le=5)
    university_id: str = Field(default="", description="FK a la universidad")
    description: str = Field(default="")
    amenities: list[Amenity] = Field(default_factory=list)
    is_recommended: bool = Field(default=False)

    def stored_image_urls(self) -> list[str]:
        if self.image_urls:
            return list(self.image_urls)
        return super().stored_image_urls()

    @classmethod
    def image_fields(cls, primary_url: str, image_urls: list[str]) -> dict:
        return {"image_url": primary_url, "image_urls": list(image_urls)}
