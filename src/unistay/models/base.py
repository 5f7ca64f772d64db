"""
Modelo base de entidades.

Las columnas en Supabase están en camelCase (imageUrl, priceRange...),
los atributos en Python en snake_case. El alias generator hace el puente.
"""

from typing import ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from unistay.errors import ValidationError


class EntityModel(BaseModel):
    """Registro de una colección con ID asignado por el store."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    # Las entidades sin imágenes (confesiones) lo sobreescriben
    HAS_IMAGES: ClassVar[bool] = True

    id: Optional[str] = Field(None, description="UUID generado por Supabase")

    def to_db_dict(self, include_id: bool = False) -> dict:
        """Convierte a diccionario para inserción en Supabase."""
        exclude = None if include_id and self.id else {"id"}
        return self.model_dump(by_alias=True, exclude=exclude, mode="json")

    @classmethod
    def normalize_fields(cls, fields: dict) -> dict:
        """
        Traduce un dict parcial (nombres Python o columnas) a nombres Python.

        Raises:
            ValidationError: Si aparece un campo que la entidad no tiene
        """
        aliases = {
            (info.alias or name): name for name, info in cls.model_fields.items()
        }
        normalized = {}
        for key, value in fields.items():
            if key in cls.model_fields:
                normalized[key] = value
            elif key in aliases:
                normalized[aliases[key]] = value
            else:
                raise ValidationError(f"Campo desconocido para {cls.__name__}: {key}")
        return normalized

    @classmethod
    def to_db_fields(cls, fields: dict) -> dict:
        """Traduce un dict parcial a columnas de la tabla, sin el ID."""
        return {
            cls.model_fields[name].alias or name: value
            for name, value in cls.normalize_fields(fields).items()
            if name != "id"
        }

    def stored_image_urls(self) -> list[str]:
        """URLs de imágenes que hoy referencia el registro."""
        url = getattr(self, "image_url", None)
        return [url] if url else []

    @classmethod
    def image_fields(cls, primary_url: str, image_urls: list[str]) -> dict:
        """Campos a escribir después de subir imágenes."""
        return {"image_url": primary_url}
