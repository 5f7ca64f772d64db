"""
Flujo de upload/reemplazo de imágenes de los formularios de admin.

Orden dentro de un submit:
1. Validar que haya al menos una imagen (antes de tocar la red)
2. Subir las imágenes locales a {bucket}/{id o timestamp}/
3. (el llamador escribe la entidad)
4. Borrar las imágenes viejas que ya no se usan; si falla, solo warning
"""

import asyncio
import time
from dataclasses import dataclass, field
from typing import Optional, Union

import structlog

from unistay.errors import StorageError, ValidationError
from unistay.storage import ImageStorage, LocalImage

logger = structlog.get_logger()

# Una imagen del formulario: URL ya subida o archivo local pendiente
SelectedImage = Union[str, LocalImage]


@dataclass
class UploadedImages:
    """Resultado de subir la selección de un formulario."""

    primary_url: str
    image_urls: list[str]
    uploaded_urls: list[str] = field(default_factory=list)


class ImageWorkflow:
    """Sube imágenes nuevas y limpia las reemplazadas."""

    def __init__(self, storage: Optional[ImageStorage] = None):
        self.storage = storage or ImageStorage()

    def validate(self, selection: list[SelectedImage]) -> None:
        """
        Raises:
            ValidationError: Si no hay ninguna imagen seleccionada
        """
        if not selection:
            raise ValidationError("Please upload at least one image")

    async def upload(
        self,
        selection: list[SelectedImage],
        bucket: str,
        entity_id: Optional[str] = None,
    ) -> UploadedImages:
        """
        Sube las imágenes locales de la selección.

        Las URLs remotas se conservan tal cual. La carpeta destino es el ID
        de la entidad, o un timestamp en milisegundos si todavía no tiene.

        Returns:
            UploadedImages con la lista final en el orden de la selección
        """
        self.validate(selection)

        local_images = [img for img in selection if isinstance(img, LocalImage)]
        folder = entity_id or str(int(time.time() * 1000))

        uploaded: list[str] = []
        if local_images:
            uploaded = await asyncio.to_thread(
                self.storage.upload_multiple_images, local_images, bucket, folder
            )

        pending = iter(uploaded)
        image_urls = [
            next(pending) if isinstance(img, LocalImage) else img for img in selection
        ]
        primary_url = uploaded[0] if uploaded else image_urls[0]

        logger.info(
            "Imágenes preparadas",
            bucket=bucket,
            folder=folder,
            uploaded=len(uploaded),
            kept=len(image_urls) - len(uploaded),
        )
        return UploadedImages(
            primary_url=primary_url,
            image_urls=image_urls,
            uploaded_urls=uploaded,
        )

    @staticmethod
    def stale_urls(previous: list[str], current: list[str]) -> list[str]:
        """URLs anteriores que ya no están en la lista nueva, sin repetir."""
        keep = set(current)
        stale = []
        for url in previous:
            if url and url not in keep and url not in stale:
                stale.append(url)
        return stale

    async def cleanup(
        self, previous: list[str], current: list[str], bucket: str
    ) -> list[str]:
        """
        Borra las imágenes reemplazadas.

        Los errores de borrado se loguean como warning y no se propagan:
        la entidad ya quedó escrita con las URLs nuevas.

        Returns:
            Las URLs efectivamente borradas
        """
        deleted = []
        for url in self.stale_urls(previous, current):
            try:
                await asyncio.to_thread(self.storage.delete_image, url, bucket)
            except StorageError as e:
                logger.warning(
                    "No se pudo borrar imagen vieja",
                    bucket=bucket,
                    url=url,
                    error=str(e),
                )
                continue
            deleted.append(url)
        return deleted
