"""
Imágenes en Supabase Storage.

Sube archivos a bucket/carpeta y devuelve URLs públicas; borra objetos
a partir de su URL pública.
"""

import mimetypes
import secrets
import time
from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Optional
from urllib.parse import unquote, urlparse

import httpx
import structlog
from storage3.utils import StorageException

from unistay.database.supabase_client import get_supabase_client, SupabaseClient
from unistay.errors import StorageError

logger = structlog.get_logger()


@dataclass
class LocalImage:
    """Archivo elegido por el usuario que todavía no se subió."""

    filename: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def extension(self) -> str:
        suffix = PurePosixPath(self.filename).suffix.lower().lstrip(".")
        if suffix:
            return suffix
        guessed = mimetypes.guess_extension(self.mime_type) or ".bin"
        return guessed.lstrip(".")

    @property
    def mime_type(self) -> str:
        if self.content_type:
            return self.content_type
        guessed, _ = mimetypes.guess_type(self.filename)
        return guessed or "application/octet-stream"


class ImageStorage:
    """Operaciones de upload y borrado sobre los buckets de imágenes."""

    PUBLIC_PREFIX = "/storage/v1/object/public/"

    def __init__(self, client: Optional[SupabaseClient] = None):
        self._client = client or get_supabase_client()

    @property
    def client(self) -> SupabaseClient:
        return self._client

    def _object_path(self, image: LocalImage, folder: str) -> str:
        millis = int(time.time() * 1000)
        return f"{folder}/{millis}-{secrets.token_hex(4)}.{image.extension}"

    def upload_image(self, image: LocalImage, bucket: str, folder: str) -> str:
        """
        Sube una imagen al bucket dentro de la carpeta dada.

        Returns:
            URL pública del objeto subido

        Raises:
            StorageError: Si el upload falla
        """
        path = self._object_path(image, folder)
        try:
            self.client.bucket(bucket).upload(
                path,
                image.content,
                file_options={"content-type": image.mime_type, "upsert": "false"},
            )
        except (StorageException, httpx.HTTPError) as e:
            logger.error(
                "Error subiendo imagen",
                bucket=bucket,
                path=path,
                error=str(e),
            )
            raise StorageError(str(e), bucket, path) from e

        url = self.client.bucket(bucket).get_public_url(path)
        logger.info("Imagen subida", bucket=bucket, path=path, size=len(image.content))
        return url

    def upload_multiple_images(
        self, images: list[LocalImage], bucket: str, folder: str
    ) -> list[str]:
        """Sube varias imágenes en orden y devuelve sus URLs en el mismo orden."""
        return [self.upload_image(image, bucket, folder) for image in images]

    def path_from_public_url(self, url: str, bucket: str) -> str:
        """
        Extrae el path del objeto a partir de su URL pública.

        Raises:
            StorageError: Si la URL no pertenece al bucket
        """
        marker = f"{self.PUBLIC_PREFIX}{bucket}/"
        url_path = urlparse(url).path
        index = url_path.find(marker)
        if index < 0:
            raise StorageError(f"La URL no pertenece al bucket: {url}", bucket)
        return unquote(url_path[index + len(marker):])

    def delete_image(self, url: str, bucket: str) -> None:
        """
        Borra un objeto a partir de su URL pública.

        Raises:
            StorageError: Si la URL no es del bucket o el borrado falla
        """
        path = self.path_from_public_url(url, bucket)
        try:
            self.client.bucket(bucket).remove([path])
        except (StorageException, httpx.HTTPError) as e:
            logger.error("Error borrando imagen", bucket=bucket, path=path, error=str(e))
            raise StorageError(str(e), bucket, path) from e
        logger.info("Imagen borrada", bucket=bucket, path=path)
