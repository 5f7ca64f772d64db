"""
Módulo de object storage.

Provee upload y borrado de imágenes en Supabase Storage.
"""

from unistay.storage.images import ImageStorage, LocalImage

__all__ = [
    "ImageStorage",
    "LocalImage",
]
