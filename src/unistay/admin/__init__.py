"""
Panel de administración.

Provee las secciones administrables, el flujo de imágenes
y el manager de alta/edición/baja por sección.
"""

from unistay.admin.images import ImageWorkflow, UploadedImages, SelectedImage
from unistay.admin.sections import Column, ContentSection, build_sections
from unistay.admin.manager import (
    ContentManager,
    ManagerState,
    Notice,
    build_managers,
    fetch_dashboard_stats,
)

__all__ = [
    "ImageWorkflow",
    "UploadedImages",
    "SelectedImage",
    "Column",
    "ContentSection",
    "build_sections",
    "ContentManager",
    "ManagerState",
    "Notice",
    "build_managers",
    "fetch_dashboard_stats",
]
