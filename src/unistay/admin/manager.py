"""
Manager de contenido del panel de administración.

Máquina de estados por sección:
- IDLE: listado
- ADDING: formulario para un registro nuevo
- EDITING: formulario ligado a un registro existente

Un submit exitoso (o un delete) avisa el cambio de datos y vuelve a IDLE.
Un submit fallido deja el formulario como estaba para reintentar.
"""

import asyncio
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Generic, Optional, TypeVar

import structlog
from pydantic import ValidationError as PydanticValidationError

from unistay.admin.images import ImageWorkflow, SelectedImage
from unistay.admin.sections import ContentSection
from unistay.database import CrudRepository
from unistay.errors import StorageError, StoreError, ValidationError
from unistay.models import EntityModel
from unistay.storage import LocalImage

logger = structlog.get_logger()

T = TypeVar("T", bound=EntityModel)

DataChangeCallback = Callable[[str], Awaitable[None]]


class ManagerState(str, Enum):
    IDLE = "idle"
    EDITING = "editing"
    ADDING = "adding"


@dataclass
class Notice:
    """Notificación visible para el admin."""

    message: str
    level: str  # 'success' o 'error'


class ContentManager(Generic[T]):
    """
    Controlador de listado/alta/edición/baja para una sección.

    Las llamadas al cliente de Supabase son bloqueantes, así que se
    ejecutan en threads para no frenar el event loop.
    """

    def __init__(
        self,
        section: ContentSection,
        on_data_change: DataChangeCallback,
        images: Optional[ImageWorkflow] = None,
        get_items: Optional[Callable[[], list[T]]] = None,
        notify: Optional[Callable[[Notice], None]] = None,
    ):
        self.section = section
        self.on_data_change = on_data_change
        self.images = images or ImageWorkflow()
        self._get_items = get_items or (lambda: [])
        self._notify_callback = notify

        self.state = ManagerState.IDLE
        self.editing_item: Optional[T] = None
        self.is_submitting = False
        self.deleting_ids: set[str] = set()
        self.notices: list[Notice] = []
        self.last_error: Optional[Exception] = None

    @property
    def repository(self) -> CrudRepository:
        return self.section.repository

    @property
    def can_add(self) -> bool:
        """El botón 'Add New' se deshabilita mientras hay algo en vuelo."""
        return not self.is_submitting and not self.deleting_ids

    def rows(self) -> list[dict]:
        """Filas del listado con el ID y las columnas de la sección."""
        return [
            {"id": item.id, **self.section.row(item)} for item in self._get_items()
        ]

    def _notify(self, message: str, level: str) -> None:
        notice = Notice(message=message, level=level)
        self.notices.append(notice)
        if self._notify_callback:
            self._notify_callback(notice)

    # Transiciones

    def start_add(self) -> bool:
        if not self.can_add:
            return False
        self.editing_item = None
        self.state = ManagerState.ADDING
        return True

    def start_edit(self, item: T) -> None:
        self.editing_item = item
        self.state = ManagerState.EDITING

    def cancel(self) -> None:
        self.editing_item = None
        self.state = ManagerState.IDLE

    # Submit

    def _build_record(self, fields: dict, record_id: str) -> T:
        model_cls = self.repository.MODEL
        base = self.editing_item.model_dump() if self.editing_item else {}
        data = {**base, **model_cls.normalize_fields(fields), "id": record_id}
        try:
            return model_cls.model_validate(data)
        except PydanticValidationError as e:
            problems = ", ".join(
                ".".join(str(loc) for loc in err["loc"]) for err in e.errors()
            )
            raise ValidationError(f"Datos inválidos: {problems}") from e

    async def _save(self, fields: dict, selection: list[SelectedImage]) -> T:
        section = self.section
        existing = self.editing_item if self.state == ManagerState.EDITING else None

        # Validaciones de cliente: nada de red hasta acá
        if section.requires_images:
            self.images.validate(selection)
            if not section.multi_image:
                # Una sola imagen: manda el archivo nuevo si lo hay
                selection = [
                    next(
                        (img for img in selection if isinstance(img, LocalImage)),
                        selection[0],
                    )
                ]

        record_id = existing.id if existing else str(uuid.uuid4())
        record = self._build_record(fields, record_id)

        uploaded = None
        if section.requires_images:
            uploaded = await self.images.upload(selection, section.bucket, record_id)
            record = record.model_copy(
                update=record.image_fields(uploaded.primary_url, uploaded.image_urls)
            )

        if existing:
            await asyncio.to_thread(self.repository.update, existing.id, record)
            saved = record
        else:
            saved = await asyncio.to_thread(self.repository.add, record)

        if existing and uploaded is not None:
            await self.images.cleanup(
                existing.stored_image_urls(), uploaded.image_urls, section.bucket
            )

        return saved

    async def submit(
        self, fields: dict, images: Optional[list[SelectedImage]] = None
    ) -> Optional[T]:
        """
        Guarda el formulario abierto (alta o edición).

        Returns:
            El registro guardado, o None si el submit falló o fue ignorado
        """
        if self.state == ManagerState.IDLE:
            raise RuntimeError("No hay formulario abierto. Usa start_add o start_edit.")

        if self.is_submitting:
            logger.warning("Submit ignorado: ya hay uno en curso", kind=self.section.kind)
            return None

        was_editing = self.state == ManagerState.EDITING
        self.is_submitting = True
        self.last_error = None
        try:
            saved = await self._save(fields, list(images or []))
        except (ValidationError, StoreError, StorageError) as e:
            self.last_error = e
            logger.warning(
                "Submit fallido",
                kind=self.section.kind,
                state=self.state.value,
                error=str(e),
            )
            self._notify(str(e), "error")
            return None
        finally:
            self.is_submitting = False

        self._notify(
            "Item updated successfully!" if was_editing else "Item added successfully!",
            "success",
        )
        await self._data_changed()
        self.cancel()
        return saved

    # Delete

    async def delete(self, record_id: str) -> bool:
        """
        Borra un registro del listado.

        Un segundo click sobre la misma fila mientras el primero está en
        vuelo no hace ninguna llamada.

        Returns:
            True si el registro se borró
        """
        if record_id in self.deleting_ids:
            logger.info("Delete ignorado: ya en curso", kind=self.section.kind, id=record_id)
            return False

        self.deleting_ids.add(record_id)
        self.last_error = None
        try:
            await asyncio.to_thread(self.repository.remove, record_id)
        except StoreError as e:
            self.last_error = e
            logger.warning("Delete fallido", kind=self.section.kind, id=record_id, error=str(e))
            self._notify(str(e), "error")
            return False
        finally:
            self.deleting_ids.discard(record_id)

        self._notify("Item deleted successfully!", "success")
        await self._data_changed()
        return True

    async def _data_changed(self) -> None:
        # La escritura ya está confirmada: un refresh fallido no la deshace
        try:
            await self.on_data_change(self.section.kind)
        except Exception as e:
            logger.error("Error refrescando datos", kind=self.section.kind, error=str(e))
            self._notify("Saved, but the list could not be refreshed.", "error")


async def fetch_dashboard_stats(
    repositories: dict[str, CrudRepository],
) -> dict[str, int]:
    """
    Cuenta los registros de cada colección en paralelo.

    Si cualquier conteo falla, devuelve ceros para todas.
    """
    kinds = list(repositories)
    try:
        counts = await asyncio.gather(
            *(asyncio.to_thread(repositories[kind].get_counts) for kind in kinds)
        )
    except StoreError as e:
        logger.error("Error obteniendo estadísticas del dashboard", error=str(e))
        return {kind: 0 for kind in kinds}
    return dict(zip(kinds, counts))


def build_managers(
    sections: dict[str, ContentSection],
    store,
    images: Optional[ImageWorkflow] = None,
    notify: Optional[Callable[[Notice], None]] = None,
) -> dict[str, ContentManager]:
    """Un ContentManager por sección, ligado a las colecciones del store."""
    images = images or ImageWorkflow()
    return {
        kind: ContentManager(
            section,
            on_data_change=store.on_data_change,
            images=images,
            get_items=lambda kind=kind: store.get(kind),
            notify=notify,
        )
        for kind, section in sections.items()
    }
