"""
Colecciones en memoria de la aplicación.

Las colecciones se reemplazan completas al re-leerlas, nunca se parchean.
Después de una escritura se invalida solo la colección afectada, y cada
refresh saca un ticket: si termina después de uno más nuevo, se descarta.
"""

import asyncio
import inspect
from typing import Awaitable, Callable, Optional, Union

import structlog

from unistay.database import CrudRepository

logger = structlog.get_logger()

Listener = Callable[[str], Union[Awaitable[None], None]]


class CampusStore:
    """Hostels, noticias, eventos, trabajos, perfiles y comunidad en memoria."""

    def __init__(self, repositories: dict[str, CrudRepository]):
        self._repositories = repositories
        self._collections: dict[str, list] = {kind: [] for kind in repositories}
        self._issued: dict[str, int] = {kind: 0 for kind in repositories}
        self._applied: dict[str, int] = {kind: 0 for kind in repositories}
        self._listeners: list[Listener] = []

    @property
    def kinds(self) -> list[str]:
        return list(self._repositories)

    def get(self, kind: str) -> list:
        """Colección actual de un tipo de entidad."""
        if kind not in self._collections:
            raise KeyError(f"Tipo de entidad desconocido: {kind}")
        return self._collections[kind]

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Registra un listener que recibe el tipo de la colección que cambió.

        Returns:
            Función para desuscribirse
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _emit(self, kind: str) -> None:
        for listener in list(self._listeners):
            result = listener(kind)
            if inspect.isawaitable(result):
                await result

    async def refresh(self, kind: str) -> list:
        """
        Re-lee una colección completa y la reemplaza.

        Raises:
            StoreError: Si falla la lectura (la colección anterior se conserva)
        """
        self._issued[kind] += 1
        ticket = self._issued[kind]

        items = await asyncio.to_thread(self._repositories[kind].get_all)

        if ticket < self._applied[kind]:
            logger.debug("Refresh descartado por uno más nuevo", kind=kind, ticket=ticket)
            return self._collections[kind]

        self._applied[kind] = ticket
        self._collections[kind] = items
        await self._emit(kind)
        return items

    async def refresh_all(self, kinds: Optional[list[str]] = None) -> None:
        """Re-lee todas las colecciones (o las indicadas) en paralelo."""
        await asyncio.gather(*(self.refresh(kind) for kind in kinds or self.kinds))

    async def load(self) -> None:
        """Carga inicial de todas las colecciones."""
        await self.refresh_all()
        logger.info(
            "Colecciones cargadas",
            **{kind: len(items) for kind, items in self._collections.items()},
        )

    async def on_data_change(self, kind: str) -> None:
        """Callback para los managers de admin: invalida solo esa colección."""
        await self.refresh(kind)
