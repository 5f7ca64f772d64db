"""
Repositorios para operaciones CRUD en Supabase.

Un único repositorio genérico parametrizado por el modelo de la entidad;
cada subclase solo declara su tabla y su modelo. Cada operación es un
round trip independiente: no hay transacciones, batching ni reintentos.
"""

from typing import Generic, Optional, TypeVar, Union

import httpx
import structlog
from postgrest.exceptions import APIError
from pydantic import ValidationError as PydanticValidationError

from unistay.database.supabase_client import get_supabase_client, SupabaseClient
from unistay.errors import StoreError, ValidationError
from unistay.models import (
    EntityModel,
    Hostel,
    NewsItem,
    Event,
    Job,
    RoommateProfile,
    Deal,
    Spotlight,
    Confession,
)

logger = structlog.get_logger()

T = TypeVar("T", bound=EntityModel)


class CrudRepository(Generic[T]):
    """Acceso uniforme a una tabla para un tipo de entidad."""

    TABLE: str = ""
    MODEL: type[EntityModel] = EntityModel

    def __init__(self, client: Optional[SupabaseClient] = None):
        self._client = client or get_supabase_client()

    @property
    def client(self) -> SupabaseClient:
        return self._client

    def _execute(self, operation: str, query, fields: Optional[list[str]] = None):
        """Ejecuta un query y traduce los errores del cliente a StoreError."""
        try:
            return query.execute()
        except (APIError, httpx.HTTPError) as e:
            logger.error(
                "Error en operación de tabla",
                table=self.TABLE,
                operation=operation,
                error=str(e),
            )
            raise StoreError(str(e), self.TABLE, operation, fields) from e

    def _to_model(self, row: dict) -> T:
        try:
            return self.MODEL.model_validate(row)
        except PydanticValidationError as e:
            raise StoreError(
                f"Registro inválido: {e.error_count()} errores",
                self.TABLE,
                "select",
            ) from e

    def _payload(self, record: Union[T, dict], include_id: bool = False) -> dict:
        if isinstance(record, EntityModel):
            return record.to_db_dict(include_id=include_id)
        data = self.MODEL.to_db_fields(record)
        if include_id and record.get("id"):
            data["id"] = record["id"]
        return data

    def get_all(self) -> list[T]:
        """Obtiene todos los registros de la tabla (sin orden garantizado)."""
        response = self._execute("select", self.client.table(self.TABLE).select("*"))
        return [self._to_model(row) for row in response.data or []]

    def get_counts(self) -> int:
        """Cuenta los registros sin traer los cuerpos (head + count exacto)."""
        response = self._execute(
            "count",
            self.client.table(self.TABLE).select("*", count="exact", head=True),
        )
        return response.count or 0

    def get_by_id(self, record_id: str) -> Optional[T]:
        """Obtiene un registro por su ID."""
        response = self._execute(
            "select",
            self.client.table(self.TABLE).select("*").eq("id", record_id).limit(1),
        )
        return self._to_model(response.data[0]) if response.data else None

    def add(self, record: Union[T, dict]) -> T:
        """
        Inserta un registro nuevo.

        Si el registro no trae ID, lo asigna Supabase (default UUID de la columna).

        Returns:
            El registro creado, con su ID
        """
        data = self._payload(record, include_id=True)
        response = self._execute(
            "insert",
            self.client.table(self.TABLE).insert([data]),
            fields=sorted(data),
        )
        if not response.data:
            raise StoreError(
                "El insert no devolvió filas", self.TABLE, "insert", sorted(data)
            )
        created = self._to_model(response.data[0])
        logger.info("Registro creado", table=self.TABLE, id=created.id)
        return created

    def update(self, record_id: str, fields: Union[T, dict]) -> None:
        """
        Actualiza los campos dados del registro con ese ID.

        Un ID inexistente no es error: el update simplemente no toca filas.
        """
        data = self._payload(fields)
        response = self._execute(
            "update",
            self.client.table(self.TABLE).update(data).eq("id", record_id),
            fields=sorted(data),
        )
        if not response.data:
            logger.debug("Update sin filas afectadas", table=self.TABLE, id=record_id)
        else:
            logger.info("Registro actualizado", table=self.TABLE, id=record_id)

    def set(self, record: Union[T, dict]) -> None:
        """Upsert por ID: inserta si no existe, reemplaza si existe."""
        data = self._payload(record, include_id=True)
        if not data.get("id"):
            raise ValidationError(f"set en '{self.TABLE}' requiere un ID")
        self._execute(
            "upsert",
            self.client.table(self.TABLE).upsert(data, on_conflict="id"),
            fields=sorted(data),
        )
        logger.info("Registro upserted", table=self.TABLE, id=data["id"])

    def remove(self, record_id: str) -> None:
        """Borra el registro con ese ID. Borrar un ID inexistente no es error."""
        self._execute(
            "delete",
            self.client.table(self.TABLE).delete().eq("id", record_id),
        )
        logger.info("Registro borrado", table=self.TABLE, id=record_id)


class HostelRepository(CrudRepository[Hostel]):
    """Repositorio para hostels."""

    TABLE = "hostels"
    MODEL = Hostel

    def get_by_university(self, university_id: str) -> list[Hostel]:
        """Obtiene los hostels de una universidad."""
        response = self._execute(
            "select",
            self.client.table(self.TABLE)
            .select("*")
            .eq("universityId", university_id),
        )
        return [self._to_model(row) for row in response.data or []]


class NewsRepository(CrudRepository[NewsItem]):
    """Repositorio para noticias."""

    TABLE = "news"
    MODEL = NewsItem


class EventRepository(CrudRepository[Event]):
    """Repositorio para eventos."""

    TABLE = "events"
    MODEL = Event


class JobRepository(CrudRepository[Job]):
    """Repositorio para ofertas de trabajo."""

    TABLE = "jobs"
    MODEL = Job


class RoommateProfileRepository(CrudRepository[RoommateProfile]):
    """Repositorio para perfiles de roommates (se escriben con set)."""

    TABLE = "profiles"
    MODEL = RoommateProfile


class DealRepository(CrudRepository[Deal]):
    """Repositorio para descuentos."""

    TABLE = "deals"
    MODEL = Deal


class SpotlightRepository(CrudRepository[Spotlight]):
    """Repositorio para spotlights."""

    TABLE = "spotlights"
    MODEL = Spotlight


class ConfessionRepository(CrudRepository[Confession]):
    """Repositorio para confesiones anónimas."""

    TABLE = "confessions"
    MODEL = Confession

    def like(self, confession_id: str) -> int:
        """
        Incrementa el contador de likes.

        Lee y escribe en dos round trips: dos likes simultáneos pueden pisarse.

        Returns:
            El nuevo total, o 0 si la confesión no existe
        """
        confession = self.get_by_id(confession_id)
        if not confession:
            return 0

        new_value = confession.likes + 1
        self.update(confession_id, {"likes": new_value})
        return new_value


# Un repositorio por tipo de entidad, indexado por nombre de tabla
REPOSITORY_CLASSES: dict[str, type[CrudRepository]] = {
    repo.TABLE: repo
    for repo in (
        HostelRepository,
        NewsRepository,
        EventRepository,
        JobRepository,
        RoommateProfileRepository,
        DealRepository,
        SpotlightRepository,
        ConfessionRepository,
    )
}


def build_repositories(
    client: Optional[SupabaseClient] = None,
) -> dict[str, CrudRepository]:
    """Instancia todos los repositorios compartiendo el mismo cliente."""
    client = client or get_supabase_client()
    return {kind: repo_cls(client) for kind, repo_cls in REPOSITORY_CLASSES.items()}
