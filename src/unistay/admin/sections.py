"""
Secciones del panel de administración.

Cada sección une un repositorio, su bucket de imágenes y
las columnas que se muestran en el listado.
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from unistay.database import CrudRepository


@dataclass(frozen=True)
class Column:
    """Columna del listado de una sección."""

    header: str
    accessor: str


@dataclass
class ContentSection:
    """Configuración de una sección administrable."""

    kind: str
    title: str
    repository: CrudRepository
    columns: list[Column] = field(default_factory=list)
    bucket: Optional[str] = None
    multi_image: bool = False

    @property
    def requires_images(self) -> bool:
        return self.bucket is not None and self.repository.MODEL.HAS_IMAGES

    def row(self, item: Any) -> dict:
        """Valores de las columnas para un ítem del listado."""
        return {col.header: getattr(item, col.accessor, None) for col in self.columns}


def build_sections(repositories: dict[str, CrudRepository]) -> dict[str, ContentSection]:
    """Arma las secciones administrables a partir de los repositorios."""
    sections = [
        ContentSection(
            kind="hostels",
            title="Manage Hostels",
            repository=repositories["hostels"],
            columns=[
                Column("Name", "name"),
                Column("University", "university_id"),
                Column("Price Range", "price_range"),
                Column("Recommended", "is_recommended"),
            ],
            bucket="hostels",
            multi_image=True,
        ),
        ContentSection(
            kind="news",
            title="Manage News",
            repository=repositories["news"],
            columns=[
                Column("Title", "title"),
                Column("Source", "source"),
                Column("Featured", "featured"),
            ],
            bucket="news",
        ),
        ContentSection(
            kind="events",
            title="Manage Events",
            repository=repositories["events"],
            columns=[
                Column("Title", "title"),
                Column("Date", "date"),
                Column("Location", "location"),
            ],
            bucket="events",
        ),
        ContentSection(
            kind="jobs",
            title="Manage Jobs",
            repository=repositories["jobs"],
            columns=[
                Column("Title", "title"),
                Column("Company", "company"),
                Column("Deadline", "deadline"),
            ],
            bucket="jobs",
        ),
        ContentSection(
            kind="deals",
            title="Manage Deals",
            repository=repositories["deals"],
            columns=[
                Column("Title", "title"),
                Column("Business", "business"),
                Column("Discount", "discount"),
            ],
            bucket="deals",
        ),
        ContentSection(
            kind="spotlights",
            title="Manage Spotlights",
            repository=repositories["spotlights"],
            columns=[
                Column("Name", "name"),
                Column("Headline", "headline"),
            ],
            bucket="spotlights",
        ),
        # Las confesiones solo se moderan: sin imágenes
        ContentSection(
            kind="confessions",
            title="Moderate Confessions",
            repository=repositories["confessions"],
            columns=[
                Column("Content", "content"),
                Column("Likes", "likes"),
            ],
        ),
    ]
    return {section.kind: section for section in sections}
