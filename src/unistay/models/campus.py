"""
Contenido del campus: noticias, eventos y ofertas de trabajo.
"""

from datetime import datetime, timezone
from typing import Literal, Optional

from pydantic import Field

from unistay.models.base import EntityModel


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class NewsItem(EntityModel):
    """Noticia del campus."""

    title: str = Field(..., description="Título de la noticia")
    description: str = Field(default="")
    image_url: str = Field(default="")
    source: str = Field(default="", description="Quién publica: 'Campus Office', etc.")
    timestamp: str = Field(default_factory=_now_iso, description="Fecha ISO")
    featured: bool = Field(default=False, description="Noticia destacada")


class Event(EntityModel):
    """Evento del campus."""

    title: str = Field(..., description="Título del evento")
    date: str = Field(default="", description="Fecha como texto")
    day: str = Field(default="", description="Día para la tarjeta: '12'")
    month: str = Field(default="", description="Mes para la tarjeta: 'OCT'")
    location: str = Field(default="")
    image_url: str = Field(default="")
    time: Optional[str] = None
    price: Optional[str] = None
    contacts: Optional[list[str]] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    description: Optional[str] = None
    registration_link: Optional[str] = None


class Job(EntityModel):
    """Oferta de trabajo o pasantía."""

    title: str = Field(..., description="Puesto")
    deadline: str = Field(default="", description="Fecha límite de aplicación")
    company: str = Field(default="")
    image_url: str = Field(default="")
    location: str = Field(default="")
    type: Literal["Full-time", "Part-time", "Internship"] = Field(default="Full-time")
    description: str = Field(default="")
    responsibilities: list[str] = Field(default_factory=list)
    qualifications: list[str] = Field(default_factory=list)
    how_to_apply: str = Field(default="", description="URL de la página para aplicar")
