"""
Notificaciones de bienvenida para el usuario logueado.

Se derivan de las colecciones cargadas: la noticia y la oferta
más recientes, y un aviso de matches si el usuario tiene perfil.
"""

from datetime import datetime, timedelta, timezone
from typing import Literal, Optional

from pydantic import BaseModel, Field

from unistay.models.campus import Job, NewsItem
from unistay.models.roommate import RoommateProfile
from unistay.models.user import User


class Notification(BaseModel):
    """Notificación mostrada en el header."""

    id: str
    type: Literal["news", "job", "hostel", "roommate"]
    message: str
    timestamp: datetime
    read: bool = Field(default=False)


def build_notifications(
    user: Optional[User],
    news: list[NewsItem],
    jobs: list[Job],
    profiles: list[RoommateProfile],
    now: Optional[datetime] = None,
) -> list[Notification]:
    """
    Arma las notificaciones para un usuario.

    Args:
        user: Usuario de la sesión (None si no hay sesión)
        news: Noticias cargadas
        jobs: Ofertas cargadas
        profiles: Perfiles de roommates cargados
        now: Referencia temporal (por defecto, ahora en UTC)

    Returns:
        Notificaciones ordenadas de la más nueva a la más vieja
    """
    if user is None:
        return []

    now = now or datetime.now(timezone.utc)
    notifications = []

    if news:
        latest = news[0]
        notifications.append(
            Notification(
                id=f"notif-news-{latest.id}",
                type="news",
                message=f'New article posted: "{latest.title}"',
                timestamp=now - timedelta(minutes=3),
            )
        )

    if jobs:
        latest_job = jobs[0]
        notifications.append(
            Notification(
                id=f"notif-job-{latest_job.id}",
                type="job",
                message=f"New opportunity: {latest_job.title} at {latest_job.company}",
                timestamp=now - timedelta(hours=1),
            )
        )

    has_profile = any(p.id == user.id for p in profiles)
    if has_profile and len(profiles) > 1:
        notifications.append(
            Notification(
                id=f"notif-roommate-{int(now.timestamp() * 1000)}",
                type="roommate",
                message="You have new potential roommate matches!",
                timestamp=now - timedelta(hours=5),
            )
        )

    return sorted(notifications, key=lambda n: n.timestamp, reverse=True)
