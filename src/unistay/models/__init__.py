"""
Modelos de datos del sistema.

Cada entidad vive en una tabla de Supabase:
- Alojamiento: Hostel, RoommateProfile
- Campus: NewsItem, Event, Job
- Comunidad: Deal, Spotlight, Confession
"""

from unistay.models.base import EntityModel
from unistay.models.hostel import Hostel, Amenity
from unistay.models.campus import NewsItem, Event, Job
from unistay.models.roommate import RoommateProfile
from unistay.models.community import Deal, Spotlight, Confession
from unistay.models.user import User
from unistay.models.notification import Notification, build_notifications

__all__ = [
    "EntityModel",
    # Alojamiento
    "Hostel",
    "Amenity",
    "RoommateProfile",
    # Campus
    "NewsItem",
    "Event",
    "Job",
    # Comunidad
    "Deal",
    "Spotlight",
    "Confession",
    # Sesión
    "User",
    "Notification",
    "build_notifications",
]
