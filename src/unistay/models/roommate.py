"""
Modelo de perfil de Roommate.

El ID del perfil es el ID del usuario en Supabase Auth, por eso
los perfiles se escriben con upsert (set) y no con add.
Los campos opcionales permiten completar el perfil de a poco.
"""

from typing import Literal, Optional

from pydantic import Field

from unistay.models.base import EntityModel


class RoommateProfile(EntityModel):
    """Perfil de búsqueda de roommate."""

    name: str = Field(..., description="Nombre de pila")
    email: str = Field(default="")
    university_id: str = Field(default="")
    contact_number: str = Field(default="")
    student_number: str = Field(default="")
    image_url: str = Field(default="")

    # Completado progresivo
    age: Optional[int] = Field(None, ge=15, le=100)
    gender: Optional[Literal["Male", "Female"]] = None
    course: Optional[str] = None
    year_of_study: Optional[int] = Field(None, ge=1, le=7)
    budget: Optional[int] = Field(None, ge=0, description="UGX por mes")
    move_in_date: Optional[str] = Field(None, description="YYYY-MM-DD")
    date_of_birth: Optional[str] = Field(None, description="YYYY-MM-DD")
    lease_duration: Optional[Literal["Semester", "Full Year", "Flexible"]] = None
    bio: Optional[str] = Field(None, max_length=1000)
    is_smoker: Optional[bool] = None
    drinks_alcohol: Optional[Literal["Socially", "Rarely", "No"]] = None
    study_schedule: Optional[Literal["Early Bird", "Night Owl", "Flexible"]] = None
    cleanliness: Optional[Literal["Tidy", "Average", "Relaxed"]] = None
    guest_frequency: Optional[Literal["Rarely", "Sometimes", "Often"]] = None
    hobbies: Optional[str] = Field(None, description="Separados por coma")
    seeking_gender: Optional[Literal["Male", "Female", "Any"]] = None
