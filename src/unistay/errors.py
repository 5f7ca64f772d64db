"""
Errores del núcleo de UniStay.

- StoreError: falló una lectura/escritura contra una tabla de Supabase.
- StorageError: falló un upload o un delete en Supabase Storage.
- ValidationError: precondición del cliente no cumplida (antes de tocar la red).
"""

from typing import Optional


class UnistayError(Exception):
    """Clase base de errores del sistema."""


class StoreError(UnistayError):
    """Error de la base de datos remota (red o constraint)."""

    def __init__(
        self,
        message: str,
        table: str,
        operation: str,
        fields: Optional[list[str]] = None,
    ):
        super().__init__(message)
        self.table = table
        self.operation = operation
        self.fields = fields or []

    def __str__(self) -> str:
        detail = f"{self.operation} en '{self.table}': {self.args[0]}"
        if self.fields:
            detail += f" (campos: {', '.join(self.fields)})"
        return detail


class StorageError(UnistayError):
    """Error de object storage (upload o delete)."""

    def __init__(self, message: str, bucket: str, path: Optional[str] = None):
        super().__init__(message)
        self.bucket = bucket
        self.path = path


class ValidationError(UnistayError):
    """Precondición de cliente no cumplida; se lanza antes de cualquier llamada remota."""
