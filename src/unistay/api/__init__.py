"""
API HTTP.

Provee la aplicación aiohttp que consume el front-end.
"""

from unistay.api.app import create_app, error_middleware

__all__ = [
    "create_app",
    "error_middleware",
]
