"""
Script para levantar la API HTTP de UniStay.

Uso:
    python -m unistay.scripts.run_api
    python -m unistay.scripts.run_api --port 9000
"""

import argparse
import logging
import sys

import structlog
from aiohttp import web

from unistay.api import create_app
from unistay.config import get_settings
from unistay.database import build_repositories, get_supabase_client

# Configurar logging
settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(message)s",
    force=True,
)

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()


def main():
    """Entry point de la API."""
    parser = argparse.ArgumentParser(description="API HTTP de UniStay")
    parser.add_argument("--host", default=settings.api_listen, help="Host de escucha")
    parser.add_argument("--port", type=int, default=settings.api_port, help="Puerto")
    args = parser.parse_args()

    logger.info("Iniciando API de UniStay...", host=args.host, port=args.port)

    try:
        client = get_supabase_client()
        app = create_app(client, build_repositories(client), settings=settings)
        web.run_app(app, host=args.host, port=args.port, print=None)
    except KeyboardInterrupt:
        logger.info("API detenida por usuario")
        sys.exit(0)
    except Exception as e:
        logger.error("Error fatal en API", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
