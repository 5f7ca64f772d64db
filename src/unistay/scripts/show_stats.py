"""
Script para ver los conteos del dashboard de administración.

Uso:
    python -m unistay.scripts.show_stats
    python -m unistay.scripts.show_stats --json
"""

import argparse
import asyncio
import json
import logging
import sys

import structlog

from unistay.admin import fetch_dashboard_stats
from unistay.config import get_settings
from unistay.database import build_repositories

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
    """Entry point del script."""
    parser = argparse.ArgumentParser(description="Conteos por colección")
    parser.add_argument("--json", action="store_true", help="Salida en JSON")
    args = parser.parse_args()

    try:
        stats = asyncio.run(fetch_dashboard_stats(build_repositories()))
    except KeyboardInterrupt:
        logger.info("Interrumpido por usuario")
        sys.exit(130)
    except Exception as e:
        logger.error("Error fatal obteniendo estadísticas", error=str(e))
        sys.exit(1)

    if args.json:
        print(json.dumps(stats, indent=2))
    else:
        print("\n=== DASHBOARD ===")
        for kind, count in stats.items():
            print(f"{kind:<12} {count:>6}")


if __name__ == "__main__":
    main()
