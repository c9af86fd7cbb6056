"""
Script para seedear el catálogo de propiedades.

Mergea property_basics.json, property_characteristics.json y
property_images.json, genera embeddings y reemplaza la tabla de listings.

Uso:
    python -m nido.scripts.run_seed --data-dir data
"""

import argparse
import asyncio
import logging
import sys

import structlog

from nido.analysis import EmbeddingGenerator
from nido.config import get_settings
from nido.database import ListingRepository
from nido.ingestion import CatalogSeeder

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


async def run_seed(data_dir: str) -> dict:
    """Ejecuta el seed completo contra Supabase."""
    seeder = CatalogSeeder(store=ListingRepository(), embedder=EmbeddingGenerator())
    return await seeder.seed_from_directory(data_dir)


def main():
    """Entry point del script."""
    parser = argparse.ArgumentParser(description="Seed del catálogo de propiedades")
    parser.add_argument(
        "--data-dir",
        type=str,
        default="data",
        help="Directorio con los tres JSON de origen",
    )
    args = parser.parse_args()

    logger.info("Iniciando seed", data_dir=args.data_dir)

    try:
        stats = asyncio.run(run_seed(args.data_dir))
        sys.exit(0 if stats.get("errors", 0) == 0 else 1)

    except KeyboardInterrupt:
        logger.info("Seed interrumpido por usuario")
        sys.exit(130)
    except Exception as e:
        logger.error("Error fatal en seed", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
