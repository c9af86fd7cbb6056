"""
Script para correr una query contra el motor de búsqueda.

Por defecto lee el catálogo de Supabase; con --data usa un export JSON
en memoria (listings con embedding).

Uso:
    python -m nido.scripts.run_query "penthouse in Las Vegas"
    python -m nido.scripts.run_query "cheapest 3-bedroom in Atlanta" --data listings.json
"""

import argparse
import asyncio
import json
import logging
import sys

import structlog

from nido.config import get_settings
from nido.database import InMemoryListingStore, ListingRepository
from nido.search import SearchEngine

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


async def run_query(query: str, data_path: str = None) -> dict:
    """Procesa la query y devuelve la respuesta en formato API."""
    store = InMemoryListingStore.from_json(data_path) if data_path else ListingRepository()
    engine = SearchEngine(store=store)
    response = await engine.process_query(query)
    return response.to_api_dict()


def main():
    """Entry point del script."""
    parser = argparse.ArgumentParser(description="Búsqueda de propiedades en lenguaje natural")
    parser.add_argument("query", type=str, help="Query del usuario")
    parser.add_argument(
        "--data",
        type=str,
        default=None,
        help="Export JSON de listings (en vez de Supabase)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Imprimir la respuesta completa como JSON",
    )
    args = parser.parse_args()

    try:
        result = asyncio.run(run_query(args.query, args.data))

    except KeyboardInterrupt:
        logger.info("Query interrumpida por usuario")
        sys.exit(130)
    except Exception as e:
        logger.error("Error procesando query", error=str(e))
        sys.exit(1)

    if args.json:
        print(json.dumps(result, indent=2, ensure_ascii=False))
    else:
        print(result["summaryText"])
        print(f"\n{len(result['listings'])} de {result['totalMatches']} propiedades:")
        for listing in result["listings"]:
            print(
                f"  [{listing['id']}] {listing['title']} - {listing['location']} "
                f"${listing['price']:,.0f} ({listing['bedrooms']} bd / {listing['bathrooms']:g} ba)"
            )
    sys.exit(0)


if __name__ == "__main__":
    main()
