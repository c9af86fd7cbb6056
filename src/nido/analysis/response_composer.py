"""
Compositor de la respuesta en lenguaje natural.

Arma el prompt según el caso (sin resultados, consulta informativa o
resultados de búsqueda) y delega la redacción al LLM. Si la generación
falla, el error se propaga: un resumen faltante no se disfraza.
"""

from typing import Optional, Sequence

import structlog

from nido.analysis.llm_providers import get_llm_provider, BaseLLMProvider
from nido.config import get_settings
from nido.models import Listing, QueryType

logger = structlog.get_logger()

MAX_SAMPLE_LOCATIONS = 10

NO_RESULTS_PROMPT_TEMPLATE = """You are a helpful real estate assistant.
The user searched for properties but nothing in our catalog matches.

User Question: {query}

Apologize briefly and suggest how to broaden the search (a wider price range, fewer
bedrooms or bathrooms, a nearby location, another property type). Do not mention or
invent any specific property."""

INFORMATIONAL_PROMPT_TEMPLATE = """You are a helpful real estate assistant.
Answer the user's general question about our catalog using these statistics.

Catalog statistics:
- Total properties: {count}
- Lowest price: {min_price}
- Highest price: {max_price}
- Average price: {avg_price}
- Sample locations: {locations}

User Question: {query}

Answer in a friendly, concise way. Do NOT list individual properties unless the user
explicitly asks for them."""

RESULTS_PROMPT_TEMPLATE = """You are a helpful real estate assistant. Based on the following properties,
answer the user's question in a friendly and informative way.

We found {total_matches} matching properties in total; the {shown} below are the most relevant.

Properties:
{context}

User Question: {query}

Provide a natural, conversational response that highlights the most relevant properties and
explains why they match the user's needs. State accurately how many matching properties exist
({total_matches}), even though only {shown} are shown."""


def _format_price(value: Optional[float]) -> str:
    if value is None:
        return "n/a"
    return f"${value:,.0f}"


def catalog_statistics(listings: Sequence[Listing]) -> dict:
    """Estadísticas agregadas del catálogo para consultas informativas."""
    prices = [listing.price for listing in listings]
    locations = sorted({listing.location for listing in listings})
    return {
        "count": len(listings),
        "min_price": min(prices) if prices else None,
        "max_price": max(prices) if prices else None,
        "avg_price": sum(prices) / len(prices) if prices else None,
        "locations": locations[:MAX_SAMPLE_LOCATIONS],
    }


def format_listing_context(listings: Sequence[Listing]) -> str:
    """Contexto por propiedad para el prompt de resultados."""
    blocks = []
    for index, listing in enumerate(listings, start=1):
        amenities = ", ".join(listing.amenities) if listing.amenities else "none listed"
        blocks.append(
            f"Property {index}:\n"
            f"- Title: {listing.title}\n"
            f"- Location: {listing.location}\n"
            f"- Price: {_format_price(listing.price)}\n"
            f"- Bedrooms: {listing.bedrooms}, Bathrooms: {listing.bathrooms:g}\n"
            f"- Size: {listing.size_sqft:g} sqft\n"
            f"- Amenities: {amenities}"
        )
    return "\n\n".join(blocks)


class ResponseComposer:
    """Genera el texto de respuesta a partir del resultado de búsqueda."""

    def __init__(self, provider: Optional[BaseLLMProvider] = None):
        self._settings = get_settings()
        self._provider = provider or get_llm_provider()

    def build_prompt(
        self,
        query: str,
        listings: Sequence[Listing],
        total_matches: int,
        query_type: QueryType = QueryType.SEARCH,
        catalog: Optional[Sequence[Listing]] = None,
    ) -> str:
        """Elige la rama y construye el prompt correspondiente."""
        if query_type == QueryType.INFORMATIONAL:
            stats = catalog_statistics(catalog or [])
            return INFORMATIONAL_PROMPT_TEMPLATE.format(
                count=stats["count"],
                min_price=_format_price(stats["min_price"]),
                max_price=_format_price(stats["max_price"]),
                avg_price=_format_price(stats["avg_price"]),
                locations=", ".join(stats["locations"]) or "none",
                query=query,
            )

        if not listings:
            return NO_RESULTS_PROMPT_TEMPLATE.format(query=query)

        return RESULTS_PROMPT_TEMPLATE.format(
            total_matches=max(total_matches, len(listings)),
            shown=len(listings),
            context=format_listing_context(listings),
            query=query,
        )

    async def compose(
        self,
        query: str,
        listings: Sequence[Listing],
        total_matches: int,
        query_type: QueryType = QueryType.SEARCH,
        catalog: Optional[Sequence[Listing]] = None,
    ) -> str:
        """
        Redacta la respuesta para el usuario.

        Args:
            query: Query original
            listings: Propiedades a mostrar (ya recortadas)
            total_matches: Total real de matches antes del recorte
            query_type: Rama informativa o de búsqueda
            catalog: Pool completo, usado solo para estadísticas

        Returns:
            Texto generado por el LLM

        Raises:
            Cualquier error del proveedor LLM, sin degradar
        """
        prompt = self.build_prompt(query, listings, total_matches, query_type, catalog)

        try:
            text = await self._provider.complete(
                prompt,
                temperature=self._settings.generation_temperature,
                max_tokens=1024,
            )
        except Exception as e:
            logger.error(
                "Error generando respuesta",
                query=query[:80],
                listings=len(listings),
                error=str(e),
            )
            raise

        logger.debug("Respuesta generada", length=len(text), query_type=query_type.value)
        return text
