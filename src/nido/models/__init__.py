"""
Modelos de datos del sistema.

- Listing: propiedad ingerida con su embedding
- QueryIntent / SearchFilters: intención extraída por request
- SearchResult / QueryResponse: salida del pipeline de búsqueda
"""

from nido.models.listing import Listing, PropertyType
from nido.models.search import (
    QueryIntent,
    QueryResponse,
    QueryType,
    SearchFilters,
    SearchResult,
    SearchStrategy,
)

__all__ = [
    # Listing
    "Listing",
    "PropertyType",
    # Búsqueda
    "QueryIntent",
    "QueryResponse",
    "QueryType",
    "SearchFilters",
    "SearchResult",
    "SearchStrategy",
]
