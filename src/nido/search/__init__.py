"""
Motor de búsqueda.

Combina similitud semántica, filtros estructurados y matching léxico
tolerante a typos para resolver queries en lenguaje natural.
"""

from nido.search.catalog import PropertyCatalog
from nido.search.orchestrator import SearchEngine
from nido.search.similarity import SimilarityEngine, cosine_similarity

__all__ = [
    "PropertyCatalog",
    "SearchEngine",
    "SimilarityEngine",
    "cosine_similarity",
]
