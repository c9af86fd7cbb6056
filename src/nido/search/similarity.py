"""
Motor de similitud semántica.

Scan denso por fuerza bruta: calcula coseno contra cada listing del
pool en cada llamada, sin índice persistente.
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import structlog

from nido.models import Listing

logger = structlog.get_logger()


@dataclass
class ScoredListing:
    """Listing con su similitud contra la query."""

    listing: Listing
    score: float


def cosine_similarity(
    vec1: Optional[Sequence[float]],
    vec2: Optional[Sequence[float]],
) -> float:
    """
    Calcula la similitud de coseno entre dos vectores.

    Vectores ausentes, de distinta dimensión, de norma cero o con
    valores no finitos no matchean: devuelven 0.0 en vez de NaN.
    """
    if not vec1 or not vec2 or len(vec1) != len(vec2):
        return 0.0

    try:
        dot_product = sum(a * b for a, b in zip(vec1, vec2))
        norm1 = math.sqrt(sum(a * a for a in vec1))
        norm2 = math.sqrt(sum(b * b for b in vec2))
    except TypeError:
        return 0.0

    if norm1 == 0 or norm2 == 0:
        return 0.0

    similarity = dot_product / (norm1 * norm2)
    if not math.isfinite(similarity):
        return 0.0
    return similarity


class SimilarityEngine:
    """
    Ranking por coseno sobre un pool de listings en memoria.

    La interfaz top_k(vector, k) es la misma que tendría una
    implementación respaldada por un índice vectorial.
    """

    def __init__(self, listings: Sequence[Listing]):
        self._listings = list(listings)

    def rank(self, query_vector: Sequence[float]) -> list[ScoredListing]:
        """Todos los listings ordenados por similitud descendente (sort estable)."""
        scored = [
            ScoredListing(listing=listing, score=cosine_similarity(query_vector, listing.embedding))
            for listing in self._listings
        ]
        skipped = sum(
            1 for listing in self._listings
            if not listing.embedding or len(listing.embedding) != len(query_vector)
        )
        if skipped:
            logger.warning(
                "Listings sin embedding compatible",
                skipped=skipped,
                query_dim=len(query_vector),
            )
        # sorted() es estable: los empates respetan el orden original
        return sorted(scored, key=lambda s: s.score, reverse=True)

    def top_k(self, query_vector: Sequence[float], k: int) -> list[Listing]:
        """Los k listings más similares al vector de la query."""
        if k <= 0 or not self._listings:
            return []
        return [s.listing for s in self.rank(query_vector)[:k]]
