"""
Filtrado estructurado en memoria.

Aplica los filtros extraídos (precio, dormitorios, baños, ubicación,
tipo de propiedad, keyword) como conjunción AND sobre un pool de listings.
"""

from typing import Iterable

import structlog

from nido.models import Listing, SearchFilters
from nido.search.lexical import query_words, similarity

logger = structlog.get_logger()

DEFAULT_FUZZY_THRESHOLD = 0.75


def matches_property_type(
    listing: Listing,
    requested: str,
    threshold: float = DEFAULT_FUZZY_THRESHOLD,
) -> bool:
    """
    Match tolerante a typos del tipo de propiedad.

    Acepta si coincide exacto, si aparece como substring de la categoría
    o del título, o si la similitud léxica contra alguno supera el umbral
    ("Appartment" ~ "Apartment").
    """
    wanted = requested.strip().lower()
    category = str(listing.property_type).lower()
    title = listing.title.lower()

    if wanted == category or wanted in category or wanted in title:
        return True

    return (
        similarity(wanted, category) > threshold
        or similarity(wanted, title) > threshold
    )


def _matches_count(value: float, wanted: float, at_least: bool) -> bool:
    return value >= wanted if at_least else value == wanted


def _matches_keyword(listing: Listing, keyword: str) -> bool:
    haystack = f"{listing.title} {listing.description}".lower()
    terms = keyword.lower().split()
    return any(term in haystack for term in terms)


def matches_filters(
    listing: Listing,
    filters: SearchFilters,
    fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD,
) -> bool:
    """True si el listing cumple todos los filtros presentes."""
    if filters.min_price is not None and listing.price < filters.min_price:
        return False
    if filters.max_price is not None and listing.price > filters.max_price:
        return False

    if filters.bedrooms is not None and not _matches_count(
        listing.bedrooms, filters.bedrooms, filters.min_bedrooms
    ):
        return False
    if filters.bathrooms is not None and not _matches_count(
        listing.bathrooms, filters.bathrooms, filters.min_bathrooms
    ):
        return False

    if filters.location and filters.location.lower() not in listing.location.lower():
        return False

    if filters.property_type and not matches_property_type(
        listing, filters.property_type, fuzzy_threshold
    ):
        return False

    if filters.keyword and not _matches_keyword(listing, filters.keyword):
        return False

    return True


def apply_filters(
    listings: Iterable[Listing],
    filters: SearchFilters,
    fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD,
) -> list[Listing]:
    """Filtra preservando el orden de entrada."""
    return [
        listing for listing in listings
        if matches_filters(listing, filters, fuzzy_threshold)
    ]


def title_fallback(
    listings: Iterable[Listing],
    query: str,
    filters: SearchFilters,
    min_word_length: int = 3,
    fuzzy_threshold: float = DEFAULT_FUZZY_THRESHOLD,
) -> list[Listing]:
    """
    Busca palabras de la query en los títulos, ignorando el tipo de propiedad.

    Candidatos: listings cuyo título contiene alguna palabra de la query
    más larga que min_word_length. Sobre ellos se re-aplican el resto
    de los filtros.
    """
    words = query_words(query, min_word_length)
    if not words:
        return []

    candidates = [
        listing for listing in listings
        if any(word in listing.title.lower() for word in words)
    ]
    logger.debug("Candidatos por título", words=words, candidates=len(candidates))

    return apply_filters(candidates, filters.without_property_type(), fuzzy_threshold)
