"""
Orquestador del pipeline de búsqueda.

Implementa:
- Clasificación: query informativa vs. búsqueda (vía LLM)
- Recuperación semántica: top-K por coseno con sobremuestreo
- Filtro de restricciones: AND de todos los filtros extraídos
- Fallback A: sin resultados y con tipo de propiedad -> búsqueda por título
- Fallback B: sin resultados -> filtro directo sobre el pool completo
- Recorte y respuesta redactada por el LLM
"""

from typing import Optional, Union

import structlog

from nido.analysis import (
    BaseEmbeddingProvider,
    ConstraintExtractor,
    EmbeddingGenerator,
    ResponseComposer,
)
from nido.config import get_settings
from nido.database import ListingStore, ListingRepository
from nido.models import (
    Listing,
    QueryResponse,
    QueryType,
    SearchFilters,
    SearchResult,
    SearchStrategy,
)
from nido.search.filters import apply_filters, title_fallback
from nido.search.similarity import SimilarityEngine

logger = structlog.get_logger()


class SearchEngine:
    """
    Motor de búsqueda conversacional sobre el pool de listings.

    Flujo de process_query():
    1. Extraer intención (informational/search + filtros)
    2. Si es informativa: responder con estadísticas del catálogo
    3. Embeber la query y tomar el top-K sobremuestreado
    4. Filtrar candidatos; si no queda nada, fallbacks A y B
    5. Recortar al límite de visualización y redactar la respuesta

    No guarda estado entre requests: el pool se lee en cada llamada.
    """

    def __init__(
        self,
        store: Optional[ListingStore] = None,
        embedder: Optional[BaseEmbeddingProvider] = None,
        extractor: Optional[ConstraintExtractor] = None,
        composer: Optional[ResponseComposer] = None,
        candidate_pool_size: Optional[int] = None,
        display_limit: Optional[int] = None,
        fallback_display_limit: Optional[int] = None,
    ):
        self.settings = get_settings()
        self.store = store or ListingRepository()
        self.embedder = embedder or EmbeddingGenerator()
        self.extractor = extractor or ConstraintExtractor()
        self.composer = composer or ResponseComposer()

        self.candidate_pool_size = candidate_pool_size or self.settings.candidate_pool_size
        self.display_limit = display_limit or self.settings.display_limit
        self.fallback_display_limit = (
            fallback_display_limit or self.settings.fallback_display_limit
        )

    async def process_query(self, query: str) -> QueryResponse:
        """
        Procesa una query en lenguaje natural.

        Args:
            query: Texto del usuario ("penthouse in Las Vegas")

        Returns:
            QueryResponse con resumen, listings sin embedding y total real

        Raises:
            ValueError: Si la query está vacía
            Errores del proveedor de embeddings o de generación, sin degradar
        """
        query = (query or "").strip()
        if not query:
            raise ValueError("La query no puede estar vacía")

        logger.info("Procesando query", query=query[:80])

        intent = await self.extractor.extract(query)
        pool = self.store.find_all()

        if intent.query_type == QueryType.INFORMATIONAL:
            summary = await self.composer.compose(
                query,
                listings=[],
                total_matches=0,
                query_type=QueryType.INFORMATIONAL,
                catalog=pool,
            )
            logger.info("Query informativa respondida", catalog_size=len(pool))
            return QueryResponse(summary_text=summary, listings=[], total_matches=0)

        result = await self.retrieve(query, intent.filters, pool)
        summary = await self.composer.compose(
            query,
            listings=result.listings,
            total_matches=result.total_matches,
            query_type=QueryType.SEARCH,
        )

        return QueryResponse(
            summary_text=summary,
            listings=[listing.to_public_dict() for listing in result.listings],
            total_matches=result.total_matches,
        )

    async def retrieve(
        self,
        query: str,
        filters: SearchFilters,
        pool: list[Listing],
    ) -> SearchResult:
        """
        Recuperación semántica + filtros + fallbacks.

        Args:
            query: Texto original (se embebe y alimenta el fallback por título)
            filters: Filtros extraídos
            pool: Todos los listings

        Returns:
            SearchResult recortado, con el total previo al recorte
        """
        query_vector = await self.embedder.embed(query)
        candidates = SimilarityEngine(pool).top_k(query_vector, self.candidate_pool_size)
        threshold = self.settings.fuzzy_match_threshold

        if not filters.has_any():
            return self._truncate(candidates, SearchStrategy.SEMANTIC, filters)

        matches = apply_filters(candidates, filters, threshold)
        if matches:
            return self._truncate(matches, SearchStrategy.SEMANTIC, filters)

        logger.info(
            "Sin matches entre candidatos semánticos",
            candidates=len(candidates),
            filters=filters.model_dump(exclude_none=True, exclude_defaults=True),
        )

        # Fallback A: relajar categoría y buscar palabras de la query en títulos
        if filters.property_type:
            matches = title_fallback(
                pool,
                query,
                filters,
                min_word_length=self.settings.min_title_word_length,
                fuzzy_threshold=threshold,
            )
            if matches:
                logger.info("Fallback por título", matches=len(matches))
                return self._truncate(matches, SearchStrategy.TITLE_FALLBACK, filters)

        # Fallback B: filtro directo sobre el pool completo, sin etapa semántica
        matches = apply_filters(pool, filters, threshold)
        logger.info("Fallback sobre pool completo", matches=len(matches))
        return self._truncate(matches, SearchStrategy.FULL_POOL_FALLBACK, filters)

    def filter_by_structured_criteria(
        self,
        criteria: Union[SearchFilters, dict],
    ) -> list[dict]:
        """
        Filtro directo, sin etapa semántica, para UIs de filtros explícitos.

        Acepta SearchFilters o un dict en camelCase/snake_case
        ({"maxPrice": 1000000}, {"bedrooms": 3, "minBedrooms": True}).
        """
        if not isinstance(criteria, SearchFilters):
            criteria = SearchFilters.model_validate(criteria)

        matches = apply_filters(
            self.store.find_all(), criteria, self.settings.fuzzy_match_threshold
        )
        logger.info(
            "Filtro estructurado",
            criteria=criteria.model_dump(exclude_none=True, exclude_defaults=True),
            matches=len(matches),
        )
        return [listing.to_public_dict() for listing in matches]

    def _truncate(
        self,
        matches: list[Listing],
        strategy: SearchStrategy,
        filters: SearchFilters,
    ) -> SearchResult:
        limit = (
            self.display_limit
            if strategy == SearchStrategy.SEMANTIC
            else self.fallback_display_limit
        )
        return SearchResult(
            listings=matches[:limit],
            total_matches=len(matches),
            strategy=strategy,
            filters=filters,
        )
