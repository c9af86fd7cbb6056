"""
Modelos efímeros de una búsqueda.

Intención extraída de la query, filtros estructurados y resultado
final. Nada de esto se persiste: se crea y se descarta por request.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from nido.models.listing import Listing


class QueryType(str, Enum):
    """Tipo de consulta: pregunta general o búsqueda de propiedades."""

    INFORMATIONAL = "informational"
    SEARCH = "search"


class SearchFilters(BaseModel):
    """
    Restricciones estructuradas sobre el pool de propiedades.

    Un único esquema para todo el sistema: cantidades exactas de
    dormitorios/baños, o umbral mínimo si el flag min_* está activo.
    Los campos ausentes no filtran; un cero sí es una restricción.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    min_price: Optional[float] = Field(None, alias="minPrice", ge=0)
    max_price: Optional[float] = Field(None, alias="maxPrice", ge=0)
    bedrooms: Optional[int] = Field(None, ge=0)
    min_bedrooms: bool = Field(False, alias="minBedrooms")
    bathrooms: Optional[float] = Field(None, ge=0)
    min_bathrooms: bool = Field(False, alias="minBathrooms")
    location: Optional[str] = Field(None, description="Substring de la ubicación")
    property_type: Optional[str] = Field(None, description="Categoría, tolerante a typos")
    keyword: Optional[str] = Field(None, description="Términos a buscar en título/descripción")

    @model_validator(mode="before")
    @classmethod
    def _reconcile_shapes(cls, data):
        """
        Normaliza la forma alternativa {"minBedrooms": 3} a
        {"bedrooms": 3, "minBedrooms": true}. Igual para baños.
        """
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for count_key, flag_alias, flag_name in (
            ("bedrooms", "minBedrooms", "min_bedrooms"),
            ("bathrooms", "minBathrooms", "min_bathrooms"),
        ):
            key = flag_alias if flag_alias in data else flag_name
            value = data.get(key)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                if data.get(count_key) is None:
                    data[count_key] = value
                data[key] = True
            elif value is None and key in data:
                data[key] = False

        for text_key in ("location", "property_type", "keyword"):
            value = data.get(text_key)
            if isinstance(value, str) and not value.strip():
                data[text_key] = None
        return data

    def has_any(self) -> bool:
        """True si hay al menos una restricción activa."""
        return any(
            value is not None
            for value in (
                self.min_price,
                self.max_price,
                self.bedrooms,
                self.bathrooms,
                self.location,
                self.property_type,
                self.keyword,
            )
        )

    def without_property_type(self) -> "SearchFilters":
        return self.model_copy(update={"property_type": None})


class QueryIntent(BaseModel):
    """Salida del extractor: tipo de query + filtros."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    query_type: QueryType = Field(QueryType.SEARCH, alias="queryType")
    filters: SearchFilters = Field(default_factory=SearchFilters)

    @classmethod
    def unconstrained(cls) -> "QueryIntent":
        """Intención neutra: búsqueda semántica sin filtros."""
        return cls()


class SearchStrategy(str, Enum):
    """Camino del pipeline que produjo el resultado."""

    SEMANTIC = "semantic"
    TITLE_FALLBACK = "title_fallback"
    FULL_POOL_FALLBACK = "full_pool_fallback"
    INFORMATIONAL = "informational"


@dataclass
class SearchResult:
    """Propiedades en orden de relevancia + total previo al recorte."""

    listings: list[Listing]
    total_matches: int
    strategy: SearchStrategy = SearchStrategy.SEMANTIC
    filters: SearchFilters = field(default_factory=SearchFilters)


class QueryResponse(BaseModel):
    """Respuesta expuesta a la capa HTTP/UI."""

    model_config = ConfigDict(populate_by_name=True)

    summary_text: str = Field(..., alias="summaryText")
    listings: list[dict] = Field(default_factory=list, description="Sin embedding")
    total_matches: int = Field(0, alias="totalMatches", ge=0)

    def to_api_dict(self) -> dict:
        return self.model_dump(by_alias=True)
