"""
Modelo de Listing.

Una propiedad ya ingerida: inmutable durante el procesamiento de queries
y con su embedding calculado una sola vez en el seed.
"""

import json
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PropertyType(str, Enum):
    """Categorías fijas de propiedad."""

    APARTMENT = "Apartment"
    CONDO = "Condo"
    VILLA = "Villa"
    HOUSE = "House"
    PENTHOUSE = "Penthouse"
    STUDIO = "Studio"
    TOWNHOUSE = "Townhouse"
    DUPLEX = "Duplex"
    LOFT = "Loft"
    BUNGALOW = "Bungalow"
    BROWNSTONE = "Brownstone"
    CHALET = "Chalet"
    ESTATE = "Estate"
    CABIN = "Cabin"
    MANSION = "Mansion"
    OTHER = "Other"


class Listing(BaseModel):
    """
    Propiedad lista para búsqueda.

    Se mapea directamente a la tabla 'listings' en Supabase. El embedding
    es la huella semántica de la descripción sintetizada en el seed.
    """

    model_config = ConfigDict(frozen=True, use_enum_values=True, validate_default=True)

    id: int = Field(..., description="Identificador numérico único")
    title: str = Field(..., description="Título del anuncio")
    price: float = Field(..., description="Precio (sin moneda)")
    location: str = Field(..., description="Ubicación como texto libre")
    bedrooms: int = Field(0, ge=0, description="Cantidad de dormitorios")
    bathrooms: float = Field(0, ge=0, description="Cantidad de baños (admite medios baños)")
    size_sqft: float = Field(0, ge=0, description="Superficie en pies cuadrados")
    amenities: list[str] = Field(default_factory=list)
    property_type: PropertyType = Field(PropertyType.OTHER)
    description: str = Field("", description="Descripción sintetizada")
    image_url: Optional[str] = Field(None, description="URL de la imagen principal")
    embedding: Optional[list[float]] = Field(
        None, description="Vector semántico de la descripción"
    )

    @field_validator("embedding", mode="before")
    @classmethod
    def _parse_embedding(cls, value):
        # pgvector devuelve el vector como string "[0.1,0.2,...]"
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                return None
        if not isinstance(value, (list, tuple)):
            return None
        # Un componente no numérico invalida el vector entero (score 0)
        if not all(isinstance(x, (int, float)) and not isinstance(x, bool) for x in value):
            return None
        return value

    @field_validator("amenities", mode="before")
    @classmethod
    def _parse_amenities(cls, value):
        return value or []

    def to_public_dict(self) -> dict:
        """Serializa sin el embedding, para respuestas hacia afuera."""
        return self.model_dump(exclude={"embedding"})

    def to_db_dict(self) -> dict:
        """Convierte a diccionario para inserción en Supabase."""
        return self.model_dump()
