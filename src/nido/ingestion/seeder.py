"""
Seed del catálogo de propiedades.

Mergea las tres fuentes crudas por id, infiere la categoría desde el
título, sintetiza la descripción, calcula el embedding y reemplaza el
contenido del store. Corre offline y en exclusiva.
"""

import json
import re
from pathlib import Path
from typing import Optional, Union

import structlog

from nido.analysis import BaseEmbeddingProvider
from nido.config import PROPERTY_TYPE_PATTERNS, SEED_FILES
from nido.database import ListingStore
from nido.models import Listing, PropertyType

logger = structlog.get_logger()

_COMPILED_PATTERNS = [
    (PropertyType(name), re.compile(pattern, re.IGNORECASE))
    for name, pattern in PROPERTY_TYPE_PATTERNS
]


def read_json_file(data_dir: Union[str, Path], filename: str) -> list[dict]:
    with open(Path(data_dir) / filename, encoding="utf-8") as f:
        return json.load(f)


def merge_property_data(
    basics: list[dict],
    characteristics: list[dict],
    images: list[dict],
) -> list[dict]:
    """
    Mergea las tres fuentes por id, guiado por basics.

    Si falta el registro de características o de imagen se loguea un
    warning y se usan defaults (0, [], "").
    """
    chars_by_id = {c["id"]: c for c in characteristics}
    images_by_id = {i["id"]: i for i in images}

    merged = []
    for basic in basics:
        char = chars_by_id.get(basic["id"], {})
        img = images_by_id.get(basic["id"], {})

        if not char or not img:
            logger.warning("Datos incompletos para propiedad", id=basic["id"])

        merged.append({
            "id": basic["id"],
            "title": basic["title"],
            "price": basic["price"],
            "location": basic["location"],
            "bedrooms": char.get("bedrooms") or 0,
            "bathrooms": char.get("bathrooms") or 0,
            "size_sqft": char.get("size_sqft") or 0,
            "amenities": char.get("amenities") or [],
            "image_url": img.get("image_url") or "",
        })

    logger.info("Propiedades mergeadas", total=len(merged))
    return merged


def extract_property_type(title: str) -> PropertyType:
    """Categoría inferida del título: gana el primer patrón que matchea."""
    for property_type, pattern in _COMPILED_PATTERNS:
        if pattern.search(title):
            return property_type
    return PropertyType.OTHER


def generate_description(property_data: dict) -> str:
    """
    Texto sintetizado que se muestra y se embebe.

    Combina título, ubicación, precio, ambientes, superficie, tipo y amenities.
    """
    amenities = ", ".join(property_data.get("amenities") or [])
    property_type = property_data["property_type"]
    if isinstance(property_type, PropertyType):
        property_type = property_type.value
    return (
        f"{property_data['title']} - {property_data['location']}\n"
        f"Price: ${float(property_data['price']):,.0f}\n"
        f"{property_data['bedrooms']} bedrooms, {property_data['bathrooms']} bathrooms\n"
        f"Size: {property_data['size_sqft']} sqft\n"
        f"Property Type: {property_type}\n"
        f"Amenities: {amenities}"
    )


class CatalogSeeder:
    """Construye listings con embedding y los persiste en el store."""

    def __init__(self, store: ListingStore, embedder: BaseEmbeddingProvider):
        self.store = store
        self.embedder = embedder

    async def build_listing(self, property_data: dict) -> Listing:
        property_type = extract_property_type(property_data["title"])
        data = {**property_data, "property_type": property_type}
        description = generate_description(data)
        embedding = await self.embedder.embed_for_ingestion(description)
        return Listing(**data, description=description, embedding=embedding)

    async def seed(self, properties: list[dict]) -> dict:
        """
        Procesa cada propiedad y reemplaza el catálogo.

        Los errores por propiedad se cuentan y se loguean, no cortan el seed.

        Returns:
            Estadísticas {"total", "inserted", "errors"}
        """
        stats = {"total": len(properties), "inserted": 0, "errors": 0}
        listings: list[Listing] = []
        expected_dim: Optional[int] = None

        for property_data in properties:
            try:
                listing = await self.build_listing(property_data)
                dim = len(listing.embedding or [])
                if expected_dim is None:
                    expected_dim = dim
                elif dim != expected_dim:
                    raise ValueError(f"Dimensión de embedding inconsistente: {dim} != {expected_dim}")

                listings.append(listing)
                logger.debug(
                    "Propiedad procesada",
                    id=listing.id,
                    title=listing.title,
                    property_type=listing.property_type,
                )
            except Exception as e:
                stats["errors"] += 1
                logger.error(
                    "Error procesando propiedad",
                    id=property_data.get("id"),
                    error=str(e),
                )

        stats["inserted"] = self.store.replace_all(listings)
        logger.info("Seed completado", **stats)
        return stats

    async def seed_from_directory(self, data_dir: Union[str, Path]) -> dict:
        """Lee las tres fuentes JSON de data_dir y corre el seed."""
        properties = merge_property_data(
            read_json_file(data_dir, SEED_FILES["basics"]),
            read_json_file(data_dir, SEED_FILES["characteristics"]),
            read_json_file(data_dir, SEED_FILES["images"]),
        )
        return await self.seed(properties)
