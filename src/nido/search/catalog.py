"""
Operaciones de catálogo no semánticas.

Paginación, detalle, comparación y metadatos de filtros sobre el
ListingStore. Todo lo que sale de acá va sin embedding.
"""

import math
from typing import Optional

from nido.database import ListingStore, ListingRepository


class PropertyCatalog:
    """Lecturas directas del pool de propiedades."""

    def __init__(self, store: Optional[ListingStore] = None):
        self.store = store or ListingRepository()

    def get_all(self, page: int = 1, limit: int = 10) -> dict:
        """
        Página de propiedades con info de paginación.

        Returns:
            {"properties": [...], "pagination": {page, limit, total, pages}}
        """
        if page < 1 or limit < 1:
            raise ValueError("page y limit deben ser >= 1")

        listings = self.store.find_all()
        total = len(listings)
        skip = (page - 1) * limit

        return {
            "properties": [l.to_public_dict() for l in listings[skip:skip + limit]],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit),
            },
        }

    def get_by_id(self, listing_id: int) -> Optional[dict]:
        listing = self.store.get_by_id(listing_id)
        return listing.to_public_dict() if listing else None

    def compare(self, listing_ids: list[int]) -> list[dict]:
        """Propiedades a comparar, en el orden pedido."""
        return [l.to_public_dict() for l in self.store.get_by_ids(listing_ids)]

    def filter_metadata(self) -> dict:
        """Valores distintos para armar los controles de filtro de la UI."""
        listings = self.store.find_all()
        prices = [l.price for l in listings]
        return {
            "locations": sorted({l.location for l in listings}),
            "property_types": sorted({str(l.property_type) for l in listings}),
            "bedrooms": sorted({l.bedrooms for l in listings}),
            "bathrooms": sorted({l.bathrooms for l in listings}),
            "price_range": {
                "min": min(prices) if prices else None,
                "max": max(prices) if prices else None,
            },
        }
