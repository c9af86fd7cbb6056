"""
Store de listings en memoria.

Útil para correr queries contra un export JSON sin Supabase.
"""

import json
from pathlib import Path
from typing import Iterable, Union

import structlog

from nido.database.repositories import ListingStore
from nido.models import Listing

logger = structlog.get_logger()


class InMemoryListingStore(ListingStore):
    """ListingStore respaldado por una lista en memoria."""

    def __init__(self, listings: Iterable[Listing] = ()):
        self._listings = sorted(listings, key=lambda listing: listing.id)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "InMemoryListingStore":
        """Carga un export JSON (lista de listings con embedding)."""
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
        store = cls(Listing.model_validate(item) for item in raw)
        logger.info("Listings cargados desde JSON", path=str(path), total=store.count())
        return store

    def find_all(self) -> list[Listing]:
        return list(self._listings)

    def replace_all(self, listings: Iterable[Listing]) -> int:
        self._listings = sorted(listings, key=lambda listing: listing.id)
        return len(self._listings)
